"""Main window for pingchart: live latency chart."""

import logging
import math
import statistics

import pyqtgraph as pg
from PySide6.QtCore import Qt, QThreadPool, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pingchart.buffer import SampleBuffer
from pingchart.channel import SampleChannel
from pingchart.config import RunConfiguration
from pingchart.errors import DestinationAlreadyExistsError
from pingchart.export import export_values
from pingchart.models import Measurement
from pingchart.probe import Probe
from pingchart.sampling import SamplingWorker

logger = logging.getLogger(__name__)


class ChartWindow(QMainWindow):
    """Window that polls the sample channel and redraws the latency chart.

    Each redraw tick drains whatever the sampling loop has published,
    appends it to the bounded buffer and pushes the buffer to the plot.
    The next tick is scheduled unconditionally, so the window keeps
    polling (and stays usable) after sampling has finished.
    """

    def __init__(self, config: RunConfiguration, channel: SampleChannel, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"Network Ping Monitor - {config.target_host}")
        self.setGeometry(100, 100, 1000, 600)

        self.config = config
        self.channel = channel
        self.buffer = SampleBuffer(capacity=config.max_points)

        # Progress counters
        self.received_count = 0
        self.skipped_count = 0
        self.sampling_finished = False

        # Threading for the sampling loop
        self.thread_pool = QThreadPool.globalInstance()
        self._worker = None

        # Redraw tick, re-armed at the end of every tick
        self.tick_timer = QTimer(self)
        self.tick_timer.setSingleShot(True)
        self.tick_timer.setInterval(config.redraw_interval_ms)
        self.tick_timer.timeout.connect(self.redraw_tick)
        self._ticking = False

        self.setup_ui()

    def setup_ui(self):
        """Set up the chart and the status bar underneath it."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        if self.config.time_axis:
            self.plot_widget = pg.PlotWidget(axisItems={"bottom": pg.DateAxisItem()})
            self.plot_widget.setLabel("bottom", "Time")
        else:
            self.plot_widget = pg.PlotWidget()
            self.plot_widget.setLabel("bottom", "Sample")
        self.plot_widget.setLabel("left", "Ping (ms)")
        self.plot_widget.showGrid(x=False, y=True, alpha=0.2)
        self.plot_widget.setMouseEnabled(x=True, y=False)

        # connect="finite" breaks the line at NaN gaps from skipped probes
        self.curve = self.plot_widget.plot([], [], pen=pg.mkPen(color=(220, 50, 50), width=2), connect="finite")
        layout.addWidget(self.plot_widget, 1)

        layout.addWidget(self.create_status_panel(), 0)

    def create_status_panel(self):
        """Create the strip with statistics, status and export button."""
        panel = QFrame()
        panel.setFrameStyle(QFrame.Box)
        layout = QHBoxLayout(panel)

        self.latency_label = QLabel("Latency: --")
        self.average_label = QLabel("Average: --")
        self.jitter_label = QLabel("Jitter: --")
        self.skipped_label = QLabel("Skipped: --")

        for label in [self.latency_label, self.average_label, self.jitter_label, self.skipped_label]:
            label.setStyleSheet("padding: 5px; font-family: monospace;")
            layout.addWidget(label)

        layout.addStretch()

        self.status_label = QLabel("Status: Ready")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.status_label)

        self.export_button = QPushButton("Export")
        self.export_button.clicked.connect(self.export_dialog)
        layout.addWidget(self.export_button)

        return panel

    def start(self, probe: Probe):
        """Launch the sampling loop in the background and begin redrawing."""
        worker = SamplingWorker(self.config, probe, self.channel)
        worker.signals.finished.connect(self.on_sampling_finished)
        worker.signals.error.connect(self.on_sampling_error)
        self._worker = worker

        self.status_label.setText("Status: Sampling")
        self.thread_pool.start(worker)
        self.start_ticking()

    def start_ticking(self):
        self._ticking = True
        self.tick_timer.start()

    def stop_ticking(self):
        self._ticking = False
        self.tick_timer.stop()

    def redraw_tick(self):
        """Drain new results into the buffer and redraw the chart."""
        results = self.channel.drain()
        for result in results:
            self.buffer.append(result)
            self.received_count += 1
            if not isinstance(result, Measurement):
                self.skipped_count += 1

        if results:
            self.update_statistics()
            if not self.sampling_finished:
                self.status_label.setText(
                    f"Status: Sampling ({self.received_count}/{self.config.iteration_count})"
                )

        self.refresh_curve()

        if self._ticking:
            self.tick_timer.start()

    def refresh_curve(self):
        """Hand the buffer contents to the plot."""
        values = self.buffer.values()
        if self.config.time_axis:
            x = self.buffer.timestamps()
        else:
            x = list(range(len(values)))
        self.curve.setData(x, values)

    def update_statistics(self):
        """Update the summary statistics labels from the buffer."""
        latencies = [m.value_ms for m in self.buffer.measurements()]

        if latencies:
            self.latency_label.setText(f"Latency: {latencies[-1]:.2f} ms")
            self.average_label.setText(f"Average: {statistics.fmean(latencies):.2f} ms")
        else:
            self.latency_label.setText("Latency: -- ms")
            self.average_label.setText("Average: -- ms")

        if len(latencies) >= 2:
            self.jitter_label.setText(f"Jitter: {statistics.stdev(latencies):.2f} ms")
        else:
            self.jitter_label.setText("Jitter: -- ms")

        if self.received_count > 0:
            skipped_percent = (self.skipped_count / self.received_count) * 100
            self.skipped_label.setText(f"Skipped: {skipped_percent:.1f}%")

    def on_sampling_finished(self, delivered: int):
        """Keep the chart live, only report that no more data is coming."""
        self.sampling_finished = True
        self._worker = None
        logger.info("Sampling finished with %d results", delivered)
        if not self.status_label.text().startswith("Status: Sampling error"):
            self.status_label.setText(f"Status: Finished ({delivered} samples)")

    def on_sampling_error(self, error_msg: str):
        logger.error("Sampling error: %s", error_msg)
        self.status_label.setText(f"Status: Sampling error - {error_msg}")

    def recorded_values(self) -> list[float]:
        """Latencies currently held by the buffer, oldest first."""
        return [value for value in self.buffer.values() if not math.isnan(value)]

    def export_dialog(self):
        """Ask for a destination and export the recorded latencies."""
        if not self.buffer.measurements():
            self.status_label.setText("Status: No data to export")
            return

        filename, _ = QFileDialog.getSaveFileName(
            self,
            "Export Latencies",
            "ping_values.txt",
            "Text Files (*.txt)",
            options=QFileDialog.Option.DontConfirmOverwrite,
        )

        # User cancelled
        if not filename:
            return

        self.export_to(filename)

    def export_to(self, path) -> bool:
        """Export recorded latencies to path, reporting the outcome in the status label."""
        try:
            count = export_values(path, self.recorded_values())
        except DestinationAlreadyExistsError as e:
            logger.error("Export refused: %s", e)
            self.status_label.setText("Status: Export failed - file already exists")
            return False
        except OSError as e:
            logger.error("Export failed: %s", e)
            self.status_label.setText(f"Status: Export failed - {type(e).__name__}")
            return False

        self.status_label.setText(f"Status: Exported {count} values")
        return True

    def closeEvent(self, event: QCloseEvent) -> None:
        """Stop redrawing, disconnect from the sampler and run the close-time export."""
        self.stop_ticking()

        # The sampling loop stops at its next send
        self.channel.close()

        if self._worker is not None:
            try:
                self._worker.signals.finished.disconnect()
                self._worker.signals.error.disconnect()
            except RuntimeError:
                pass  # Already disconnected
            self._worker = None

        # Give an in-flight probe a moment to finish (a hung ping is not waited for)
        self.thread_pool.waitForDone(1000)

        # Pick up anything published before the channel closed
        self.buffer.extend(self.channel.drain())

        if self.config.export_path is not None:
            self.export_to(self.config.export_path)

        super().closeEvent(event)
