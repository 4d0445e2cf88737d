"""Background sampling loop feeding the chart."""

import logging
from datetime import datetime, timezone

from PySide6.QtCore import QObject, QRunnable, Signal

from pingchart.channel import SampleChannel
from pingchart.config import RunConfiguration
from pingchart.errors import ParseError, ProbeError
from pingchart.models import Skipped
from pingchart.parser import parse_ping_summary
from pingchart.probe import Probe

logger = logging.getLogger(__name__)


def run_sampling_loop(config: RunConfiguration, probe: Probe, channel: SampleChannel) -> int:
    """Probe config.target_host iteration_count times, one after another.

    Each iteration publishes exactly one result: a Measurement on success
    or a Skipped entry when the probe or the parse failed. A failed send
    means the consumer disconnected and ends the loop quietly.

    Returns:
        Number of results delivered to the channel
    """
    host = config.target_host
    delivered = 0

    for iteration in range(config.iteration_count):
        try:
            raw_text = probe.invoke(host)
            received_at = datetime.now(timezone.utc)
            result = parse_ping_summary(raw_text, received_at, marker=probe.summary_marker)
        except (ProbeError, ParseError) as e:
            logger.warning(
                "Iteration %d/%d skipped: host=%s, %s: %s",
                iteration + 1,
                config.iteration_count,
                host,
                type(e).__name__,
                e,
            )
            result = Skipped(reason=str(e), observed_at=datetime.now(timezone.utc))

        if not channel.send(result):
            logger.info("Consumer disconnected, stopping after %d results", delivered)
            break
        delivered += 1

    logger.debug("Sampling loop done: host=%s, delivered=%d", host, delivered)
    return delivered


class WorkerSignals(QObject):
    """Signals for reporting worker lifecycle to the main thread."""

    finished = Signal(int)  # Emits number of delivered results
    error = Signal(str)  # Emits error message


class SamplingWorker(QRunnable):
    """Worker that executes run_sampling_loop() in a background thread."""

    def __init__(self, config: RunConfiguration, probe: Probe, channel: SampleChannel):
        super().__init__()
        self.config = config
        self.probe = probe
        self.channel = channel
        self.signals = WorkerSignals()

    def run(self):
        """Execute the sampling loop in background thread."""
        delivered = 0
        try:
            logger.info(
                "Sampling started: host=%s, iterations=%d",
                self.config.target_host,
                self.config.iteration_count,
            )
            delivered = run_sampling_loop(self.config, self.probe, self.channel)
            logger.info("Sampling finished: host=%s, delivered=%d", self.config.target_host, delivered)

        except Exception as e:
            logger.exception("Sampling worker exception: host=%s, error=%s", self.config.target_host, e)
            self.signals.error.emit(str(e))

        finally:
            # Always signal completion
            self.signals.finished.emit(delivered)
