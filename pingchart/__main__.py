"""Entry point for pingchart."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from pingchart.channel import SampleChannel
from pingchart.config import RunConfiguration, parse_config
from pingchart.errors import InvalidStartupArgumentError
from pingchart.fake_probe import FakeProbe
from pingchart.logging_config import configure_logging
from pingchart.probe import PingProbe, Probe
from pingchart.ui.chart_window import ChartWindow

logger = logging.getLogger(__name__)


def select_probe(config: RunConfiguration) -> Probe:
    """Pick the real ping probe unless simulated data was requested."""
    if config.use_fake_probe:
        logger.info("Using FakeProbe (simulated ping output)")
        return FakeProbe()

    probe = PingProbe(timeout_ms=config.timeout_ms)
    logger.info("Using PingProbe")
    return probe


def main(argv: list[str] | None = None) -> int:
    """Main entry point: pingchart HOST COUNT [options]."""
    try:
        configure_logging()
        config = parse_config(argv)
    except InvalidStartupArgumentError as e:
        logger.error("Invalid startup argument: %s", e)
        print(f"pingchart: error: {e}", file=sys.stderr)
        return 2

    logger.info("Running ping to %s (%d iterations)", config.target_host, config.iteration_count)

    app = QApplication.instance() or QApplication(sys.argv[:1])

    channel = SampleChannel()
    window = ChartWindow(config, channel)
    window.show()
    window.start(select_probe(config))

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
