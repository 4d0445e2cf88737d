"""Run configuration and command-line parsing."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

from pingchart.errors import InvalidStartupArgumentError

DEFAULT_MAX_POINTS = 1000


@dataclass(frozen=True)
class RunConfiguration:
    """Settings for one run, fixed at startup."""

    target_host: str
    iteration_count: int
    max_points: int = DEFAULT_MAX_POINTS
    export_path: Path | None = None
    time_axis: bool = False
    redraw_interval_ms: int = 0
    timeout_ms: int | None = None
    use_fake_probe: bool = False

    def __post_init__(self):
        if not self.target_host or not self.target_host.strip():
            raise InvalidStartupArgumentError("target host must not be empty")
        if self.iteration_count <= 0:
            raise InvalidStartupArgumentError("iteration count must be a positive integer")
        if self.max_points <= 0:
            raise InvalidStartupArgumentError("max points must be a positive integer")
        if self.redraw_interval_ms < 0:
            raise InvalidStartupArgumentError("redraw interval must not be negative")
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise InvalidStartupArgumentError("timeout must be a positive integer")


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad input."""

    def error(self, message):
        raise InvalidStartupArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="pingchart",
        description="Ping a host repeatedly and chart the average round-trip time live.",
    )
    parser.add_argument("host", help="The host to ping")
    parser.add_argument("count", help="Number of pings to run (positive integer)")
    parser.add_argument(
        "--max-points",
        default=str(DEFAULT_MAX_POINTS),
        help=f"Number of most recent samples kept on the chart. Default is {DEFAULT_MAX_POINTS}.",
    )
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write the recorded latencies to PATH when the window closes (must not exist)",
    )
    parser.add_argument(
        "--time-axis",
        action="store_true",
        help="Plot against receive time instead of sample index",
    )
    parser.add_argument(
        "--redraw-ms",
        default="0",
        help="Delay between redraw ticks in milliseconds. Default 0 redraws continuously.",
    )
    parser.add_argument(
        "--timeout-ms",
        default=None,
        help="Hard deadline for one ping run in milliseconds. Default is no timeout.",
    )
    parser.add_argument(
        "--fake",
        action="store_true",
        help="Use simulated ping output (also enabled by PINGCHART_PROBE=fake)",
    )
    return parser


def _parse_int(name: str, text: str) -> int:
    try:
        return int(text)
    except (TypeError, ValueError) as e:
        raise InvalidStartupArgumentError(f"{name} must be an integer, got {text!r}") from e


def parse_config(argv: list[str] | None = None) -> RunConfiguration:
    """Build a RunConfiguration from command-line arguments.

    Raises:
        InvalidStartupArgumentError: an argument is missing or malformed
    """
    args = build_parser().parse_args(argv)

    timeout_ms = None
    if args.timeout_ms is not None:
        timeout_ms = _parse_int("timeout", args.timeout_ms)

    force_fake = os.environ.get("PINGCHART_PROBE", "").lower() == "fake"

    return RunConfiguration(
        target_host=args.host.strip(),
        iteration_count=_parse_int("iteration count", args.count),
        max_points=_parse_int("max points", args.max_points),
        export_path=args.export,
        time_axis=args.time_axis,
        redraw_interval_ms=_parse_int("redraw interval", args.redraw_ms),
        timeout_ms=timeout_ms,
        use_fake_probe=args.fake or force_fake,
    )
