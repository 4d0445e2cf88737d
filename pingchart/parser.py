"""Parsing of ping summary statistics."""

import logging
import math
import re
from datetime import datetime

from pingchart.errors import MalformedNumberError, MarkerNotFoundError, StatsSegmentMissingError
from pingchart.models import Measurement

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "min/avg/max/stddev"
STATS_SEPARATOR = " = "
AVERAGE_FIELD = 1

# Plain ASCII decimal, optionally with exponent (no "_" grouping, no unicode digits)
DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_ping_summary(
    raw_text: str, received_at: datetime, marker: str = DEFAULT_MARKER
) -> Measurement:
    """Extract the average round-trip time from a ping summary (pure function).

    The summary line looks like this on macOS/BSD:

        round-trip min/avg/max/stddev = 10.1/15.3/20.7/2.1 ms

    Only the last occurrence of ``marker`` is considered, so noise printed
    before the summary is ignored. Whitespace around the average is
    tolerated, but a unit glued to the number ("15.3ms") is rejected.

    Args:
        raw_text: Full text report of one ping run
        received_at: Time the report was received, stored on the measurement
        marker: Header of the statistics line ("min/avg/max/mdev" on Linux)

    Returns:
        Measurement carrying the average latency in milliseconds

    Raises:
        MarkerNotFoundError: ``marker`` does not occur in ``raw_text``
        StatsSegmentMissingError: nothing follows a " = " after the marker
        MalformedNumberError: the average field is missing or not a number

    Examples:
        >>> parse_ping_summary("rtt min/avg/max/stddev = 10.1/15.3/20.7/2.1 ms", ts).value_ms
        15.3
    """
    marker_index = raw_text.rfind(marker)
    if marker_index == -1:
        raise MarkerNotFoundError(f"marker {marker!r} not found in ping output")

    segments = raw_text[marker_index:].split(STATS_SEPARATOR)
    if len(segments) < 2:
        raise StatsSegmentMissingError(f"no statistics after {marker!r}")

    fields = segments[1].split("/")
    if len(fields) <= AVERAGE_FIELD:
        raise MalformedNumberError(f"average field missing in {segments[1]!r}")

    average_text = fields[AVERAGE_FIELD]
    if not DECIMAL_PATTERN.fullmatch(average_text.strip()):
        raise MalformedNumberError(f"invalid average {average_text!r}")
    average = float(average_text)

    if not math.isfinite(average) or average < 0:
        raise MalformedNumberError(f"invalid average {average_text!r}")

    logger.debug("Parsed average latency: %.3fms", average)
    return Measurement(value_ms=average, observed_at=received_at)
