"""Export of recorded latencies to a text file."""

import logging
import math
import os
from collections.abc import Iterable
from decimal import Decimal

from pingchart.errors import DestinationAlreadyExistsError

logger = logging.getLogger(__name__)


def format_value(value: float) -> str:
    """Render a latency as a plain decimal ("1" for 1.0, "2.5" for 2.5, never exponent form)."""
    if value.is_integer():
        return str(int(value))
    # Shortest round-trip digits, expanded out of scientific notation
    return format(Decimal(repr(value)), "f")


def export_values(path: str | os.PathLike, values: Iterable[float]) -> int:
    """Write values as newline-separated decimals to a new file.

    NaN entries (skipped probes) are left out. The file is created in
    exclusive mode, so an existing file is never truncated.

    Returns:
        Number of values written

    Raises:
        DestinationAlreadyExistsError: path already exists
    """
    lines = [format_value(value) for value in values if not math.isnan(value)]

    try:
        with open(path, "x", encoding="utf-8", newline="") as f:
            f.write("\n".join(lines))
    except FileExistsError as e:
        raise DestinationAlreadyExistsError(f"File {os.fspath(path)} already exists.") from e

    logger.info("Exported %d values to %s", len(lines), os.fspath(path))
    return len(lines)
