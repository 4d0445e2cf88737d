"""Data models for pingchart samples."""

import math
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Measurement:
    """A single successful latency sample."""

    value_ms: float
    observed_at: datetime

    def __post_init__(self):
        """Reject latencies that cannot come from a real probe."""
        if not math.isfinite(self.value_ms) or self.value_ms < 0:
            raise ValueError(f"value_ms must be a finite non-negative number, got {self.value_ms!r}")


@dataclass(frozen=True)
class Skipped:
    """A probe iteration that produced no measurement (rendered as a gap)."""

    reason: str
    observed_at: datetime

    @property
    def value_ms(self) -> float:
        return math.nan


# Per-iteration result sent from the sampling loop to the chart
SampleResult = Measurement | Skipped
