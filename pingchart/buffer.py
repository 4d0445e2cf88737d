"""Bounded in-memory history of sample results."""

from pingchart.models import Measurement, SampleResult


class SampleBuffer:
    """Fixed-capacity ring buffer of SampleResult entries.

    Slots are preallocated; ``_start`` points at the oldest entry. When the
    buffer is full an append overwrites the oldest slot, so eviction is O(1)
    and the newest entry is always kept. Iteration runs oldest to newest.
    """

    def __init__(self, capacity: int = 1000):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._slots: list[SampleResult | None] = [None] * capacity
        self._start = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._count

    def __iter__(self):
        capacity = len(self._slots)
        for offset in range(self._count):
            yield self._slots[(self._start + offset) % capacity]

    def __getitem__(self, index: int) -> SampleResult:
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("SampleBuffer index out of range")
        return self._slots[(self._start + index) % len(self._slots)]

    def append(self, item: SampleResult):
        """Add item as the newest entry, evicting the oldest if full."""
        capacity = len(self._slots)
        if self._count < capacity:
            self._slots[(self._start + self._count) % capacity] = item
            self._count += 1
        else:
            self._slots[self._start] = item
            self._start = (self._start + 1) % capacity

    def extend(self, items):
        for item in items:
            self.append(item)

    def clear(self):
        self._slots = [None] * len(self._slots)
        self._start = 0
        self._count = 0

    def values(self) -> list[float]:
        """Latencies in order, NaN where an iteration was skipped."""
        return [item.value_ms for item in self]

    def timestamps(self) -> list[float]:
        """POSIX receive times in order."""
        return [item.observed_at.timestamp() for item in self]

    def measurements(self) -> list[Measurement]:
        """Successful measurements only (for export, statistics, etc.)."""
        return [item for item in self if isinstance(item, Measurement)]
