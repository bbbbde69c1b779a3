"""Thread-safe collection of worker averages."""

from __future__ import annotations

import math
import threading


class Aggregator:
    """Append-only multiset of worker averages with a mean-of-means fold.

    Invariant:
    - append() is the only mutation and runs under a single lock.
    - reduce() must only be called after every appender has finished; the
      caller's join barrier enforces this, the aggregator does not.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._averages: list[float] = []

    def append(self, average: float) -> None:
        with self._lock:
            self._averages.append(float(average))

    def values(self) -> tuple[float, ...]:
        """Return a snapshot of the contributed averages in insertion order."""
        with self._lock:
            return tuple(self._averages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._averages)

    def reduce(self) -> float:
        """Return the arithmetic mean of all contributions, 0.0 if none.

        NaN contributions are not filtered and yield a NaN result.
        """
        values = self.values()
        if not values:
            return 0.0
        return math.fsum(values) / len(values)
