# Copyright (c) Syntropy Systems
"""Append-only store of timed measurements grouped by size level."""
from __future__ import annotations

from typing import TYPE_CHECKING

from expose.models.experiment import Measurement

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class InsufficientDataError(ValueError):
    """Raised when a value is requested before enough levels were measured."""


class ResultStore:
    """Ordered series of (level, elapsed) measurements.

    Levels are contiguous from 0. Each level keeps a running sum and count so
    the per-level mean is available without rescanning the series. Ratios are
    always newer level mean divided by older level mean.
    """

    _measurements: list[Measurement]
    _level_sums: list[float]
    _level_counts: list[int]

    def __init__(self, measurements: Iterable[Measurement] | None = None) -> None:
        """Initialize a store, optionally replaying saved measurements."""
        self._measurements = []
        self._level_sums = []
        self._level_counts = []
        for measurement in measurements or ():
            _ = self.append(measurement.level, measurement.elapsed)

    def append(self, level: int, elapsed: float) -> Measurement:
        """Record one trial and return the stored measurement.

        Raises:
            ValueError: If the level would leave a gap or go backwards,
                or the elapsed time is negative.

        """
        current = len(self._level_counts) - 1
        if level not in (current, current + 1) or level < 0:
            msg = f"Level {level} does not follow level {current}"
            raise ValueError(msg)
        if elapsed < 0:
            msg = f"Elapsed time must be non-negative, got {elapsed}"
            raise ValueError(msg)

        measurement = Measurement(level=level, elapsed=elapsed)
        self._measurements.append(measurement)

        if level > current:
            self._level_sums.append(0.0)
            self._level_counts.append(0)
        self._level_sums[level] += measurement.elapsed
        self._level_counts[level] += 1

        return measurement

    def size(self) -> int:
        """Return the total number of measurements."""
        return len(self._measurements)

    def level_count(self) -> int:
        """Return the number of distinct levels measured so far."""
        return len(self._level_counts)

    def latest(self) -> float:
        """Return the elapsed time of the most recent measurement."""
        if not self._measurements:
            msg = "No measurements recorded yet"
            raise InsufficientDataError(msg)
        return self._measurements[-1].elapsed

    def level_mean(self, level: int) -> float:
        """Return the mean elapsed time of one level's trials."""
        return self._level_sums[level] / self._level_counts[level]

    def level_means(self) -> list[float]:
        """Return the mean elapsed time of every level, oldest first."""
        return [self.level_mean(level) for level in range(self.level_count())]

    def ratio(self, k: int = 0) -> float:
        """Return the k-th most recent level-to-level growth ratio.

        ``ratio(0)`` compares the newest level to the one before it.

        Raises:
            InsufficientDataError: If fewer than ``k + 2`` levels exist.

        """
        if k < 0:
            msg = f"Ratio index must be non-negative, got {k}"
            raise ValueError(msg)
        levels = self.level_count()
        if levels < k + 2:
            msg = f"ratio({k}) needs {k + 2} levels, only {levels} measured"
            raise InsufficientDataError(msg)

        newer = self.level_mean(levels - 1 - k)
        older = self.level_mean(levels - 2 - k)
        if older == 0:
            return float("inf") if newer > 0 else 1.0
        return newer / older

    def ratios(self) -> list[float]:
        """Return every available ratio, oldest first."""
        return [self.ratio(k) for k in reversed(range(self.level_count() - 1))]

    @property
    def measurements(self) -> list[Measurement]:
        """Return a copy of the recorded measurements in insertion order."""
        return list(self._measurements)

    def __len__(self) -> int:
        """Return the total number of measurements."""
        return self.size()

    def __iter__(self) -> Iterator[Measurement]:
        """Iterate measurements in insertion order."""
        return iter(list(self._measurements))
