# Copyright (c) Syntropy Systems
"""Map doubling ratios onto canonical growth classes."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from expose.results import InsufficientDataError

if TYPE_CHECKING:
    from expose.results import ResultStore


@dataclass(frozen=True)
class GrowthClass:
    """A canonical growth class and its expected doubling ratio."""

    label: str
    ratio: float

    def __str__(self) -> str:
        """Return the class label."""
        return self.label


# Ordered by growth rate; indices 0 and 1 are constant and logarithmic
GROWTH_CLASSES: tuple[GrowthClass, ...] = (
    GrowthClass("O(1)", 1.0),
    GrowthClass("O(log n)", 1.1),
    GrowthClass("O(n)", 2.0),
    GrowthClass("O(n log n)", 2.2),
    GrowthClass("O(n^2)", 4.0),
    GrowthClass("O(n^3)", 8.0),
    # No fixed ratio exists for exponential growth
    GrowthClass("O(2^n)", 64.0),
)

LOGARITHMIC_INDEX = 1


def nearest_growth_class_index(ratio: float) -> int:
    """Return the index of the growth class nearest to ``ratio``.

    Distance is measured in log2 space, so a ratio of 3 sits between linear
    and quadratic rather than next to quadratic.
    """
    if not ratio > 0:
        return 0
    if math.isinf(ratio):
        return len(GROWTH_CLASSES) - 1

    exponent = math.log2(ratio)
    distances = [abs(exponent - math.log2(cls.ratio)) for cls in GROWTH_CLASSES]
    return distances.index(min(distances))


def is_constant_or_logarithmic(index: int) -> bool:
    """Return True if the class index denotes constant or log growth."""
    return index <= LOGARITHMIC_INDEX


def classify(store: ResultStore, look_back: int = 1) -> GrowthClass:
    """Classify a finished experiment by its recent ratios.

    Averages up to ``look_back`` of the most recent ratios.

    Raises:
        InsufficientDataError: If fewer than two levels were measured.

    """
    available = store.level_count() - 1
    if available < 1:
        msg = "Classification needs at least two measured levels"
        raise InsufficientDataError(msg)

    count = max(1, min(look_back, available))
    mean_ratio = sum(store.ratio(k) for k in range(count)) / count
    return GROWTH_CLASSES[nearest_growth_class_index(mean_ratio)]
