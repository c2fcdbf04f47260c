# Copyright (c) Syntropy Systems
"""Predict the cost of the next doubling and decide whether to stop."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expose.results import ResultStore

# Elapsed times are nanoseconds
NANOSECONDS_PER_HOUR = 3.6e12


def predict_next_hours(store: ResultStore) -> float:
    """Extrapolate the next level's run time in hours.

    Uses the latest measurement scaled by the latest growth ratio. Needs at
    least two levels in the store.
    """
    return store.latest() * store.ratio(0) / NANOSECONDS_PER_HOUR


def should_give_up(store: ResultStore, give_up_hours: float) -> bool:
    """Return True if the next doubling is predicted to exceed the budget."""
    return predict_next_hours(store) > give_up_hours
