# Copyright (c) Syntropy Systems
"""Convergence check over the growth ratio series."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expose.results import ResultStore


def ratio_drift(store: ResultStore, look_back: int) -> float:
    """Return the net drift across the last ``look_back`` ratios.

    This is ``|sum(ratio(i) - ratio(i + 1))|`` for ``i`` in
    ``[0, look_back - 1)``. A flat series gives 0. With ``look_back == 1``
    the sum is empty and the drift is always 0.
    """
    ratios = [store.ratio(i) for i in range(look_back)]
    change = 0.0
    for newer, older in zip(ratios, ratios[1:]):
        change += newer - older
    return abs(change)


def has_converged(
    store: ResultStore,
    min_runs: int,
    look_back: int,
    tolerance: float,
) -> bool:
    """Return True once the ratio series has stopped drifting.

    Requires ``min_runs`` measurements and enough levels for ``look_back``
    ratios before the drift is compared against ``tolerance``.
    Use ``look_back >= 2``; with 1 only the run count is checked.
    """
    if store.size() < min_runs:
        return False
    if store.level_count() < look_back + 1:
        return False
    return ratio_drift(store, look_back) <= tolerance
