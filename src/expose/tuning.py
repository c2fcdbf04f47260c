# Copyright (c) Syntropy Systems
"""Tuning phase that finds an informative starting size."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from expose.classifier import is_constant_or_logarithmic, nearest_growth_class_index
from expose.logs import narrate

if TYPE_CHECKING:
    from expose.models.experiment import Measurement
    from expose.results import ResultStore
    from expose.subjects import Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TuningOutcome:
    """Result of a tuning phase."""

    doublings: int
    min_runs: int


def raise_min_runs(min_runs: int, doublings: int, look_back: int) -> int:
    """Return min_runs raised so look_back ratios follow the tuned levels.

    Never lowers the value passed in.
    """
    return max(min_runs, doublings + look_back - 1)


class Tuner:
    """Doubles the subject until its growth no longer looks constant or logarithmic.

    Starting sizes that are too small or too large can make polynomial work
    look flat for the first few doublings. Tuning measures and doubles until
    the latest ratio maps to a faster growth class, or ``tuning_tries``
    doublings have been spent, in which case the subject is accepted as
    genuinely constant or logarithmic.
    """

    trials: int
    tuning_tries: int
    look_back: int
    verbose: bool
    _growth_index: Callable[[float], int]

    def __init__(
        self,
        trials: int,
        tuning_tries: int,
        look_back: int,
        *,
        growth_index: Callable[[float], int] = nearest_growth_class_index,
        verbose: bool = False,
    ) -> None:
        """Initialize a tuner.

        Args:
            trials: Measurements per level
            tuning_tries: Maximum doublings before giving up on tuning
            look_back: Ratios the convergence check will consider
            growth_index: Maps a ratio to a growth class index
            verbose: Narrate progress at INFO level

        """
        self.trials = trials
        self.tuning_tries = tuning_tries
        self.look_back = look_back
        self.verbose = verbose
        self._growth_index = growth_index

    def check_init_n(self, store: ResultStore) -> bool:
        """Return True once the latest ratio shows real growth."""
        if store.level_count() < 2:
            return False

        ratio = store.ratio(0)
        narrate(logger, self.verbose, "Tuning run: ratio = %s", ratio)

        return not is_constant_or_logarithmic(self._growth_index(ratio))

    def tune(
        self,
        subject: Subject,
        store: ResultStore,
        min_runs: int,
        on_measurement: Callable[[Measurement], None] | None = None,
    ) -> TuningOutcome:
        """Run the tuning phase.

        Measures the current level ``trials`` times, then doubles the subject,
        so on return the subject sits one level past the last measured level.

        Args:
            subject: The code under test
            store: Store receiving the tuning measurements
            min_runs: Minimum runs before tuning
            on_measurement: Called with every recorded measurement

        Returns:
            Doublings performed and the raised min_runs

        """
        doublings = 0
        narrate(logger, self.verbose, "Finding min doubles...")

        while not self.check_init_n(store) and doublings < self.tuning_tries:
            for _ in range(self.trials):
                measurement = store.append(doublings, subject.measure_once())
                if on_measurement is not None:
                    on_measurement(measurement)
            subject.double_input_size()
            narrate(logger, self.verbose, "N doubled.")
            doublings += 1

        tuned = raise_min_runs(min_runs, doublings, self.look_back)
        narrate(logger, self.verbose, "Min doubles set to %d", tuned)

        return TuningOutcome(doublings=doublings, min_runs=tuned)
