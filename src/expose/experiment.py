# Copyright (c) Syntropy Systems
"""Doubling experiment control loop."""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from expose.classifier import classify, nearest_growth_class_index
from expose.convergence import has_converged, ratio_drift
from expose.give_up import predict_next_hours, should_give_up
from expose.logs import narrate
from expose.models.experiment import ExperimentConfig, ExperimentSummary, TerminationCode
from expose.results import ResultStore
from expose.tuning import Tuner

if TYPE_CHECKING:
    from expose.models.experiment import Measurement
    from expose.sinks import ResultSink
    from expose.subjects import Subject

logger = logging.getLogger(__name__)


class ExperimentRunner:
    """Runs a doubling experiment on one subject until its ratios converge.

    Each level measures the subject ``trials`` times, then the input size is
    doubled. The loop stops when the ratio series converges, or when the next
    doubling is predicted to take longer than ``give_up_hours``. A
    ``MemoryError`` raised anywhere in the run ends it as OUT_OF_RESOURCES;
    every other exception propagates.

    A runner owns its ResultStore and runs once.
    """

    subject: Subject
    config: ExperimentConfig
    _sink: ResultSink | None
    _growth_index: Callable[[float], int]
    _clock: Callable[[], float]
    _store: ResultStore
    _min_runs: int
    _termination: TerminationCode
    _run_time: float | None
    _tuning_doublings: int
    _started: bool

    def __init__(
        self,
        subject: Subject,
        config: ExperimentConfig | None = None,
        *,
        sink: ResultSink | None = None,
        growth_index: Callable[[float], int] = nearest_growth_class_index,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize a runner.

        Args:
            subject: The code under test
            config: Experiment settings (defaults if omitted)
            sink: Receives every measurement as it is recorded
            growth_index: Maps a ratio to a growth class index for tuning
            clock: Wall clock in seconds used for the run time

        """
        self.subject = subject
        self.config = config if config is not None else ExperimentConfig()
        self._sink = sink
        self._growth_index = growth_index
        self._clock = clock

        self._store = ResultStore()
        self._min_runs = self.config.min_runs
        self._termination = TerminationCode.UNSET
        self._run_time = None
        self._tuning_doublings = 0
        self._started = False

    def run(self) -> TerminationCode:
        """Run the experiment and return why it stopped.

        Raises:
            RuntimeError: If the runner has already run.

        """
        if self._started:
            msg = "An experiment runner can only run once"
            raise RuntimeError(msg)
        self._started = True

        start: float | None = None
        try:
            start = self._clock()
            self._measure()
            self._run_time = self._clock() - start

            if self._converged():
                self._termination = TerminationCode.CONVERGENT
            else:
                self._termination = TerminationCode.TIMED_OUT
        except MemoryError:
            self._termination = TerminationCode.OUT_OF_RESOURCES
            self._run_time = self._clock() - start if start is not None else None
            logger.warning(
                "Out of memory after %d levels; stopping experiment",
                self._store.level_count(),
            )
        finally:
            if self._sink is not None:
                self._sink.flush()

        return self._termination

    def _measure(self) -> None:
        """Optional tuning, then the main doubling loop."""
        config = self.config

        if config.tuning:
            tuner = Tuner(
                config.trials,
                config.tuning_tries,
                config.look_back,
                growth_index=self._growth_index,
                verbose=config.verbose,
            )
            outcome = tuner.tune(
                self.subject,
                self._store,
                self._min_runs,
                on_measurement=self._forward,
            )
            self._tuning_doublings = outcome.doublings
            self._min_runs = outcome.min_runs

        level = self._store.level_count()
        # Tuning leaves the subject doubled past its last measured level
        size_level = self._tuning_doublings

        while not self._converged():
            if level > 1:
                narrate(
                    logger, config.verbose,
                    "Predicted time for next double: %s hours",
                    predict_next_hours(self._store),
                )
                if should_give_up(self._store, config.give_up_hours):
                    break

            if level > size_level:
                self.subject.double_input_size()
                size_level += 1

            for _ in range(config.trials):
                self._forward(self._store.append(level, self.subject.measure_once()))

            level += 1
            narrate(logger, config.verbose, "N doubled.")

    def _converged(self) -> bool:
        converged = has_converged(
            self._store,
            self._min_runs,
            self.config.look_back,
            self.config.tolerance,
        )
        if (
            self._store.size() >= self._min_runs
            and self._store.level_count() > self.config.look_back
        ):
            narrate(
                logger, self.config.verbose,
                "Convergence check: change = %s ratio = %s",
                ratio_drift(self._store, self.config.look_back),
                self._store.ratio(0),
            )
        return converged

    def _forward(self, measurement: Measurement) -> None:
        if self._sink is not None:
            self._sink.append(measurement)

    @property
    def store(self) -> ResultStore:
        """Get the measurements collected so far."""
        return self._store

    @property
    def termination(self) -> TerminationCode:
        """Get why the experiment stopped (UNSET before a run)."""
        return self._termination

    @property
    def run_time(self) -> float | None:
        """Get the wall-clock run time in seconds, if known."""
        return self._run_time

    @property
    def min_runs(self) -> int:
        """Get the effective minimum run count, after any tuning."""
        return self._min_runs

    @property
    def tuning_doublings(self) -> int:
        """Get the number of doublings performed while tuning."""
        return self._tuning_doublings

    def summary(self) -> ExperimentSummary:
        """Return the termination metadata of this experiment."""
        latest_ratio = self._store.ratio(0) if self._store.level_count() >= 2 else None
        return ExperimentSummary(
            termination=self._termination,
            termination_name=self._termination.name,
            run_time=self._run_time,
            levels=self._store.level_count(),
            measurements=self._store.size(),
            min_runs=self._min_runs,
            tuning_doublings=self._tuning_doublings,
            latest_ratio=latest_ratio,
        )

    def classify(self) -> str:
        """Return the growth class label for the collected measurements."""
        if self._store.level_count() < 2:
            return "Unknown"
        return classify(self._store, self.config.look_back).label
