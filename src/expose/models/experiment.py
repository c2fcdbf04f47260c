# Copyright (c) Syntropy Systems
"""Pydantic models for doubling experiments."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

from pydantic import Field, ValidationInfo, field_validator

from .base import ExposeBaseModel, FrozenModel

if TYPE_CHECKING:
    from typing_extensions import Self


class TerminationCode(IntEnum):
    """Why an experiment stopped."""

    UNSET = -1
    CONVERGENT = 0
    TIMED_OUT = 1
    OUT_OF_RESOURCES = 2


class Measurement(FrozenModel):
    """One timed trial of the subject at a size level.

    ``elapsed`` is in nanoseconds for the whole run.
    """

    level: int = Field(ge=0)
    elapsed: float = Field(ge=0.0)


class ExperimentConfig(FrozenModel):
    """Validated, immutable settings for one doubling experiment."""

    # Maximum net drift across the last look_back ratios that counts as converged
    tolerance: float = Field(default=0.1, gt=0.0)

    # Number of ratios considered when checking for convergence
    look_back: int = Field(default=4, ge=1)

    # Minimum number of runs before convergence may be declared
    min_runs: int = Field(default=5, ge=1, validate_default=True)

    # Times each level is measured
    trials: int = Field(default=1, ge=1)

    # Search for an informative starting size before measuring
    tuning: bool = True

    # Doublings allowed while tuning before accepting constant/log growth
    tuning_tries: int = Field(default=10, ge=0)

    # Predicted hours for the next doubling that trigger a give-up
    give_up_hours: float = Field(default=1.0, gt=0.0)

    verbose: bool = False

    @field_validator("min_runs")
    @classmethod
    def _raise_min_runs(cls, value: int, info: ValidationInfo) -> int:
        # x ratios need x + 1 runs
        look_back = info.data.get("look_back")
        if isinstance(look_back, int) and value < look_back + 1:
            return look_back + 1
        return value

    def with_overrides(self, **values: object) -> Self:
        """Return a new validated config with the non-None values applied."""
        data = self.model_dump()
        data.update({key: value for key, value in values.items() if value is not None})
        return self.model_validate(data)


class ExperimentSummary(ExposeBaseModel):
    """Outcome of a finished experiment."""

    termination: TerminationCode
    termination_name: str
    run_time: float | None = None
    levels: int
    measurements: int
    min_runs: int
    tuning_doublings: int = 0
    latest_ratio: float | None = None
