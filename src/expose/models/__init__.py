# Copyright (c) Syntropy Systems
"""Pydantic models for expose."""

from expose.models.experiment import (
    ExperimentConfig,
    ExperimentSummary,
    Measurement,
    TerminationCode,
)

__all__ = [
    "ExperimentConfig",
    "ExperimentSummary",
    "Measurement",
    "TerminationCode",
]
