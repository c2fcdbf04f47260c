"""
expose - Empirical growth-rate estimation by doubling experiments.

Double the input, time it, stop when the ratios settle.
"""

from expose.experiment import ExperimentRunner
from expose.models.experiment import ExperimentConfig, Measurement, TerminationCode
from expose.results import InsufficientDataError, ResultStore
from expose.subjects import CallableSubject, Subject

__version__ = "0.1.0"
__all__ = [
    "CallableSubject",
    "ExperimentConfig",
    "ExperimentRunner",
    "InsufficientDataError",
    "Measurement",
    "ResultStore",
    "Subject",
    "TerminationCode",
    "__version__",
]
