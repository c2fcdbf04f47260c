# Copyright (c) Syntropy Systems
"""Pytest fixtures for expose tests."""

from __future__ import annotations

import itertools
import os
import tempfile
from collections.abc import Callable, Generator, Sequence
from pathlib import Path
from typing import Union

import pytest

# Store original cwd at module load time
_original_cwd = Path.cwd()

Timings = Union[Callable[[int], float], Sequence[float]]


class ScriptedSubject:
    """Deterministic subject whose elapsed time depends only on its level.

    ``level`` counts the doublings applied so far. Raises ``error`` from
    measure_once once ``fail_at`` is reached.
    """

    def __init__(
        self,
        timings: Timings,
        *,
        fail_at: int | None = None,
        error: type[BaseException] = MemoryError,
    ) -> None:
        self._timings = timings
        self.fail_at = fail_at
        self.error = error
        self.level = 0
        self.measured_levels: list[int] = []

    def measure_once(self) -> float:
        if self.fail_at is not None and self.level >= self.fail_at:
            msg = f"failed at level {self.level}"
            raise self.error(msg)
        self.measured_levels.append(self.level)
        if callable(self._timings):
            return self._timings(self.level)
        return self._timings[self.level]

    def double_input_size(self) -> None:
        self.level += 1


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def expose_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary project with an empty .expose directory."""
    (temp_dir / ".expose").mkdir()

    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def make_subject() -> type[ScriptedSubject]:
    """Return the scripted subject class for building synthetic subjects."""
    return ScriptedSubject


@pytest.fixture
def step_clock() -> Callable[[], float]:
    """A fake wall clock advancing one second per call."""
    ticks = itertools.count()
    return lambda: float(next(ticks))


SUBJECT_MODULE = '''
class Doubling:
    """Linear subject: elapsed time doubles with every doubling."""

    def __init__(self):
        self.level = 0

    def measure_once(self):
        return 1000.0 * 2 ** self.level

    def double_input_size(self):
        self.level += 1


def make_doubling():
    return Doubling()


instance = Doubling()
not_a_subject = 42
'''


@pytest.fixture
def subject_module(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write an importable module of deterministic subjects and return its name."""
    name = "expose_test_subjects"
    (temp_dir / f"{name}.py").write_text(SUBJECT_MODULE)
    monkeypatch.syspath_prepend(str(temp_dir))
    return name
