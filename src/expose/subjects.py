# Copyright (c) Syntropy Systems
"""Subjects under test: anything that can be timed and have its input doubled."""
from __future__ import annotations

import bisect
import importlib
import random
import time
from typing import TYPE_CHECKING, Callable, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

T = TypeVar("T")


@runtime_checkable
class Subject(Protocol):
    """The two hooks a doubling experiment needs from the code it measures."""

    def measure_once(self) -> float:
        """Run the operation once and return its elapsed time in nanoseconds."""
        ...

    def double_input_size(self) -> None:
        """Double the size of the input the next measurement will use."""
        ...


class CallableSubject(Generic[T]):
    """Times ``operation(make_input(size))`` and doubles ``size`` on request."""

    operation: Callable[[T], object]
    make_input: Callable[[int], T]
    size: int
    _input: T

    def __init__(
        self,
        operation: Callable[[T], object],
        make_input: Callable[[int], T],
        initial_size: int = 1000,
    ) -> None:
        """Initialize a subject.

        Args:
            operation: Function whose run time is measured
            make_input: Builds the operation's input for a given size
            initial_size: Size of the first input

        """
        if initial_size < 1:
            msg = f"Initial size must be positive, got {initial_size}"
            raise ValueError(msg)
        self.operation = operation
        self.make_input = make_input
        self.size = initial_size
        self._input = make_input(initial_size)

    def measure_once(self) -> float:
        """Time one call of the operation in nanoseconds."""
        start = time.perf_counter_ns()
        _ = self.operation(self._input)
        return float(time.perf_counter_ns() - start)

    def double_input_size(self) -> None:
        """Double the size and rebuild the input."""
        self.size *= 2
        self._input = self.make_input(self.size)


def _shuffled(size: int) -> list[int]:
    values = list(range(size))
    random.Random(size).shuffle(values)  # noqa: S311
    return values


def _pairs(values: list[int]) -> int:
    count = 0
    for a in values:
        for b in values:
            if a < b:
                count += 1
    return count


def _search_near_end(values: list[int]) -> int:
    # Sorted input: binary search for a value near the end
    return bisect.bisect_left(values, len(values) - 1)


def _lookup_subject() -> CallableSubject[dict[int, int]]:
    return CallableSubject(lambda table: table.get(0), lambda n: {i: i for i in range(n)})


def _bisect_subject() -> CallableSubject[list[int]]:
    return CallableSubject(_search_near_end, lambda n: list(range(n)))


def _sum_subject() -> CallableSubject[list[int]]:
    return CallableSubject(sum, lambda n: list(range(n)))


def _sort_subject() -> CallableSubject[list[int]]:
    return CallableSubject(sorted, _shuffled)


def _pairs_subject() -> CallableSubject[list[int]]:
    return CallableSubject(_pairs, lambda n: list(range(n)), initial_size=32)


BUILTIN_SUBJECTS: Mapping[str, tuple[Callable[[], Subject], str]] = {
    "lookup": (_lookup_subject, "dict lookup, constant"),
    "bisect": (_bisect_subject, "binary search of a sorted list, logarithmic"),
    "sum": (_sum_subject, "sum of a list, linear"),
    "sort": (_sort_subject, "sort of a shuffled list, linearithmic"),
    "pairs": (_pairs_subject, "count ordered pairs, quadratic"),
}


def resolve_subject(reference: str) -> Subject:
    """Build a subject from a built-in name or a ``module:attribute`` path.

    The attribute may be a Subject instance or a zero-argument factory.

    Raises:
        ValueError: If the reference cannot be resolved to a Subject.

    """
    if reference in BUILTIN_SUBJECTS:
        factory, _description = BUILTIN_SUBJECTS[reference]
        return factory()

    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        known = ", ".join(sorted(BUILTIN_SUBJECTS))
        msg = f"Unknown subject '{reference}'. Use one of {known} or module:attribute"
        raise ValueError(msg)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        msg = f"Cannot import module '{module_name}': {e}"
        raise ValueError(msg) from e

    target = getattr(module, attr, None)
    if target is None:
        msg = f"Module '{module_name}' has no attribute '{attr}'"
        raise ValueError(msg)

    # Classes satisfy the protocol check too, so instantiate them first
    subject: object = target
    if isinstance(target, type) or (
        callable(target) and not isinstance(target, Subject)
    ):
        subject = target()
    if isinstance(subject, type) or not isinstance(subject, Subject):
        msg = f"'{reference}' is not a subject or a factory returning one"
        raise ValueError(msg)
    return subject
