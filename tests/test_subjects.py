# Copyright (c) Syntropy Systems
"""Tests for subjects and subject resolution."""

import pytest

from expose.subjects import BUILTIN_SUBJECTS, CallableSubject, Subject, resolve_subject


class TestCallableSubject:
    """Tests for CallableSubject."""

    def test_doubling_rebuilds_input(self) -> None:
        """Test that doubling rebuilds the input at twice the size."""
        built: list[int] = []

        def make_input(size: int) -> list[int]:
            built.append(size)
            return list(range(size))

        seen: list[int] = []
        subject = CallableSubject(lambda values: seen.append(len(values)), make_input, 4)

        elapsed = subject.measure_once()
        subject.double_input_size()
        subject.double_input_size()
        _ = subject.measure_once()

        assert elapsed >= 0.0
        assert built == [4, 8, 16]
        assert seen == [4, 16]
        assert subject.size == 16

    def test_invalid_initial_size(self) -> None:
        """Test that the starting size must be positive."""
        with pytest.raises(ValueError, match="positive"):
            _ = CallableSubject(len, list, initial_size=0)

    def test_satisfies_protocol(self) -> None:
        """Test that CallableSubject is a Subject."""
        assert isinstance(CallableSubject(len, lambda n: [0] * n), Subject)


class TestResolveSubject:
    """Tests for resolve_subject."""

    @pytest.mark.parametrize("name", sorted(BUILTIN_SUBJECTS))
    def test_builtin_subjects(self, name: str) -> None:
        """Test that every built-in subject resolves and measures."""
        subject = resolve_subject(name)

        assert isinstance(subject, Subject)
        assert subject.measure_once() >= 0.0

    def test_module_factory(self, subject_module: str) -> None:
        """Test resolving a zero-argument factory."""
        subject = resolve_subject(f"{subject_module}:make_doubling")

        assert subject.measure_once() == 1000.0
        subject.double_input_size()
        assert subject.measure_once() == 2000.0

    def test_module_class(self, subject_module: str) -> None:
        """Test that a class reference is instantiated."""
        subject = resolve_subject(f"{subject_module}:Doubling")

        assert not isinstance(subject, type)
        assert subject.measure_once() == 1000.0

    def test_module_instance(self, subject_module: str) -> None:
        """Test resolving an existing instance."""
        assert isinstance(resolve_subject(f"{subject_module}:instance"), Subject)

    @pytest.mark.parametrize(
        "reference",
        ["quicksort", "no_colon_module", ":attr", "module:"],
    )
    def test_unknown_reference(self, reference: str) -> None:
        """Test that malformed references are rejected."""
        with pytest.raises(ValueError, match="Unknown subject"):
            _ = resolve_subject(reference)

    def test_missing_module(self) -> None:
        """Test that an unimportable module is reported."""
        with pytest.raises(ValueError, match="Cannot import"):
            _ = resolve_subject("expose_no_such_module_xyz:thing")

    def test_missing_attribute(self, subject_module: str) -> None:
        """Test that a missing attribute is reported."""
        with pytest.raises(ValueError, match="has no attribute"):
            _ = resolve_subject(f"{subject_module}:missing")

    def test_not_a_subject(self, subject_module: str) -> None:
        """Test that other objects are rejected."""
        with pytest.raises(ValueError, match="not a subject"):
            _ = resolve_subject(f"{subject_module}:not_a_subject")
