# Copyright (c) Syntropy Systems
"""Output sinks that persist measurements as an experiment runs."""
from __future__ import annotations

import csv
from contextlib import suppress
from typing import IO, TYPE_CHECKING, Protocol

from pydantic import ValidationError
from typing_extensions import Self

from expose.models.experiment import Measurement
from expose.results import ResultStore

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path
    from types import TracebackType

    from expose.models.base import JSONValue


class ResultSink(Protocol):
    """Receives each measurement as it is recorded."""

    def append(self, measurement: Measurement) -> None:
        ...

    def flush(self) -> None:
        ...

    def close(self) -> None:
        ...


class _FileSink:
    """Shared file handling for sinks writing to a single path."""

    path: Path
    _file: IO[str] | None

    def __init__(self, path: Path, *, overwrite: bool) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._is_new = overwrite or not path.exists() or path.stat().st_size == 0
        self._file = path.open("w" if overwrite else "a", newline="")

    def _require_open(self) -> IO[str]:
        if self._file is None:
            msg = f"Sink for {self.path} is closed"
            raise RuntimeError(msg)
        return self._file

    def flush(self) -> None:
        """Flush buffered output to disk."""
        _ = self._require_open().flush()

    def close(self) -> None:
        """Close the underlying file. Safe to call twice."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> Self:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - close the file."""
        self.close()


class JsonlResultSink(_FileSink):
    """Writes one JSON object per measurement to a .jsonl file."""

    def __init__(self, path: Path, *, overwrite: bool = False) -> None:
        """Open ``path`` for appending, or truncate it when ``overwrite``."""
        super().__init__(path, overwrite=overwrite)

    def append(self, measurement: Measurement) -> None:
        """Write one measurement line and flush it."""
        f = self._require_open()
        _ = f.write(measurement.model_dump_json() + "\n")
        _ = f.flush()


class CsvResultSink(_FileSink):
    """Writes measurements as CSV rows with optional per-experiment columns.

    The header is written only when the file is new or overwritten, so
    repeated experiments can share one file.
    """

    _extra_values: list[str]

    def __init__(
        self,
        path: Path,
        *,
        header: Sequence[str] = ("Doubles", "Time"),
        extra: Mapping[str, JSONValue] | None = None,
        overwrite: bool = False,
    ) -> None:
        """Open the CSV file.

        Args:
            path: Output CSV path
            header: Column names for level and elapsed time
            extra: Experiment parameters repeated on every row
            overwrite: Truncate instead of appending

        """
        super().__init__(path, overwrite=overwrite)
        extra = extra or {}
        self._extra_values = [str(value) for value in extra.values()]
        self._writer = csv.writer(self._require_open())
        if self._is_new:
            self._writer.writerow([*header, *extra.keys()])

    def append(self, measurement: Measurement) -> None:
        """Write one measurement row."""
        _ = self._require_open()
        self._writer.writerow(
            [measurement.level, measurement.elapsed, *self._extra_values]
        )


def read_measurements(path: Path) -> list[Measurement]:
    """Read measurements from a JSONL file, tolerating partial lines."""
    measurements: list[Measurement] = []

    if not path.exists():
        return measurements

    with path.open() as f:
        for raw_line in f:
            line = raw_line.strip()
            if line:
                with suppress(ValidationError):
                    measurements.append(Measurement.model_validate_json(line))

    return measurements


def split_runs(measurements: Sequence[Measurement]) -> list[list[Measurement]]:
    """Split measurements appended by several experiments into one list per run.

    A run ends where the level falls back to 0 after a later level. Two runs
    that both stopped at level 0 cannot be told apart and stay together.
    """
    runs: list[list[Measurement]] = []
    previous: Measurement | None = None

    for measurement in measurements:
        if previous is None or (measurement.level == 0 and previous.level > 0):
            runs.append([])
        runs[-1].append(measurement)
        previous = measurement

    return runs


def load_runs(path: Path) -> list[ResultStore]:
    """Rebuild one ResultStore per experiment recorded in a JSONL file."""
    return [ResultStore(run) for run in split_runs(read_measurements(path))]


def load_store(path: Path, run: int = -1) -> ResultStore:
    """Rebuild a ResultStore from a JSONL file written by JsonlResultSink.

    Args:
        path: JSONL measurements file
        run: Index of the experiment to load when the file holds several,
            counting from 0; negative values count from the last run

    Raises:
        ValueError: If there is no such run, or its levels are not contiguous.

    """
    runs = split_runs(read_measurements(path))
    if not runs:
        return ResultStore()
    if not -len(runs) <= run < len(runs):
        msg = f"No run {run} in {path} ({len(runs)} runs)"
        raise ValueError(msg)
    return ResultStore(runs[run])
