"""
Error types for mfqe.

Every error is fatal: it propagates to the command line handler, which
reports it and exits with a non-zero status.
"""

from pathlib import Path
from typing import Optional, Sequence


class MfqeError(Exception):
    """Base class for all mfqe errors."""


class ConfigurationError(MfqeError):
    """Inconsistent run configuration, detected before any I/O."""


class ListFileUnreadable(MfqeError):
    """A name list file could not be opened or read."""

    def __init__(self, list_path: Path, reason: str):
        self.list_path = Path(list_path)
        super().__init__(f"Failed to read name list file {list_path}: {reason}")


class DuplicateNameInList(MfqeError):
    """The same sequence name appears twice within one name list."""

    def __init__(self, name: str, list_path: Path):
        self.name = name
        self.list_path = Path(list_path)
        super().__init__(
            f"Sequence name '{name}' appears more than once in name list {list_path}"
        )


class SourceDecodeError(MfqeError):
    """The input does not conform to the expected record format."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (input line {line_number})"
        super().__init__(message)


class SourceOpenError(MfqeError):
    """The input file could not be opened."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to open input file {path}: {reason}")


class SinkOpenError(MfqeError):
    """An output file could not be opened."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to open output file {path} for writing: {reason}")


class SinkWriteError(MfqeError):
    """Writing, flushing or closing an output file failed."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to write to output file {path}: {reason}")


class CountMismatch(MfqeError):
    """Observed per-destination counts differ from the expected counts."""

    def __init__(self, expected: Sequence[int], observed: Sequence[int]):
        self.expected = list(expected)
        self.observed = list(observed)
        super().__init__(
            "Mismatching numbers of sequence names were observed. "
            f"Expected:\n{self.expected}\nbut found\n{self.observed}"
        )
