"""
Reconciliation of expected and observed per-destination counts.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from ..errors import CountMismatch
from .router import RoutingResult


@dataclass(frozen=True)
class ExtractionSummary:
    """Outcome of a successful extraction run."""
    total_records: int
    expected_counts: Tuple[int, ...]
    observed_counts: Tuple[int, ...]

    @property
    def extracted_records(self) -> int:
        return sum(self.observed_counts)

    def __str__(self) -> str:
        return f"Extracted {self.extracted_records} sequences from {self.total_records} total"


def find_mismatches(expected: Sequence[int], observed: Sequence[int]) -> Tuple[int, ...]:
    """Destination indices whose observed count differs from the expected one."""
    return tuple(i for i, (e, o) in enumerate(zip(expected, observed)) if e != o)


def validate_counts(expected: Sequence[int], routing: RoutingResult) -> ExtractionSummary:
    """
    Check that every destination received exactly the number of records
    its name list requested.

    Raises:
        CountMismatch: If any destination differs, reporting both count
            sequences in full
    """
    expected = tuple(expected)
    observed = tuple(routing.observed_counts)

    if len(expected) != len(observed) or find_mismatches(expected, observed):
        raise CountMismatch(expected, observed)

    return ExtractionSummary(
        total_records=routing.total_records,
        expected_counts=expected,
        observed_counts=observed,
    )
