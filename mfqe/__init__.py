"""
mfqe - extract multiple sets of FASTQ/FASTA sequences by name.
"""

__version__ = "0.5.0"

from .config import ExtractionConfig, SequenceFormat
from .core.name_index import NameIndex, build_name_index
from .core.validation import ExtractionSummary
from .errors import (
    ConfigurationError,
    CountMismatch,
    DuplicateNameInList,
    ListFileUnreadable,
    MfqeError,
    SinkOpenError,
    SinkWriteError,
    SourceDecodeError,
    SourceOpenError,
)
from .pipeline import run_extraction

__all__ = [
    "ExtractionConfig",
    "SequenceFormat",
    "NameIndex",
    "build_name_index",
    "ExtractionSummary",
    "run_extraction",
    "MfqeError",
    "ConfigurationError",
    "ListFileUnreadable",
    "DuplicateNameInList",
    "SourceDecodeError",
    "SourceOpenError",
    "SinkOpenError",
    "SinkWriteError",
    "CountMismatch",
    "__version__",
]
