"""
Configuration classes for mfqe.

A run is described by an ExtractionConfig, built either from command line
options or from a YAML file.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging
import os

import yaml

from .errors import ConfigurationError

# Environment variable tuning diagnostic verbosity
LOG_LEVEL_ENV = 'MFQE_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'INFO'


class SequenceFormat(Enum):
    """Record flavour of the input and outputs."""
    FASTQ = "fastq"
    FASTA = "fasta"


@dataclass
class ExtractionConfig:
    """Full configuration of one extraction run.

    Attributes:
        sequence_format: FASTQ or FASTA
        name_lists: Name list files, one per destination, in order
        output_paths: Output files, paired 1:1 with name_lists
        input_path: Input file, or None for standard input
        compress: Write gzip-compressed outputs
        append: Append to existing outputs instead of truncating
        sequence_prefix: Text prepended to every output sequence name
        summary_path: Optional per-destination count report (TSV)
    """
    sequence_format: SequenceFormat
    name_lists: List[Path] = field(default_factory=list)
    output_paths: List[Path] = field(default_factory=list)
    input_path: Optional[Path] = None
    compress: bool = True
    append: bool = False
    sequence_prefix: Optional[str] = None
    summary_path: Optional[Path] = None

    def __post_init__(self):
        self.name_lists = [Path(p) for p in self.name_lists]
        self.output_paths = [Path(p) for p in self.output_paths]
        if self.input_path is not None:
            self.input_path = Path(self.input_path)
        if self.summary_path is not None:
            self.summary_path = Path(self.summary_path)

    def validate(self) -> 'ExtractionConfig':
        """Check the configuration before any file is touched.

        Raises:
            ConfigurationError: If no name lists are given, the number of
                name lists and output files differ, an output file is given
                twice, or an output file is also the input or the report.
        """
        if not self.name_lists:
            raise ConfigurationError("At least one sequence name list is required")

        if len(self.name_lists) != len(self.output_paths):
            raise ConfigurationError(
                f"The number of sequence name lists was {len(self.name_lists)}, "
                f"output files there was {len(self.output_paths)}. These must be equal"
            )

        seen = {}
        for path in self.output_paths:
            resolved = path.resolve()
            if resolved in seen:
                raise ConfigurationError(
                    f"Output file {path} is given more than once "
                    f"(also as {seen[resolved]}); each name list needs its own output"
                )
            seen[resolved] = path

        if self.input_path is not None and self.input_path.resolve() in seen:
            raise ConfigurationError(
                f"Output file {seen[self.input_path.resolve()]} is also the input file"
            )

        if self.summary_path is not None and self.summary_path.resolve() in seen:
            raise ConfigurationError(
                f"Output file {seen[self.summary_path.resolve()]} is also the count report"
            )

        return self

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ExtractionConfig':
        """Create from a dictionary, as loaded from YAML."""
        if 'format' not in d:
            raise ConfigurationError("Configuration must specify 'format' (fastq or fasta)")

        try:
            sequence_format = SequenceFormat(str(d['format']).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown sequence format '{d['format']}', expected 'fastq' or 'fasta'"
            ) from None

        name_lists = d.get('name_lists') or []
        outputs = d.get('outputs') or []
        if isinstance(name_lists, str):
            name_lists = [name_lists]
        if isinstance(outputs, str):
            outputs = [outputs]

        return cls(
            sequence_format=sequence_format,
            name_lists=name_lists,
            output_paths=outputs,
            input_path=d.get('input'),
            compress=_flag(d, 'compress', True),
            append=_flag(d, 'append', False),
            sequence_prefix=d.get('sequence_prefix'),
            summary_path=d.get('summary'),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> 'ExtractionConfig':
        """Load configuration from YAML file.

        Relative paths in the file are taken as given, i.e. relative to the
        working directory of the run.
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        return cls.from_dict(data)


def _flag(d: Dict[str, Any], key: str, default: bool) -> bool:
    """Boolean option from a config mapping; YAML true/false only."""
    value = d.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"Configuration key '{key}' must be true or false, got {value!r}"
        )
    return value


def log_level_from_env(environ: Optional[Dict[str, str]] = None) -> int:
    """Resolve the logging level from MFQE_LOG_LEVEL (name or number)."""
    environ = os.environ if environ is None else environ
    value = environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip()

    if value.isdigit():
        return int(value)

    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level

    raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV} value: {value}")
