"""
I/O modules for mfqe.
"""

from .output import build_count_table, write_count_report
from .records import (
    FastaRecord,
    FastqRecord,
    SequenceRecord,
    open_input,
    read_fasta,
    read_fastq,
    read_records,
)
from .sinks import OutputSink, open_sinks

__all__ = [
    'SequenceRecord',
    'FastqRecord',
    'FastaRecord',
    'read_fastq',
    'read_fasta',
    'read_records',
    'open_input',
    'OutputSink',
    'open_sinks',
    'build_count_table',
    'write_count_report',
]
