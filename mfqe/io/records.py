"""
FASTQ and FASTA record reading.

Records are read from binary streams so that they can be written back
byte for byte. Readers are lazy generators: one record is held in memory
at a time.
"""

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple
import gzip
import io
import logging
import re
import sys

from ..config import SequenceFormat
from ..errors import SourceDecodeError, SourceOpenError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'

# Name is everything before the first whitespace byte of the header
_NAME_END = re.compile(rb'\s')


def _strip_line_ending(line: bytes) -> bytes:
    if line.endswith(b'\n'):
        line = line[:-1]
    if line.endswith(b'\r'):
        line = line[:-1]
    return line


def _prefixed_header(header: bytes, prefix: Optional[str]) -> bytes:
    if prefix:
        return prefix.encode('utf-8') + header
    return header


@dataclass
class SequenceRecord:
    """A single sequence record.

    Subclasses provide `encode(prefix=None) -> bytes`, returning the record
    in its native format with `prefix` prepended to the header.

    Attributes:
        header: Header line without its '@'/'>' marker or line ending.
            Any comment after the name is kept verbatim.
    """
    header: bytes

    @property
    def identifier(self) -> str:
        """Sequence name used for matching against name lists."""
        match = _NAME_END.search(self.header)
        raw = self.header[:match.start()] if match else self.header
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SourceDecodeError(f"Sequence name is not valid UTF-8: {raw!r}") from e


@dataclass
class FastqRecord(SequenceRecord):
    """FASTQ record: header, sequence and per-base quality."""
    sequence: bytes = b''
    quality: bytes = b''

    def encode(self, prefix: Optional[str] = None) -> bytes:
        return b''.join([
            b'@', _prefixed_header(self.header, prefix), b'\n',
            self.sequence, b'\n+\n',
            self.quality, b'\n',
        ])


@dataclass
class FastaRecord(SequenceRecord):
    """FASTA record: header and the sequence lines as they were read."""
    sequence_lines: Tuple[bytes, ...] = ()

    @property
    def sequence(self) -> bytes:
        return b''.join(self.sequence_lines)

    def encode(self, prefix: Optional[str] = None) -> bytes:
        parts = [b'>', _prefixed_header(self.header, prefix), b'\n']
        for line in self.sequence_lines:
            parts.append(line)
            parts.append(b'\n')
        return b''.join(parts)


def read_fastq(stream: BinaryIO) -> Iterator[FastqRecord]:
    """
    Parse FASTQ records (4 lines each) from a binary stream.

    Blank lines between records are skipped. Any framing error is fatal.

    Yields:
        FastqRecord objects in input order

    Raises:
        SourceDecodeError: On malformed or truncated records
    """
    line_number = 0

    while True:
        header = stream.readline()
        line_number += 1
        if not header:
            return
        header = _strip_line_ending(header)
        if not header:
            continue
        if not header.startswith(b'@'):
            raise SourceDecodeError(
                f"Expected FASTQ header starting with '@', found {header[:50]!r}",
                line_number,
            )
        record_start = line_number

        seq = stream.readline()
        plus = stream.readline()
        qual = stream.readline()
        line_number += 3

        if not seq or not plus or not qual:
            raise SourceDecodeError("Truncated FASTQ record at end of input", record_start)

        plus = _strip_line_ending(plus)
        if not plus.startswith(b'+'):
            raise SourceDecodeError(
                f"Expected FASTQ separator line starting with '+', found {plus[:50]!r}",
                record_start + 2,
            )

        seq = _strip_line_ending(seq)
        qual = _strip_line_ending(qual)
        if len(seq) != len(qual):
            raise SourceDecodeError(
                f"Sequence and quality lengths differ ({len(seq)} vs {len(qual)})",
                record_start,
            )

        yield FastqRecord(header=header[1:], sequence=seq, quality=qual)


def read_fasta(stream: BinaryIO) -> Iterator[FastaRecord]:
    """
    Parse FASTA records from a binary stream.

    A record is a '>' header followed by zero or more sequence lines.
    Blank lines are skipped.

    Raises:
        SourceDecodeError: If sequence data precedes the first header
    """
    header = None
    lines = []
    line_number = 0

    for raw in stream:
        line_number += 1
        line = _strip_line_ending(raw)
        if not line:
            continue
        if line.startswith(b'>'):
            if header is not None:
                yield FastaRecord(header=header, sequence_lines=tuple(lines))
            header = line[1:]
            lines = []
        elif header is None:
            raise SourceDecodeError(
                f"Expected FASTA header starting with '>', found {line[:50]!r}",
                line_number,
            )
        else:
            lines.append(line)

    if header is not None:
        yield FastaRecord(header=header, sequence_lines=tuple(lines))


def read_records(stream: BinaryIO, sequence_format: SequenceFormat) -> Iterator[SequenceRecord]:
    """Read records of the given format from a binary stream.

    Errors from the underlying stream (e.g. corrupt gzip data) are reported
    as SourceDecodeError.
    """
    reader = read_fastq if sequence_format == SequenceFormat.FASTQ else read_fasta
    try:
        yield from reader(stream)
    except (OSError, EOFError) as e:
        raise SourceDecodeError(f"Failed to read input: {e}") from e


@contextmanager
def open_input(path: Optional[Path] = None) -> Iterator[BinaryIO]:
    """
    Open the input for binary reading.

    Args:
        path: Input file, or None for standard input

    Yields:
        Binary stream; gzip input (detected by magic bytes) is decompressed
        transparently. Files opened here are closed on exit, standard input
        is left open.
    """
    with ExitStack() as stack:
        if path is None:
            logger.info("Reading sequences from standard input")
            raw = sys.stdin.buffer
        else:
            logger.info(f"Reading sequences from {path}")
            try:
                raw = stack.enter_context(open(path, 'rb'))
            except OSError as e:
                raise SourceOpenError(path, str(e)) from e

        if not hasattr(raw, 'peek'):
            raw = io.BufferedReader(raw)

        if raw.peek(2)[:2] == GZIP_MAGIC:
            logger.debug("Input is gzip-compressed")
            yield stack.enter_context(gzip.GzipFile(fileobj=raw, mode='rb'))
        else:
            yield raw
