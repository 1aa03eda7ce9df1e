"""
Output sinks for extracted records.

A sink is one output file, plain or gzip-compressed, opened either
truncating or appending.
"""

from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional, Sequence
import gzip
import logging

from ..errors import SinkOpenError, SinkWriteError
from .records import SequenceRecord

logger = logging.getLogger(__name__)

# zlib default compression level
GZIP_LEVEL = 6


class OutputSink:
    """Writes re-encoded records to one output file.

    Append mode never truncates: a missing file is created, an existing
    one is extended. For gzip outputs each run appends a new gzip member,
    which decompresses to the concatenation of all runs.
    """

    def __init__(
        self,
        path: Path,
        compress: bool = True,
        append: bool = False,
        sequence_prefix: Optional[str] = None,
    ):
        self.path = Path(path)
        self.compress = compress
        self.append = append
        self.sequence_prefix = sequence_prefix
        self.records_written = 0

        mode = 'ab' if append else 'wb'
        try:
            if compress:
                self._handle = gzip.open(self.path, mode, compresslevel=GZIP_LEVEL)
            else:
                self._handle = open(self.path, mode)
        except OSError as e:
            raise SinkOpenError(self.path, str(e)) from e

    def write(self, record: SequenceRecord):
        """Write one record in its native format."""
        try:
            self._handle.write(record.encode(self.sequence_prefix))
        except (OSError, ValueError) as e:
            raise SinkWriteError(self.path, str(e)) from e
        self.records_written += 1

    def close(self):
        """Flush buffered data and close the file."""
        if self._handle.closed:
            return
        try:
            self._handle.close()
        except OSError as e:
            raise SinkWriteError(self.path, str(e)) from e

    def __enter__(self) -> 'OutputSink':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        kind = 'gzip' if self.compress else 'plain'
        mode = 'append' if self.append else 'truncate'
        return f"OutputSink({str(self.path)!r}, {kind}, {mode})"


def open_sinks(
    paths: Sequence[Path],
    stack: ExitStack,
    compress: bool = True,
    append: bool = False,
    sequence_prefix: Optional[str] = None,
) -> List[OutputSink]:
    """
    Open one sink per output path, in destination order.

    Each sink is registered with `stack`, so all of them are closed when
    the stack unwinds, including when a later sink fails to open.

    Args:
        paths: Output files
        stack: ExitStack owning the sinks
        compress: gzip-compress outputs
        append: Append instead of truncating
        sequence_prefix: Prefix for every written sequence name

    Returns:
        List of open OutputSink objects
    """
    action = "Appending to" if append else "Opening"
    kind = "gzip-compressed" if compress else "uncompressed"
    logger.info(f"{action} {len(paths)} {kind} output files ..")

    sinks = []
    for path in paths:
        sink = OutputSink(path, compress=compress, append=append,
                          sequence_prefix=sequence_prefix)
        stack.enter_context(sink)
        sinks.append(sink)
    return sinks
