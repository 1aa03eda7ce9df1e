"""
Extraction pipeline: name lists in, demultiplexed outputs out.
"""

from contextlib import ExitStack
import logging

from .config import ExtractionConfig
from .core.name_index import build_name_index
from .core.router import route_records
from .core.validation import ExtractionSummary, validate_counts
from .io.output import write_count_report
from .io.records import open_input, read_records
from .io.sinks import open_sinks

logger = logging.getLogger(__name__)


def run_extraction(config: ExtractionConfig) -> ExtractionSummary:
    """
    Run one extraction.

    Steps:
    1. Validate the configuration (before any file is touched)
    2. Build the name index from all name lists
    3. Open input and outputs, stream the input once, route matching records
    4. Close outputs, optionally write the count report
    5. Reconcile expected and observed counts

    Any failure raises an MfqeError; outputs already written are left as
    they are.

    Args:
        config: Run configuration

    Returns:
        ExtractionSummary of the run

    Raises:
        CountMismatch: If a name list was not matched exactly
    """
    config.validate()

    name_index = build_name_index(config.name_lists)

    with ExitStack() as stack:
        stream = stack.enter_context(open_input(config.input_path))
        sinks = open_sinks(
            config.output_paths,
            stack,
            compress=config.compress,
            append=config.append,
            sequence_prefix=config.sequence_prefix,
        )
        records = read_records(stream, config.sequence_format)
        routing = route_records(records, name_index, sinks)

    if config.summary_path is not None:
        write_count_report(
            config.summary_path,
            config.name_lists,
            config.output_paths,
            name_index.expected_counts,
            routing.observed_counts,
        )

    return validate_counts(name_index.expected_counts, routing)
