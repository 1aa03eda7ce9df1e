"""
Single-pass demultiplexing of sequence records into output sinks.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence
import logging

from ..errors import ConfigurationError
from ..io.records import SequenceRecord
from ..io.sinks import OutputSink
from .name_index import NameIndex

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1_000_000


@dataclass
class RoutingResult:
    """Counts gathered during one routing pass."""
    total_records: int = 0
    observed_counts: List[int] = field(default_factory=list)

    @property
    def extracted_records(self) -> int:
        return sum(self.observed_counts)


def route_records(
    records: Iterable[SequenceRecord],
    name_index: NameIndex,
    sinks: Sequence[OutputSink],
) -> RoutingResult:
    """
    Write each record to every destination whose list names it.

    Records whose name is in no list are dropped. A record requested by
    several lists is written to each of them, in ascending destination
    order. Records reach each sink in input order.

    Args:
        records: Records to route, consumed to exhaustion
        name_index: Name to destination mapping
        sinks: One sink per destination, in destination order

    Returns:
        RoutingResult with the total number of records read and the number
        written to each destination
    """
    if len(sinks) != name_index.n_destinations:
        raise ConfigurationError(
            f"Got {len(sinks)} output sinks for {name_index.n_destinations} name lists"
        )

    result = RoutingResult(observed_counts=[0] * name_index.n_destinations)
    observed = result.observed_counts

    logger.info("Iterating input sequences")
    for record in records:
        for i in name_index.destinations(record.identifier):
            sinks[i].write(record)
            observed[i] += 1

        result.total_records += 1
        if result.total_records % PROGRESS_INTERVAL == 0:
            logger.debug(
                f"Processed {result.total_records:,} sequences, "
                f"extracted {result.extracted_records:,}"
            )

    logger.info(
        f"Extracted {result.extracted_records} sequences from {result.total_records} total"
    )
    return result
