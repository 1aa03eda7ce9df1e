"""
Name index: which destinations requested each sequence name.
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Set, Tuple
import logging

from ..errors import DuplicateNameInList, ListFileUnreadable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameIndex:
    """Immutable mapping from sequence name to destination indices.

    Attributes:
        name_to_destinations: Read-only mapping; each value is a tuple of
            destination indices in ascending order
        expected_counts: Number of names in each list, by destination
    """
    name_to_destinations: Mapping[str, Tuple[int, ...]]
    expected_counts: Tuple[int, ...]

    @property
    def n_destinations(self) -> int:
        return len(self.expected_counts)

    def destinations(self, name: str) -> Tuple[int, ...]:
        """Destinations requesting `name`, or an empty tuple."""
        return self.name_to_destinations.get(name, ())

    def __contains__(self, name: str) -> bool:
        return name in self.name_to_destinations

    def __len__(self) -> int:
        return len(self.name_to_destinations)


def iter_list_names(list_path: Path):
    """Yield the names in one list file, skipping empty lines.

    Only the line ending is stripped; names are otherwise taken verbatim.
    """
    try:
        with open(list_path, encoding='utf-8', newline='') as f:
            for line in f:
                name = line.rstrip('\n')
                if name.endswith('\r'):
                    name = name[:-1]
                if name:
                    yield name
    except OSError as e:
        raise ListFileUnreadable(list_path, str(e)) from e
    except UnicodeDecodeError as e:
        raise ListFileUnreadable(list_path, f"not valid UTF-8 text ({e})") from e


def build_name_index(list_paths: Sequence[Path]) -> NameIndex:
    """
    Read every name list and build the NameIndex.

    List i feeds destination i. A name may appear in several lists
    (fan-out), but only once per list.

    Args:
        list_paths: Name list files, in destination order

    Returns:
        NameIndex with one expected count per list

    Raises:
        ListFileUnreadable: If a list cannot be opened
        DuplicateNameInList: If a name occurs twice in the same list
    """
    name_to_destinations: Dict[str, List[int]] = {}
    expected_counts: List[int] = []

    for i, list_path in enumerate(list_paths):
        seen: Set[str] = set()
        for name in iter_list_names(list_path):
            if name in seen:
                raise DuplicateNameInList(name, list_path)
            seen.add(name)
            # Lists are visited in order, so destinations stay ascending
            name_to_destinations.setdefault(name, []).append(i)

        expected_counts.append(len(seen))
        logger.info(f"Read in {len(seen)} sequence names from {list_path}")

    shared = sum(1 for dests in name_to_destinations.values() if len(dests) > 1)
    if shared:
        logger.info(f"{shared} sequence names are requested by more than one list")

    return NameIndex(
        name_to_destinations=MappingProxyType(
            {name: tuple(dests) for name, dests in name_to_destinations.items()}
        ),
        expected_counts=tuple(expected_counts),
    )
