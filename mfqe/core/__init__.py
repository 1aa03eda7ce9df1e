"""
Core extraction logic: name index, record routing and count validation.
"""

from .name_index import NameIndex, build_name_index, iter_list_names
from .router import RoutingResult, route_records
from .validation import ExtractionSummary, find_mismatches, validate_counts

__all__ = [
    'NameIndex',
    'build_name_index',
    'iter_list_names',
    'RoutingResult',
    'route_records',
    'ExtractionSummary',
    'find_mismatches',
    'validate_counts',
]
