"""
Per-destination count report.
"""

from pathlib import Path
from typing import Sequence
import logging

import pandas as pd

from ..errors import SinkWriteError

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ['destination', 'name_list', 'output', 'expected', 'observed', 'status']


def build_count_table(
    name_lists: Sequence[Path],
    output_paths: Sequence[Path],
    expected_counts: Sequence[int],
    observed_counts: Sequence[int],
) -> pd.DataFrame:
    """
    Tabulate expected and observed counts, one row per destination.

    Rows whose counts differ are marked MISMATCH, all others OK.
    """
    df = pd.DataFrame({
        'destination': range(len(name_lists)),
        'name_list': [str(p) for p in name_lists],
        'output': [str(p) for p in output_paths],
        'expected': list(expected_counts),
        'observed': list(observed_counts),
    })
    df['status'] = 'OK'
    df.loc[df['expected'] != df['observed'], 'status'] = 'MISMATCH'
    return df[REPORT_COLUMNS]


def write_count_report(
    path: Path,
    name_lists: Sequence[Path],
    output_paths: Sequence[Path],
    expected_counts: Sequence[int],
    observed_counts: Sequence[int],
) -> pd.DataFrame:
    """Write the count table as TSV. Returns the table."""
    df = build_count_table(name_lists, output_paths, expected_counts, observed_counts)
    try:
        df.to_csv(path, sep='\t', index=False)
    except OSError as e:
        raise SinkWriteError(path, str(e)) from e
    logger.info(f"Wrote count report to {path}")
    return df
