"""Flat-file peptide report.

One row per distinct peptide:

    peptide  peptideLength  accessionCount  occurrenceCount  accessions

Accessions are comma-joined. Large reports can additionally be written as
split files (``<path>.split1``, ``<path>.split2``, ...) of a fixed number of
rows, each with its own header line.
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from .aggregation import PeptideAccessionAggregator

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "peptide",
    "peptideLength",
    "accessionCount",
    "occurrenceCount",
    "accessions",
]


def peptide_table(aggregator: PeptideAccessionAggregator) -> pd.DataFrame:
    """Build the report table from an aggregator.

    Rows follow the aggregator's iteration order, accessions within a row
    are sorted.
    """
    rows = [
        (
            entry.peptide,
            len(entry.peptide),
            entry.accession_count,
            entry.occurrences,
            ",".join(sorted(entry.accessions)),
        )
        for entry in aggregator.entries()
    ]
    df = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    return df.astype({"peptideLength": "int64", "accessionCount": "int64", "occurrenceCount": "int64"})


def write_peptide_report(
    aggregator: PeptideAccessionAggregator,
    path: Union[str, Path],
    sep: str = "\t",
    split_size: int = 0,
) -> List[Path]:
    """Write the peptide report.

    Parameters
    ----------
    aggregator : PeptideAccessionAggregator
        Aggregated peptides
    path : str or Path
        Output file
    sep : str
        Column separator (default: tab)
    split_size : int
        If > 0 and the report has more rows, also write split files of at
        most ``split_size`` rows

    Returns
    -------
    paths : List[Path]
        All written files, the full report first
    """
    path = Path(path)
    df = peptide_table(aggregator)

    logger.info(f"Writing {len(df):,} peptides to {path.name}")
    df.to_csv(path, sep=sep, index=False)
    written = [path]

    if split_size > 0 and len(df) > split_size:
        for n, start in enumerate(range(0, len(df), split_size), start=1):
            split_path = path.with_name(f"{path.name}.split{n}")
            df.iloc[start:start + split_size].to_csv(split_path, sep=sep, index=False)
            written.append(split_path)
        logger.info(f"  Split into {len(written) - 1} files of up to {split_size:,} peptides")

    return written


def read_peptide_report(path: Union[str, Path], sep: str = "\t") -> pd.DataFrame:
    """Read a report written by write_peptide_report."""
    df = pd.read_csv(path, sep=sep, dtype={"peptide": str, "accessions": str}, keep_default_na=False)
    missing = [c for c in REPORT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Not a peptide report, missing columns: {missing}")
    return df
