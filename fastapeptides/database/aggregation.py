"""Peptide-to-accession aggregation across a protein corpus.

The aggregator is the only mutable state of a digestion run. It maps every
distinct peptide to the set of accessions it was produced from and keeps a
separate occurrence ledger counting every time a peptide was produced
(several times within one protein included).

Design principles:
1. Explicit context object passed to every batch call
2. Flushing is decided by the caller (``needs_flush`` / ``clear()``),
   never triggered by a digestion call
3. Commutative, associative ``update`` for map-reduce style processing

Examples
--------
>>> agg = PeptideAccessionAggregator()
>>> agg.merge("PEPTIDEK", "P1")
>>> agg.merge("PEPTIDEK", "P1")
>>> agg.merge("PEPTIDEK", "P2")
>>> agg.occurrences("PEPTIDEK"), sorted(agg.accessions("PEPTIDEK"))
(3, ['P1', 'P2'])
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from functools import reduce
from typing import Dict, FrozenSet, Iterable, Iterator, NamedTuple, Optional, Set, Tuple

from ..constants import DEFAULT_FLUSH_THRESHOLD, PEPTIDE_LOG_INTERVAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessionRecord:
    """Identifier of a source protein plus its free-text description."""

    accession: str
    description: str = ""

    @classmethod
    def from_header(cls, header: str) -> AccessionRecord:
        """Build a record from a FASTA-style header (without '>').

        The first whitespace-separated token is the accession, the rest the
        description. Without a description the accession is used.

        >>> AccessionRecord.from_header("P12345 Some protein")
        AccessionRecord(accession='P12345', description='Some protein')
        """
        parts = header.strip().split(maxsplit=1)
        if not parts:
            return cls("", "")
        accession = parts[0]
        description = parts[1] if len(parts) > 1 else accession
        return cls(accession, description)


class AggregationEntry(NamedTuple):
    """Snapshot of one distinct peptide."""

    peptide: str
    accessions: FrozenSet[str]
    occurrences: int

    @property
    def accession_count(self) -> int:
        return len(self.accessions)


class PeptideAccessionAggregator:
    """Mapping from peptide to (accession set, occurrence count).

    Attributes
    ----------
    flush_threshold : int
        Number of distinct peptides at which ``needs_flush`` turns True
    """

    def __init__(self, flush_threshold: int = DEFAULT_FLUSH_THRESHOLD):
        self.flush_threshold = flush_threshold
        self._accessions: Dict[str, Set[str]] = {}
        # Spans all digestion rounds; may hold peptides no longer in _accessions
        self._occurrences: Dict[str, int] = defaultdict(int)
        self._records: Dict[str, AccessionRecord] = {}

    # -------------------------------------------------------------------------
    # Accumulation
    # -------------------------------------------------------------------------

    def add_accession(self, record: AccessionRecord) -> None:
        """Register the record of a processed protein (first record wins)."""
        self._records.setdefault(record.accession, record)

    def merge(self, peptide: str, accession: str) -> None:
        """Record one occurrence of ``peptide`` in protein ``accession``."""
        accessions = self._accessions.get(peptide)
        if accessions is None:
            accessions = set()
            self._accessions[peptide] = accessions
        accessions.add(accession)
        self._occurrences[peptide] += 1

    def merge_round(self, derivations: Iterable[Tuple[str, Iterable[str]]]) -> None:
        """Replace the peptide set by peptides derived in a further digestion round.

        Parameters
        ----------
        derivations : iterable of (source_peptide, derived_peptides)
            For every current peptide, the peptides a further enzyme cut it
            into (possibly containing the source itself)

        Notes
        -----
        Every derived peptide inherits the source's accessions and gains
        ``len(source accessions)`` occurrences. The source loses that same
        amount, so a peptide the enzyme leaves unchanged keeps its count.

        Counts of peptides missing from the new round stay in the ledger: a
        later round may derive the peptide again and then adds to what is
        left of its count. Call :meth:`discard_stale_counts` once no further
        round follows.
        """
        round_accessions: Dict[str, Set[str]] = {}

        for n_sources, (source, derived) in enumerate(derivations, start=1):
            source_accessions = self._accessions.get(source)
            if source_accessions is None:
                raise KeyError(f"Peptide '{source}' is not part of the aggregation")
            weight = len(source_accessions)

            for peptide in derived:
                accessions = round_accessions.get(peptide)
                if accessions is None:
                    accessions = set()
                    round_accessions[peptide] = accessions
                accessions.update(source_accessions)
                self._occurrences[peptide] += weight

            self._occurrences[source] -= weight

            if n_sources % PEPTIDE_LOG_INTERVAL == 0:
                logger.info(f"  {n_sources:,} peptides digested further")

        self._accessions = round_accessions

    def update(self, other: PeptideAccessionAggregator) -> None:
        """Merge another aggregator into this one.

        Accession sets are unioned, occurrence counts summed. The operation is
        commutative and associative, so per-batch aggregators can be combined
        in any order.
        """
        for peptide, accessions in other._accessions.items():
            own = self._accessions.get(peptide)
            if own is None:
                self._accessions[peptide] = set(accessions)
            else:
                own.update(accessions)
        for peptide, count in other._occurrences.items():
            self._occurrences[peptide] += count
        for record in other._records.values():
            self.add_accession(record)

    def remove_longer_than(self, max_length: int) -> int:
        """Drop peptides longer than ``max_length`` and return how many were removed."""
        too_long = [p for p in self._accessions if len(p) > max_length]
        for peptide in too_long:
            del self._accessions[peptide]
            self._occurrences.pop(peptide, None)
        return len(too_long)

    def discard_stale_counts(self) -> int:
        """Drop ledger counts of peptides no longer aggregated and return how many."""
        stale = [p for p in self._occurrences if p not in self._accessions]
        for peptide in stale:
            del self._occurrences[peptide]
        return len(stale)

    def clear(self) -> None:
        """Reset all state, e.g. after an external flush."""
        self._accessions = {}
        self._occurrences = defaultdict(int)
        self._records = {}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def needs_flush(self) -> bool:
        """True once the number of distinct peptides reaches the flush threshold."""
        return self.flush_threshold > 0 and len(self._accessions) >= self.flush_threshold

    def occurrences(self, peptide: str) -> int:
        """Total number of times ``peptide`` was produced (0 if unknown)."""
        if peptide not in self._accessions:
            return 0
        return self._occurrences[peptide]

    def accessions(self, peptide: str) -> FrozenSet[str]:
        """Accessions that produced ``peptide`` (empty if unknown)."""
        return frozenset(self._accessions.get(peptide, ()))

    def accession_record(self, accession: str) -> Optional[AccessionRecord]:
        return self._records.get(accession)

    @property
    def accession_records(self) -> Dict[str, AccessionRecord]:
        return dict(self._records)

    def entry(self, peptide: str) -> Optional[AggregationEntry]:
        if peptide not in self._accessions:
            return None
        return AggregationEntry(peptide, frozenset(self._accessions[peptide]), self._occurrences[peptide])

    def entries(self) -> Iterator[AggregationEntry]:
        """Iterate over all peptides in first-seen order."""
        for peptide, accessions in self._accessions.items():
            yield AggregationEntry(peptide, frozenset(accessions), self._occurrences[peptide])

    def __len__(self) -> int:
        return len(self._accessions)

    def __contains__(self, peptide: object) -> bool:
        return peptide in self._accessions

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._accessions))

    def __repr__(self) -> str:
        return (
            f"PeptideAccessionAggregator(n_peptides={len(self):,}, "
            f"n_accessions={len(self._records):,})"
        )


def merge_aggregators(aggregators: Iterable[PeptideAccessionAggregator]) -> PeptideAccessionAggregator:
    """Combine several aggregators into a new one.

    Parameters
    ----------
    aggregators : iterable of PeptideAccessionAggregator
        Per-batch aggregators (left unchanged)

    Returns
    -------
    PeptideAccessionAggregator
        Aggregator holding the union of all inputs
    """
    def _combine(acc: PeptideAccessionAggregator, other: PeptideAccessionAggregator):
        acc.update(other)
        return acc

    return reduce(_combine, aggregators, PeptideAccessionAggregator())
