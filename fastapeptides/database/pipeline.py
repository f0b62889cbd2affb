"""Sequential multi-enzyme digestion of a protein corpus.

Round 0 digests every protein with the first enzyme and aggregates the
peptides per accession. Every further round digests the distinct peptides
of the previous round (not the proteins) with the next enzyme, propagating
accessions and occurrence counts (see PeptideAccessionAggregator.merge_round).

With more than one enzyme, upper length bounds are not applied during the
rounds: an interim peptide may be long before a later enzyme cuts it. The
bound is applied once after the last enzyme.

Examples
--------
>>> pipeline = MultiEnzymePipeline.from_enzymes(["trypsin"], min_length=0, max_length=0)
>>> agg = pipeline.run([("P1", "Protein 1", "ABKCDKEF")])
>>> sorted(agg)
['ABK', 'CDK', 'EF']
"""

import logging
import warnings
from multiprocessing import Pool
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from ..constants import (
    DEFAULT_MIN_LENGTH,
    DEFAULT_MAX_LENGTH,
    DEFAULT_MISSED_CLEAVAGES,
    PROTEIN_LOG_INTERVAL,
)
from .aggregation import AccessionRecord, PeptideAccessionAggregator, merge_aggregators
from .digestion import Digester, clean_sequence, is_peptide_sequence
from .enzymes import CleavageRule, get_enzyme
from .exceptions import AmbiguousDigestionWarning, DigestionError

logger = logging.getLogger(__name__)


class ProteinEntry(NamedTuple):
    """One protein as delivered by a sequence source."""

    accession: str
    description: str
    sequence: str


ProteinLike = Union[ProteinEntry, Tuple[str, str, str]]


class MultiEnzymePipeline:
    """Chain of digesters applied one after the other.

    Parameters
    ----------
    digesters : sequence of Digester
        Enzymes in the order they are applied. The first one digests the
        proteins, each following one the peptides of its predecessor.

    Attributes
    ----------
    digesters : tuple of Digester
        Digesters as used in the rounds (upper bounds disabled when chained)
    max_length : int
        Upper length bound applied after the last round (0 = none)
    """

    def __init__(self, digesters: Sequence[Digester]):
        if not digesters:
            raise DigestionError("No enzyme given for digestion.")
        for digester in digesters:
            if digester.rule is None:
                raise DigestionError("No enzyme given for digestion.")

        if len(digesters) > 1:
            bounds = [d.max_length for d in digesters if d.max_length > 0]
            self.max_length = min(bounds) if bounds else 0
            self.digesters = tuple(d.with_max_length(0) for d in digesters)

            if any(d.missed_cleavages > 0 for d in digesters):
                message = (
                    "Multiple enzymes combined with missed cleavages > 0 "
                    "give ambiguous results."
                )
                logger.warning(message)
                warnings.warn(message, AmbiguousDigestionWarning, stacklevel=2)
        else:
            self.max_length = digesters[0].max_length
            self.digesters = tuple(digesters)

    @classmethod
    def from_enzymes(
        cls,
        enzymes: Sequence[Union[str, CleavageRule]],
        min_length: int = DEFAULT_MIN_LENGTH,
        max_length: int = DEFAULT_MAX_LENGTH,
        missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    ) -> "MultiEnzymePipeline":
        """Create a pipeline from enzyme names sharing the same settings.

        Examples
        --------
        >>> pipeline = MultiEnzymePipeline.from_enzymes(["trypsin", "chymotrypsin"], 6, 45)
        """
        if isinstance(enzymes, (str, CleavageRule)):
            enzymes = [enzymes]
        return cls([
            Digester(get_enzyme(enzyme), min_length, max_length, missed_cleavages)
            for enzyme in enzymes
        ])

    @property
    def is_chained(self) -> bool:
        return len(self.digesters) > 1

    # -------------------------------------------------------------------------
    # Round 0: proteins
    # -------------------------------------------------------------------------

    def first_round_peptides(self, entry: ProteinLike) -> List[str]:
        """Digest one protein with the first enzyme.

        Fragments containing characters outside the 20 standard amino acids
        are logged and dropped; the rest of the protein is kept.
        """
        accession, _, sequence = entry
        peptides = []
        for peptide in self.digesters[0].digest(sequence):
            if is_peptide_sequence(peptide):
                peptides.append(peptide)
            else:
                logger.warning(
                    f"Could not add peptide for '{accession}', "
                    f"this is considered to be no peptide sequence: '{peptide}'"
                )
        return peptides

    def process_protein(self, entry: ProteinLike, aggregator: PeptideAccessionAggregator) -> int:
        """Digest one protein into ``aggregator`` and return the number of peptides added."""
        accession, description, _ = entry
        aggregator.add_accession(AccessionRecord(accession, description or accession))
        peptides = self.first_round_peptides(entry)
        for peptide in peptides:
            aggregator.merge(peptide, accession)
        return len(peptides)

    def process_proteins(
        self,
        entries: Iterable[ProteinLike],
        aggregator: Optional[PeptideAccessionAggregator] = None,
    ) -> PeptideAccessionAggregator:
        """Run round 0 over a stream of proteins.

        Parameters
        ----------
        entries : iterable of (accession, description, sequence)
            Protein entries
        aggregator : PeptideAccessionAggregator, optional
            Aggregator to fill (a new one by default)

        Returns
        -------
        aggregator : PeptideAccessionAggregator
        """
        if aggregator is None:
            aggregator = PeptideAccessionAggregator()

        logger.info(f"Digesting with {self.digesters[0].name}...")
        n_proteins = 0
        n_peptides = 0
        for entry in entries:
            n_peptides += self.process_protein(entry, aggregator)
            n_proteins += 1
            if n_proteins % PROTEIN_LOG_INTERVAL == 0:
                logger.info(
                    f"  Processed {n_proteins:,} proteins: "
                    f"{len(aggregator):,} unique peptides"
                )

        logger.info(
            f"Digestion with {self.digesters[0].name} done: "
            f"{n_proteins:,} proteins, {n_peptides:,} peptides, "
            f"{len(aggregator):,} unique"
        )
        return aggregator

    # -------------------------------------------------------------------------
    # Rounds 1..n: peptides
    # -------------------------------------------------------------------------

    def _derivations(self, digester: Digester, peptides: Iterable[str]) -> Iterator[Tuple[str, List[str]]]:
        for peptide in peptides:
            yield peptide, digester.digest(peptide)

    def finalize(self, aggregator: PeptideAccessionAggregator) -> PeptideAccessionAggregator:
        """Apply the remaining enzymes and the deferred length filter.

        Does nothing for a single enzyme, whose bounds were applied in round 0.
        """
        if not self.is_chained:
            return aggregator

        for digester in self.digesters[1:]:
            logger.info(f"Digesting {len(aggregator):,} peptides with {digester.name}...")
            aggregator.merge_round(self._derivations(digester, aggregator))
            logger.info(f"Digestion with {digester.name} done: {len(aggregator):,} peptides")
        aggregator.discard_stale_counts()

        if self.max_length > 0:
            logger.info(f"Removing peptides longer than {self.max_length}")
            removed = aggregator.remove_longer_than(self.max_length)
            logger.info(f"Removed {removed:,} peptides, {len(aggregator):,} remaining")

        return aggregator

    def run(
        self,
        entries: Iterable[ProteinLike],
        aggregator: Optional[PeptideAccessionAggregator] = None,
    ) -> PeptideAccessionAggregator:
        """Digest all proteins with every enzyme of the chain."""
        aggregator = self.process_proteins(entries, aggregator)
        return self.finalize(aggregator)

    def __repr__(self) -> str:
        names = " -> ".join(d.name for d in self.digesters)
        return f"MultiEnzymePipeline({names}, max_length={self.max_length})"


# =============================================================================
# Map-Reduce Processing
# =============================================================================

def _digest_batch(args: Tuple[MultiEnzymePipeline, List[ProteinLike]]) -> PeptideAccessionAggregator:
    """Round 0 for one batch of proteins (runs in a worker process)."""
    pipeline, batch = args
    aggregator = PeptideAccessionAggregator()
    for entry in batch:
        pipeline.process_protein(entry, aggregator)
    return aggregator


def _batched(entries: Iterable[ProteinLike], batch_size: int) -> Iterator[List[ProteinLike]]:
    batch = []
    for entry in entries:
        batch.append(ProteinEntry(*entry))
        if len(batch) >= batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


def aggregate_parallel(
    entries: Iterable[ProteinLike],
    pipeline: MultiEnzymePipeline,
    n_workers: int = 4,
    batch_size: int = 1000,
) -> PeptideAccessionAggregator:
    """Digest proteins in worker processes and merge the per-batch results.

    Parameters
    ----------
    entries : iterable of (accession, description, sequence)
        Protein entries
    pipeline : MultiEnzymePipeline
        Enzyme chain to apply
    n_workers : int
        Number of worker processes (<= 1 runs in the calling process)
    batch_size : int
        Proteins per worker task

    Returns
    -------
    aggregator : PeptideAccessionAggregator
        Same content as ``pipeline.run(entries)``
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    tasks = ((pipeline, batch) for batch in _batched(entries, batch_size))

    if n_workers <= 1:
        aggregator = merge_aggregators(_digest_batch(task) for task in tasks)
    else:
        logger.info(f"Digesting with {n_workers} worker processes (batch size {batch_size:,})")
        with Pool(processes=n_workers) as pool:
            aggregator = merge_aggregators(pool.imap(_digest_batch, tasks))

    logger.info(f"Round 0 merged: {len(aggregator):,} unique peptides")
    return pipeline.finalize(aggregator)
