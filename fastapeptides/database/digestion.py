"""Protein digestion for peptide database generation.

In silico digestion of protein sequences with support for:
- Any cleavage rule from the enzyme table (trypsin, chymotrypsin, CNBr, ...)
- Missed cleavages
- Peptide length filtering
- Non-standard amino acid detection

A protein is first split into its base fragments. Missed cleavages are
then modelled by joining up to ``missed_cleavages + 1`` consecutive base
fragments. Every generated peptide, base fragment or joined, passes the
length filter on its own.

Examples
--------
>>> digester = Digester(get_enzyme("trypsin"), min_length=0, max_length=0,
...                     missed_cleavages=1)
>>> digester.digest("ABKCDKEF")
['ABK', 'ABKCDK', 'CDK', 'CDKEF', 'EF']
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from ..constants import (
    STANDARD_AMINO_ACIDS,
    DEFAULT_MIN_LENGTH,
    DEFAULT_MAX_LENGTH,
    DEFAULT_MISSED_CLEAVAGES,
)
from .enzymes import CleavageRule, get_enzyme
from .exceptions import DigestionError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def clean_sequence(sequence: str) -> str:
    """Remove all whitespace and upper-case a protein sequence.

    >>> clean_sequence(" abk\\ncdk ")
    'ABKCDK'
    """
    return _WHITESPACE.sub("", sequence).upper()


def is_peptide_sequence(peptide: str) -> bool:
    """Whether a peptide consists of standard amino acids only."""
    return bool(peptide) and all(aa in STANDARD_AMINO_ACIDS for aa in peptide)


def passes_length_filter(peptide: str, min_length: int, max_length: int) -> bool:
    """Check a peptide against length bounds (0 disables a bound)."""
    length = len(peptide)
    if min_length > 0 and length < min_length:
        return False
    if max_length > 0 and length > max_length:
        return False
    return True


def filter_by_length(peptides: Iterable[str], min_length: int, max_length: int) -> List[str]:
    """Keep the peptides within the length bounds, preserving order."""
    return [p for p in peptides if passes_length_filter(p, min_length, max_length)]


@dataclass(frozen=True)
class Digester:
    """One enzyme with its length bounds and allowed missed cleavages.

    Attributes
    ----------
    rule : CleavageRule
        Cleavage rule of the enzyme
    min_length : int
        Minimum peptide length (0 = no lower bound)
    max_length : int
        Maximum peptide length (0 = no upper bound)
    missed_cleavages : int
        Number of cut sites a peptide may span
    """

    rule: Optional[CleavageRule]
    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH
    missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES

    def __post_init__(self):
        if self.min_length < 0 or self.max_length < 0:
            raise DigestionError(
                f"Peptide length bounds must not be negative "
                f"(min_length={self.min_length}, max_length={self.max_length})."
            )
        if self.missed_cleavages < 0:
            raise DigestionError(
                f"Missed cleavages must not be negative ({self.missed_cleavages})."
            )

    @property
    def name(self) -> str:
        return self.rule.name if self.rule is not None else "none"

    def with_max_length(self, max_length: int) -> "Digester":
        """Copy of this digester with another upper length bound."""
        return Digester(self.rule, self.min_length, max_length, self.missed_cleavages)

    def digest(self, sequence: Optional[str]) -> List[str]:
        """Digest one protein sequence.

        Parameters
        ----------
        sequence : str
            Protein sequence; whitespace is removed and letters upper-cased

        Returns
        -------
        peptides : List[str]
            Peptides ordered by start position, then by number of joined
            fragments. A peptide occurring several times in the sequence is
            returned several times.

        Raises
        ------
        DigestionError
            If no sequence or no cleavage rule is given
        """
        if sequence is None:
            raise DigestionError("No protein sequence given for digestion.")
        if self.rule is None:
            raise DigestionError("No enzyme given for digestion.")

        sequence = clean_sequence(sequence)
        if not sequence:
            return []

        # Fragment boundaries: fragment i spans bounds[i]:bounds[i + 1]
        bounds = [0] + self.rule.cleavage_sites(sequence) + [len(sequence)]
        n_fragments = len(bounds) - 1
        max_window = self.missed_cleavages + 1

        peptides = []
        for start in range(n_fragments):
            for window in range(1, max_window + 1):
                end = start + window
                if end > n_fragments:
                    break
                peptide = sequence[bounds[start]:bounds[end]]
                if passes_length_filter(peptide, self.min_length, self.max_length):
                    peptides.append(peptide)

        return peptides


def digest_protein(
    sequence: str,
    enzyme: Union[str, CleavageRule] = "trypsin",
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
    missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
) -> List[str]:
    """Digest a single protein (functional shortcut for Digester.digest).

    Parameters
    ----------
    sequence : str
        Protein sequence
    enzyme : str or CleavageRule
        Enzyme name or rule (default: trypsin)
    min_length : int
        Minimum peptide length (default: 7, 0 disables)
    max_length : int
        Maximum peptide length (default: 45, 0 disables)
    missed_cleavages : int
        Number of missed cleavages allowed (default: 0)

    Returns
    -------
    peptides : List[str]

    Examples
    --------
    >>> digest_protein("ABKCDKEF", "trypsin", 0, 0)
    ['ABK', 'CDK', 'EF']
    """
    digester = Digester(get_enzyme(enzyme), min_length, max_length, missed_cleavages)
    return digester.digest(sequence)
