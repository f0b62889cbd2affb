"""Cleavage rules for in silico digestion.

Each enzyme is a value: a name plus the residues required left of a cut
site and the residues forbidden right of it. New enzymes are added by
constructing another CleavageRule, not by subclassing.

Rules follow the PSI-MS ontology definitions, e.g. trypsin cuts after K or R
unless the next residue is P (``(?<=[KR])(?![P])``).

Examples
--------
>>> trypsin = get_enzyme("trypsin")
>>> trypsin.split("ABKCDKEF")
['ABK', 'CDK', 'EF']
>>> trypsin.split("ABKPCDK")
['ABKPCDK']
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .exceptions import DigestionError


@dataclass(frozen=True)
class CleavageRule:
    """Site predicate of a proteolytic enzyme.

    Attributes
    ----------
    name : str
        Enzyme name
    cut_after : str or None
        Residues of which one must be left of the site.
        None cuts after every residue, an empty string never cuts.
    not_before : str
        Residues that block the cut when found right of the site
    """

    name: str
    cut_after: Optional[str]
    not_before: str = ""
    _regex: "re.Pattern" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_regex", re.compile(self.pattern))

    @property
    def pattern(self) -> str:
        """Zero-width regular expression matching every cut site."""
        if self.cut_after == "":
            # No residue allows a cut
            return "(?!)"
        left = "(?<=.)" if self.cut_after is None else f"(?<=[{re.escape(self.cut_after)}])"
        if not self.not_before:
            return left
        return f"{left}(?![{re.escape(self.not_before)}])"

    def is_site(self, sequence: str, position: int) -> bool:
        """Whether the rule cuts between ``position - 1`` and ``position``."""
        if position <= 0 or position >= len(sequence):
            return False
        left = sequence[position - 1]
        if self.cut_after is not None and left not in self.cut_after:
            return False
        return sequence[position] not in self.not_before

    def cleavage_sites(self, sequence: str) -> List[int]:
        """Positions of all internal cut sites.

        A site ``i`` means the protein is cut between ``sequence[i - 1]``
        and ``sequence[i]``. Sequence boundaries are never reported.
        """
        return [m.start() for m in self._regex.finditer(sequence) if 0 < m.start() < len(sequence)]

    def split(self, sequence: str) -> List[str]:
        """Split a sequence into its base fragments.

        Concatenating the fragments in order gives back ``sequence``.
        Empty fragments, which can only arise at the boundaries, are dropped.
        """
        return [fragment for fragment in self._regex.split(sequence) if fragment]


# =============================================================================
# Enzyme Table
# =============================================================================

ENZYMES: Dict[str, CleavageRule] = {
    rule.name: rule for rule in (
        CleavageRule("trypsin", "KR", "P"),
        CleavageRule("trypsin/p", "KR"),
        CleavageRule("chymotrypsin", "FYWL", "P"),
        CleavageRule("cnbr", "M"),
        CleavageRule("proteinase k", "FYWLIAV"),
        CleavageRule("lys-c", "K", "P"),
        CleavageRule("lys-c/p", "K"),
        CleavageRule("arg-c", "R", "P"),
        CleavageRule("leukocyte elastase", "ALIV", "P"),
        CleavageRule("cutall", None),
    )
}


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace("_", " ")


_ALIASES = {
    "proteinasek": "proteinase k",
    "lysc": "lys-c",
    "argc": "arg-c",
}


def get_enzyme(enzyme: Union[str, CleavageRule]) -> CleavageRule:
    """Look up a cleavage rule by name (case-insensitive).

    Parameters
    ----------
    enzyme : str or CleavageRule
        Enzyme name, e.g. "Trypsin", "CNBR", "proteinase_k".
        A CleavageRule is returned unchanged.

    Returns
    -------
    CleavageRule

    Raises
    ------
    DigestionError
        If no enzyme is given or the name is unknown
    """
    if isinstance(enzyme, CleavageRule):
        return enzyme
    if not enzyme:
        raise DigestionError("No enzyme given for digestion.")

    key = _normalize_name(enzyme)
    key = _ALIASES.get(key, key)
    try:
        return ENZYMES[key]
    except KeyError:
        raise DigestionError(
            f"Unknown enzyme '{enzyme}'. Known enzymes: {', '.join(sorted(ENZYMES))}"
        ) from None
