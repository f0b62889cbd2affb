"""Enumerate modification states of a peptide and their mass shifts.

Fixed modifications apply to every occurrence of a residue type, variable
modifications may or may not apply at each individual site. Every
combination is encoded as a label string mapped to its total mass shift.

Label format
------------
- Variable site: residue + 1-based position + [mass], e.g. ``M5[15.994915]``
- Fixed residue type: residue + [mass], once per type, e.g. ``C[57.021464]``
- Fixed and variable halves are joined by ``---``:
  ``C[57.021464]---M5[15.994915]``

Examples
--------
>>> enumerate_modifications("AMAM", {}, {"M": 16.0})
{'': 0.0, 'M2[16.0]': 16.0, 'M4[16.0]': 16.0, 'M2[16.0]M4[16.0]': 32.0}

>>> enumerate_modifications("ACK", {"C": 57.021464}, {})
{'C[57.021464]---': 57.021464, '': 0.0}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from .constants import (
    DEFAULT_CHARGES,
    DEFAULT_FIXED_MODIFICATIONS,
    DEFAULT_VARIABLE_MODIFICATIONS,
    FIXED_MODIFICATION_SEPARATOR,
)


# =============================================================================
# Label Encoding
# =============================================================================

def encode_variable_site(residue: str, position: int, mass: float) -> str:
    """Encode one variable modification site (position is 1-based)."""
    return f"{residue}{position}[{mass}]"


def encode_fixed_modifications(residues, fixed_modifications: Mapping[str, float]) -> str:
    """Encode the fixed modifications found on a peptide.

    Every residue type appears once, in alphabetical order.

    >>> encode_fixed_modifications({"S", "C"}, {"C": 57.021464, "S": 1.0})
    'C[57.021464]S[1.0]'
    """
    return "".join(f"{aa}[{fixed_modifications[aa]}]" for aa in sorted(set(residues)))


def split_encoded_modifications(label: str) -> Tuple[str, str]:
    """Split a label into its fixed and variable half.

    >>> split_encoded_modifications("C[57.021464]---M5[15.994915]")
    ('C[57.021464]', 'M5[15.994915]')
    >>> split_encoded_modifications("M5[15.994915]")
    ('', 'M5[15.994915]')
    """
    if FIXED_MODIFICATION_SEPARATOR in label:
        fixed, variable = label.split(FIXED_MODIFICATION_SEPARATOR, 1)
        return fixed, variable
    return "", label


# =============================================================================
# Enumeration
# =============================================================================

def add_variable_modification(
    modification_masses: Mapping[str, float],
    site_label: str,
    mass: float,
) -> Dict[str, float]:
    """Double a modification map with one more variable site.

    Returns a new map holding every existing entry unchanged followed by
    every existing entry with ``site_label`` appended and ``mass`` added.
    """
    doubled = dict(modification_masses)
    for label, shift in modification_masses.items():
        doubled[label + site_label] = shift + mass
    return doubled


def enumerate_modifications(
    sequence: str,
    fixed_modifications: Mapping[str, float],
    variable_modifications: Mapping[str, float],
    encode_unmodified: bool = True,
) -> Dict[str, float]:
    """Map every modification state of a peptide to its mass shift.

    Parameters
    ----------
    sequence : str
        Peptide sequence
    fixed_modifications : Mapping[str, float]
        Residue -> mass shift applied to all occurrences
    variable_modifications : Mapping[str, float]
        Residue -> mass shift applied optionally per site
    encode_unmodified : bool
        If fixed modifications occur, also keep every state without them
        (models a population that is not fully modified)

    Returns
    -------
    Dict[str, float]
        Encoded label -> total mass shift. Contains ``2**v`` entries for
        ``v`` variable sites, doubled when fixed modifications occur and
        ``encode_unmodified`` is set.
    """
    modification_masses: Dict[str, float] = {"": 0.0}

    fixed_mass = 0.0
    found_fixed = set()
    for idx, aa in enumerate(sequence):
        if aa in fixed_modifications:
            fixed_mass += fixed_modifications[aa]
            found_fixed.add(aa)

        if aa in variable_modifications:
            mass = variable_modifications[aa]
            modification_masses = add_variable_modification(
                modification_masses, encode_variable_site(aa, idx + 1, mass), mass
            )

    if not found_fixed:
        return modification_masses

    fixed_label = encode_fixed_modifications(found_fixed, fixed_modifications) + FIXED_MODIFICATION_SEPARATOR
    with_fixed: Dict[str, float] = {}
    for label, shift in modification_masses.items():
        with_fixed[fixed_label + label] = fixed_mass + shift
        if encode_unmodified:
            with_fixed[label] = shift
    return with_fixed


@dataclass(frozen=True)
class ModificationScheme:
    """Modifications and charge states used to derive the ions of a peptide.

    Defaults: Carbamidomethyl C fixed, Oxidation M variable, charges 2 and 3,
    unmodified states encoded.
    """

    fixed: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_FIXED_MODIFICATIONS))
    variable: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_VARIABLE_MODIFICATIONS))
    encode_unmodified: bool = True
    charges: Tuple[int, ...] = DEFAULT_CHARGES

    def __post_init__(self):
        for charge in self.charges:
            if int(charge) != charge or charge < 1:
                raise ValueError(f"Charges must be positive integers, got {charge}")

    def enumerate(self, sequence: str) -> Dict[str, float]:
        """Modification states of ``sequence`` under this scheme."""
        return enumerate_modifications(sequence, self.fixed, self.variable, self.encode_unmodified)
