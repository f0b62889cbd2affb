"""Precursor ion m/z values for peptides and their modification states.

The unmodified monoisotopic mass of a peptide is the sum of its residue
masses plus one water (hydrolysed termini). An ion adds a modification mass
shift and ``charge`` protons:

    m/z = (residues + H2O + mass_shift + charge * PROTON_MASS) / charge

Mass kernels are Numba-compiled and work on ord() encoded sequences, like
the rest of the mass code.
"""

from typing import Iterable, Iterator, List, NamedTuple

import numba
import numpy as np
import pandas as pd

from ..constants import AA_MASSES, H2O_MASS, PROTON_MASS
from ..database.digestion import clean_sequence, is_peptide_sequence
from ..modifications import ModificationScheme, split_encoded_modifications


def encode_peptide_to_ord(peptide: str) -> np.ndarray:
    """Encode peptide string to ord() array for Numba processing.

    >>> encode_peptide_to_ord("PEP")
    array([80, 69, 80], dtype=uint8)
    """
    return np.array([ord(c) for c in peptide], dtype=np.uint8)


# =============================================================================
# Numba Kernels
# =============================================================================

@numba.jit(nopython=True, cache=True)
def calculate_neutral_mass(peptide_ord: np.ndarray) -> float:
    """Unmodified neutral peptide mass (residues + H2O) from an ord() array."""
    total = 0.0
    for i in range(len(peptide_ord)):
        total += AA_MASSES[peptide_ord[i]]
    return total + H2O_MASS


@numba.jit(nopython=True, cache=True)
def calculate_ion_mz(neutral_mass: float, mass_shift: float, charge: int) -> float:
    """m/z of a peptide ion from its unmodified neutral mass."""
    return (neutral_mass + mass_shift + charge * PROTON_MASS) / charge


@numba.jit(nopython=True, cache=True)
def calculate_ion_mz_batch(
    neutral_mass: float,
    mass_shifts: np.ndarray,
    charges: np.ndarray,
) -> np.ndarray:
    """m/z for every (mass shift, charge) pair of one peptide.

    Returns
    -------
    mz : np.ndarray (float64)
        Shape (len(mass_shifts), len(charges))
    """
    mz = np.empty((len(mass_shifts), len(charges)), dtype=np.float64)
    for i in range(len(mass_shifts)):
        for j in range(len(charges)):
            mz[i, j] = (neutral_mass + mass_shifts[i] + charges[j] * PROTON_MASS) / charges[j]
    return mz


# =============================================================================
# Python API
# =============================================================================

class Ion(NamedTuple):
    """A charged modification state of a peptide."""

    peptide: str
    charge: int
    mz: float
    mass_shift: float
    fixed_modifications: str
    variable_modifications: str


def _checked_peptide(peptide: str) -> str:
    """Cleaned peptide, or ValueError if it is not made of standard residues."""
    if peptide is None:
        raise ValueError("No peptide given")
    cleaned = clean_sequence(peptide)
    if not is_peptide_sequence(cleaned):
        raise ValueError(f"Not a peptide of standard amino acids: '{peptide}'")
    return cleaned


def peptide_mass(peptide: str) -> float:
    """Unmodified neutral monoisotopic mass of a peptide.

    >>> round(peptide_mass("PEPTIDE"), 4)
    799.36
    """
    peptide = _checked_peptide(peptide)
    return float(calculate_neutral_mass(encode_peptide_to_ord(peptide)))


def ion_mz(peptide: str, mass_shift: float, charge: int) -> float:
    """Theoretical m/z of a peptide ion.

    Parameters
    ----------
    peptide : str
        Peptide sequence
    mass_shift : float
        Total modification mass shift
    charge : int
        Positive charge state

    Returns
    -------
    float
        Mass-to-charge ratio

    Raises
    ------
    ValueError
        If the charge is not a positive integer or the peptide contains
        residues other than the 20 standard amino acids

    Examples
    --------
    >>> round(ion_mz("PEPTIDE", 0.0, 2), 4)
    400.6873
    """
    if int(charge) != charge or charge < 1:
        raise ValueError(f"Charge must be a positive integer, got {charge}")
    return float(calculate_ion_mz(peptide_mass(peptide), mass_shift, int(charge)))


def generate_ions(peptide: str, scheme: ModificationScheme = None) -> List[Ion]:
    """All ions of a peptide: one per (modification state, charge).

    Parameters
    ----------
    peptide : str
        Peptide sequence
    scheme : ModificationScheme, optional
        Modifications and charges (default scheme if omitted)

    Returns
    -------
    ions : List[Ion]
        Ordered by modification state, then charge as given in the scheme
    """
    if scheme is None:
        scheme = ModificationScheme()

    peptide = _checked_peptide(peptide)
    modification_masses = scheme.enumerate(peptide)
    labels = list(modification_masses)
    shifts = np.array([modification_masses[label] for label in labels], dtype=np.float64)
    charges = np.array(scheme.charges, dtype=np.int64)

    neutral_mass = calculate_neutral_mass(encode_peptide_to_ord(peptide))
    mz = calculate_ion_mz_batch(neutral_mass, shifts, charges)

    ions = []
    for i, label in enumerate(labels):
        fixed, variable = split_encoded_modifications(label)
        for j, charge in enumerate(scheme.charges):
            ions.append(Ion(peptide, int(charge), float(mz[i, j]), float(shifts[i]), fixed, variable))
    return ions


def iter_ions(peptides: Iterable[str], scheme: ModificationScheme = None) -> Iterator[Ion]:
    """Lazily generate the ions of many peptides."""
    if scheme is None:
        scheme = ModificationScheme()
    for peptide in peptides:
        yield from generate_ions(peptide, scheme)


def generate_ion_table(peptides: Iterable[str], scheme: ModificationScheme = None) -> pd.DataFrame:
    """Ions of many peptides as a table for an external persistence layer.

    Columns: peptide, charge, mz, mass_shift, fixed_modifications,
    variable_modifications.
    """
    return pd.DataFrame(list(iter_ions(peptides, scheme)), columns=list(Ion._fields))
