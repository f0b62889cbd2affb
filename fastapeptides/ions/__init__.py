"""Precursor ion generation.

Numba-compiled peptide mass and m/z kernels plus Python wrappers that
combine them with the enumerated modification states of a peptide.
"""

from .calculator import (
    Ion,
    encode_peptide_to_ord,
    calculate_neutral_mass,
    calculate_ion_mz,
    calculate_ion_mz_batch,
    peptide_mass,
    ion_mz,
    generate_ions,
    iter_ions,
    generate_ion_table,
)

__all__ = [
    'Ion',
    'encode_peptide_to_ord',
    'calculate_neutral_mass',
    'calculate_ion_mz',
    'calculate_ion_mz_batch',
    'peptide_mass',
    'ion_mz',
    'generate_ions',
    'iter_ions',
    'generate_ion_table',
]
