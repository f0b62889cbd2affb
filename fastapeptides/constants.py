"""Physical constants, residue masses and defaults for digestion and ion calculation.

Constants are provided in both dictionary and ord()-indexed array formats
so they can be used from plain Python and from Numba-compiled kernels.

Sources
-------
- NIST physical constants: https://physics.nist.gov/cgi-bin/cuu/Value
- Residue masses: https://www.unimod.org/masses.html
- Modification masses: https://www.unimod.org/modifications_list.php
"""

import numpy as np

# =============================================================================
# Fundamental Physical Constants
# =============================================================================

# Proton mass, not the hydrogen atom mass (1.007825)
# Source: NIST 2018 CODATA
PROTON_MASS = 1.007276466622  # Da

# Water mass (H2O), added once per peptide for the hydrolysed termini
H2O_MASS = 18.010564684  # Da

# =============================================================================
# Amino Acid Monoisotopic Residue Masses (Da)
# =============================================================================

AA_MASSES_DICT = {
    'A': 71.037114,   # Alanine
    'R': 156.101111,  # Arginine
    'N': 114.042927,  # Asparagine
    'D': 115.026943,  # Aspartic acid
    'C': 103.009185,  # Cysteine (unmodified)
    'E': 129.042593,  # Glutamic acid
    'Q': 128.058578,  # Glutamine
    'G': 57.021464,   # Glycine
    'H': 137.058912,  # Histidine
    'I': 113.084064,  # Isoleucine
    'L': 113.084064,  # Leucine
    'K': 128.094963,  # Lysine
    'M': 131.040485,  # Methionine
    'F': 147.068414,  # Phenylalanine
    'P': 97.052764,   # Proline
    'S': 87.032028,   # Serine
    'T': 101.047679,  # Threonine
    'W': 186.079313,  # Tryptophan
    'Y': 163.063320,  # Tyrosine
    'V': 99.068414,   # Valine
}

# Alphabet a peptide must be written in to be aggregated
STANDARD_AMINO_ACIDS = frozenset(AA_MASSES_DICT)

# ord()-indexed lookup for Numba: AA_MASSES[ord('A')] -> 71.037114
# Unknown characters map to 0.0
AA_MASSES = np.zeros(256, dtype=np.float64)
for aa, mass in AA_MASSES_DICT.items():
    AA_MASSES[ord(aa)] = mass

# =============================================================================
# Common Modification Masses
# =============================================================================

# Carbamidomethylation of Cysteine (Unimod:4)
CARBAMIDOMETHYL_MASS = 57.021464

# Oxidation of Methionine (Unimod:35)
OXIDATION_MASS = 15.994915

# Phosphorylation (Unimod:21)
PHOSPHO_MASS = 79.966331


# =============================================================================
# Defaults
# =============================================================================

# Digestion defaults
DEFAULT_MIN_LENGTH = 7
DEFAULT_MAX_LENGTH = 45
DEFAULT_MISSED_CLEAVAGES = 0

# Ion generation defaults
DEFAULT_CHARGES = (2, 3)
DEFAULT_FIXED_MODIFICATIONS = {'C': CARBAMIDOMETHYL_MASS}
DEFAULT_VARIABLE_MODIFICATIONS = {'M': OXIDATION_MASS}

# Joins the fixed and the variable half of an encoded modification label
FIXED_MODIFICATION_SEPARATOR = "---"

# Number of distinct peptides after which an aggregator asks to be flushed
DEFAULT_FLUSH_THRESHOLD = 5_000_000

# Progress is logged every this many proteins / peptides
PROTEIN_LOG_INTERVAL = 10_000
PEPTIDE_LOG_INTERVAL = 500_000


def validate_constants():
    """Validate that constants are physically reasonable.

    Raises AssertionError if any constant is out of expected range.
    """
    assert 1.0072 < PROTON_MASS < 1.0073, f"PROTON_MASS is wrong: {PROTON_MASS}"
    assert 18.00 < H2O_MASS < 18.02, f"H2O_MASS is wrong: {H2O_MASS}"

    for aa, mass in AA_MASSES_DICT.items():
        assert mass > 50.0, f"AA {aa} mass is too low: {mass}"
        assert mass < 250.0, f"AA {aa} mass is too high: {mass}"
        assert AA_MASSES[ord(aa)] == mass, f"AA_MASSES out of sync for {aa}"
