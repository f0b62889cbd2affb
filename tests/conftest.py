"""Pytest configuration for fastapeptides tests.

Common fixtures: small protein corpora, enzyme rules and constants.
"""

import pytest


@pytest.fixture
def trypsin():
    """Trypsin cleavage rule."""
    from fastapeptides.database import get_enzyme
    return get_enzyme("trypsin")


@pytest.fixture
def cut_after_k():
    """Rule cutting after every K (no proline blocking)."""
    from fastapeptides.database import CleavageRule
    return CleavageRule("cut after K", "K")


@pytest.fixture
def ras_protein():
    """KRAS N-terminal region, a typical test protein."""
    return (
        "MTEYKLVVVGAAGVGKSALTIQLIQNHFVDEYDPTIEDSYRKQVVIDGETCLLDILDTAG"
        "REEYSAMRDQYMRTGEGFLCVFAINNTKSFEDIHHYREQIKRVKDSEDVPMVLVGNNCDL"
        "PSRTVDTKQAQDLARSYGIPFIETSTKTRQRVEDAFYTLVREIRQYRLKKISKEEKTPGC"
        "VKIKKCIIM"
    )


@pytest.fixture
def small_corpus():
    """Three proteins as (accession, description, sequence)."""
    return [
        ("P1", "Protein one", "AGKCDKAGK"),
        ("P2", "Protein two", "AGKEFR"),
        ("P3", "Protein three", "GHK"),
    ]


@pytest.fixture
def proton_mass():
    """Proton mass constant."""
    from fastapeptides.constants import PROTON_MASS
    return PROTON_MASS


@pytest.fixture
def h2o_mass():
    """Water mass constant."""
    from fastapeptides.constants import H2O_MASS
    return H2O_MASS


@pytest.fixture
def aa_masses_dict():
    """Amino acid masses dictionary."""
    from fastapeptides.constants import AA_MASSES_DICT
    return AA_MASSES_DICT
