"""fastapeptides - In silico protein digestion and peptide ion enumeration.

Turns protein sequences into the peptides an enzymatic digestion produces,
aggregates them per source accession across a corpus, and enumerates the
modification states and ion m/z values of each peptide.

Subpackages
-----------
database : cleavage rules, digestion, multi-enzyme pipeline, aggregation, report
ions : Numba-compiled peptide mass and ion m/z calculation
modifications : fixed/variable modification enumeration
"""

__version__ = "0.1.0"

from fastapeptides import constants
from fastapeptides import database
from fastapeptides import modifications
from fastapeptides import ions

from fastapeptides.database import (
    CleavageRule,
    Digester,
    DigestionError,
    MultiEnzymePipeline,
    PeptideAccessionAggregator,
    get_enzyme,
    digest_protein,
)
from fastapeptides.modifications import ModificationScheme, enumerate_modifications
from fastapeptides.ions import ion_mz, generate_ions

__all__ = [
    "constants",
    "database",
    "modifications",
    "ions",
    "CleavageRule",
    "Digester",
    "DigestionError",
    "MultiEnzymePipeline",
    "PeptideAccessionAggregator",
    "get_enzyme",
    "digest_protein",
    "ModificationScheme",
    "enumerate_modifications",
    "ion_mz",
    "generate_ions",
]
