"""In silico digestion and peptide-to-accession aggregation.

- Data-driven cleavage rules (trypsin, chymotrypsin, CNBr, proteinase K, ...)
- Missed cleavages and length filtering
- Sequential multi-enzyme digestion with deferred max-length filtering
- Peptide -> accessions / occurrence aggregation
- Tabular peptide report
"""

from .exceptions import (
    DigestionError,
    AmbiguousDigestionWarning,
)

from .enzymes import (
    CleavageRule,
    ENZYMES,
    get_enzyme,
)

from .digestion import (
    Digester,
    digest_protein,
    clean_sequence,
    is_peptide_sequence,
    passes_length_filter,
    filter_by_length,
)

from .aggregation import (
    AccessionRecord,
    AggregationEntry,
    PeptideAccessionAggregator,
    merge_aggregators,
)

from .pipeline import (
    ProteinEntry,
    MultiEnzymePipeline,
    aggregate_parallel,
)

from .report import (
    REPORT_COLUMNS,
    peptide_table,
    write_peptide_report,
    read_peptide_report,
)

__all__ = [
    # Errors
    'DigestionError',
    'AmbiguousDigestionWarning',

    # Cleavage rules
    'CleavageRule',
    'ENZYMES',
    'get_enzyme',

    # Digestion
    'Digester',
    'digest_protein',
    'clean_sequence',
    'is_peptide_sequence',
    'passes_length_filter',
    'filter_by_length',

    # Aggregation
    'AccessionRecord',
    'AggregationEntry',
    'PeptideAccessionAggregator',
    'merge_aggregators',

    # Pipeline
    'ProteinEntry',
    'MultiEnzymePipeline',
    'aggregate_parallel',

    # Report
    'REPORT_COLUMNS',
    'peptide_table',
    'write_peptide_report',
    'read_peptide_report',
]
