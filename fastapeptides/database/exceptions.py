"""Errors and warnings raised while digesting proteins."""


class DigestionError(ValueError):
    """Digestion was requested with an incomplete or invalid configuration.

    Raised for a missing cleavage rule, a missing sequence, an unknown
    enzyme name or negative length / missed cleavage settings.
    """


class AmbiguousDigestionWarning(UserWarning):
    """Several enzymes were chained while allowing missed cleavages.

    The pipeline still runs, but peptides spanning a cut of an earlier
    enzyme cannot be produced by a later one.
    """
