"""Tests for single-enzyme digestion with missed cleavages."""

import pytest

from fastapeptides.database import (
    Digester,
    DigestionError,
    clean_sequence,
    digest_protein,
    filter_by_length,
    is_peptide_sequence,
    passes_length_filter,
)


# =============================================================================
# Helper Functions
# =============================================================================

def expected_peptide_count(n_fragments: int, missed_cleavages: int) -> int:
    """Number of windows of length 1..k+1 over n fragments."""
    return sum(n_fragments - i + 1 for i in range(1, missed_cleavages + 2))


# =============================================================================
# Digestion Tests
# =============================================================================

class TestDigester:
    """Test Digester.digest."""

    def test_no_missed_cleavages(self, cut_after_k):
        """Zero missed cleavages yields the base fragments."""
        digester = Digester(cut_after_k, min_length=0, max_length=0, missed_cleavages=0)
        assert digester.digest("ABKCDKEF") == ["ABK", "CDK", "EF"]

    def test_one_missed_cleavage(self, cut_after_k):
        """One missed cleavage joins neighbouring fragments."""
        digester = Digester(cut_after_k, min_length=0, max_length=0, missed_cleavages=1)
        peptides = digester.digest("ABKCDKEF")
        assert set(peptides) == {"ABK", "CDK", "EF", "ABKCDK", "CDKEF"}

    def test_output_order(self, cut_after_k):
        """Ordered by start position, then window length."""
        digester = Digester(cut_after_k, min_length=0, max_length=0, missed_cleavages=2)
        assert digester.digest("ABKCDKEF") == [
            "ABK", "ABKCDK", "ABKCDKEF",
            "CDK", "CDKEF",
            "EF",
        ]

    @pytest.mark.parametrize("missed_cleavages", [0, 1, 2, 3])
    def test_missed_cleavage_count(self, trypsin, ras_protein, missed_cleavages):
        """Without bounds the number of peptides follows the window count."""
        n_fragments = len(trypsin.split(ras_protein))
        digester = Digester(trypsin, min_length=0, max_length=0, missed_cleavages=missed_cleavages)
        peptides = digester.digest(ras_protein)
        assert len(peptides) == expected_peptide_count(n_fragments, missed_cleavages)

    def test_windows_never_exceed_sequence(self, cut_after_k):
        """More missed cleavages than sites just yields all windows."""
        digester = Digester(cut_after_k, min_length=0, max_length=0, missed_cleavages=5)
        assert digester.digest("ABKCD") == ["ABK", "ABKCD", "CD"]

    def test_windows_are_substrings(self, trypsin, ras_protein):
        """Every peptide is a contiguous part of the protein."""
        digester = Digester(trypsin, min_length=0, max_length=0, missed_cleavages=2)
        for peptide in digester.digest(ras_protein):
            assert peptide in ras_protein

    def test_duplicates_are_kept(self, cut_after_k):
        """A peptide occurring twice in a protein is returned twice."""
        digester = Digester(cut_after_k, min_length=0, max_length=0)
        assert digester.digest("ABKCDKABK") == ["ABK", "CDK", "ABK"]

    def test_min_length(self, cut_after_k):
        """Short peptides are dropped, joined peptides filtered independently."""
        digester = Digester(cut_after_k, min_length=4, max_length=0, missed_cleavages=1)
        assert digester.digest("ABKCDKEF") == ["ABKCDK", "CDKEF"]

    def test_max_length(self, cut_after_k):
        """Long peptides are dropped."""
        digester = Digester(cut_after_k, min_length=0, max_length=3, missed_cleavages=1)
        assert digester.digest("ABKCDKEF") == ["ABK", "CDK", "EF"]

    def test_short_fragment_still_joined(self, cut_after_k):
        """A base fragment removed by min_length still takes part in joined peptides."""
        digester = Digester(cut_after_k, min_length=3, max_length=0, missed_cleavages=1)
        assert digester.digest("KABCDK") == ["KABCDK", "ABCDK"]

    def test_ras_protein_tryptic(self, trypsin, ras_protein):
        """Known tryptic peptides of KRAS with min length 6."""
        digester = Digester(trypsin, min_length=6, max_length=0)
        peptides = digester.digest(ras_protein)
        assert peptides[:3] == [
            "LVVVGAAGVGK",
            "SALTIQLIQNHFVDEYDPTIEDSYR",
            "QVVIDGETCLLDILDTAGR",
        ]
        assert all(len(p) >= 6 for p in peptides)

    def test_ras_protein_missed_cleavages(self, trypsin, ras_protein):
        """Joined peptides over short fragments are produced."""
        digester = Digester(trypsin, min_length=6, max_length=0, missed_cleavages=2)
        peptides = digester.digest(ras_protein)
        assert "MTEYKLVVVGAAGVGK" in peptides
        assert "SALTIQLIQNHFVDEYDPTIEDSYRK" in peptides
        assert "KQVVIDGETCLLDILDTAGR" in peptides

    def test_sequence_is_cleaned(self, cut_after_k):
        """Whitespace is removed and the sequence upper-cased."""
        digester = Digester(cut_after_k, min_length=0, max_length=0)
        assert digester.digest(" abk\ncd k ef\t") == ["ABK", "CDK", "EF"]

    def test_empty_sequence(self, cut_after_k):
        """Empty input gives no peptides."""
        digester = Digester(cut_after_k)
        assert digester.digest("") == []
        assert digester.digest("   ") == []


class TestDigestionErrors:
    """Configuration errors fail fast."""

    def test_missing_sequence(self, trypsin):
        """None as sequence raises."""
        with pytest.raises(DigestionError, match="sequence"):
            Digester(trypsin).digest(None)

    def test_missing_rule(self):
        """Missing rule raises."""
        with pytest.raises(DigestionError, match="enzyme"):
            Digester(None).digest("ABK")

    def test_negative_settings(self, trypsin):
        """Negative bounds or missed cleavages raise."""
        with pytest.raises(DigestionError):
            Digester(trypsin, min_length=-1)
        with pytest.raises(DigestionError):
            Digester(trypsin, max_length=-1)
        with pytest.raises(DigestionError):
            Digester(trypsin, missed_cleavages=-1)

    def test_error_is_value_error(self):
        """DigestionError can be caught as ValueError."""
        assert issubclass(DigestionError, ValueError)


class TestDigestProtein:
    """Test the functional shortcut."""

    def test_by_name(self):
        """Enzyme given by name."""
        assert digest_protein("ABKCDKEF", "trypsin", 0, 0) == ["ABK", "CDK", "EF"]

    def test_defaults(self, ras_protein):
        """Default settings: trypsin, 7..45 residues, no missed cleavages."""
        peptides = digest_protein(ras_protein)
        assert all(7 <= len(p) <= 45 for p in peptides)
        assert "LVVVGAAGVGK" in peptides
        assert "MTEYK" not in peptides

    def test_with_rule(self, cut_after_k):
        """Enzyme given as rule."""
        assert digest_protein("ABKCDKEF", cut_after_k, 0, 0, 1) == [
            "ABK", "ABKCDK", "CDK", "CDKEF", "EF",
        ]


class TestHelpers:
    """Test sequence and length helpers."""

    def test_clean_sequence(self):
        assert clean_sequence(" pep tide\r\n") == "PEPTIDE"

    def test_is_peptide_sequence(self):
        assert is_peptide_sequence("PEPTIDEK")
        assert not is_peptide_sequence("PEPTXDEK")
        assert not is_peptide_sequence("PEPT*")
        assert not is_peptide_sequence("")

    def test_passes_length_filter(self):
        assert passes_length_filter("ABC", 0, 0)
        assert passes_length_filter("ABC", 3, 3)
        assert not passes_length_filter("ABC", 4, 0)
        assert not passes_length_filter("ABC", 0, 2)

    def test_filter_idempotent(self, trypsin, ras_protein):
        """Filtering twice with the same bounds changes nothing."""
        peptides = Digester(trypsin, 0, 0, 2).digest(ras_protein)
        once = filter_by_length(peptides, 6, 20)
        assert filter_by_length(once, 6, 20) == once
        assert all(6 <= len(p) <= 20 for p in once)
