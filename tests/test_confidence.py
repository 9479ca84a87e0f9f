"""
Tests for Refurb Inspector - Confidence Scoring

Test Coverage:
1. HIGH iff any critical indicator or two or more warnings
2. MEDIUM for one warning or two indicators of any severity
3. LOW otherwise, including the empty indicator set
4. Verdict combines program flag, replaced parts and warnings
"""

import pytest

from refurb_inspector.analysis.confidence import ConfidenceScorer
from refurb_inspector.models import ConfidenceTier, Indicator, Severity


def make_indicators(severity: Severity, count: int):
    return [
        Indicator(name=f"test_{i}", description=f"code_{i}", severity=severity)
        for i in range(count)
    ]


@pytest.fixture
def scorer():
    return ConfidenceScorer()


class TestConfidenceTier:
    """Tests for the confidence tier mapping."""

    @pytest.mark.parametrize(
        "warnings,expected",
        [
            (0, ConfidenceTier.LOW),
            (1, ConfidenceTier.MEDIUM),
            (2, ConfidenceTier.HIGH),
            (3, ConfidenceTier.HIGH),
        ],
    )
    def test_warning_counts(self, scorer, warnings, expected):
        """Test 0/1/2/3 warnings map to low/medium/high/high."""
        assert scorer.confidence_tier(make_indicators(Severity.WARNING, warnings)) == expected

    def test_lone_critical_is_high(self, scorer):
        """Test a single critical indicator alone yields HIGH."""
        indicators = make_indicators(Severity.CRITICAL, 1)
        assert scorer.confidence_tier(indicators) == ConfidenceTier.HIGH

    def test_two_info_indicators_are_medium(self, scorer):
        """Test two informational indicators reach MEDIUM."""
        indicators = make_indicators(Severity.INFO, 2)
        assert scorer.confidence_tier(indicators) == ConfidenceTier.MEDIUM

    def test_one_info_indicator_is_low(self, scorer):
        """Test a single informational indicator stays LOW."""
        indicators = make_indicators(Severity.INFO, 1)
        assert scorer.confidence_tier(indicators) == ConfidenceTier.LOW

    def test_many_info_never_high(self, scorer):
        """Test informational indicators alone never reach HIGH."""
        indicators = make_indicators(Severity.INFO, 10)
        assert scorer.confidence_tier(indicators) == ConfidenceTier.MEDIUM

    def test_count_by_severity(self, scorer):
        """Test severity counting returns (critical, warning, total)."""
        indicators = (
            make_indicators(Severity.CRITICAL, 1)
            + make_indicators(Severity.WARNING, 2)
            + make_indicators(Severity.INFO, 3)
        )
        assert scorer.count_by_severity(indicators) == (1, 2, 6)


class TestVerdict:
    """Tests for the refurbishment verdict."""

    def test_empty_is_not_refurbished(self, scorer):
        """Test no evidence yields (False, LOW)."""
        assert scorer.score([]) == (False, ConfidenceTier.LOW)

    def test_warning_marks_refurbished(self, scorer):
        """Test a single warning marks the unit refurbished."""
        is_refurbished, confidence = scorer.score(make_indicators(Severity.WARNING, 1))
        assert is_refurbished is True
        assert confidence == ConfidenceTier.MEDIUM

    def test_replaced_parts_mark_refurbished(self, scorer):
        """Test a replaced part alone marks the unit refurbished."""
        is_refurbished, confidence = scorer.score(
            make_indicators(Severity.INFO, 1), replaced_parts=["storage"]
        )
        assert is_refurbished is True
        assert confidence == ConfidenceTier.LOW

    def test_provisional_marks_refurbished(self, scorer):
        """Test the program flag alone marks the unit refurbished."""
        is_refurbished, _ = scorer.score(
            make_indicators(Severity.INFO, 1), provisional_refurbished=True
        )
        assert is_refurbished is True

    def test_info_only_not_refurbished(self, scorer):
        """Test informational indicators without a program flag are not a verdict."""
        is_refurbished, _ = scorer.score(make_indicators(Severity.INFO, 3))
        assert is_refurbished is False

    def test_lone_critical_does_not_set_verdict(self, scorer):
        """Test a critical indicator raises confidence but not the verdict by itself."""
        is_refurbished, confidence = scorer.score(make_indicators(Severity.CRITICAL, 1))
        assert is_refurbished is False
        assert confidence == ConfidenceTier.HIGH

    def test_accepts_generators(self, scorer):
        """Test iterables are consumed only once."""
        parts = (p for p in ["display"])
        is_refurbished, _ = scorer.score(iter([]), replaced_parts=parts)
        assert is_refurbished is True
