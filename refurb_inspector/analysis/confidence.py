"""
Refurb Inspector - Confidence Scoring Module

Maps the indicator set of one assessment to a confidence tier and the
overall refurbishment verdict.

Confidence tiers:
- HIGH: any critical indicator, or two or more warnings
- MEDIUM: one warning, or two or more indicators of any severity
- LOW: everything else (including no indicators at all)

Verdict: refurbished when a refurbishment-program signal fired, when a
replaced part was recorded, or when any warning fired. The three inputs
stay separate so each contributor can be tested on its own.
"""

from typing import Iterable, Sequence, Tuple

from refurb_inspector.models import ConfidenceTier, Indicator, Severity


class ConfidenceScorer:
    """
    Calculates confidence tiers and the refurbishment verdict.

    Pure and total: every input, including an empty one, yields a result.
    """

    # Warning count that alone reaches HIGH
    HIGH_WARNING_THRESHOLD = 2

    # Total indicator count that alone reaches MEDIUM
    MEDIUM_TOTAL_THRESHOLD = 2

    @staticmethod
    def count_by_severity(indicators: Sequence[Indicator]) -> Tuple[int, int, int]:
        """
        Count indicators per severity.

        Args:
            indicators: Emitted indicators

        Returns:
            Tuple of (critical, warning, total) counts
        """
        critical = sum(1 for i in indicators if i.severity == Severity.CRITICAL)
        warning = sum(1 for i in indicators if i.severity == Severity.WARNING)
        return critical, warning, len(indicators)

    def confidence_tier(self, indicators: Sequence[Indicator]) -> ConfidenceTier:
        """
        Convert indicator counts to a confidence tier.

        Args:
            indicators: Emitted indicators

        Returns:
            Corresponding ConfidenceTier
        """
        critical, warning, total = self.count_by_severity(indicators)

        if critical > 0 or warning >= self.HIGH_WARNING_THRESHOLD:
            return ConfidenceTier.HIGH
        elif warning >= 1 or total >= self.MEDIUM_TOTAL_THRESHOLD:
            return ConfidenceTier.MEDIUM
        else:
            return ConfidenceTier.LOW

    def is_refurbished(
        self,
        indicators: Sequence[Indicator],
        replaced_parts: Iterable[str] = (),
        provisional_refurbished: bool = False,
    ) -> bool:
        """
        Combine the three verdict inputs.

        Args:
            indicators: Emitted indicators
            replaced_parts: Replaced-part records
            provisional_refurbished: Program/marker signal raised by rules

        Returns:
            True if the unit is judged refurbished or part-swapped
        """
        _, warning, _ = self.count_by_severity(indicators)
        has_replaced_parts = any(True for _ in replaced_parts)
        return provisional_refurbished or has_replaced_parts or warning > 0

    def score(
        self,
        indicators: Sequence[Indicator],
        replaced_parts: Iterable[str] = (),
        provisional_refurbished: bool = False,
    ) -> Tuple[bool, ConfidenceTier]:
        """
        Score one assessment.

        Args:
            indicators: Emitted indicators
            replaced_parts: Replaced-part records
            provisional_refurbished: Program/marker signal raised by rules

        Returns:
            Tuple of (is_refurbished, confidence)
        """
        indicators = list(indicators)
        return (
            self.is_refurbished(indicators, list(replaced_parts), provisional_refurbished),
            self.confidence_tier(indicators),
        )
