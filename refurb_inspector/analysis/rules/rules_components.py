"""
Refurb Inspector - Component Originality Rules (REFURB-005 to REFURB-006)

Compares the identity of internal components against the vendor profile's
first-party tables. Each offending component produces one warning
indicator and one replaced-part record.
"""

from typing import List

from refurb_inspector.analysis.rules.models import IndicatorRule, RuleOutcome
from refurb_inspector.models import Facts, Indicator, ReplacedPart


class ComponentRulesMixin:
    """Mixin providing REFURB-005 and REFURB-006 check implementations."""

    def _check_third_party_storage(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-005: Internal storage with a non-first-party model name.

        External drives are never judged, and neither is a profile with an
        empty first-party storage table.
        """
        storage = facts.storage
        if storage is None or storage.internal is not True:
            return RuleOutcome(rule_id=rule.rule_id)

        model = (storage.model or "").strip()
        if not model or not self.profile.first_party_storage_models:
            return RuleOutcome(rule_id=rule.rule_id)

        if self.profile.is_first_party_storage(model):
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description=f"storage_not_first_party:{model}",
                    severity=rule.severity,
                )
            ],
            replaced_parts=[ReplacedPart.STORAGE.value],
        )

    def _check_third_party_display(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-006: Internal displays with a non-first-party vendor.

        Evaluated per display, so a machine reporting several internal
        panels can yield several indicators from this one rule.
        """
        if not facts.displays or not self.profile.first_party_display_vendors:
            return RuleOutcome(rule_id=rule.rule_id)

        indicators: List[Indicator] = []
        replaced: List[str] = []

        for display in facts.displays:
            vendor = (display.vendor or "").strip()
            if not vendor or not display.is_internal:
                continue
            if self.profile.is_first_party_display(vendor):
                continue
            indicators.append(
                Indicator(
                    name=rule.name,
                    description=f"display_not_first_party:{vendor}",
                    severity=rule.severity,
                )
            )
            replaced.append(ReplacedPart.DISPLAY.value)

        return RuleOutcome(rule_id=rule.rule_id, indicators=indicators, replaced_parts=replaced)
