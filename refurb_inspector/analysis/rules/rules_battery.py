"""
Refurb Inspector - Battery Anomaly Rules (REFURB-007 to REFURB-008)

Heuristics for a freshly replaced battery. Both are informational and are
switched per platform through the vendor profile: a low cycle count or a
near-new health ratio is common on genuinely new machines too.
"""

from refurb_inspector.analysis.rules.models import IndicatorRule, RuleOutcome
from refurb_inspector.models import Facts, Indicator


class BatteryRulesMixin:
    """Mixin providing REFURB-007 and REFURB-008 check implementations."""

    def _check_low_battery_cycles(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-007: Cycle count below the profile threshold."""
        battery = facts.battery
        if battery is None or battery.cycle_count is None:
            return RuleOutcome(rule_id=rule.rule_id)

        if battery.cycle_count >= self.profile.low_battery_cycle_threshold:
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description=f"battery_cycles_low:{battery.cycle_count}",
                    severity=rule.severity,
                )
            ],
        )

    def _check_high_battery_health(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-008: Full-charge capacity implausibly close to design capacity."""
        battery = facts.battery
        health = battery.health_percent if battery is not None else None
        if health is None or health <= self.profile.high_battery_health_threshold:
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description=f"battery_health_high:{health:.1f}",
                    severity=rule.severity,
                )
            ],
        )
