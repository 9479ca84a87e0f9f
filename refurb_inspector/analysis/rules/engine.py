"""
Refurb Inspector - Indicator Rule Engine

Core engine implementing the built-in refurbishment indicator rules and
support for custom YAML/JSON rules.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from refurb_inspector.analysis.rules.models import (
    IndicatorRule,
    RuleCondition,
    RuleOutcome,
)
from refurb_inspector.analysis.rules.rules_battery import BatteryRulesMixin
from refurb_inspector.analysis.rules.rules_components import ComponentRulesMixin
from refurb_inspector.analysis.rules.rules_provenance import ProvenanceRulesMixin
from refurb_inspector.analysis.vendor_profiles import VendorProfile, profile_for_platform
from refurb_inspector.models import Facts, Indicator, Severity
from refurb_inspector.utils.exceptions import RulesConfigError

logger = logging.getLogger(__name__)


class IndicatorRuleEngine(
    ProvenanceRulesMixin,
    ComponentRulesMixin,
    BatteryRulesMixin,
):
    """
    Rule engine for refurbishment evidence.

    Implements the built-in rules and supports custom YAML/JSON rules.
    Uses mixin classes for rule implementations organized by category:
    - ProvenanceRulesMixin: REFURB-001 to REFURB-004 (program markers, enrollment)
    - ComponentRulesMixin: REFURB-005 to REFURB-006 (storage/display originality)
    - BatteryRulesMixin: REFURB-007 to REFURB-008 (battery replacement heuristics)

    Rules never observe each other's output; the engine evaluates them in
    a fixed order so that indicator lists are reproducible.
    """

    def __init__(
        self,
        profile: Optional[VendorProfile] = None,
        enable_rules: Optional[Iterable[str]] = None,
        disable_rules: Optional[Iterable[str]] = None,
    ):
        """
        Initialize with built-in rules and an optional vendor profile.

        Args:
            profile: VendorProfile with the first-party tables and platform
                rule toggles. If None, uses the GENERIC profile (no
                component judgment).
            enable_rules: Rule ids to force on, overriding the profile
            disable_rules: Rule ids to force off
        """
        self.rules: List[IndicatorRule] = []
        self._profile = profile or profile_for_platform(None)
        self._enable_rules = set(enable_rules or [])
        self._disable_rules = set(disable_rules or [])
        self._load_builtin_rules()

    def _load_builtin_rules(self) -> None:
        """Load the built-in indicator rules."""
        builtin = [
            # Provenance rules (REFURB-001 to REFURB-004)
            IndicatorRule(
                rule_id="REFURB-001",
                name="serial_refurb",
                severity=Severity.INFO,
                description="Serial number matches a vendor refurbished-program pattern",
                provisional=True,
            ),
            IndicatorRule(
                rule_id="REFURB-002",
                name="firmware_refurb",
                severity=Severity.INFO,
                description="Firmware or BIOS data contains a refurbishment marker",
                provisional=True,
            ),
            IndicatorRule(
                rule_id="REFURB-003",
                name="oem_refurb",
                severity=Severity.INFO,
                description="OEM information contains a refurbishment marker",
                provisional=True,
            ),
            IndicatorRule(
                rule_id="REFURB-004",
                name="enterprise_managed",
                severity=Severity.WARNING,
                description="Device was enrolled in a device-enrollment program or MDM",
            ),
            # Component originality rules (REFURB-005 to REFURB-006)
            IndicatorRule(
                rule_id="REFURB-005",
                name="third_party_storage",
                severity=Severity.WARNING,
                description="Internal storage model is not a first-party part",
                replaced_part="storage",
            ),
            IndicatorRule(
                rule_id="REFURB-006",
                name="third_party_display",
                severity=Severity.WARNING,
                description="Internal display vendor is not the first-party vendor",
                replaced_part="display",
            ),
            # Battery rules (REFURB-007 to REFURB-008)
            IndicatorRule(
                rule_id="REFURB-007",
                name="low_battery_cycles",
                severity=Severity.INFO,
                description="Battery cycle count is very low, battery may be newly replaced",
            ),
            IndicatorRule(
                rule_id="REFURB-008",
                name="high_battery_health",
                severity=Severity.INFO,
                description="Battery health is implausibly high, battery may be newly replaced",
            ),
        ]
        self.rules.extend(builtin)

    @property
    def profile(self) -> VendorProfile:
        """Vendor profile the rules match against."""
        return self._profile

    def with_profile(self, profile: VendorProfile) -> "IndicatorRuleEngine":
        """
        Create an engine with the same rules and overrides but another profile.

        Args:
            profile: VendorProfile for the new engine

        Returns:
            New IndicatorRuleEngine; this engine is left untouched
        """
        engine = IndicatorRuleEngine(
            profile=profile,
            enable_rules=self._enable_rules,
            disable_rules=self._disable_rules,
        )
        engine.rules = list(self.rules)
        return engine

    def get_builtin_rules(self) -> List[IndicatorRule]:
        """Get all built-in indicator rules."""
        return [r for r in self.rules if r.rule_id.startswith("REFURB-")]

    def load_rules(self, rules_path: Optional[Path] = None) -> None:
        """
        Load custom rules from YAML or JSON file.

        Args:
            rules_path: Path to rules configuration file

        Raises:
            RulesConfigError: If the file is missing, of an unsupported
                format, or does not describe valid rules
        """
        if rules_path is None:
            return

        rules_path = Path(rules_path)
        if not rules_path.exists():
            raise RulesConfigError(str(rules_path), "File not found")

        suffix = rules_path.suffix.lower()
        with open(rules_path, "r", encoding="utf-8") as f:
            try:
                if suffix in [".yaml", ".yml"]:
                    config = yaml.safe_load(f)
                elif suffix == ".json":
                    config = json.load(f)
                else:
                    raise RulesConfigError(str(rules_path), f"Unsupported format: {suffix}")
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise RulesConfigError(str(rules_path), f"Parse error: {e}")

        if not isinstance(config, dict) or "rules" not in config:
            raise RulesConfigError(str(rules_path), "Rules file must contain 'rules' key")
        if not isinstance(config["rules"], list):
            raise RulesConfigError(str(rules_path), "'rules' must be a list of rule definitions")

        for rule_data in config["rules"]:
            try:
                rule = IndicatorRule(**rule_data)
            except (ValidationError, TypeError) as e:
                raise RulesConfigError(str(rules_path), f"Invalid rule: {e}")
            if rule.condition is None:
                raise RulesConfigError(
                    str(rules_path), f"Custom rule {rule.rule_id} has no condition"
                )
            self.rules.append(rule)
            logger.debug(f"Loaded custom rule {rule.rule_id}")

    def is_rule_active(self, rule: IndicatorRule) -> bool:
        """
        Check whether a rule runs under this engine's profile and overrides.

        Explicit disables win over explicit enables, which win over the
        rule spec and the profile's platform toggles.
        """
        if rule.rule_id in self._disable_rules:
            return False
        if rule.rule_id in self._enable_rules:
            return True
        return rule.enabled and self._profile.is_rule_enabled(rule.rule_id)

    def evaluate_rule(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """
        Evaluate a single rule against a fact bundle.

        A rule that raises is logged and contributes nothing, so one bad
        fact never aborts the assessment.

        Args:
            rule: Rule to evaluate
            facts: Fact bundle

        Returns:
            RuleOutcome with the emitted indicators (possibly none)
        """
        # Custom rules with conditions
        if rule.condition:
            return self._evaluate_custom_rule(rule, facts)

        # Built-in rules - dispatcher dictionary
        evaluators: Dict[str, Callable[[IndicatorRule, Facts], RuleOutcome]] = {
            "REFURB-001": self._check_serial_refurb,
            "REFURB-002": self._check_firmware_refurb,
            "REFURB-003": self._check_oem_refurb,
            "REFURB-004": self._check_enterprise_enrollment,
            "REFURB-005": self._check_third_party_storage,
            "REFURB-006": self._check_third_party_display,
            "REFURB-007": self._check_low_battery_cycles,
            "REFURB-008": self._check_high_battery_health,
        }

        evaluator = evaluators.get(rule.rule_id)
        if evaluator is None:
            logger.debug(f"No implementation for rule {rule.rule_id}")
            return RuleOutcome(rule_id=rule.rule_id)

        try:
            return evaluator(rule, facts)
        except Exception as e:
            logger.warning(f"Rule {rule.rule_id} failed, skipping: {e}", exc_info=True)
            return RuleOutcome(rule_id=rule.rule_id)

    def _evaluate_custom_rule(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """Evaluate a custom rule and build its outcome."""
        if not self._evaluate_condition(rule.condition, facts.model_dump(mode="json")):
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description=rule.message or rule.rule_id.lower(),
                    severity=rule.severity,
                )
            ],
            replaced_parts=[rule.replaced_part] if rule.replaced_part else [],
            provisional_refurbished=rule.provisional,
        )

    def _evaluate_condition(
        self, condition: RuleCondition, context: Dict[str, Any]
    ) -> bool:
        """Evaluate custom rule condition."""
        # Navigate to field via dot notation
        parts = condition.field.split(".")
        value: Any = context

        try:
            for part in parts:
                if isinstance(value, dict):
                    value = value.get(part)
                elif isinstance(value, list) and part.isdigit():
                    index = int(part)
                    value = value[index] if index < len(value) else None
                else:
                    value = None
                    break

            if condition.operator == "exists":
                return value is not None
            elif condition.operator == "not_exists":
                return value is None

            if value is None:
                return False

            if condition.operator == "equals":
                return value == condition.value
            elif condition.operator == "not_equals":
                return value != condition.value
            elif condition.operator == "greater_than":
                return value > condition.value
            elif condition.operator == "less_than":
                return value < condition.value
            elif condition.operator == "contains":
                return condition.value in value
            elif condition.operator == "not_contains":
                return condition.value not in value

        except (KeyError, TypeError, AttributeError):
            pass

        return False

    def evaluate_all(self, facts: Facts) -> List[RuleOutcome]:
        """Evaluate all active rules in rule order.

        Args:
            facts: Fact bundle for one assessment

        Returns:
            List of RuleOutcomes, one per active rule
        """
        outcomes = []
        for rule in self.rules:
            if not self.is_rule_active(rule):
                logger.debug(f"Rule {rule.rule_id} disabled under profile {self._profile.name}")
                continue
            outcomes.append(self.evaluate_rule(rule, facts))
        return outcomes
