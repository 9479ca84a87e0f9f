"""
Refurb Inspector - Provenance Rules (REFURB-001 to REFURB-004)

Checks for explicit refurbishment-program signals and prior enterprise
ownership:
- REFURB-001: Serial number matches a vendor refurbished-program pattern
- REFURB-002: Firmware / BIOS dump carries a refurbishment marker
- REFURB-003: OEM information carries a refurbishment marker
- REFURB-004: Device enrolled in a device-enrollment program and/or MDM

The marker checks are substring heuristics over unstructured text, so a
platform that encodes the flag differently produces a false negative.
"""

from refurb_inspector.analysis.rules.models import IndicatorRule, RuleOutcome
from refurb_inspector.analysis.vendor_profiles import PLACEHOLDER_SERIALS
from refurb_inspector.models import Facts, Indicator

# Shortest serial that still carries a vendor prefix
MIN_SERIAL_LENGTH = 4


class ProvenanceRulesMixin:
    """Mixin providing REFURB-001 through REFURB-004 check implementations."""

    def _check_serial_refurb(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-001: Serial refurbished-program pattern."""
        serial = (facts.serial_number or "").strip()
        if len(serial) < MIN_SERIAL_LENGTH or serial.lower() in PLACEHOLDER_SERIALS:
            return RuleOutcome(rule_id=rule.rule_id)

        program = self.profile.match_serial_program(serial)
        if program is None:
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description=f"serial_refurb_program:{program}",
                    severity=rule.severity,
                )
            ],
            provisional_refurbished=True,
            refurb_program=program,
        )

    def _check_firmware_refurb(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-002: Refurbishment marker in the firmware dump."""
        if not self.profile.has_firmware_marker(facts.firmware_dump):
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description="firmware_refurb_marker",
                    severity=rule.severity,
                )
            ],
            provisional_refurbished=True,
        )

    def _check_oem_refurb(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-003: Refurbishment marker in OEM information."""
        if not self.profile.has_oem_marker(facts.oem_info):
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[
                Indicator(
                    name=rule.name,
                    description="oem_refurb_marker",
                    severity=rule.severity,
                )
            ],
            provisional_refurbished=True,
        )

    def _check_enterprise_enrollment(self, rule: IndicatorRule, facts: Facts) -> RuleOutcome:
        """REFURB-004: Prior enterprise enrollment.

        Ex-fleet machines are a common source of refurbished stock. The
        description distinguishes which of the two enrollments is present.
        """
        enrollment = facts.enrollment
        if enrollment is None:
            return RuleOutcome(rule_id=rule.rule_id)

        dep = enrollment.dep_enrolled is True
        mdm = enrollment.mdm_enrolled is True

        if dep and mdm:
            code = "enrolled_dep_and_mdm"
        elif dep:
            code = "enrolled_dep_only"
        elif mdm:
            code = "enrolled_mdm_only"
        else:
            return RuleOutcome(rule_id=rule.rule_id)

        return RuleOutcome(
            rule_id=rule.rule_id,
            indicators=[Indicator(name=rule.name, description=code, severity=rule.severity)],
        )
