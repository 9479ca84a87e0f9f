"""
Refurb Inspector - Evidence Aggregator

Runs every active indicator rule against one fact bundle and folds the
outcomes into a single evidence bundle, alongside the date-bearing details
copied from the facts.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from refurb_inspector.analysis.rules import IndicatorRuleEngine, RuleOutcome
from refurb_inspector.analysis.vendor_profiles import (
    PLACEHOLDER_SERIALS,
    VendorProfile,
    profile_for_platform,
)
from refurb_inspector.models import Facts, Indicator, RefurbishmentDetails

logger = logging.getLogger(__name__)

# Leading serial characters that encode plant and production date
SERIAL_DATE_PREFIX_LENGTH = 4


class EvidenceBundle(BaseModel):
    """Everything the rules found for one assessment."""
    model_config = ConfigDict(frozen=True)

    indicators: List[Indicator] = Field(default_factory=list)
    replaced_parts: List[str] = Field(default_factory=list)
    details: RefurbishmentDetails = Field(default_factory=RefurbishmentDetails)
    provisional_refurbished: bool = False
    profile_name: Optional[str] = None


class EvidenceAggregator:
    """
    Collects rule outcomes into one evidence bundle.

    When no profile is pinned, the vendor profile is selected per
    assessment from the platform named in the facts.
    """

    def __init__(
        self,
        engine: Optional[IndicatorRuleEngine] = None,
        profile: Optional[VendorProfile] = None,
        profiles: Optional[Dict[str, VendorProfile]] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            engine: Rule engine carrying built-in and custom rules plus
                toggles. If None, a default engine is created.
            profile: Vendor profile to pin. If None, chosen from
                ``facts.platform`` on every call.
            profiles: Registry the per-call profile is chosen from
                (default: the built-in profiles)
        """
        self.engine = engine or IndicatorRuleEngine(profile=profile)
        self.pinned_profile = profile
        self.profiles = profiles
        if profile is not None and self.engine.profile is not profile:
            self.engine = self.engine.with_profile(profile)

    def engine_for(self, facts: Facts) -> IndicatorRuleEngine:
        """Get the rule engine matching the profile for these facts."""
        if self.pinned_profile is not None:
            return self.engine
        profile = profile_for_platform(facts.platform, self.profiles)
        if self.engine.profile is profile:
            return self.engine
        return self.engine.with_profile(profile)

    def evaluate(self, facts: Facts) -> EvidenceBundle:
        """
        Evaluate all rules and derive report details.

        Args:
            facts: Fact bundle for one assessment

        Returns:
            EvidenceBundle with indicators and replaced parts in rule order
        """
        engine = self.engine_for(facts)
        outcomes = engine.evaluate_all(facts)

        indicators: List[Indicator] = []
        replaced_parts: List[str] = []
        for outcome in outcomes:
            indicators.extend(outcome.indicators)
            replaced_parts.extend(outcome.replaced_parts)

        provisional = any(o.provisional_refurbished for o in outcomes)
        details = self.derive_details(facts, outcomes)

        logger.info(
            f"Evaluated {len(outcomes)} rules under profile {engine.profile.name}: "
            f"{len(indicators)} indicators, {len(replaced_parts)} replaced parts"
        )

        return EvidenceBundle(
            indicators=indicators,
            replaced_parts=replaced_parts,
            details=details,
            provisional_refurbished=provisional,
            profile_name=engine.profile.name,
        )

    def derive_details(self, facts: Facts, outcomes: List[RuleOutcome]) -> RefurbishmentDetails:
        """
        Copy and reformat date-bearing facts into report details.

        ``date_mismatch`` is set when both a battery date and an OS install
        date are present; the two are not compared.
        """
        battery_date = facts.battery.manufacture_date if facts.battery else None
        refurb_program = next((o.refurb_program for o in outcomes if o.refurb_program), None)

        return RefurbishmentDetails(
            serial_manufacture_date=self._serial_date_code(facts.serial_number),
            os_install_date=facts.os_install_date,
            battery_manufacture_date=battery_date,
            storage_first_use_date=facts.storage_first_use_date,
            date_mismatch=battery_date is not None and facts.os_install_date is not None,
            refurb_program=refurb_program,
        )

    @staticmethod
    def _serial_date_code(serial: Optional[str]) -> Optional[str]:
        if not serial:
            return None
        serial = serial.strip()
        if len(serial) < SERIAL_DATE_PREFIX_LENGTH or serial.lower() in PLACEHOLDER_SERIALS:
            return None
        return f"serial_prefix:{serial[:SERIAL_DATE_PREFIX_LENGTH]}"
