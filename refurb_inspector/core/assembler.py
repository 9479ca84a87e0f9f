"""Report assembly for refurbishment assessments.

The assembler is the single entry point of the evidence engine: it takes
one fact bundle, runs the evidence aggregator and the confidence scorer,
and packs the results into a RefurbishmentReport. It performs no I/O and
keeps no state between calls, so equal facts always give equal reports.
"""

import logging
from typing import Optional

from refurb_inspector.analysis.aggregator import EvidenceAggregator
from refurb_inspector.analysis.confidence import ConfidenceScorer
from refurb_inspector.analysis.rules import IndicatorRuleEngine
from refurb_inspector.analysis.vendor_profiles import get_profile, list_profiles, load_profiles
from refurb_inspector.config import EngineConfig
from refurb_inspector.models import Facts, RefurbishmentReport

logger = logging.getLogger(__name__)


class ReportAssembler:
    """Builds refurbishment reports from fact bundles."""

    def __init__(
        self,
        aggregator: Optional[EvidenceAggregator] = None,
        scorer: Optional[ConfidenceScorer] = None,
    ):
        """Initialize the assembler.

        Args:
            aggregator: Evidence aggregator (default: built-in rules,
                profile chosen from the facts' platform)
            scorer: Confidence scorer (default: ConfidenceScorer())
        """
        self.aggregator = aggregator or EvidenceAggregator()
        self.scorer = scorer or ConfidenceScorer()

    @classmethod
    def from_config(cls, config: EngineConfig) -> "ReportAssembler":
        """Create an assembler from engine configuration.

        Args:
            config: EngineConfig with profile, rule file and toggles

        Returns:
            Configured ReportAssembler

        Raises:
            RulesConfigError: If the rules or profiles file is invalid
            ProfileNotFoundError: If the configured profile is unknown
        """
        # Loaded profiles extend a private copy of the built-in registry
        profiles = list_profiles()
        if config.profiles_file:
            profiles.update(load_profiles(config.profiles_file, profiles))

        profile = get_profile(config.profile, profiles) if config.profile else None
        engine = IndicatorRuleEngine(
            profile=profile,
            enable_rules=config.enable_rules,
            disable_rules=config.disable_rules,
        )
        engine.load_rules(config.rules_file)

        return cls(
            aggregator=EvidenceAggregator(engine=engine, profile=profile, profiles=profiles)
        )

    def assemble(self, facts: Facts) -> RefurbishmentReport:
        """Assess one fact bundle.

        Args:
            facts: Facts collected for this machine

        Returns:
            RefurbishmentReport
        """
        evidence = self.aggregator.evaluate(facts)
        is_refurbished, confidence = self.scorer.score(
            evidence.indicators,
            evidence.replaced_parts,
            evidence.provisional_refurbished,
        )

        logger.info(
            f"Assessment complete: refurbished={is_refurbished} "
            f"confidence={confidence.value}"
        )

        return RefurbishmentReport(
            is_refurbished=is_refurbished,
            confidence=confidence,
            indicators=list(evidence.indicators),
            replaced_parts=list(evidence.replaced_parts),
            details=evidence.details,
        )


def assemble(facts: Facts) -> RefurbishmentReport:
    """Convenience function to assess facts with the default assembler.

    Args:
        facts: Facts collected for this machine

    Returns:
        RefurbishmentReport
    """
    return ReportAssembler().assemble(facts)
