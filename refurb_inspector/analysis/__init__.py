"""
Refurb Inspector - Analysis Module

The refurbishment evidence engine:
- Indicator rule engine with built-in and custom rules
- Vendor profiles holding first-party tables and platform rule toggles
- Evidence aggregation into indicators, replaced parts and details
- Confidence scoring and the overall verdict

Severity Classification:
- CRITICAL: Strong anomaly, alone yields high confidence
- WARNING: Meaningful anomaly, marks the unit refurbished
- INFO: Contextual signal
"""

from refurb_inspector.analysis.aggregator import EvidenceAggregator, EvidenceBundle
from refurb_inspector.analysis.confidence import ConfidenceScorer
from refurb_inspector.analysis.rules import (
    IndicatorRule,
    IndicatorRuleEngine,
    RuleCondition,
    RuleOutcome,
)
from refurb_inspector.analysis.vendor_profiles import (
    VendorProfile,
    get_profile,
    list_profiles,
    load_profiles,
    profile_for_platform,
)

__all__ = [
    "EvidenceAggregator",
    "EvidenceBundle",
    "ConfidenceScorer",
    "IndicatorRule",
    "IndicatorRuleEngine",
    "RuleCondition",
    "RuleOutcome",
    "VendorProfile",
    "get_profile",
    "list_profiles",
    "load_profiles",
    "profile_for_platform",
]
