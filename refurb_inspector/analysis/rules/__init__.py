"""
Refurb Inspector - Indicator Rules Package

This package provides modular refurbishment indicator rules.
All public APIs are re-exported here for convenience.

Rule Organization:
- models.py: Pydantic models (RuleCondition, IndicatorRule, RuleOutcome)
- engine.py: IndicatorRuleEngine class
- rules_provenance.py: REFURB-001 to REFURB-004 (program markers, enrollment)
- rules_components.py: REFURB-005 to REFURB-006 (storage/display originality)
- rules_battery.py: REFURB-007 to REFURB-008 (battery replacement heuristics)
"""

from refurb_inspector.analysis.rules.engine import IndicatorRuleEngine
from refurb_inspector.analysis.rules.models import (
    IndicatorRule,
    RuleCondition,
    RuleOutcome,
)

__all__ = [
    # Models
    "RuleCondition",
    "IndicatorRule",
    "RuleOutcome",
    # Engine
    "IndicatorRuleEngine",
]
