"""
Refurb Inspector - Indicator Rule Models

Pydantic models for indicator rules and their outcomes.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from refurb_inspector.models import Indicator, Severity


class RuleCondition(BaseModel):
    """Condition specification for custom rules."""
    field: str = Field(..., description="Dot-notation path into the facts")
    operator: Literal[
        "equals", "not_equals", "greater_than", "less_than",
        "contains", "not_contains", "exists", "not_exists"
    ]
    value: Optional[Any] = None


class IndicatorRule(BaseModel):
    """Indicator rule specification."""
    model_config = ConfigDict(populate_by_name=True)

    rule_id: str = Field(..., alias="id", description="Rule ID (e.g., REFURB-001)")
    name: str = Field(..., description="Indicator name emitted when the rule fires")
    severity: Severity = Field(..., description="Severity of the emitted indicator")
    description: str = Field(..., description="What the rule looks for")
    enabled: bool = Field(default=True, description="Whether rule is active")
    condition: Optional[RuleCondition] = Field(
        default=None, description="Condition for custom rules"
    )
    message: Optional[str] = Field(
        default=None, description="Description code emitted by a custom rule"
    )
    replaced_part: Optional[str] = Field(
        default=None, description="Replaced-part tag recorded when a custom rule fires"
    )
    provisional: bool = Field(
        default=False,
        description="True if firing marks the unit refurbished regardless of severity"
    )


class RuleOutcome(BaseModel):
    """Result of evaluating one rule against a fact bundle."""
    model_config = ConfigDict(frozen=True)

    rule_id: str
    indicators: List[Indicator] = Field(default_factory=list)
    replaced_parts: List[str] = Field(default_factory=list)
    provisional_refurbished: bool = False
    refurb_program: Optional[str] = None

    @property
    def fired(self) -> bool:
        """True when the rule emitted at least one indicator."""
        return bool(self.indicators)
