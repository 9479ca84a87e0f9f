"""
Utility modules for refurbishment inspection.

This package contains shared utilities, currently the custom exception
hierarchy used by the probe layer, configuration loading and the CLI.
"""

from refurb_inspector.utils.exceptions import (
    FactsLoadError,
    ProbeError,
    ProfileNotFoundError,
    RefurbInspectorError,
    RulesConfigError,
)

__all__ = [
    "RefurbInspectorError",
    "ProbeError",
    "FactsLoadError",
    "RulesConfigError",
    "ProfileNotFoundError",
]
