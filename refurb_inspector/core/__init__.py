"""Core modules for refurbishment assessment.

This package provides the report assembler (the evidence engine's entry
point), fact collection from platform probes, and facts file intake.
"""

from refurb_inspector.core.assembler import ReportAssembler, assemble
from refurb_inspector.core.collector import FactCollector
from refurb_inspector.core.intake import load_facts, save_facts

__all__ = [
    # Assembler
    "ReportAssembler",
    "assemble",
    # Collection
    "FactCollector",
    # Intake
    "load_facts",
    "save_facts",
]
