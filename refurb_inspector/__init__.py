"""
Refurb Inspector - Refurbishment and part-swap detection for laptops and desktops.

The evidence engine folds platform signals (serial number, firmware flags,
enrollment, storage/display identity, battery data) into a verdict with a
confidence tier and a provenance report.
"""

__version__ = "0.1.0"
