"""Output generation modules for refurbishment reports.

This package provides output formatters and exporters for assessment results.
"""

from refurb_inspector.output.json_export import JSONExporter, export_to_json

__all__ = ["JSONExporter", "export_to_json"]
