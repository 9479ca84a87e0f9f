"""JSON wire format for refurbishment reports.

UI layers read reports in this shape. The key set and key order are fixed
here, independent of how the report models are declared:

    {is_refurbished, confidence, indicators: [{name, detected, description,
    severity}], replaced_parts, details: {serial_manufacture_date,
    os_install_date, battery_manufacture_date, storage_first_use_date,
    date_mismatch, refurb_program}}

Enums travel as their lowercase string values.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from refurb_inspector.models import Indicator, RefurbishmentDetails, RefurbishmentReport

DETAIL_KEYS = (
    "serial_manufacture_date",
    "os_install_date",
    "battery_manufacture_date",
    "storage_first_use_date",
    "date_mismatch",
    "refurb_program",
)


def indicator_to_wire(indicator: Indicator) -> Dict[str, Any]:
    return {
        "name": indicator.name,
        "detected": indicator.detected,
        "description": indicator.description,
        "severity": indicator.severity.value,
    }


def details_to_wire(details: RefurbishmentDetails) -> Dict[str, Any]:
    return {key: getattr(details, key) for key in DETAIL_KEYS}


class JSONExporter:
    """Writes refurbishment reports in the wire format."""

    def __init__(self, indent: Optional[int] = 2):
        """Initialize the JSON exporter.

        Args:
            indent: Number of spaces for indentation, None for one line
        """
        self.indent = indent

    def to_dict(self, report: RefurbishmentReport) -> Dict[str, Any]:
        """Convert a report to its wire dictionary.

        Args:
            report: RefurbishmentReport to convert

        Returns:
            Dictionary holding exactly the wire keys, in wire order
        """
        return {
            "is_refurbished": report.is_refurbished,
            "confidence": report.confidence.value,
            "indicators": [indicator_to_wire(i) for i in report.indicators],
            "replaced_parts": list(report.replaced_parts),
            "details": details_to_wire(report.details),
        }

    def to_json(self, report: RefurbishmentReport) -> str:
        return json.dumps(self.to_dict(report), indent=self.indent, ensure_ascii=False)

    def to_file(
        self,
        report: RefurbishmentReport,
        file_path: Union[str, Path],
        encoding: str = "utf-8",
    ) -> None:
        """Save a report to a JSON file, creating parent directories.

        Args:
            report: RefurbishmentReport to save
            file_path: Path to the output file
            encoding: File encoding (default: utf-8)
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding=encoding) as f:
            f.write(self.to_json(report))


def export_to_json(
    report: RefurbishmentReport,
    output_path: Optional[Union[str, Path]] = None,
    indent: Optional[int] = 2,
) -> str:
    """Convenience function to export a refurbishment report to JSON.

    Args:
        report: RefurbishmentReport to export
        output_path: Optional path to save JSON file
        indent: Number of spaces for indentation (default: 2)

    Returns:
        JSON string representation of the report
    """
    exporter = JSONExporter(indent=indent)
    json_str = exporter.to_json(report)

    if output_path:
        exporter.to_file(report, output_path)

    return json_str
