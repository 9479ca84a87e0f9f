"""Pytest configuration and shared fixtures for Refurb Inspector tests."""

import json
import tempfile
from pathlib import Path

import pytest

from refurb_inspector.analysis.vendor_profiles import VendorProfile
from refurb_inspector.models import (
    BatteryFacts,
    DisplayDescriptor,
    EnrollmentStatus,
    Facts,
    StorageDescriptor,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def empty_facts():
    """A fact bundle where every probe came back empty."""
    return Facts()


@pytest.fixture
def ssd_profile():
    """Profile whose only first-party table is the Apple SSD model names."""
    return VendorProfile(
        name="TEST_SSD",
        description="Test profile with a storage table only",
        first_party_storage_models=("APPLE SSD", "Apple SSD"),
    )


@pytest.fixture
def display_profile():
    """Profile whose only first-party table is the Apple display vendor."""
    return VendorProfile(
        name="TEST_DISPLAY",
        description="Test profile with a display table only",
        first_party_display_vendors=("Apple",),
    )


@pytest.fixture
def original_mac_facts():
    """Facts from an unmodified, never-managed Mac."""
    return Facts(
        platform="macos",
        serial_number="C02XK0AAJGH5",
        firmware_dump='"IOPlatformSerialNumber" = "C02XK0AAJGH5"',
        enrollment=EnrollmentStatus(dep_enrolled=False, mdm_enrolled=False),
        storage=StorageDescriptor(model="APPLE SSD AP0512M", internal=True, smart_status="Verified"),
        displays=[
            DisplayDescriptor(vendor="Apple", name="Color LCD", connection_type="spdisplays_internal"),
        ],
        battery=BatteryFacts(
            cycle_count=312,
            design_capacity=5103,
            full_charge_capacity=4420,
            manufacture_date="2019-06-11",
        ),
        os_install_date="Jun 30 10:12:44 2019",
    )


@pytest.fixture
def refurbished_mac_facts():
    """Facts from a Certified Refurbished Mac with a replaced SSD."""
    return Facts(
        platform="macos",
        serial_number="FVFXK0AAJGH5",
        enrollment=EnrollmentStatus(dep_enrolled=True, mdm_enrolled=False),
        storage=StorageDescriptor(model="Samsung SSD 970 EVO", internal=True),
        displays=[
            DisplayDescriptor(vendor="Apple", name="Color LCD", connection_type="spdisplays_internal"),
            DisplayDescriptor(vendor="DELL", name="U2720Q", connection_type="DisplayPort"),
        ],
        battery=BatteryFacts(cycle_count=3, design_capacity=5103, full_charge_capacity=5100),
    )


@pytest.fixture
def facts_file(temp_dir, refurbished_mac_facts):
    """Refurbished Mac facts written to a JSON file."""
    path = temp_dir / "facts.json"
    path.write_text(refurbished_mac_facts.model_dump_json(indent=2), encoding="utf-8")
    return path


@pytest.fixture
def critical_rules_file(temp_dir):
    """Custom YAML rules file with one critical rule on the firmware dump."""
    path = temp_dir / "rules.yaml"
    path.write_text(
        "rules:\n"
        "  - id: CUSTOM-001\n"
        "    name: tampered_firmware\n"
        "    severity: critical\n"
        "    description: Firmware reports a reflashed board\n"
        "    message: firmware_reflashed\n"
        "    condition:\n"
        "      field: firmware_dump\n"
        "      operator: contains\n"
        "      value: REFLASHED\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def json_rules_file(temp_dir):
    """Custom JSON rules file recording a replaced battery."""
    path = temp_dir / "rules.json"
    path.write_text(
        json.dumps({
            "rules": [
                {
                    "id": "CUSTOM-002",
                    "name": "cloned_storage",
                    "severity": "info",
                    "description": "Storage model names a known clone part",
                    "message": "storage_clone_part",
                    "replaced_part": "storage",
                    "condition": {
                        "field": "storage.model",
                        "operator": "contains",
                        "value": "Clone",
                    },
                }
            ]
        }),
        encoding="utf-8",
    )
    return path
