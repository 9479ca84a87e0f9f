"""
Parsers for raw OS utility output.

Pure functions turning the text printed by ioreg, diskutil, system_profiler,
profiles and PowerShell into typed facts. Every parser is total: output it
cannot understand yields None (or an empty list), never an exception.
"""

import json
import re
from typing import Any, Dict, List, Optional

from refurb_inspector.models import (
    BatteryFacts,
    BatteryInfo,
    DisplayDescriptor,
    EnrollmentStatus,
    StorageDescriptor,
    StorageHealth,
)

# "Key" = value lines of ioreg output, ignoring tree-drawing characters
IOREG_KEY_RE = re.compile(r'^[\s|+\-o]*"(?P<key>[^"]+)"\s*=\s*(?P<value>.*?)\s*$')

# Manufacture date may sit at top level or inside the BatteryData dictionary
MANUFACTURE_DATE_RE = re.compile(r'"ManufactureDate"\s*=\s*(?P<value>[^,}\s]+)')

# EDID manufacturer ids reported by system_profiler, mapped to vendor codes
DISPLAY_VENDOR_IDS = {
    "610": "APP",
}

# Win32_Battery BatteryStatus values meaning "charging"
WINDOWS_CHARGING_STATUSES = {6, 7, 8, 9}

# Get-PhysicalDisk BusType values for removable or virtual media, by name and
# by the numeric value ConvertTo-Json emits
WINDOWS_EXTERNAL_BUS_TYPES = {"USB", "SD", "MMC", "Virtual", "File Backed Virtual"}
WINDOWS_EXTERNAL_BUS_CODES = {7, 12, 13, 14, 15}

# Get-PhysicalDisk HealthStatus numeric values
WINDOWS_HEALTH_STATUSES = {0: "Healthy", 1: "Warning", 2: "Unhealthy", 5: "Unknown"}


def parse_ioreg_properties(text: Optional[str]) -> Dict[str, str]:
    """
    Parse top-level "Key" = value pairs from ioreg output.

    Later duplicates do not overwrite earlier ones, so the first object in
    the tree wins.
    """
    properties: Dict[str, str] = {}
    if not text:
        return properties
    for line in text.splitlines():
        match = IOREG_KEY_RE.match(line)
        if match and match.group("key") not in properties:
            properties[match.group("key")] = match.group("value")
    return properties


def _ioreg_int(properties: Dict[str, str], key: str) -> Optional[int]:
    value = properties.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _ioreg_str(properties: Dict[str, str], key: str) -> Optional[str]:
    value = properties.get(key)
    if value is None:
        return None
    value = value.strip().strip('"').strip()
    return value or None


def parse_ioreg_serial(text: Optional[str]) -> Optional[str]:
    """Extract IOPlatformSerialNumber from ioreg output."""
    return _ioreg_str(parse_ioreg_properties(text), "IOPlatformSerialNumber")


def decode_battery_manufacture_date(raw: Optional[str]) -> Optional[str]:
    """
    Decode a smart-battery manufacture date.

    Smart batteries pack the date as ``(year - 1980) << 9 | month << 5 | day``.
    Values that do not decode to a plausible date are returned unchanged.

    Args:
        raw: Raw value from ioreg

    Returns:
        ISO date string, the raw value, or None if absent
    """
    if raw is None:
        return None
    raw = raw.strip().strip('"').strip()
    if not raw:
        return None
    if raw.isdigit():
        packed = int(raw)
        year = (packed >> 9) + 1980
        month = (packed >> 5) & 0x0F
        day = packed & 0x1F
        if 1 <= month <= 12 and 1 <= day <= 31 and 1990 <= year <= 2100:
            return f"{year:04d}-{month:02d}-{day:02d}"
    return raw


def _actual_max_capacity(properties: Dict[str, str]) -> int:
    design = _ioreg_int(properties, "DesignCapacity") or 0
    raw_max = _ioreg_int(properties, "AppleRawMaxCapacity") or 0
    max_capacity = _ioreg_int(properties, "MaxCapacity") or 0

    # Newer macOS reports the real capacity as AppleRawMaxCapacity and
    # MaxCapacity as a percentage
    if raw_max > 0:
        return raw_max
    if max_capacity > 100:
        return max_capacity
    return design


def parse_ioreg_battery_facts(text: Optional[str]) -> Optional[BatteryFacts]:
    """Build battery facts from ``ioreg -r -c AppleSmartBattery`` output."""
    properties = parse_ioreg_properties(text)
    if not properties:
        return None

    design = _ioreg_int(properties, "DesignCapacity")
    manufacture = MANUFACTURE_DATE_RE.search(text or "")

    return BatteryFacts(
        cycle_count=_ioreg_int(properties, "CycleCount"),
        design_capacity=design,
        full_charge_capacity=_actual_max_capacity(properties) if design else None,
        serial=_ioreg_str(properties, "Serial") or _ioreg_str(properties, "BatterySerialNumber"),
        manufacture_date=decode_battery_manufacture_date(
            manufacture.group("value") if manufacture else None
        ),
    )


def parse_ioreg_battery_info(text: Optional[str]) -> Optional[BatteryInfo]:
    """Build the battery health readout from ``ioreg -r -c AppleSmartBattery`` output."""
    properties = parse_ioreg_properties(text)
    if not properties:
        return None

    design = _ioreg_int(properties, "DesignCapacity") or 0
    actual_max = _actual_max_capacity(properties)
    temperature = _ioreg_int(properties, "Temperature")

    if design > 0 and actual_max > 0:
        health = (actual_max / design) * 100.0
    else:
        health = 100.0

    return BatteryInfo(
        health=health,
        cycle_count=_ioreg_int(properties, "CycleCount") or 0,
        design_capacity=design,
        max_capacity=actual_max,
        current_capacity=_ioreg_int(properties, "CurrentCapacity") or 0,
        is_charging=properties.get("IsCharging", "").strip() == "Yes",
        temperature=temperature / 100.0 if temperature is not None else None,
    )


def _colon_fields(text: Optional[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for line in (text or "").splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields.setdefault(key.strip(), value.strip())
    return fields


def parse_diskutil_info(text: Optional[str]) -> Optional[StorageDescriptor]:
    """Build a storage descriptor from ``diskutil info`` output."""
    fields = _colon_fields(text)
    if not fields:
        return None

    internal: Optional[bool] = None
    location = fields.get("Device Location")
    if location is not None:
        internal = "Internal" in location
    elif "Internal" in fields:
        internal = fields["Internal"].lower().startswith("yes")

    return StorageDescriptor(
        model=fields.get("Device / Media Name") or None,
        internal=internal,
        smart_status=fields.get("SMART Status") or None,
    )


def parse_profiles_enrollment(text: Optional[str]) -> Optional[EnrollmentStatus]:
    """Build enrollment flags from ``profiles status -type enrollment`` output."""
    fields = _colon_fields(text)
    dep = fields.get("Enrolled via DEP")
    mdm = fields.get("MDM enrollment")
    if dep is None and mdm is None:
        return None
    return EnrollmentStatus(
        dep_enrolled=dep.lower().startswith("yes") if dep is not None else None,
        mdm_enrolled=mdm.lower().startswith("yes") if mdm is not None else None,
    )


def _load_json(text: Optional[str]) -> Any:
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_sp_displays(text: Optional[str]) -> List[DisplayDescriptor]:
    """
    Build display descriptors from ``system_profiler SPDisplaysDataType -json``.

    Each graphics entry may list its attached panels under
    ``spdisplays_ndrvs``; entries without that list are read directly.
    """
    data = _load_json(text)
    if not isinstance(data, dict):
        return []
    entries = data.get("SPDisplaysDataType")
    if not isinstance(entries, list):
        return []

    displays: List[DisplayDescriptor] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        panels = entry.get("spdisplays_ndrvs")
        if isinstance(panels, list) and panels:
            for panel in panels:
                if isinstance(panel, dict):
                    displays.append(_display_from_entry(panel))
        elif "spdisplays_connection_type" in entry:
            displays.append(_display_from_entry(entry))
    return displays


def _display_from_entry(entry: Dict[str, Any]) -> DisplayDescriptor:
    vendor = entry.get("spdisplays_vendor")
    if not isinstance(vendor, str) or not vendor:
        vendor_id = entry.get("_spdisplays_display-vendor-id")
        vendor = DISPLAY_VENDOR_IDS.get(str(vendor_id), f"vendor-id:{vendor_id}") if vendor_id else None
    connection = entry.get("spdisplays_connection_type")
    return DisplayDescriptor(
        vendor=vendor,
        name=entry.get("_name") if isinstance(entry.get("_name"), str) else None,
        connection_type=connection if isinstance(connection, str) else None,
    )


def parse_sp_storage_model(text: Optional[str]) -> Optional[str]:
    """Extract the first physical drive name from ``system_profiler SPStorageDataType -json``."""
    data = _load_json(text)
    if not isinstance(data, dict):
        return None
    entries = data.get("SPStorageDataType")
    if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
        return None
    physical = entries[0].get("physical_drive")
    if not isinstance(physical, dict):
        return None
    name = physical.get("device_name")
    return name if isinstance(name, str) and name else None


def _first_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    # ConvertTo-Json prints a list when several objects match
    data = _load_json(text)
    if isinstance(data, list):
        data = data[0] if data else None
    return data if isinstance(data, dict) else None


def _json_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def parse_windows_battery_facts(text: Optional[str]) -> Optional[BatteryFacts]:
    """Build battery facts from Win32_Battery JSON."""
    data = _first_json_object(text)
    if data is None:
        return None
    return BatteryFacts(
        design_capacity=_json_int(data, "DesignCapacity"),
        full_charge_capacity=_json_int(data, "FullChargeCapacity"),
    )


def parse_windows_battery_info(text: Optional[str]) -> Optional[BatteryInfo]:
    """Build the battery health readout from Win32_Battery JSON."""
    data = _first_json_object(text)
    if data is None:
        return None

    design = _json_int(data, "DesignCapacity") or 0
    full = _json_int(data, "FullChargeCapacity") or 0
    health = (full / design) * 100.0 if design > 0 and full > 0 else 100.0

    return BatteryInfo(
        health=health,
        design_capacity=design,
        max_capacity=full,
        current_capacity=_json_int(data, "EstimatedChargeRemaining") or 0,
        is_charging=_json_int(data, "BatteryStatus") in WINDOWS_CHARGING_STATUSES,
    )


def parse_windows_physical_disk(text: Optional[str]) -> Optional[StorageDescriptor]:
    """Build a storage descriptor from Get-PhysicalDisk JSON."""
    data = _first_json_object(text)
    if data is None:
        return None
    bus = data.get("BusType")
    internal = None
    if isinstance(bus, str):
        internal = bus not in WINDOWS_EXTERNAL_BUS_TYPES
    elif isinstance(bus, int) and not isinstance(bus, bool):
        internal = bus not in WINDOWS_EXTERNAL_BUS_CODES
    model = data.get("FriendlyName")
    health = data.get("HealthStatus")
    if isinstance(health, int) and not isinstance(health, bool):
        health = WINDOWS_HEALTH_STATUSES.get(health)
    return StorageDescriptor(
        model=model if isinstance(model, str) and model else None,
        internal=internal,
        smart_status=health if isinstance(health, str) else None,
    )


def parse_windows_storage_health(text: Optional[str]) -> Optional[StorageHealth]:
    """Build the storage health readout from Get-PhysicalDisk JSON."""
    descriptor = parse_windows_physical_disk(text)
    if descriptor is None:
        return None
    return StorageHealth(
        model=descriptor.model or "Unknown",
        smart_status=descriptor.smart_status or "Unknown",
    )


def first_nonempty_line(text: Optional[str]) -> Optional[str]:
    """Return the first non-blank line of command output, stripped."""
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return None
