"""
Refurb Inspector - Vendor Profiles

Named configuration tables used by the indicator rules.

Each profile carries the vendor-specific string sets that the rules match
against (first-party storage models, first-party display vendors, serial
refurbishment patterns, firmware markers) plus per-platform rule toggles:
- APPLE: Mac hardware, full component checks, battery heuristics off
- WINDOWS: PC hardware, firmware/OEM markers and battery health heuristic
- GENERIC: Conservative fallback, no component judgment

An empty first-party table means the profile makes no originality judgment
for that component, so the matching rule stays silent.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from refurb_inspector.utils.exceptions import ProfileNotFoundError, RulesConfigError

logger = logging.getLogger(__name__)

# Serial values some firmwares report instead of a real serial
PLACEHOLDER_SERIALS = frozenset({
    "unknown",
    "none",
    "default string",
    "to be filled by o.e.m.",
    "system serial number",
    "0",
    "0123456789",
})


@dataclass
class VendorProfile:
    """
    Vendor configuration table for one hardware platform.

    Attributes:
        name: Profile identifier (e.g., "APPLE")
        description: Human-readable description of the profile
        serial_refurb_patterns: Ordered (regex, program name) pairs matched
            against the serial number
        firmware_markers: Case-insensitive substrings marking a refurbished
            unit in the firmware dump
        oem_markers: Case-insensitive substrings marking a refurbished unit
            in the OEM information
        first_party_storage_models: Substrings of first-party storage models
        storage_exempt_models: Substrings of model names that are never
            judged (volume names some tools report in place of a model)
        first_party_display_vendors: Substrings of first-party display vendors
        disabled_rules: Rule ids switched off on this platform
        low_battery_cycle_threshold: Cycle count below which a battery looks
            freshly replaced
        high_battery_health_threshold: Health percentage above which a
            battery looks freshly replaced
    """
    name: str
    description: str
    serial_refurb_patterns: Tuple[Tuple[str, str], ...] = ()
    firmware_markers: Tuple[str, ...] = ("refurbished", "renewed")
    oem_markers: Tuple[str, ...] = ("refurb", "renewed")
    first_party_storage_models: Tuple[str, ...] = ()
    storage_exempt_models: Tuple[str, ...] = ()
    first_party_display_vendors: Tuple[str, ...] = ()
    disabled_rules: FrozenSet[str] = field(default_factory=frozenset)
    low_battery_cycle_threshold: int = 50
    high_battery_health_threshold: float = 95.0

    def match_serial_program(self, serial: Optional[str]) -> Optional[str]:
        """
        Return the refurbishment program a serial number belongs to.

        Args:
            serial: Serial number fact (may be None)

        Returns:
            Program name, or None when no pattern matches
        """
        if not serial:
            return None
        for pattern, program in self.serial_refurb_patterns:
            if re.match(pattern, serial):
                return program
        return None

    def has_firmware_marker(self, text: Optional[str]) -> bool:
        """Check a firmware dump for any refurbishment marker."""
        return _contains_any(text, self.firmware_markers)

    def has_oem_marker(self, text: Optional[str]) -> bool:
        """Check OEM information for any refurbishment marker."""
        return _contains_any(text, self.oem_markers)

    def is_first_party_storage(self, model: str) -> bool:
        """Check whether a storage model matches the first-party table."""
        if any(exempt in model for exempt in self.storage_exempt_models):
            return True
        return any(entry in model for entry in self.first_party_storage_models)

    def is_first_party_display(self, vendor: str) -> bool:
        """Check whether a display vendor matches the first-party table."""
        return any(entry in vendor for entry in self.first_party_display_vendors)

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check whether this profile leaves a rule switched on."""
        return rule_id not in self.disabled_rules


def _contains_any(text: Optional[str], markers: Tuple[str, ...]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(marker.lower() in lowered for marker in markers)


# Built-in vendor profiles

APPLE = VendorProfile(
    name="APPLE",
    description=(
        "Apple Mac hardware - Certified Refurbished serials start with 'F', "
        "first-party SSDs report APPLE SSD / AP model names"
    ),
    serial_refurb_patterns=(
        (r"^F", "Apple Certified Refurbished"),
    ),
    firmware_markers=("refurbished",),
    first_party_storage_models=("APPLE SSD", "Apple SSD", "AP"),
    storage_exempt_models=("Macintosh",),
    first_party_display_vendors=("Apple", "APP"),
    # Low cycle counts alone produce too many false positives on Macs
    disabled_rules=frozenset({"REFURB-007", "REFURB-008"}),
)

WINDOWS = VendorProfile(
    name="WINDOWS",
    description=(
        "Windows PC hardware - Refurbishment markers in BIOS and OEM "
        "information, battery health heuristic enabled"
    ),
    firmware_markers=("refurbished", "renewed"),
    oem_markers=("refurb", "renewed"),
    disabled_rules=frozenset({"REFURB-007"}),
)

GENERIC = VendorProfile(
    name="GENERIC",
    description=(
        "Unknown platform - Conservative fallback with marker checks only "
        "and no component originality judgment"
    ),
    disabled_rules=frozenset({"REFURB-007"}),
)


# Built-in profile registry, read-only. Loaded profiles live in registries
# owned by their callers (see load_profiles).
VENDOR_PROFILES: Dict[str, VendorProfile] = {
    "APPLE": APPLE,
    "WINDOWS": WINDOWS,
    "GENERIC": GENERIC,
}

# Platform name (as reported by the probe layer) to profile name
PLATFORM_PROFILES = {
    "macos": "APPLE",
    "darwin": "APPLE",
    "windows": "WINDOWS",
}


def get_profile(name: str, profiles: Optional[Dict[str, VendorProfile]] = None) -> VendorProfile:
    """
    Get vendor profile by name.

    Args:
        name: Profile name (case-insensitive, e.g., "apple")
        profiles: Registry to search (default: the built-in profiles)

    Returns:
        VendorProfile instance

    Raises:
        ProfileNotFoundError: If no profile is registered under that name
    """
    registry = VENDOR_PROFILES if profiles is None else profiles
    profile = registry.get(name.upper())
    if profile is None:
        raise ProfileNotFoundError(name, list(registry))
    return profile


def list_profiles() -> Dict[str, VendorProfile]:
    """
    Get all built-in vendor profiles.

    Returns:
        Dictionary of profile name to VendorProfile (a copy, safe to extend)
    """
    return VENDOR_PROFILES.copy()


def profile_for_platform(
    platform_name: Optional[str],
    profiles: Optional[Dict[str, VendorProfile]] = None,
) -> VendorProfile:
    """
    Select the vendor profile for a platform name.

    Args:
        platform_name: Platform as reported in the facts (e.g. "macos")
        profiles: Registry to select from (default: the built-in profiles)

    Returns:
        Matching VendorProfile, GENERIC when the platform is unknown
    """
    registry = VENDOR_PROFILES if profiles is None else profiles
    key = PLATFORM_PROFILES.get((platform_name or "").lower(), "GENERIC")
    return registry.get(key) or GENERIC


class ProfileTable(BaseModel):
    """
    One vendor profile as written in a profiles file.

    Every table key is optional; a key left out falls back to the ``base``
    profile, or to the VendorProfile default when there is no base.
    Serial patterns are given either as a ``{regex: program}`` mapping or
    as a list of ``[regex, program]`` pairs, and must compile.
    """
    model_config = ConfigDict(extra="forbid")

    base: Optional[str] = None
    description: Optional[str] = None
    serial_refurb_patterns: Optional[Union[Dict[str, str], List[Tuple[str, str]]]] = None
    firmware_markers: Optional[List[str]] = None
    oem_markers: Optional[List[str]] = None
    first_party_storage_models: Optional[List[str]] = None
    storage_exempt_models: Optional[List[str]] = None
    first_party_display_vendors: Optional[List[str]] = None
    disabled_rules: Optional[List[str]] = None
    low_battery_cycle_threshold: Optional[int] = Field(None, ge=0)
    high_battery_health_threshold: Optional[float] = Field(None, ge=0)

    @field_validator("serial_refurb_patterns")
    @classmethod
    def compile_patterns(cls, v):
        """Normalize patterns to (regex, program) pairs and check each regex."""
        if v is None:
            return None
        pairs = list(v.items()) if isinstance(v, dict) else list(v)
        for pattern, _ in pairs:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid serial pattern {pattern!r}: {e}")
        return pairs


def profile_from_dict(
    name: str,
    data: Dict,
    profiles: Optional[Dict[str, VendorProfile]] = None,
) -> VendorProfile:
    """
    Build a VendorProfile from a mapping, optionally extending a base profile.

    Args:
        name: Profile name (stored upper-cased)
        data: Profile table; a ``base`` key names a profile in ``profiles``
            whose values are used for any key the table leaves out
        profiles: Registry the base is looked up in (default: built-ins)

    Returns:
        VendorProfile

    Raises:
        ValidationError: If the table has unknown keys, values of the wrong
            shape, or a serial pattern that does not compile
        ProfileNotFoundError: If the base profile is unknown
    """
    table = ProfileTable.model_validate(data)
    base = get_profile(table.base, profiles) if table.base else None
    defaults = base or VendorProfile(name=name.upper(), description=name)

    def pick(key):
        value = getattr(table, key)
        return getattr(defaults, key) if value is None else value

    return VendorProfile(
        name=name.upper(),
        description=pick("description"),
        serial_refurb_patterns=tuple(tuple(pair) for pair in pick("serial_refurb_patterns")),
        firmware_markers=tuple(pick("firmware_markers")),
        oem_markers=tuple(pick("oem_markers")),
        first_party_storage_models=tuple(pick("first_party_storage_models")),
        storage_exempt_models=tuple(pick("storage_exempt_models")),
        first_party_display_vendors=tuple(pick("first_party_display_vendors")),
        disabled_rules=frozenset(pick("disabled_rules")),
        low_battery_cycle_threshold=pick("low_battery_cycle_threshold"),
        high_battery_health_threshold=float(pick("high_battery_health_threshold")),
    )


def load_profiles(
    profiles_path: Path,
    base_profiles: Optional[Dict[str, VendorProfile]] = None,
) -> Dict[str, VendorProfile]:
    """
    Load vendor profiles from a YAML file.

    The file holds a ``vendor_profiles`` mapping of profile name to table.
    Tables are read in file order, so a profile may use an earlier one in
    the same file as its ``base``. Nothing is registered globally: callers
    merge the result into a registry of their own.

    Args:
        profiles_path: Path to the YAML file
        base_profiles: Profiles a ``base`` key may name (default: built-ins)

    Returns:
        Dictionary of the profiles that were loaded

    Raises:
        RulesConfigError: If the file is missing, malformed, or holds an
            invalid profile table
        ProfileNotFoundError: If a table names an unknown base profile
    """
    profiles_path = Path(profiles_path)
    if not profiles_path.exists():
        raise RulesConfigError(str(profiles_path), "File not found")

    with open(profiles_path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RulesConfigError(str(profiles_path), f"Invalid YAML: {e}")

    if not isinstance(config, dict) or not isinstance(config.get("vendor_profiles"), dict):
        raise RulesConfigError(str(profiles_path), "File must contain a 'vendor_profiles' mapping")

    known = dict(VENDOR_PROFILES if base_profiles is None else base_profiles)
    loaded = {}
    for name, data in config["vendor_profiles"].items():
        try:
            profile = profile_from_dict(str(name), data or {}, known)
        except ValidationError as e:
            raise RulesConfigError(str(profiles_path), f"Invalid profile {name}: {e}")
        known[profile.name] = profile
        loaded[profile.name] = profile
        logger.debug(f"Loaded vendor profile {profile.name}")
    return loaded
