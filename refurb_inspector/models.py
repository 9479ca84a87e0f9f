"""
Pydantic data models for refurbishment evidence analysis.

This module defines the fact bundle handed to the evidence engine by the
probe layer, the indicators emitted by rules, and the final report shape
returned to the caller. Field names of the report models are the wire
contract consumed by UI layers and must stay stable.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Indicator severity, ordered info < warning < critical."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class ConfidenceTier(str, Enum):
    """Engine's self-assessed certainty in its verdict."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReplacedPart(str, Enum):
    """Subsystem tags recorded when a component looks non-original."""
    STORAGE = "storage"
    DISPLAY = "display"


# ---------------------------------------------------------------------------
# Facts (engine input)
# ---------------------------------------------------------------------------


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EnrollmentStatus(BaseModel):
    """Device-management enrollment flags reported by the OS."""
    model_config = ConfigDict(frozen=True)

    dep_enrolled: Optional[bool] = Field(
        None, description="Enrolled through a device-enrollment program (DEP/ABM/Autopilot)"
    )
    mdm_enrolled: Optional[bool] = Field(
        None, description="Enrolled in a mobile-device-management service"
    )


class StorageDescriptor(BaseModel):
    """Identity of the primary storage device."""
    model_config = ConfigDict(frozen=True)

    model: Optional[str] = Field(None, description="Device / media model name")
    internal: Optional[bool] = Field(None, description="Whether the device is internally connected")
    smart_status: Optional[str] = Field(None, description="SMART status as reported by the OS")


class DisplayDescriptor(BaseModel):
    """Identity of one attached display."""
    model_config = ConfigDict(frozen=True)

    vendor: Optional[str] = Field(None, description="Display vendor string")
    name: Optional[str] = Field(None, description="Display product name")
    connection_type: Optional[str] = Field(
        None, description="Connection type (e.g. 'spdisplays_internal', 'Internal')"
    )

    @property
    def is_internal(self) -> bool:
        """True when the connection type names an internal panel."""
        return bool(self.connection_type) and "internal" in self.connection_type.lower()


class BatteryFacts(BaseModel):
    """Battery observations used by the evidence rules."""
    model_config = ConfigDict(frozen=True)

    cycle_count: Optional[int] = Field(None, ge=0)
    design_capacity: Optional[int] = Field(None, ge=0)
    full_charge_capacity: Optional[int] = Field(None, ge=0)
    serial: Optional[str] = None
    manufacture_date: Optional[str] = None

    @field_validator("serial", "manufacture_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Collapse empty and whitespace-only strings to an absent fact."""
        return _blank_to_none(v)

    @property
    def health_percent(self) -> Optional[float]:
        """Full-charge capacity as a percentage of design capacity, if computable."""
        if not self.design_capacity or self.full_charge_capacity is None:
            return None
        return (self.full_charge_capacity / self.design_capacity) * 100.0


class Facts(BaseModel):
    """Immutable bundle of possibly-missing observations for one assessment.

    Every field is optional: a probe that could not determine a value leaves
    it as None (or an empty list for displays) and the engine simply skips
    the rules that depend on it.
    """
    model_config = ConfigDict(frozen=True)

    platform: Optional[str] = Field(None, description="Platform the facts were collected on")
    serial_number: Optional[str] = None
    firmware_dump: Optional[str] = Field(None, description="Raw firmware / BIOS / IORegistry text")
    oem_info: Optional[str] = Field(None, description="Raw OEM information text")
    enrollment: Optional[EnrollmentStatus] = None
    storage: Optional[StorageDescriptor] = None
    displays: List[DisplayDescriptor] = Field(default_factory=list)
    battery: Optional[BatteryFacts] = None
    os_install_date: Optional[str] = None
    storage_first_use_date: Optional[str] = None

    @field_validator("serial_number", "os_install_date", "storage_first_use_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Collapse empty and whitespace-only strings to an absent fact."""
        return _blank_to_none(v)


# ---------------------------------------------------------------------------
# Report (engine output / wire contract)
# ---------------------------------------------------------------------------


class Indicator(BaseModel):
    """One rule's fired verdict. Description is a code, never prose."""
    model_config = ConfigDict(frozen=True)

    name: str
    detected: bool = True
    description: str
    severity: Severity


class RefurbishmentDetails(BaseModel):
    """Date-bearing and contextual facts copied into the report."""
    model_config = ConfigDict(frozen=True)

    serial_manufacture_date: Optional[str] = None
    os_install_date: Optional[str] = None
    battery_manufacture_date: Optional[str] = None
    storage_first_use_date: Optional[str] = None
    date_mismatch: bool = False
    refurb_program: Optional[str] = None


class RefurbishmentReport(BaseModel):
    """Terminal aggregate returned by the report assembler."""
    model_config = ConfigDict(frozen=True)

    is_refurbished: bool
    confidence: ConfidenceTier
    indicators: List[Indicator] = Field(default_factory=list)
    replaced_parts: List[str] = Field(default_factory=list)
    details: RefurbishmentDetails = Field(default_factory=RefurbishmentDetails)


# ---------------------------------------------------------------------------
# Hardware telemetry (pass-through, not evidence-scored)
# ---------------------------------------------------------------------------


class BatteryInfo(BaseModel):
    """Battery health readout."""
    health: float = Field(..., description="Max capacity as a percentage of design capacity")
    cycle_count: int = Field(0, ge=0)
    design_capacity: int = Field(0, ge=0)
    max_capacity: int = Field(0, ge=0)
    current_capacity: int = Field(0, ge=0)
    is_charging: bool = False
    temperature: Optional[float] = Field(None, description="Battery temperature in Celsius")


class StorageHealth(BaseModel):
    """Storage health readout."""
    model: str = "Unknown"
    smart_status: str = "Unknown"
    power_on_hours: Optional[int] = Field(None, ge=0)
    temperature: Optional[float] = None


class HardwareTelemetry(BaseModel):
    """Pass-through health telemetry shown next to the refurbishment report."""
    platform: Optional[str] = None
    battery: Optional[BatteryInfo] = None
    storage: Optional[StorageHealth] = None
