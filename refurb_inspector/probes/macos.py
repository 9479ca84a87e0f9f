"""
macOS probes.

Sources facts from ioreg, diskutil, system_profiler, profiles and stat.
"""

from typing import List, Optional

from refurb_inspector.models import (
    BatteryFacts,
    BatteryInfo,
    DisplayDescriptor,
    EnrollmentStatus,
    StorageDescriptor,
    StorageHealth,
)
from refurb_inspector.probes.base import PlatformProbes
from refurb_inspector.probes.parsing import (
    first_nonempty_line,
    parse_diskutil_info,
    parse_ioreg_battery_facts,
    parse_ioreg_battery_info,
    parse_ioreg_serial,
    parse_profiles_enrollment,
    parse_sp_displays,
    parse_sp_storage_model,
)

SETUP_DONE_MARKER = "/var/db/.AppleSetupDone"
SMART_BATTERY_COMMAND = ["ioreg", "-r", "-c", "AppleSmartBattery", "-w0"]


class MacOSProbes(PlatformProbes):
    """Probe set for macOS."""

    platform_name = "macos"

    def probe_serial_number(self) -> Optional[str]:
        output = self.run(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"], "serial_number")
        return parse_ioreg_serial(output)

    def probe_firmware_dump(self) -> Optional[str]:
        return self.run(["ioreg", "-l"], "firmware_dump") or None

    def probe_enrollment(self) -> Optional[EnrollmentStatus]:
        output = self.run(["profiles", "status", "-type", "enrollment"], "enrollment")
        return parse_profiles_enrollment(output)

    def probe_storage(self) -> Optional[StorageDescriptor]:
        return parse_diskutil_info(self.run(["diskutil", "info", "disk0"], "storage"))

    def probe_displays(self) -> List[DisplayDescriptor]:
        output = self.run(["system_profiler", "SPDisplaysDataType", "-json"], "displays")
        return parse_sp_displays(output)

    def probe_battery(self) -> Optional[BatteryFacts]:
        return parse_ioreg_battery_facts(self.run(SMART_BATTERY_COMMAND, "battery"))

    def probe_os_install_date(self) -> Optional[str]:
        output = self.run(["stat", "-f", "%SB", SETUP_DONE_MARKER], "os_install_date")
        return first_nonempty_line(output)

    def battery_info(self) -> Optional[BatteryInfo]:
        return parse_ioreg_battery_info(self.run(SMART_BATTERY_COMMAND, "battery_info"))

    def storage_health(self) -> Optional[StorageHealth]:
        model = parse_sp_storage_model(
            self.run(["system_profiler", "SPStorageDataType", "-json"], "storage_health")
        )
        descriptor = self.probe_storage()
        smart = descriptor.smart_status if descriptor else None
        return StorageHealth(model=model or "Unknown", smart_status=smart or "Unknown")
