"""
Windows probes.

Sources facts through PowerShell CIM/WMI queries and the registry.
"""

from typing import Optional

from refurb_inspector.models import (
    BatteryFacts,
    BatteryInfo,
    StorageDescriptor,
    StorageHealth,
)
from refurb_inspector.probes.base import PlatformProbes
from refurb_inspector.probes.parsing import (
    first_nonempty_line,
    parse_windows_battery_facts,
    parse_windows_battery_info,
    parse_windows_physical_disk,
    parse_windows_storage_health,
)

OEM_INFORMATION_KEY = r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\OEMInformation"

BATTERY_QUERY = (
    "Get-CimInstance Win32_Battery | Select-Object DesignCapacity,FullChargeCapacity,"
    "EstimatedChargeRemaining,BatteryStatus | ConvertTo-Json"
)
PHYSICAL_DISK_QUERY = (
    "Get-PhysicalDisk | Select-Object FriendlyName,HealthStatus,BusType | ConvertTo-Json"
)


class WindowsProbes(PlatformProbes):
    """Probe set for Windows."""

    platform_name = "windows"

    def powershell(self, command: str, probe: str) -> str:
        """Run a PowerShell command without loading the user profile."""
        return self.run(["powershell", "-NoProfile", "-Command", command], probe)

    def probe_serial_number(self) -> Optional[str]:
        output = self.powershell("(Get-CimInstance Win32_BIOS).SerialNumber", "serial_number")
        return first_nonempty_line(output)

    def probe_firmware_dump(self) -> Optional[str]:
        output = self.powershell(
            "Get-CimInstance Win32_BIOS | Select-Object Manufacturer,SerialNumber,"
            "ReleaseDate,SMBIOSBIOSVersion | ConvertTo-Json",
            "firmware_dump",
        )
        return output or None

    def probe_oem_info(self) -> Optional[str]:
        output = self.powershell(
            f"Get-ItemProperty '{OEM_INFORMATION_KEY}' | ConvertTo-Json", "oem_info"
        )
        return output or None

    def probe_storage(self) -> Optional[StorageDescriptor]:
        return parse_windows_physical_disk(self.powershell(PHYSICAL_DISK_QUERY, "storage"))

    def probe_battery(self) -> Optional[BatteryFacts]:
        return parse_windows_battery_facts(self.powershell(BATTERY_QUERY, "battery"))

    def probe_os_install_date(self) -> Optional[str]:
        output = self.powershell(
            "(Get-CimInstance Win32_OperatingSystem).InstallDate.ToString('o')",
            "os_install_date",
        )
        return first_nonempty_line(output)

    def battery_info(self) -> Optional[BatteryInfo]:
        return parse_windows_battery_info(self.powershell(BATTERY_QUERY, "battery_info"))

    def storage_health(self) -> Optional[StorageHealth]:
        return parse_windows_storage_health(self.powershell(PHYSICAL_DISK_QUERY, "storage_health"))
