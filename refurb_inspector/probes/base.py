"""
Platform probe interface.

A PlatformProbes implementation knows how to source each fact on one
operating system. Probes raise ProbeError when a fact cannot be
determined; the fact collector turns that into an absent fact.
"""

import logging
import subprocess
from abc import ABC
from typing import Any, List, Optional, Sequence

from refurb_inspector.models import (
    BatteryFacts,
    BatteryInfo,
    DisplayDescriptor,
    EnrollmentStatus,
    StorageDescriptor,
    StorageHealth,
)
from refurb_inspector.utils.exceptions import ProbeError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT = 10.0


def run_command(
    args: Sequence[str],
    probe: str,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> str:
    """
    Run an OS utility and return its standard output.

    Args:
        args: Command and arguments
        probe: Name of the probe, used in error reports
        timeout: Seconds before the command is killed

    Returns:
        Decoded standard output

    Raises:
        ProbeError: If the utility is missing, times out, or exits non-zero
    """
    logger.debug(f"Probe {probe}: running {' '.join(args)}")
    try:
        completed = subprocess.run(
            list(args),
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise ProbeError(probe, f"Utility not found: {args[0]}", cause=e)
    except subprocess.TimeoutExpired as e:
        raise ProbeError(probe, f"Timed out after {timeout}s", cause=e)
    except OSError as e:
        raise ProbeError(probe, f"Could not run {args[0]}", cause=e)

    if completed.returncode != 0:
        raise ProbeError(probe, f"{args[0]} exited with status {completed.returncode}")

    return completed.stdout.decode("utf-8", errors="replace")


class PlatformProbes(ABC):
    """
    Sources facts on one platform.

    Every ``probe_<fact>`` method returns the fact or None; subclasses
    override the ones their platform can answer. The defaults report every
    fact as absent.
    """

    platform_name: str = "unknown"

    # Fact names in the order they are submitted to the collector
    FACT_PROBES = (
        "serial_number",
        "firmware_dump",
        "oem_info",
        "enrollment",
        "storage",
        "displays",
        "battery",
        "os_install_date",
    )

    def __init__(self, command_timeout: float = DEFAULT_COMMAND_TIMEOUT):
        self.command_timeout = command_timeout

    def run(self, args: Sequence[str], probe: str) -> str:
        """Run an OS utility with this probe set's timeout."""
        return run_command(args, probe, timeout=self.command_timeout)

    def probe_names(self) -> List[str]:
        """Names of the facts this probe set sources."""
        return list(self.FACT_PROBES)

    def run_probe(self, name: str) -> Any:
        """Dispatch to ``probe_<name>``."""
        probe = getattr(self, f"probe_{name}", None)
        if probe is None:
            raise ProbeError(name, "No such probe")
        return probe()

    def probe_serial_number(self) -> Optional[str]:
        return None

    def probe_firmware_dump(self) -> Optional[str]:
        return None

    def probe_oem_info(self) -> Optional[str]:
        return None

    def probe_enrollment(self) -> Optional[EnrollmentStatus]:
        return None

    def probe_storage(self) -> Optional[StorageDescriptor]:
        return None

    def probe_displays(self) -> List[DisplayDescriptor]:
        return []

    def probe_battery(self) -> Optional[BatteryFacts]:
        return None

    def probe_os_install_date(self) -> Optional[str]:
        return None

    # Pass-through telemetry

    def battery_info(self) -> Optional[BatteryInfo]:
        """Battery health readout, or None when there is no battery."""
        return None

    def storage_health(self) -> Optional[StorageHealth]:
        """Storage health readout."""
        return None


class NullProbes(PlatformProbes):
    """Probe set for platforms without refurbishment signals; every fact is absent."""

    def __init__(self, platform_name: str = "unknown", command_timeout: float = DEFAULT_COMMAND_TIMEOUT):
        super().__init__(command_timeout)
        self.platform_name = platform_name
