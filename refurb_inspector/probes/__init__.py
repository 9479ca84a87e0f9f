"""Platform probes sourcing raw facts for the evidence engine.

One probe set per operating system behind the common PlatformProbes
interface, selected once at startup from the detected platform.
"""

import platform
from typing import Optional

from refurb_inspector.probes.base import (
    DEFAULT_COMMAND_TIMEOUT,
    NullProbes,
    PlatformProbes,
    run_command,
)
from refurb_inspector.probes.macos import MacOSProbes
from refurb_inspector.probes.windows import WindowsProbes


def select_probes(
    system: Optional[str] = None,
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> PlatformProbes:
    """Select the probe set for a platform.

    Args:
        system: Value of ``platform.system()`` (default: this machine)
        command_timeout: Seconds before any single OS utility is killed

    Returns:
        PlatformProbes for the platform; NullProbes when unsupported
    """
    system = system or platform.system()
    if system == "Darwin":
        return MacOSProbes(command_timeout)
    if system == "Windows":
        return WindowsProbes(command_timeout)
    return NullProbes(system.lower() or "unknown", command_timeout)


__all__ = [
    "PlatformProbes",
    "MacOSProbes",
    "WindowsProbes",
    "NullProbes",
    "run_command",
    "select_probes",
]
