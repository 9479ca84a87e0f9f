"""Tests for platform probes."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from refurb_inspector.probes import (
    MacOSProbes,
    NullProbes,
    WindowsProbes,
    run_command,
    select_probes,
)
from refurb_inspector.utils.exceptions import ProbeError


def completed(stdout: bytes = b"", returncode: int = 0):
    result = MagicMock()
    result.stdout = stdout
    result.returncode = returncode
    return result


class TestRunCommand:
    """Tests for the OS utility runner."""

    @patch("refurb_inspector.probes.base.subprocess.run")
    def test_returns_stdout(self, mock_run):
        """Test standard output is decoded."""
        mock_run.return_value = completed("Verified ✓\n".encode("utf-8"))

        assert run_command(["diskutil", "info", "disk0"], "storage", timeout=3) == "Verified ✓\n"
        args, kwargs = mock_run.call_args
        assert args[0] == ["diskutil", "info", "disk0"]
        assert kwargs["timeout"] == 3
        assert kwargs["capture_output"] is True

    @patch("refurb_inspector.probes.base.subprocess.run")
    def test_invalid_utf8_replaced(self, mock_run):
        """Test undecodable bytes do not raise."""
        mock_run.return_value = completed(b"model \xff\n")
        assert run_command(["ioreg"], "battery").startswith("model ")

    @patch("refurb_inspector.probes.base.subprocess.run")
    def test_missing_utility(self, mock_run):
        """Test a missing utility raises ProbeError."""
        mock_run.side_effect = FileNotFoundError("ioreg")
        with pytest.raises(ProbeError, match="Utility not found: ioreg") as exc_info:
            run_command(["ioreg", "-l"], "firmware_dump")
        assert exc_info.value.probe == "firmware_dump"

    @patch("refurb_inspector.probes.base.subprocess.run")
    def test_timeout(self, mock_run):
        """Test a hung utility raises ProbeError."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="profiles", timeout=1)
        with pytest.raises(ProbeError, match="Timed out"):
            run_command(["profiles", "status"], "enrollment", timeout=1)

    @patch("refurb_inspector.probes.base.subprocess.run")
    def test_nonzero_exit(self, mock_run):
        """Test a failing utility raises ProbeError."""
        mock_run.return_value = completed(b"", returncode=1)
        with pytest.raises(ProbeError, match="exited with status 1"):
            run_command(["stat", "-f", "%SB", "/nope"], "os_install_date")


class TestSelectProbes:
    """Tests for probe set selection."""

    def test_darwin(self):
        """Test macOS selects MacOSProbes."""
        probes = select_probes("Darwin", command_timeout=2.0)
        assert isinstance(probes, MacOSProbes)
        assert probes.platform_name == "macos"
        assert probes.command_timeout == 2.0

    def test_windows(self):
        """Test Windows selects WindowsProbes."""
        assert isinstance(select_probes("Windows"), WindowsProbes)

    def test_other(self):
        """Test other systems get NullProbes named after the system."""
        probes = select_probes("Linux")
        assert isinstance(probes, NullProbes)
        assert probes.platform_name == "linux"

    @patch("refurb_inspector.probes.platform.system", return_value="Darwin")
    def test_detects_current_platform(self, mock_system):
        """Test the running platform is used by default."""
        assert isinstance(select_probes(), MacOSProbes)


class TestPlatformProbes:
    """Tests for the probe interface defaults."""

    def test_null_probes_absent(self):
        """Test every fact of NullProbes is absent."""
        probes = NullProbes("linux")
        for name in probes.probe_names():
            value = probes.run_probe(name)
            assert value is None or value == []
        assert probes.battery_info() is None
        assert probes.storage_health() is None

    def test_unknown_probe(self):
        """Test dispatching to an unknown fact raises ProbeError."""
        with pytest.raises(ProbeError, match="No such probe"):
            NullProbes().run_probe("cpu_model")


class TestMacOSProbes:
    """Tests for the macOS probe set with canned utility output."""

    @pytest.fixture
    def probes(self):
        probes = MacOSProbes(command_timeout=1.0)
        probes.run = MagicMock()
        return probes

    def test_serial_number(self, probes):
        """Test the serial is read from IOPlatformExpertDevice."""
        probes.run.return_value = '    "IOPlatformSerialNumber" = "C02XK0AAJGH5"\n'
        assert probes.probe_serial_number() == "C02XK0AAJGH5"
        probes.run.assert_called_once_with(
            ["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"], "serial_number"
        )

    def test_enrollment(self, probes):
        """Test enrollment is read from profiles."""
        probes.run.return_value = "Enrolled via DEP: Yes\nMDM enrollment: Yes\n"
        enrollment = probes.probe_enrollment()
        assert enrollment.dep_enrolled is True
        assert enrollment.mdm_enrolled is True

    def test_os_install_date(self, probes):
        """Test the setup-done marker birth time is the install date."""
        probes.run.return_value = "Jun 30 10:12:44 2019\n"
        assert probes.probe_os_install_date() == "Jun 30 10:12:44 2019"
        args, _ = probes.run.call_args
        assert args[0][-1] == "/var/db/.AppleSetupDone"

    def test_empty_firmware_dump_absent(self, probes):
        """Test empty ioreg output is an absent fact."""
        probes.run.return_value = ""
        assert probes.probe_firmware_dump() is None

    def test_storage_health(self, probes):
        """Test storage health combines system_profiler and diskutil."""
        probes.run.side_effect = [
            '{"SPStorageDataType": [{"physical_drive": {"device_name": "APPLE SSD AP0512Q"}}]}',
            "   Device / Media Name:  APPLE SSD AP0512Q\n   SMART Status:  Verified\n",
        ]
        health = probes.storage_health()
        assert health.model == "APPLE SSD AP0512Q"
        assert health.smart_status == "Verified"

    def test_probe_error_propagates(self, probes):
        """Test utility failures surface as ProbeError for the collector."""
        probes.run.side_effect = ProbeError("displays", "system_profiler exited with status 1")
        with pytest.raises(ProbeError):
            probes.probe_displays()


class TestWindowsProbes:
    """Tests for the Windows probe set with canned PowerShell output."""

    @pytest.fixture
    def probes(self):
        probes = WindowsProbes(command_timeout=1.0)
        probes.run = MagicMock()
        return probes

    def test_powershell_invocation(self, probes):
        """Test commands run without the user profile."""
        probes.run.return_value = "5CG1234XYZ\r\n"
        assert probes.probe_serial_number() == "5CG1234XYZ"
        args, _ = probes.run.call_args
        assert args[0][:3] == ["powershell", "-NoProfile", "-Command"]
        assert "Win32_BIOS" in args[0][3]

    def test_oem_info_raw(self, probes):
        """Test OEM information is passed through as raw text."""
        probes.run.return_value = '{"Manufacturer": "Dell Refurbished"}'
        assert probes.probe_oem_info() == '{"Manufacturer": "Dell Refurbished"}'

    def test_storage(self, probes):
        """Test the physical disk query."""
        probes.run.return_value = '{"FriendlyName": "WDC PC SN730", "BusType": "NVMe"}'
        storage = probes.probe_storage()
        assert storage.model == "WDC PC SN730"
        assert storage.internal is True

    def test_no_enrollment_or_displays(self, probes):
        """Test facts Windows does not source stay absent."""
        assert probes.probe_enrollment() is None
        assert probes.probe_displays() == []
        probes.run.assert_not_called()
