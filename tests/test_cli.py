"""Tests for CLI module."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from refurb_inspector.cli import main, print_status
from refurb_inspector.probes import NullProbes


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove configuration variables from the environment."""
    for name in ("REFURB_PROFILE", "REFURB_PROBE_TIMEOUT", "REFURB_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def null_probes():
    """Replace platform probes with a probe set that finds nothing."""
    with patch("refurb_inspector.cli.select_probes", return_value=NullProbes("linux")) as mock:
        yield mock


class TestCLIBasic:
    """Basic CLI tests."""

    def test_cli_version(self, runner):
        """Test that CLI shows version."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "refurb-inspector" in result.output

    def test_cli_help(self, runner):
        """Test that CLI shows help."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Refurb Inspector" in result.output

    def test_cli_info_command(self, runner):
        """Test info command."""
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert "Refurb Inspector" in result.output
        assert "APPLE" in result.output
        assert "macOS" in result.output

    def test_print_status_function(self):
        """Test print_status helper function."""
        # Just ensure it doesn't raise
        print_status("[OK]", "Test message")
        print_status("[FAIL]", "Error message")
        print_status("[WARN]", "Warning message")
        print_status("[INFO]", "Info message")
        print_status("[ERROR]", "Error message")
        print_status("[UNKNOWN]", "Message with [brackets]")


class TestAssessCommand:
    """Tests for assess command."""

    def test_assess_json(self, runner, facts_file):
        """Test assessing a facts file with JSON output."""
        result = runner.invoke(main, ["assess", str(facts_file), "-f", "json"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["is_refurbished"] is True
        assert data["confidence"] == "high"
        assert data["replaced_parts"] == ["storage"]
        assert data["details"]["refurb_program"] == "Apple Certified Refurbished"

    def test_assess_table(self, runner, facts_file):
        """Test the table report."""
        result = runner.invoke(main, ["assess", str(facts_file)])
        assert result.exit_code == 0
        assert "REFURBISHED" in result.output
        assert "third_party_storage" in result.output

    def test_assess_output_file(self, runner, facts_file, temp_dir):
        """Test saving the report to a file."""
        output = temp_dir / "report.json"
        result = runner.invoke(main, ["assess", str(facts_file), "-o", str(output)])

        assert result.exit_code == 0
        assert "Report saved" in result.output
        assert json.loads(output.read_text())["confidence"] == "high"

    def test_assess_pinned_profile(self, runner, facts_file):
        """Test --profile overrides the platform profile."""
        result = runner.invoke(
            main, ["assess", str(facts_file), "-f", "json", "--profile", "generic"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["replaced_parts"] == []
        assert data["details"]["refurb_program"] is None

    def test_assess_custom_rules(self, runner, temp_dir, critical_rules_file):
        """Test --rules adds custom rules."""
        facts = temp_dir / "facts.yaml"
        facts.write_text("firmware_dump: 'state: REFLASHED'\n")

        result = runner.invoke(
            main, ["assess", str(facts), "-f", "json", "--rules", str(critical_rules_file)]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["confidence"] == "high"

    def test_assess_config_file(self, runner, facts_file, temp_dir):
        """Test --config applies rule toggles."""
        config = temp_dir / "refurb.yaml"
        config.write_text("disable_rules: [REFURB-001, REFURB-004, REFURB-005]\n")

        result = runner.invoke(
            main, ["assess", str(facts_file), "-f", "json", "--config", str(config)]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["indicators"] == []
        assert data["is_refurbished"] is False

    def test_assess_missing_file(self, runner, temp_dir):
        """Test a missing facts file exits with status 1."""
        result = runner.invoke(main, ["assess", str(temp_dir / "missing.json")])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_assess_invalid_file(self, runner, temp_dir):
        """Test an invalid facts file exits with status 1."""
        facts = temp_dir / "facts.json"
        facts.write_text("{broken")
        result = runner.invoke(main, ["assess", str(facts)])
        assert result.exit_code == 1
        assert "Failed to load facts" in result.output

    def test_assess_unknown_profile(self, runner, facts_file):
        """Test an unknown profile exits with status 1."""
        result = runner.invoke(main, ["assess", str(facts_file), "--profile", "amiga"])
        assert result.exit_code == 1
        assert "Unknown vendor profile" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_check_json(self, runner, null_probes):
        """Test checking a machine where no probe finds anything."""
        result = runner.invoke(main, ["check", "-f", "json"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["is_refurbished"] is False
        assert data["confidence"] == "low"
        null_probes.assert_called_once()

    def test_check_table(self, runner, null_probes):
        """Test the table report for a clean machine."""
        result = runner.invoke(main, ["check"])
        assert result.exit_code == 0
        assert "ORIGINAL" in result.output
        assert "No refurbishment indicators detected" in result.output


class TestCollectCommand:
    """Tests for the collect command."""

    def test_collect_stdout(self, runner, null_probes):
        """Test facts are printed as JSON."""
        result = runner.invoke(main, ["collect"])
        assert result.exit_code == 0
        assert json.loads(result.output)["platform"] == "linux"

    def test_collect_to_file(self, runner, null_probes, temp_dir):
        """Test facts are saved for a later assess run."""
        output = temp_dir / "facts.json"
        result = runner.invoke(main, ["collect", "-o", str(output)])

        assert result.exit_code == 0
        assert "Facts saved" in result.output

        result = runner.invoke(main, ["assess", str(output), "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["is_refurbished"] is False


class TestHardwareCommand:
    """Tests for the hardware command."""

    def test_hardware_json(self, runner, null_probes):
        """Test telemetry JSON for a machine without readouts."""
        result = runner.invoke(main, ["hardware", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {"platform": "linux", "battery": None, "storage": None}

    def test_hardware_table(self, runner, null_probes):
        """Test the telemetry tables."""
        result = runner.invoke(main, ["hardware"])
        assert result.exit_code == 0
        assert "Not available" in result.output


class TestListRulesCommand:
    """Tests for list-rules command."""

    def test_list_rules_table(self, runner):
        """Test the rules table."""
        result = runner.invoke(main, ["list-rules"])
        assert result.exit_code == 0
        assert "REFURB-001" in result.output
        assert "Total: 8 built-in rules" in result.output

    def test_list_rules_json(self, runner):
        """Test JSON rule listing with profile toggles."""
        result = runner.invoke(main, ["list-rules", "--format", "json", "--profile", "apple"])
        assert result.exit_code == 0

        rules = {r["id"]: r for r in json.loads(result.output)}
        assert len(rules) == 8
        assert rules["REFURB-005"]["active"] is True
        assert rules["REFURB-007"]["active"] is False
        assert rules["REFURB-008"]["enabled"] is True

    def test_list_rules_unknown_profile(self, runner):
        """Test an unknown profile exits with status 1."""
        result = runner.invoke(main, ["list-rules", "--profile", "amiga"])
        assert result.exit_code == 1
