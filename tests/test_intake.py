"""Tests for facts file intake."""

import json

import pytest

from refurb_inspector.core.intake import load_facts, save_facts
from refurb_inspector.models import Facts
from refurb_inspector.utils.exceptions import FactsLoadError


class TestLoadFacts:
    """Tests for load_facts."""

    def test_load_json(self, facts_file, refurbished_mac_facts):
        """Test loading a saved JSON bundle gives equal facts."""
        assert load_facts(facts_file) == refurbished_mac_facts

    def test_load_yaml(self, temp_dir):
        """Test loading a hand-written YAML bundle."""
        path = temp_dir / "facts.yaml"
        path.write_text(
            "platform: windows\n"
            "serial_number: 5CG1234XYZ\n"
            "storage:\n"
            "  model: Samsung PM9A1\n"
            "  internal: true\n"
        )
        facts = load_facts(path)
        assert facts.platform == "windows"
        assert facts.storage.model == "Samsung PM9A1"

    def test_empty_file(self, temp_dir):
        """Test an empty YAML file gives empty facts."""
        path = temp_dir / "facts.yml"
        path.write_text("")
        assert load_facts(path) == Facts()

    def test_missing_file(self, temp_dir):
        """Test a missing file raises FactsLoadError."""
        with pytest.raises(FactsLoadError, match="File not found"):
            load_facts(temp_dir / "missing.json")

    def test_unsupported_format(self, temp_dir):
        """Test an unsupported extension raises FactsLoadError."""
        path = temp_dir / "facts.xml"
        path.write_text("<facts/>")
        with pytest.raises(FactsLoadError, match="Unsupported format"):
            load_facts(path)

    def test_invalid_json(self, temp_dir):
        """Test malformed JSON raises FactsLoadError."""
        path = temp_dir / "facts.json"
        path.write_text("{oops")
        with pytest.raises(FactsLoadError, match="Parse error"):
            load_facts(path)

    def test_not_a_mapping(self, temp_dir):
        """Test a JSON list is rejected."""
        path = temp_dir / "facts.json"
        path.write_text("[1, 2]")
        with pytest.raises(FactsLoadError, match="mapping"):
            load_facts(path)

    def test_invalid_facts(self, temp_dir):
        """Test values failing validation raise FactsLoadError."""
        path = temp_dir / "facts.json"
        path.write_text(json.dumps({"battery": {"cycle_count": -5}}))
        with pytest.raises(FactsLoadError, match="Invalid facts"):
            load_facts(path)


class TestSaveFacts:
    """Tests for save_facts."""

    def test_save_creates_parents(self, temp_dir, original_mac_facts):
        """Test saving into a new directory."""
        path = save_facts(original_mac_facts, temp_dir / "out" / "facts.json")
        assert path.exists()
        data = json.loads(path.read_text())
        assert data["serial_number"] == "C02XK0AAJGH5"
        assert data["storage"]["internal"] is True
