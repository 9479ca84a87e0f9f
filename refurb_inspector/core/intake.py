"""
Facts intake module for refurb inspector.

Loads previously captured fact bundles from JSON or YAML files and saves
collected bundles for later offline assessment.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from refurb_inspector.models import Facts
from refurb_inspector.utils.exceptions import FactsLoadError


def load_facts(facts_path: Path) -> Facts:
    """
    Load a fact bundle from disk.

    Args:
        facts_path: Path to a .json, .yaml or .yml file

    Returns:
        Validated Facts

    Raises:
        FactsLoadError: If the file is missing, of an unsupported format,
            unparseable, or fails validation
    """
    facts_path = Path(facts_path)
    if not facts_path.exists():
        raise FactsLoadError(str(facts_path), "File not found")

    suffix = facts_path.suffix.lower()
    try:
        with open(facts_path, "r", encoding="utf-8") as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise FactsLoadError(str(facts_path), f"Unsupported format: {suffix}")
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FactsLoadError(str(facts_path), f"Parse error: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FactsLoadError(str(facts_path), "Facts must be a mapping")

    try:
        return Facts(**data)
    except ValidationError as e:
        raise FactsLoadError(str(facts_path), f"Invalid facts: {e}")


def save_facts(facts: Facts, output_path: Path) -> Path:
    """
    Save a fact bundle as JSON.

    Args:
        facts: Facts to save
        output_path: Destination file path

    Returns:
        Path to the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(facts.model_dump_json(indent=2))
    return output_path
