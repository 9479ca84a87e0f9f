"""
Refurb Inspector - Configuration

Engine and collector settings, loaded from a YAML/JSON file and
overridable through environment variables:
- REFURB_PROFILE: vendor profile name (default: auto from platform)
- REFURB_PROBE_TIMEOUT: per-probe timeout in seconds
- REFURB_MAX_WORKERS: probe worker pool size
"""

import json
import logging
import os
from pathlib import Path
from typing import ClassVar, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from refurb_inspector.utils.exceptions import RulesConfigError

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """Settings for one refurbishment assessment run."""
    profile: Optional[str] = Field(
        None, description="Vendor profile name; None selects by platform"
    )
    rules_file: Optional[Path] = Field(None, description="Custom rules file (YAML/JSON)")
    profiles_file: Optional[Path] = Field(
        None, description="YAML file with additional vendor profiles"
    )
    enable_rules: List[str] = Field(default_factory=list)
    disable_rules: List[str] = Field(default_factory=list)
    probe_timeout_seconds: float = Field(10.0, gt=0)
    max_workers: int = Field(4, ge=1, le=32)

    ENV_VAR_PROFILE: ClassVar[str] = "REFURB_PROFILE"
    ENV_VAR_TIMEOUT: ClassVar[str] = "REFURB_PROBE_TIMEOUT"
    ENV_VAR_WORKERS: ClassVar[str] = "REFURB_MAX_WORKERS"

    def with_env_overrides(self) -> "EngineConfig":
        """
        Apply environment variable overrides.

        Returns:
            New EngineConfig; invalid values are logged and ignored
        """
        updates = {}

        profile = os.environ.get(self.ENV_VAR_PROFILE)
        if profile:
            updates["profile"] = profile

        timeout = os.environ.get(self.ENV_VAR_TIMEOUT)
        if timeout:
            try:
                updates["probe_timeout_seconds"] = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid {self.ENV_VAR_TIMEOUT}={timeout!r}")

        workers = os.environ.get(self.ENV_VAR_WORKERS)
        if workers:
            try:
                updates["max_workers"] = int(workers)
            except ValueError:
                logger.warning(f"Ignoring invalid {self.ENV_VAR_WORKERS}={workers!r}")

        if not updates:
            return self
        try:
            return EngineConfig(**{**self.model_dump(), **updates})
        except ValidationError as e:
            logger.warning(f"Ignoring invalid environment overrides: {e}")
            return self


def load_config(config_path: Optional[Path] = None) -> EngineConfig:
    """
    Load engine configuration.

    Args:
        config_path: Optional YAML or JSON file. Relative rule/profile
            paths inside it are resolved against the file's directory.

    Returns:
        EngineConfig with environment overrides applied

    Raises:
        RulesConfigError: If the file is missing or invalid
    """
    if config_path is None:
        return EngineConfig().with_env_overrides()

    config_path = Path(config_path)
    if not config_path.exists():
        raise RulesConfigError(str(config_path), "File not found")

    suffix = config_path.suffix.lower()
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise RulesConfigError(str(config_path), f"Unsupported format: {suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise RulesConfigError(str(config_path), f"Parse error: {e}")

    if not isinstance(data, dict):
        raise RulesConfigError(str(config_path), "Configuration must be a mapping")

    for key in ("rules_file", "profiles_file"):
        if data.get(key):
            path = Path(data[key])
            if not path.is_absolute():
                data[key] = config_path.parent / path

    try:
        config = EngineConfig(**data)
    except ValidationError as e:
        raise RulesConfigError(str(config_path), f"Invalid configuration: {e}")

    return config.with_env_overrides()
