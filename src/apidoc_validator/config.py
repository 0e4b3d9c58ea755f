"""Doc-set configuration.

Settings come from an optional ``apidocs.yaml`` at the doc-set root (or
an explicit path), with environment variables taking precedence:

    include_warnings: true
    extensions: [".md"]
    exclude: ["drafts/*"]
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

CONFIG_FILENAME = "apidocs.yaml"
ENV_INCLUDE_WARNINGS = "APIDOCS_INCLUDE_WARNINGS"


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""


class ValidatorConfig(BaseModel):
    include_warnings: bool = False
    extensions: list[str] = [".md"]
    exclude: list[str] = []  # glob patterns matched against doc-set relative paths


def load_config(root: Path, config_path: Path | None = None) -> ValidatorConfig:
    """Load configuration for the doc set rooted at ``root``."""
    path = config_path or root / CONFIG_FILENAME
    data: dict = {}

    if config_path is not None or path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Config {path} must be a mapping")
        data = loaded or {}

    env_warnings = os.getenv(ENV_INCLUDE_WARNINGS)
    if env_warnings is not None:
        data["include_warnings"] = env_warnings.strip().lower() in ("1", "true", "yes", "on")

    try:
        return ValidatorConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
