"""
Settings loader — reads provisioner.yml into ProvisionerSettings.

The file is optional: without one every setting takes its default.
It reads YAML, validates against the Pydantic schema, and returns a
typed settings object.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Default settings filename
SETTINGS_FILE = "provisioner.yml"

# Env var that names an explicit settings file
SETTINGS_ENV = "OCP_CONFIG"

# Minimum supported Node.js major version
MIN_RUNTIME_MAJOR = 22


class ConfigError(Exception):
    """Raised when provisioner settings are invalid or unreadable."""


class ProvisionerSettings(BaseModel):
    """Tunable knobs of the provisioner."""

    min_runtime_major: int = Field(default=MIN_RUNTIME_MAJOR, ge=1)
    runtime_command: str = "node"
    tool_command: str = "openclaw"
    tool_package: str = "openclaw@latest"
    config_dir: str | None = None
    default_config: dict[str, str] = Field(
        default_factory=lambda: {"gateway.mode": "local"},
    )
    script_dir: str | None = None
    timeout: float | None = None

    def resolved_config_dir(self) -> Path:
        """Configured config root, or the platform default."""
        from provisioner.core.context import get_config_dir

        if self.config_dir:
            return Path(self.config_dir).expanduser()
        return get_config_dir()


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for provisioner.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to provisioner.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> ProvisionerSettings:
    """Load and validate provisioner settings.

    Args:
        path: Explicit path to provisioner.yml. If None, uses
            ``$OCP_CONFIG`` or searches upward; no file means defaults.

    Returns:
        Validated ProvisionerSettings.

    Raises:
        ConfigError: If an explicit file is missing, or a file is invalid.
    """
    if path is None and os.environ.get(SETTINGS_ENV):
        path = Path(os.environ[SETTINGS_ENV])
    elif path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found, using defaults", SETTINGS_FILE)
            return ProvisionerSettings()

    if not path.is_file():
        raise ConfigError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ProvisionerSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "provisioner" key or be flat
    section = data.get("provisioner", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'provisioner' to be a mapping in {path}")

    try:
        settings = ProvisionerSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid provisioner settings: {e}") from e

    logger.info("Loaded settings from %s (node >= %d)", path, settings.min_runtime_major)
    return settings
