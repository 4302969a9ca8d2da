"""
Host context — the platform-utilities collaborator.

Supplies the two things the provisioner consumes from outside: the
host OS identifier and the OpenClaw configuration root.  Entry points
may override the OS once at startup (``main.py --os``) so a front-end
can drive the provisioner for a platform it already knows.

Design notes:
    - Module-level singleton (not a class), like any process-wide
      setting that is written once and read everywhere.
    - Reads are safe from any thread; nothing here is mutated after
      startup.
"""

from __future__ import annotations

import platform
from pathlib import Path
from typing import Optional

from provisioner.core.models.environment import HostOS, normalize_os

CONFIG_DIR_NAME = ".openclaw"

_os_override: Optional[str] = None


def set_os_override(name: Optional[str]) -> None:
    """Force the reported OS identifier (None restores detection)."""
    global _os_override
    _os_override = name


def get_os_name() -> str:
    """Return the OS identifier string: windows, macos, linux, or the raw name."""
    if _os_override:
        return _os_override
    system = platform.system()
    host = normalize_os(system)
    return host if host != "other" else system.lower()


def get_host_os() -> HostOS:
    """The OS family of the current host."""
    return normalize_os(get_os_name())


def get_config_dir() -> Path:
    """Default OpenClaw configuration root (``~/.openclaw``)."""
    return Path.home() / CONFIG_DIR_NAME
