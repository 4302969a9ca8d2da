"""
EnvironmentStatus and InstallResult — the values handed to the front-end.

A status is a snapshot of live host state.  It is produced fresh on
every probe and never mutated or cached: an install may happen out of
band (another process, or a terminal window we opened ourselves)
between two probes.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, computed_field

HostOS = Literal["windows", "macos", "linux", "other"]

_OS_ALIASES: dict[str, HostOS] = {
    "windows": "windows",
    "win32": "windows",
    "macos": "macos",
    "darwin": "macos",
    "osx": "macos",
    "linux": "linux",
}


def normalize_os(name: str | None) -> HostOS:
    """Map an OS identifier (``"macos"``, ``"Darwin"``, ...) to a HostOS."""
    if not name:
        return "other"
    return _OS_ALIASES.get(name.strip().lower(), "other")


class EnvironmentStatus(BaseModel):
    """Snapshot of the host's Node.js / OpenClaw environment."""

    model_config = ConfigDict(frozen=True)

    runtime_installed: bool = False
    runtime_version: str | None = None
    runtime_version_ok: bool = False
    tool_installed: bool = False
    tool_version: str | None = None
    config_dir_exists: bool = False
    os: HostOS = "other"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ready(self) -> bool:
        """Everything needed to run the gateway is present."""
        return self.runtime_installed and self.runtime_version_ok and self.tool_installed

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


class InstallResult(BaseModel):
    """Terminal outcome of one installation attempt.

    ``message`` is always present; ``error`` carries the raw detail on
    failure (or on an ambiguous outcome such as a missing binary after
    a clean exit).
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    error: str | None = None

    @classmethod
    def ok(cls, message: str) -> InstallResult:
        """Create a success result."""
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, message: str, error: str | None = None) -> InstallResult:
        """Create a failure result."""
        return cls(success=False, message=message, error=error or message)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
