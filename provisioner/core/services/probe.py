"""
Environment prober — read-only presence and version checks.

Runs ``--version`` queries through the injected CommandRunner.  Any
failure (non-zero exit, missing executable) means "not installed":
absence is a normal outcome, so probing never fails the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path

from provisioner.adapters.base import CommandRunner
from provisioner.core.config.loader import MIN_RUNTIME_MAJOR, ProvisionerSettings
from provisioner.core.models.environment import EnvironmentStatus

logger = logging.getLogger(__name__)


def parse_major_version(version: str | None) -> int:
    """Major component of a ``vMAJOR.MINOR.PATCH`` string; 0 when malformed.

    ``"v22.1.0"`` → 22.  ``"22.1.0"`` has no prefix and gives 0.
    """
    if not version:
        return 0
    text = version.strip()
    if not text.startswith("v"):
        return 0
    text = text[1:]
    head = text.split(".", 1)[0]
    if not (head.isascii() and head.isdigit()):
        return 0
    return int(head)


def meets_version_requirement(
    version: str | None,
    min_major: int = MIN_RUNTIME_MAJOR,
) -> bool:
    """Whether *version* satisfies the minimum major version policy."""
    if version is None:
        return False
    return parse_major_version(version) >= min_major


class EnvironmentProber:
    """Produce fresh EnvironmentStatus snapshots for the host.

    Holds no state between calls: every ``probe()`` re-queries the host.
    """

    def __init__(
        self,
        runner: CommandRunner,
        settings: ProvisionerSettings | None = None,
        config_dir: Path | None = None,
    ):
        self._runner = runner
        self._settings = settings or ProvisionerSettings()
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        return self._config_dir or self._settings.resolved_config_dir()

    def _query_version(self, executable: str) -> str | None:
        # Windows executables are .cmd shims that only a shell resolves.
        if self._runner.is_windows:
            result = self._runner.run_script(f"{executable} --version")
        else:
            result = self._runner.run_args([executable, "--version"])

        if not result.ok:
            logger.debug("%s not available: %s", executable, result.error)
            return None

        version = result.output.strip()
        if not version:
            return None
        # Some CLIs print a banner; the version is on the first line.
        return version.splitlines()[0].strip()

    def runtime_version(self) -> str | None:
        """Installed Node.js version string, or None."""
        return self._query_version(self._settings.runtime_command)

    def tool_version(self) -> str | None:
        """Installed OpenClaw version string, or None."""
        return self._query_version(self._settings.tool_command)

    def check_runtime(self) -> tuple[bool, str | None]:
        version = self.runtime_version()
        return version is not None, version

    def check_tool(self) -> tuple[bool, str | None]:
        version = self.tool_version()
        return version is not None, version

    def probe(self) -> EnvironmentStatus:
        """Snapshot the host's environment."""
        runtime_version = self.runtime_version()
        tool_version = self.tool_version()

        status = EnvironmentStatus(
            runtime_installed=runtime_version is not None,
            runtime_version=runtime_version,
            runtime_version_ok=meets_version_requirement(
                runtime_version, self._settings.min_runtime_major,
            ),
            tool_installed=tool_version is not None,
            tool_version=tool_version,
            config_dir_exists=self.config_dir.exists(),
            os=self._runner.host_os,
        )
        logger.debug(
            "Probe: node=%s openclaw=%s ready=%s",
            runtime_version, tool_version, status.ready,
        )
        return status
