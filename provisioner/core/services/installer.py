"""
Installer — the operations exposed to the desktop front-end.

    check_environment()        → EnvironmentStatus (never fails)
    install_runtime()          → InstallResult
    install_tool()             → InstallResult
    initialize_config(dir)     → InstallResult
    open_install_terminal(k)   → TerminalLaunch

Every operation runs detect → select → execute → verify sequentially
and returns a value; process and OS errors are converted at the
runner boundary.  Nothing is shared between calls, so two callers may
use the same Installer, although two concurrent installs of the same
dependency still race inside the package manager.

A process exit code of 0 is not proof of success.  The fnm bootstrap,
for instance, can exit cleanly while leaving ``node`` off this
process's PATH.  Each install is therefore followed by a re-probe, and
"installed but not visible" is reported as a restart-required failure.
The new binary only shows up in a fresh process's environment; no
in-process PATH refresh is attempted.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from provisioner.adapters.base import CommandRunner
from provisioner.adapters.shell.command import ShellCommandRunner
from provisioner.core import context
from provisioner.core.config.loader import ProvisionerSettings, load_settings
from provisioner.core.data import scripts
from provisioner.core.models.environment import EnvironmentStatus, InstallResult, normalize_os
from provisioner.core.models.strategy import ChainOutcome, TerminalLaunch
from provisioner.core.services.probe import EnvironmentProber, meets_version_requirement
from provisioner.core.services.strategies import (
    UnsupportedPlatformError,
    run_chain,
    select_strategy,
)
from provisioner.core.services.terminal_ops import TerminalLauncher

logger = logging.getLogger(__name__)

# Created under the configuration root by initialize_config().
CONFIG_SUBDIRS = ("agents/main/sessions", "agents/main/agent", "credentials")

RESTART_MESSAGE = (
    "{label} was installed but is not visible to this process yet. "
    "Please restart the application to pick up the new PATH."
)


class Installer:
    """Environment-provisioning orchestrator for Node.js and OpenClaw."""

    def __init__(
        self,
        runner: CommandRunner,
        os_name: str | None = None,
        settings: ProvisionerSettings | None = None,
        config_dir: Path | None = None,
        launcher: TerminalLauncher | None = None,
    ):
        self._runner = runner
        self._os_name = os_name or runner.host_os
        self._settings = settings or ProvisionerSettings()
        self._config_dir = config_dir or self._settings.resolved_config_dir()
        self._prober = EnvironmentProber(runner, self._settings, self._config_dir)
        self._launcher = launcher or TerminalLauncher(
            runner, self._os_name, self._settings, config_dir=self._config_dir,
        )

    @property
    def os_name(self) -> str:
        return self._os_name

    @property
    def settings(self) -> ProvisionerSettings:
        return self._settings

    @property
    def prober(self) -> EnvironmentProber:
        return self._prober

    # ── Probe ───────────────────────────────────────────────────────

    def check_environment(self) -> EnvironmentStatus:
        """Fresh snapshot of the host environment."""
        return self._prober.probe()

    # ── Install ─────────────────────────────────────────────────────

    def install_runtime(self) -> InstallResult:
        """Install Node.js with the host's fallback chain."""
        try:
            strategy = select_strategy("runtime", self._os_name, self._settings)
        except UnsupportedPlatformError as e:
            logger.warning("%s", e)
            return InstallResult.failure("Unsupported operating system", error=str(e))

        installed, version = self._prober.check_runtime()
        if installed and meets_version_requirement(version, self._settings.min_runtime_major):
            return InstallResult.ok(f"Node.js {version} is already installed")

        logger.info("Installing Node.js %d+ on %s", self._settings.min_runtime_major, strategy.os)
        outcome = run_chain(strategy, self._runner)
        return self._verify(outcome, "Node.js", self._prober.check_runtime)

    def install_tool(self) -> InstallResult:
        """Install the OpenClaw CLI globally with npm.

        Fails fast, without touching npm, when Node.js is absent.
        """
        runtime_installed, _ = self._prober.check_runtime()
        if not runtime_installed:
            return InstallResult.failure(
                "Node.js is required before OpenClaw can be installed. Install Node.js first.",
                error=f"Prerequisite missing: {self._settings.runtime_command}",
            )

        strategy = select_strategy("tool", self._os_name, self._settings)
        logger.info("Installing %s", self._settings.tool_package)
        outcome = run_chain(strategy, self._runner)
        return self._verify(outcome, "OpenClaw", self._prober.check_tool)

    def _verify(
        self,
        outcome: ChainOutcome,
        label: str,
        check: Callable[[], tuple[bool, str | None]],
    ) -> InstallResult:
        if not outcome.ok:
            return InstallResult.failure(f"{label} installation failed", error=outcome.error)

        present, version = check()
        if not present:
            logger.warning("%s install exited cleanly but is not on PATH", label)
            return InstallResult.failure(
                RESTART_MESSAGE.format(label=label),
                error=outcome.output or f"{label} not found after install",
            )

        return InstallResult.ok(f"{label} {version} installed successfully")

    # ── Configuration ───────────────────────────────────────────────

    def initialize_config(self, config_dir: Path | str | None = None) -> InstallResult:
        """Create the config tree and set the default configuration key.

        Directory creation failures return before any key is set.
        """
        root = Path(config_dir).expanduser() if config_dir else self._config_dir

        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return InstallResult.failure("Failed to create the configuration directory", error=str(e))

        for subdir in CONFIG_SUBDIRS:
            try:
                (root / subdir).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return InstallResult.failure(f"Failed to create directory: {subdir}", error=str(e))

        for line in scripts.config_set_lines(
            self._settings.tool_command,
            self._settings.default_config,
            self._runner.host_os,
        ):
            result = self._runner.run_script(line)
            if result.failed:
                return InstallResult.failure("Configuration initialisation failed", error=result.error)

        logger.info("Initialised configuration in %s", root)
        return InstallResult.ok("Configuration initialised")

    # ── Interactive ─────────────────────────────────────────────────

    def open_install_terminal(self, kind: str) -> TerminalLaunch:
        """Launch the installer for *kind* in a visible terminal and return."""
        return self._launcher.launch(kind)


# ── Functional facade ───────────────────────────────────────────────

def build_installer(
    os_name: str | None = None,
    settings: ProvisionerSettings | None = None,
) -> Installer:
    """Installer wired to the real host."""
    os_name = os_name or context.get_os_name()
    settings = settings or load_settings()
    runner = ShellCommandRunner(normalize_os(os_name), timeout=settings.timeout)
    return Installer(runner, os_name=os_name, settings=settings)


def check_environment() -> EnvironmentStatus:
    return build_installer().check_environment()


def install_runtime() -> InstallResult:
    return build_installer().install_runtime()


def install_tool() -> InstallResult:
    return build_installer().install_tool()


def initialize_config(config_dir: Path | str | None = None) -> InstallResult:
    return build_installer().initialize_config(config_dir)


def open_install_terminal(kind: str) -> TerminalLaunch:
    return build_installer().open_install_terminal(kind)
