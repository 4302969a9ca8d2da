"""
Installation strategies — per-OS fallback chains as tables.

Each (dependency, OS) pair maps to an ordered list of procedures.
Selection is a pure lookup recomputed on every call; execution walks
the chain through the injected CommandRunner:

    runtime / windows   winget → fnm
    runtime / macos     homebrew-bootstrap (if brew missing) → homebrew
    runtime / linux     first of apt-get, dnf, yum, pacman
    tool    / any       npm-global

Chains are data so tests can drive them with a MockCommandRunner.
"""

from __future__ import annotations

import logging

from provisioner.adapters.base import CommandRunner
from provisioner.core.config.loader import ProvisionerSettings
from provisioner.core.data import scripts
from provisioner.core.models.environment import normalize_os
from provisioner.core.models.strategy import (
    Attempt,
    ChainOutcome,
    Dependency,
    InstallationStrategy,
    Procedure,
)

logger = logging.getLogger(__name__)


class UnsupportedPlatformError(Exception):
    """Raised when no strategy exists for the requested OS."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(f"Unsupported operating system: {os_name}")


# ── Strategy tables ─────────────────────────────────────────────────

# Fixed detection order for Linux system package managers.
LINUX_PACKAGE_MANAGERS: list[tuple[str, str]] = [
    ("apt-get", scripts.APT_NODE),
    ("dnf", scripts.DNF_NODE),
    ("yum", scripts.YUM_NODE),
    ("pacman", scripts.PACMAN_NODE),
]

# Each entry: name, template, and optional Procedure interpretation flags.
_RUNTIME_TABLE: dict[str, list[dict]] = {
    "windows": [
        {"name": "winget", "template": scripts.WINGET_NODE, "requires": "winget"},
        {"name": "fnm", "template": scripts.FNM_NODE},
    ],
    "macos": [
        {
            "name": "homebrew-bootstrap",
            "template": scripts.HOMEBREW_BOOTSTRAP,
            "unless": "brew",
            "final": False,
        },
        {"name": "homebrew", "template": scripts.HOMEBREW_NODE},
    ],
    "linux": [
        {"name": pm, "template": template, "requires": pm, "exclusive": True}
        for pm, template in LINUX_PACKAGE_MANAGERS
    ],
}

_TOOL_TABLE: list[dict] = [
    {"name": "npm-global", "template": scripts.NPM_GLOBAL},
]

_NONE_APPLICABLE: dict[str, str] = {
    "linux": (
        "No supported package manager detected ("
        + ", ".join(pm for pm, _ in LINUX_PACKAGE_MANAGERS)
        + ")"
    ),
}


def _build(entries: list[dict], settings: ProvisionerSettings) -> tuple[Procedure, ...]:
    values = {
        "major": settings.min_runtime_major,
        "package": settings.tool_package,
        "tool": settings.tool_command,
    }
    procedures = []
    for entry in entries:
        fields = {k: v for k, v in entry.items() if k != "template"}
        procedures.append(
            Procedure(script=scripts.render(entry["template"], **values), **fields)
        )
    return tuple(procedures)


def select_strategy(
    dependency: Dependency,
    os_name: str,
    settings: ProvisionerSettings | None = None,
) -> InstallationStrategy:
    """Map an OS identifier to the fallback chain for *dependency*.

    Raises:
        UnsupportedPlatformError: No runtime strategy for this OS.
    """
    settings = settings or ProvisionerSettings()
    host = normalize_os(os_name)

    if dependency == "tool":
        return InstallationStrategy(
            dependency="tool",
            os=host,
            procedures=_build(_TOOL_TABLE, settings),
        )

    entries = _RUNTIME_TABLE.get(host)
    if entries is None:
        raise UnsupportedPlatformError(os_name)

    kwargs = {}
    if host in _NONE_APPLICABLE:
        kwargs["none_applicable"] = _NONE_APPLICABLE[host]
    return InstallationStrategy(
        dependency="runtime",
        os=host,
        procedures=_build(entries, settings),
        **kwargs,
    )


# ── Chain execution ─────────────────────────────────────────────────

def run_chain(strategy: InstallationStrategy, runner: CommandRunner) -> ChainOutcome:
    """Execute *strategy* until a final procedure succeeds.

    Each step is a deliberate fallback with a different procedure;
    nothing is retried.  The outcome is process-level only: callers
    still have to verify the dependency is actually usable.
    """
    attempts: list[Attempt] = []
    errors: list[tuple[str, str]] = []

    for proc in strategy.procedures:
        if proc.requires and not runner.command_exists(proc.requires):
            attempts.append(Attempt(
                procedure=proc.name, status="skipped",
                detail=f"{proc.requires} not found",
            ))
            continue
        if proc.unless and runner.command_exists(proc.unless):
            attempts.append(Attempt(
                procedure=proc.name, status="skipped",
                detail=f"{proc.unless} already present",
            ))
            continue

        logger.info("Installing %s on %s via %s", strategy.dependency, strategy.os, proc.name)
        result = runner.run_script(proc.script)

        if result.ok:
            attempts.append(Attempt(procedure=proc.name, status="ok", detail=result.output))
            if proc.final or proc.exclusive:
                return ChainOutcome(ok=True, output=result.output, attempts=attempts)
            continue

        error = result.error or "unknown error"
        logger.warning("%s failed: %s", proc.name, error.splitlines()[0] if error else "")
        attempts.append(Attempt(procedure=proc.name, status="failed", detail=error))
        errors.append((proc.name, error))
        if proc.exclusive:
            break

    return ChainOutcome(ok=False, error=_chain_error(strategy, errors), attempts=attempts)


def _chain_error(strategy: InstallationStrategy, errors: list[tuple[str, str]]) -> str:
    if not errors:
        return strategy.none_applicable
    if len(errors) == 1:
        return errors[0][1]
    return "\n".join(f"[{name}] {error}" for name, error in errors)
