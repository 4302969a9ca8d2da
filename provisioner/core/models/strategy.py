"""
Strategy models — installation chains as data.

An InstallationStrategy is an ordered list of Procedures for one
dependency on one OS.  The chain executor walks the list; the tables
themselves live in ``provisioner.core.services.strategies``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from provisioner.core.models.environment import HostOS

Dependency = Literal["runtime", "tool"]


class Procedure(BaseModel):
    """One named external invocation in a fallback chain.

    Interpretation rules:
        requires   skip unless this executable is on the search path
        unless     skip when this executable is already present
        final      success ends the chain (False = preparation step)
        exclusive  once run, its outcome ends the chain either way
    """

    model_config = ConfigDict(frozen=True)

    name: str
    script: str
    requires: str | None = None
    unless: str | None = None
    final: bool = True
    exclusive: bool = False


class InstallationStrategy(BaseModel):
    """Ordered fallback chain for one dependency on one OS."""

    model_config = ConfigDict(frozen=True)

    dependency: Dependency
    os: HostOS
    procedures: tuple[Procedure, ...] = ()
    # Error reported when every procedure was skipped.
    none_applicable: str = "No installation procedure applies to this host"

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.procedures]


class Attempt(BaseModel):
    """Record of one procedure in an executed chain."""

    procedure: str
    status: Literal["ok", "failed", "skipped"]
    detail: str = ""


class ChainOutcome(BaseModel):
    """Process-level outcome of running a strategy (before verification)."""

    ok: bool
    output: str = ""
    error: str | None = None
    attempts: list[Attempt] = Field(default_factory=list)

    @property
    def ran(self) -> list[str]:
        """Names of procedures that actually executed."""
        return [a.procedure for a in self.attempts if a.status != "skipped"]


class TerminalLaunch(BaseModel):
    """Result of an interactive terminal launch.

    Requested → launched | launch_failed.  Nothing is tracked after
    ``launched``; completion is only visible to a later probe.
    """

    kind: str
    state: Literal["launched", "launch_failed"]
    message: str
    terminal: str | None = None
    script_path: str | None = None
    error: str | None = None

    @property
    def launched(self) -> bool:
        return self.state == "launched"
