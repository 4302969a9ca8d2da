"""
Runner base — the protocol contract between services and the host.

Every external process the provisioner starts goes through a
CommandRunner.  Services never call ``subprocess`` directly, so the
probing, strategy and verification logic can run against a scripted
fake (see ``provisioner.adapters.mock``).

Three call shapes are supported:

    run_args(argv)        direct argument-vector execution
    run_script(script)    inline multi-line script, OS interpreter
    spawn_detached(argv)  fire-and-forget background spawn
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from provisioner.core.models.environment import HostOS


class CommandResult(BaseModel):
    """Outcome of one external invocation.

    Runners NEVER raise for process failures — the failure is
    captured here, with the most useful text in ``error``.
    """

    ok: bool
    output: str = ""
    error: str | None = None
    returncode: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def text(self) -> str:
        """Output on success, error text on failure."""
        return self.output if self.ok else (self.error or "")

    @classmethod
    def success(cls, output: str = "", **kwargs: Any) -> CommandResult:
        """Create a success result."""
        return cls(ok=True, output=output, **kwargs)

    @classmethod
    def failure(cls, error: str, **kwargs: Any) -> CommandResult:
        """Create a failure result."""
        return cls(ok=False, error=error, **kwargs)


def failure_text(stdout: str, stderr: str, returncode: int | None) -> str:
    """Pick the failure message: stderr, then stdout, then the exit code."""
    stderr = (stderr or "").strip()
    if stderr:
        return stderr
    stdout = (stdout or "").strip()
    if stdout:
        return stdout
    return f"Command failed with exit code {returncode}"


class CommandRunner(ABC):
    """Abstract base class for process runners.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement run_args, run_script, spawn_detached
        3. Pass it to ``Installer`` / ``EnvironmentProber``
    """

    def __init__(self, host_os: HostOS = "linux"):
        self._host_os: HostOS = host_os

    @property
    def host_os(self) -> HostOS:
        """The OS family whose interpreter this runner dispatches to."""
        return self._host_os

    @property
    def is_windows(self) -> bool:
        return self._host_os == "windows"

    @abstractmethod
    def run_args(self, argv: list[str]) -> CommandResult:
        """Run *argv* to completion and capture its output."""

    @abstractmethod
    def run_script(self, script: str) -> CommandResult:
        """Run an inline script through the host's script interpreter.

        POSIX hosts use bash, Windows uses PowerShell.
        """

    @abstractmethod
    def spawn_detached(self, argv: list[str]) -> CommandResult:
        """Start *argv* without waiting for it.

        Success only means the process was spawned.  Nothing about
        the process is tracked afterwards.
        """

    def command_exists(self, name: str) -> bool:
        """Whether *name* resolves to an executable on the search path."""
        lookup = "where" if self.is_windows else "which"
        return self.run_args([lookup, name]).ok

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} host_os={self._host_os!r}>"
