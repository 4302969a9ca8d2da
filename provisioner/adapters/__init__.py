"""Adapters — process execution bindings.

Public re-exports for convenient access.
"""

from provisioner.adapters.base import CommandResult, CommandRunner
from provisioner.adapters.mock import MockCommandRunner
from provisioner.adapters.shell.command import ShellCommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "MockCommandRunner",
    "ShellCommandRunner",
]
