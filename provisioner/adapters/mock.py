"""
Mock runner — scripted test double for all process execution.

Responses are keyed by a fragment of the command text: the argv
joined by spaces, or the script body.  The first registered fragment
found in the command wins.  Unmatched commands fail as if the binary
were missing, so a fresh MockCommandRunner models a clean host.
"""

from __future__ import annotations

from dataclasses import dataclass

from provisioner.adapters.base import CommandResult, CommandRunner
from provisioner.core.models.environment import HostOS


@dataclass
class MockCall:
    """One invocation recorded by the mock."""

    shape: str          # "args", "script" or "spawn"
    command: str        # argv joined by spaces, or the script body
    argv: list[str] | None = None


class MockCommandRunner(CommandRunner):
    """Deterministic runner for tests.

    A key may hold a queue of results; they are consumed in order and
    the last one repeats.  That models "absent before install, present
    after" without any state outside the mock.
    """

    def __init__(
        self,
        host_os: HostOS = "linux",
        default: CommandResult | None = None,
        missing_binaries: list[str] | None = None,
    ):
        super().__init__(host_os)
        self._default = default or CommandResult.failure("command not found", returncode=127)
        self._responses: dict[str, list[CommandResult]] = {}
        self._missing = set(missing_binaries or [])
        self._call_log: list[MockCall] = []

    @property
    def call_log(self) -> list[MockCall]:
        """All invocations this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_matching(self, fragment: str) -> list[MockCall]:
        """Invocations whose command text contains *fragment*."""
        return [c for c in self._call_log if fragment in c.command]

    # ── Configuration ───────────────────────────────────────────

    def set_response(self, fragment: str, *results: CommandResult) -> None:
        """Set the result(s) returned for commands containing *fragment*."""
        self._responses[fragment] = list(results)

    def set_output(self, fragment: str, output: str) -> None:
        """Make commands containing *fragment* succeed with *output*."""
        self.set_response(fragment, CommandResult.success(output, returncode=0))

    def set_failure(self, fragment: str, error: str = "Mock failure", returncode: int = 1) -> None:
        """Make commands containing *fragment* fail with *error*."""
        self.set_response(fragment, CommandResult.failure(error, returncode=returncode))

    def add_binary(self, name: str) -> None:
        """Make ``command_exists(name)`` report True."""
        lookup = "where" if self.is_windows else "which"
        self.set_output(f"{lookup} {name}", name)

    def remove_binary(self, name: str) -> None:
        """Make spawning *name* fail as a missing executable."""
        self._missing.add(name)

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
        self._missing.clear()

    # ── CommandRunner ───────────────────────────────────────────

    def run_args(self, argv: list[str]) -> CommandResult:
        command = " ".join(argv)
        self._call_log.append(MockCall("args", command, list(argv)))
        return self._lookup(command)

    def run_script(self, script: str) -> CommandResult:
        self._call_log.append(MockCall("script", script))
        return self._lookup(script)

    def spawn_detached(self, argv: list[str]) -> CommandResult:
        command = " ".join(argv)
        self._call_log.append(MockCall("spawn", command, list(argv)))
        if argv and argv[0] in self._missing:
            return CommandResult.failure(
                f"[Errno 2] No such file or directory: '{argv[0]}'"
            )
        for fragment, queue in self._responses.items():
            if fragment in command:
                return self._pop(queue)
        return CommandResult.success(metadata={"argv": argv, "mock": True})

    def _lookup(self, command: str) -> CommandResult:
        for fragment, queue in self._responses.items():
            if fragment in command:
                return self._pop(queue)
        return self._default

    @staticmethod
    def _pop(queue: list[CommandResult]) -> CommandResult:
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]
