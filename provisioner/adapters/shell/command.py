"""
Shell command runner — execute real processes on the host.

This is the SINGLE PLACE where ``subprocess`` is called.  All
interpreter dispatch, logging and error conversion is centralised
here: an OS error or non-zero exit always comes back as a failed
CommandResult, never as an exception.
"""

from __future__ import annotations

import logging
import subprocess
import time

from provisioner.adapters.base import CommandResult, CommandRunner, failure_text
from provisioner.core.models.environment import HostOS

logger = logging.getLogger(__name__)

# Interpreter argv prefixes; the script body is appended as the last arg.
_POSIX_SHELL = ["bash", "-c"]
_POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]


class ShellCommandRunner(CommandRunner):
    """Run commands through ``subprocess`` and capture their output.

    No timeout is applied unless one is given: a hung installer hangs
    the call.  Callers wrap the call themselves when they need a bound.
    """

    def __init__(self, host_os: HostOS = "linux", timeout: float | None = None):
        super().__init__(host_os)
        self._timeout = timeout

    def interpreter(self) -> list[str]:
        """The argv prefix used by ``run_script`` on this host."""
        return list(_POWERSHELL if self.is_windows else _POSIX_SHELL)

    def run_args(self, argv: list[str]) -> CommandResult:
        return self._run(argv, label=" ".join(argv))

    def run_script(self, script: str) -> CommandResult:
        first_line = next((ln for ln in script.splitlines() if ln.strip()), "")
        return self._run(
            self.interpreter() + [script],
            label=f"<script> {first_line.strip()[:60]}",
        )

    def spawn_detached(self, argv: list[str]) -> CommandResult:
        logger.debug("Spawning detached: %s", " ".join(argv))
        try:
            kwargs: dict = {
                "stdin": subprocess.DEVNULL,
                "stdout": subprocess.DEVNULL,
                "stderr": subprocess.DEVNULL,
            }
            if self.is_windows:
                kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0)
            else:
                kwargs["start_new_session"] = True
            proc = subprocess.Popen(argv, **kwargs)
        except Exception as e:
            logger.debug("Spawn of %s failed: %s", argv[0] if argv else "?", e)
            return CommandResult.failure(str(e), metadata={"argv": argv})

        return CommandResult.success(
            metadata={"argv": argv, "pid": proc.pid},
        )

    def _run(self, argv: list[str], label: str) -> CommandResult:
        logger.debug("Executing: %s", label)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                f"Command timed out after {self._timeout}s",
                metadata={"command": label},
            )
        except OSError as e:
            # Interpreter or executable missing, permission denied, ...
            logger.debug("Execution of %s failed: %s", label, e)
            return CommandResult.failure(str(e), metadata={"command": label})
        except Exception as e:
            logger.debug("Execution of %s raised: %s", label, e)
            return CommandResult.failure(str(e), metadata={"command": label})

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return CommandResult.success(
                stdout,
                returncode=0,
                metadata={"command": label, "stderr": stderr, "duration_ms": elapsed_ms},
            )

        logger.debug("%s exited with %d", label, result.returncode)
        return CommandResult.failure(
            failure_text(stdout, stderr, result.returncode),
            returncode=result.returncode,
            metadata={"command": label, "stdout": stdout, "duration_ms": elapsed_ms},
        )
