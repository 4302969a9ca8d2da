"""
Terminal operations — run an installer in a visible terminal window.

Some installs need an interactive sudo / UAC prompt or progress the
user can watch, which a headless capture cannot give.  For those the
install script is written to a fixed temp path and launched in a new
terminal:

    windows   Start-Process powershell (-Verb RunAs for Node.js)
    macos     open <script>.command   (Terminal.app)
    linux     first terminal emulator in _TERMINAL_REGISTRY that spawns

Launches are fire-and-forget: requested → launched | launch_failed.
Whether the install finished is only visible to a later probe.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from provisioner.adapters.base import CommandRunner
from provisioner.core.config.loader import ProvisionerSettings
from provisioner.core.data import scripts
from provisioner.core.models.environment import normalize_os
from provisioner.core.models.strategy import TerminalLaunch

logger = logging.getLogger(__name__)


# ── Terminal emulator registry ──────────────────────────────────────

# Probed in order on Linux.  {script} is replaced by the script path.
_TERMINAL_REGISTRY: list[dict] = [
    {
        "name": "gnome-terminal",
        "label": "GNOME Terminal",
        "args": ["gnome-terminal", "--", "bash", "{script}"],
    },
    {
        "name": "xfce4-terminal",
        "label": "XFCE Terminal",
        "args": ["xfce4-terminal", "-x", "bash", "{script}"],
    },
    {
        "name": "konsole",
        "label": "Konsole",
        "args": ["konsole", "-e", "bash", "{script}"],
    },
    {
        "name": "xterm",
        "label": "XTerm",
        "args": ["xterm", "-e", "bash", "{script}"],
    },
]

TERMINAL_NAMES = [t["name"] for t in _TERMINAL_REGISTRY]

# Accepted install kinds, including the names the desktop UI uses.
_KINDS: dict[str, str] = {
    "runtime": "runtime",
    "nodejs": "runtime",
    "node": "runtime",
    "tool": "tool",
    "openclaw": "tool",
}

_SCRIPT_STEMS = {
    "runtime": "openclaw_install_nodejs",
    "tool": "openclaw_install_openclaw",
}

_SCRIPT_EXTENSIONS = {"windows": ".ps1", "macos": ".command", "linux": ".sh"}

_TITLES = {"runtime": "Node.js installer", "tool": "OpenClaw installer"}

_TEMPLATES = {
    ("runtime", "windows"): scripts.INTERACTIVE_NODE_WINDOWS,
    ("runtime", "macos"): scripts.INTERACTIVE_NODE_MACOS,
    ("runtime", "linux"): scripts.INTERACTIVE_NODE_LINUX,
    ("tool", "windows"): scripts.INTERACTIVE_TOOL_WINDOWS,
    ("tool", "macos"): scripts.INTERACTIVE_TOOL_UNIX,
    ("tool", "linux"): scripts.INTERACTIVE_TOOL_UNIX,
}


def _build_terminal_cmd(terminal_name: str, script_path: str) -> list[str] | None:
    """Build the full argv list for opening *script_path* in a terminal."""
    for entry in _TERMINAL_REGISTRY:
        if entry["name"] == terminal_name:
            return [arg.replace("{script}", script_path) for arg in entry["args"]]
    return None


class TerminalLauncher:
    """Write install scripts and open them in a user-visible terminal."""

    def __init__(
        self,
        runner: CommandRunner,
        os_name: str | None = None,
        settings: ProvisionerSettings | None = None,
        script_dir: Path | None = None,
        config_dir: Path | None = None,
    ):
        self._runner = runner
        self._os_name = os_name or runner.host_os
        self._host_os = normalize_os(self._os_name)
        self._settings = settings or ProvisionerSettings()
        if script_dir is None and self._settings.script_dir:
            script_dir = Path(self._settings.script_dir).expanduser()
        self._script_dir = script_dir or Path(tempfile.gettempdir())
        self._config_dir = config_dir or self._settings.resolved_config_dir()

    def script_path(self, kind: str) -> Path:
        """Fixed, predictable script location for *kind* on this host."""
        ext = _SCRIPT_EXTENSIONS.get(self._host_os, ".sh")
        return self._script_dir / f"{_SCRIPT_STEMS[kind]}{ext}"

    def render_script(self, kind: str) -> str:
        template = _TEMPLATES[(kind, self._host_os)]
        config_lines = scripts.config_set_lines(
            self._settings.tool_command,
            self._settings.default_config,
            self._host_os,
            template=None if self._host_os == "windows" else scripts.CONFIG_SET_TOLERANT,
        )
        return scripts.render(
            template,
            title=_TITLES[kind],
            major=self._settings.min_runtime_major,
            package=self._settings.tool_package,
            tool=self._settings.tool_command,
            config_lines="\n".join(config_lines),
            config_dir=self._config_dir,
            download_url=scripts.NODE_DOWNLOAD_URL,
        )

    def manual_instructions(self, kind: str) -> str:
        if kind == "tool":
            return f"npm install -g {self._settings.tool_package}"
        return (
            f"install Node.js {self._settings.min_runtime_major}+ "
            f"from {scripts.NODE_DOWNLOAD_URL}"
        )

    def launch(self, kind: str) -> TerminalLaunch:
        """Open an installer terminal for *kind* ("runtime" or "tool")."""
        canonical = _KINDS.get(kind.strip().lower())
        if canonical is None:
            return TerminalLaunch(
                kind=kind,
                state="launch_failed",
                message=f"Unknown install kind: {kind}",
                error=f"Unknown install kind: {kind}",
            )

        if self._host_os == "other":
            manual = self.manual_instructions(canonical)
            return self._failed(
                canonical,
                f"Interactive install is not supported on {self._os_name}; {manual}",
            )

        try:
            path = self._write_script(canonical)
        except OSError as e:
            logger.warning("Cannot write install script: %s", e)
            return self._failed(canonical, f"Failed to create install script: {e}")

        if self._host_os == "windows":
            return self._launch_windows(canonical, path)
        if self._host_os == "macos":
            return self._launch_macos(canonical, path)
        return self._launch_linux(canonical, path)

    # ── Helpers ─────────────────────────────────────────────────────

    def _write_script(self, kind: str) -> Path:
        path = self.script_path(kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_script(kind), encoding="utf-8")
        if self._host_os != "windows":
            path.chmod(0o755)
        logger.debug("Wrote %s install script to %s", kind, path)
        return path

    def _launched(self, kind: str, terminal: str, path: Path) -> TerminalLaunch:
        logger.info("Opened %s for %s install", terminal, kind)
        return TerminalLaunch(
            kind=kind,
            state="launched",
            terminal=terminal,
            script_path=str(path),
            message=(
                f"Installer opened in {terminal}. Complete the installation "
                "there, then check the environment again."
            ),
        )

    def _failed(self, kind: str, error: str, path: Path | None = None) -> TerminalLaunch:
        return TerminalLaunch(
            kind=kind,
            state="launch_failed",
            script_path=str(path) if path else None,
            message=error,
            error=error,
        )

    def _launch_windows(self, kind: str, path: Path) -> TerminalLaunch:
        command = (
            "Start-Process powershell -ArgumentList "
            f"'-NoExit','-ExecutionPolicy','Bypass','-File','{path}'"
        )
        if kind == "runtime":
            # System-wide Node.js needs an elevated window.
            command += " -Verb RunAs"
        result = self._runner.spawn_detached(["powershell", "-NoProfile", "-Command", command])
        if result.failed:
            return self._failed(kind, f"Failed to open PowerShell: {result.error}", path)
        return self._launched(kind, "PowerShell", path)

    def _launch_macos(self, kind: str, path: Path) -> TerminalLaunch:
        result = self._runner.spawn_detached(["open", str(path)])
        if result.failed:
            return self._failed(kind, f"Failed to open Terminal: {result.error}", path)
        return self._launched(kind, "Terminal", path)

    def _launch_linux(self, kind: str, path: Path) -> TerminalLaunch:
        for entry in _TERMINAL_REGISTRY:
            argv = _build_terminal_cmd(entry["name"], str(path))
            if not argv:
                continue
            result = self._runner.spawn_detached(argv)
            if result.ok:
                return self._launched(kind, entry["label"], path)
            logger.debug("Terminal '%s' failed to launch: %s", entry["name"], result.error)

        logger.warning("No terminal emulator available (tried %s)", ", ".join(TERMINAL_NAMES))
        return self._failed(
            kind,
            f"No terminal available. Please run manually: {self.manual_instructions(kind)}",
            path,
        )
