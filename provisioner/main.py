"""
OpenClaw provisioner — CLI entrypoint.

Usage:
    python -m provisioner.main --help
    python -m provisioner.main check
    python -m provisioner.main install runtime
    python -m provisioner.main setup
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from provisioner import __version__
from provisioner.core.models.environment import InstallResult
from provisioner.core.observability.logging_config import configure as configure_logging

if TYPE_CHECKING:
    from provisioner.core.services.installer import Installer

_KIND_CHOICE = click.Choice(["runtime", "tool", "nodejs", "openclaw"], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="provisioner")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to provisioner.yml (default: auto-detect).",
)
@click.option("--os", "os_name", default=None, help="Override the detected OS (windows, macos, linux).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    os_name: str | None,
) -> None:
    """OpenClaw provisioner — set up Node.js and the OpenClaw CLI."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    from provisioner.core.context import set_os_override
    set_os_override(os_name)

    # ── Logging setup (once, at process start) ──────────────────
    configure_logging(verbose=verbose, quiet=quiet, debug=debug)


def _installer(ctx: click.Context) -> Installer:
    """Build the host installer, turning settings errors into a clean exit."""
    from provisioner.core.config.loader import ConfigError, load_settings
    from provisioner.core.services.installer import build_installer

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(2)
    return build_installer(settings=settings)


def _echo_result(result: InstallResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if result.success:
        click.secho(f"✅ {result.message}", fg="green")
    else:
        click.secho(f"❌ {result.message}", fg="red")
        if result.error and result.error != result.message:
            for line in result.error.splitlines()[-10:]:
                click.echo(f"   {line}")


def _mark(ok: bool) -> str:
    return click.style("✓", fg="green") if ok else click.style("✗", fg="red")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Show whether Node.js and OpenClaw are ready."""
    installer = _installer(ctx)
    status = installer.check_environment()

    if as_json:
        click.echo(json.dumps(status.to_dict(), indent=2))
        sys.exit(0 if status.ready else 1)

    min_major = installer.settings.min_runtime_major
    click.secho(f"\n🔍 Environment ({status.os})", fg="cyan", bold=True)
    node_label = status.runtime_version or "not installed"
    if status.runtime_installed and not status.runtime_version_ok:
        node_label += f" (requires v{min_major}+)"
    click.echo(f"   {_mark(status.runtime_installed and status.runtime_version_ok)} Node.js   {node_label}")
    click.echo(f"   {_mark(status.tool_installed)} OpenClaw  {status.tool_version or 'not installed'}")
    click.echo(f"   {_mark(status.config_dir_exists)} Config    {installer.prober.config_dir}")
    click.echo()

    if status.ready:
        click.secho("✅ Environment is ready", fg="green", bold=True)
    else:
        click.secho("⚠️  Environment is not ready — run 'provisioner setup'", fg="yellow")
        sys.exit(1)


@cli.command()
@click.argument("kind", type=_KIND_CHOICE)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, kind: str, as_json: bool) -> None:
    """Install Node.js (runtime) or OpenClaw (tool) headlessly."""
    installer = _installer(ctx)
    if kind.lower() in ("runtime", "nodejs"):
        result = installer.install_runtime()
    else:
        result = installer.install_tool()

    _echo_result(result, as_json)
    if not result.success:
        if not as_json:
            click.echo(f"\n   Try an interactive install: provisioner terminal {kind.lower()}")
        sys.exit(1)


@cli.command("init-config")
@click.option("--dir", "config_dir", type=click.Path(), default=None, help="Configuration root.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init_config(ctx: click.Context, config_dir: str | None, as_json: bool) -> None:
    """Create the OpenClaw configuration tree."""
    result = _installer(ctx).initialize_config(config_dir)
    _echo_result(result, as_json)
    if not result.success:
        sys.exit(1)


@cli.command()
@click.argument("kind", type=_KIND_CHOICE)
@click.pass_context
def terminal(ctx: click.Context, kind: str) -> None:
    """Run the installer in a new terminal window."""
    launch = _installer(ctx).open_install_terminal(kind)
    if launch.launched:
        click.secho(f"🖥️  {launch.message}", fg="green")
        return
    click.secho(f"❌ {launch.message}", fg="red")
    sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def setup(ctx: click.Context, as_json: bool) -> None:
    """Check, install what is missing, and initialise configuration."""
    installer = _installer(ctx)
    status = installer.check_environment()
    steps: list[dict] = []

    def _finish(ok: bool, hint: str = "") -> None:
        if as_json:
            click.echo(json.dumps({"ok": ok, "steps": steps}, indent=2))
        elif hint:
            click.echo(f"\n   {hint}")
        sys.exit(0 if ok else 1)

    if not (status.runtime_installed and status.runtime_version_ok):
        result = installer.install_runtime()
        steps.append({"step": "runtime", **result.to_dict()})
        if not as_json:
            _echo_result(result, False)
        if not result.success:
            _finish(False, "Try an interactive install: provisioner terminal runtime")

    if not status.tool_installed:
        result = installer.install_tool()
        steps.append({"step": "tool", **result.to_dict()})
        if not as_json:
            _echo_result(result, False)
        if not result.success:
            _finish(False, "Try an interactive install: provisioner terminal tool")

    result = installer.initialize_config()
    steps.append({"step": "config", **result.to_dict()})
    if not as_json:
        _echo_result(result, False)
    _finish(result.success)


if __name__ == "__main__":
    cli()
