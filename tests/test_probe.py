"""
Tests for the environment prober — version parsing and host snapshots.
"""

from pathlib import Path

import pytest

from provisioner.adapters.base import CommandResult
from provisioner.adapters.mock import MockCommandRunner
from provisioner.core.config.loader import MIN_RUNTIME_MAJOR, ProvisionerSettings
from provisioner.core.services.probe import (
    EnvironmentProber,
    meets_version_requirement,
    parse_major_version,
)

# ── Version parsing ─────────────────────────────────────────────────


class TestParseMajorVersion:
    @pytest.mark.parametrize("major", [0, 1, 18, 20, 22, 23, 100])
    def test_well_formed(self, major):
        assert parse_major_version(f"v{major}.4.1") == major

    def test_surrounding_whitespace(self):
        assert parse_major_version("  v22.11.0\n") == 22

    def test_major_only(self):
        assert parse_major_version("v22") == 22

    @pytest.mark.parametrize("text", [
        "",
        None,
        "22.1.0",
        "vX.1.0",
        "v.1.0",
        "node",
        "v-1.0.0",
        "v²².0",
    ])
    def test_malformed_is_zero(self, text):
        assert parse_major_version(text) == 0


class TestVersionRequirement:
    def test_policy_constant(self):
        assert MIN_RUNTIME_MAJOR == 22

    def test_below_minimum(self):
        assert not meets_version_requirement("v20.9.0")

    def test_at_minimum(self):
        assert meets_version_requirement("v22.0.0")

    def test_above_minimum(self):
        assert meets_version_requirement("v23.1.0")

    def test_missing(self):
        assert not meets_version_requirement(None)

    def test_malformed(self):
        assert not meets_version_requirement("garbage")

    def test_custom_minimum(self):
        assert not meets_version_requirement("v22.0.0", min_major=24)


# ── Probing ─────────────────────────────────────────────────────────


class TestEnvironmentProber:
    def test_clean_host(self, runner, config_dir):
        status = EnvironmentProber(runner, config_dir=config_dir).probe()
        assert status.runtime_installed is False
        assert status.runtime_version is None
        assert status.runtime_version_ok is False
        assert status.tool_installed is False
        assert status.tool_version is None
        assert status.config_dir_exists is False
        assert status.ready is False
        assert status.os == "linux"

    def test_ready_host(self, runner, tmp_path: Path):
        runner.set_output("node --version", "v22.3.0")
        runner.set_output("openclaw --version", "2026.1.5")
        status = EnvironmentProber(runner, config_dir=tmp_path).probe()
        assert status.runtime_version == "v22.3.0"
        assert status.runtime_version_ok
        assert status.tool_version == "2026.1.5"
        assert status.config_dir_exists
        assert status.ready

    def test_old_runtime(self, runner, config_dir):
        runner.set_output("node --version", "v20.9.0")
        runner.set_output("openclaw --version", "2026.1.5")
        status = EnvironmentProber(runner, config_dir=config_dir).probe()
        assert status.runtime_installed
        assert status.runtime_version_ok is False
        assert status.ready is False

    def test_new_enough_runtime(self, runner, config_dir):
        runner.set_output("node --version", "v22.0.0")
        status = EnvironmentProber(runner, config_dir=config_dir).probe()
        assert status.runtime_version_ok is True

    def test_settings_minimum(self, runner, config_dir):
        runner.set_output("node --version", "v22.0.0")
        settings = ProvisionerSettings(min_runtime_major=24)
        status = EnvironmentProber(runner, settings, config_dir).probe()
        assert status.runtime_installed
        assert status.runtime_version_ok is False

    def test_failure_is_absence(self, runner, config_dir):
        runner.set_failure("node --version", "node: permission denied", returncode=126)
        status = EnvironmentProber(runner, config_dir=config_dir).probe()
        assert status.runtime_installed is False

    def test_empty_output_is_absence(self, runner, config_dir):
        runner.set_output("openclaw --version", "   ")
        installed, version = EnvironmentProber(runner, config_dir=config_dir).check_tool()
        assert installed is False
        assert version is None

    def test_banner_first_line(self, runner, config_dir):
        runner.set_output("openclaw --version", "2026.1.5\nUpdate available!")
        _, version = EnvironmentProber(runner, config_dir=config_dir).check_tool()
        assert version == "2026.1.5"

    def test_idempotent(self, runner, tmp_path: Path):
        runner.set_output("node --version", "v22.3.0")
        prober = EnvironmentProber(runner, config_dir=tmp_path)
        assert prober.probe() == prober.probe()

    def test_not_cached(self, runner, config_dir):
        runner.set_response(
            "node --version",
            CommandResult.failure("not found"),
            CommandResult.success("v22.1.0"),
        )
        prober = EnvironmentProber(runner, config_dir=config_dir)
        assert prober.probe().runtime_installed is False
        assert prober.probe().runtime_installed is True

    def test_posix_uses_argv(self, runner, config_dir):
        EnvironmentProber(runner, config_dir=config_dir).check_runtime()
        assert runner.call_log[0].shape == "args"
        assert runner.call_log[0].argv == ["node", "--version"]

    def test_windows_uses_script(self, config_dir):
        runner = MockCommandRunner(host_os="windows")
        runner.set_output("node --version", "v22.1.0")
        status = EnvironmentProber(runner, config_dir=config_dir).probe()
        assert status.runtime_installed
        assert status.os == "windows"
        assert runner.call_log[0].shape == "script"

    def test_config_dir_from_settings(self, runner, tmp_path: Path):
        settings = ProvisionerSettings(config_dir=str(tmp_path))
        prober = EnvironmentProber(runner, settings)
        assert prober.config_dir == tmp_path
        assert prober.probe().config_dir_exists
