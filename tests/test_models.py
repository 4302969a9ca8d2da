"""
Tests for domain models — EnvironmentStatus, InstallResult, strategies.
"""

import itertools

import pytest
from pydantic import ValidationError

from provisioner.core.models import (
    ChainOutcome,
    EnvironmentStatus,
    InstallResult,
    Procedure,
    TerminalLaunch,
    normalize_os,
)
from provisioner.core.models.strategy import Attempt


class TestEnvironmentStatus:
    @pytest.mark.parametrize(
        "runtime,version_ok,tool",
        list(itertools.product([True, False], repeat=3)),
    )
    def test_ready_is_conjunction(self, runtime, version_ok, tool):
        status = EnvironmentStatus(
            runtime_installed=runtime,
            runtime_version_ok=version_ok,
            tool_installed=tool,
        )
        assert status.ready is (runtime and version_ok and tool)

    def test_ready_serialized(self):
        status = EnvironmentStatus(
            runtime_installed=True, runtime_version="v22.1.0",
            runtime_version_ok=True, tool_installed=True, os="linux",
        )
        d = status.to_dict()
        assert d["ready"] is True
        assert d["os"] == "linux"
        assert d["runtime_version"] == "v22.1.0"

    def test_frozen(self):
        status = EnvironmentStatus()
        with pytest.raises(ValidationError):
            status.runtime_installed = True

    def test_ready_not_settable(self):
        status = EnvironmentStatus(runtime_installed=False)
        with pytest.raises((ValidationError, AttributeError)):
            status.ready = True

    def test_equality(self):
        assert EnvironmentStatus(os="macos") == EnvironmentStatus(os="macos")

    def test_invalid_os(self):
        with pytest.raises(ValidationError):
            EnvironmentStatus(os="beos")


class TestInstallResult:
    def test_ok(self):
        r = InstallResult.ok("done")
        assert r.success
        assert r.message == "done"
        assert r.error is None

    def test_failure_with_error(self):
        r = InstallResult.failure("failed", error="exit 1")
        assert not r.success
        assert r.error == "exit 1"

    def test_failure_always_has_error(self):
        r = InstallResult.failure("failed")
        assert r.error == "failed"

    def test_message_required(self):
        with pytest.raises(ValidationError):
            InstallResult(success=True)


class TestNormalizeOs:
    @pytest.mark.parametrize("name,expected", [
        ("windows", "windows"),
        ("Windows", "windows"),
        ("win32", "windows"),
        ("macos", "macos"),
        ("Darwin", "macos"),
        ("linux", "linux"),
        ("freebsd", "other"),
        ("", "other"),
        (None, "other"),
    ])
    def test_mapping(self, name, expected):
        assert normalize_os(name) == expected


class TestStrategyModels:
    def test_procedure_defaults(self):
        p = Procedure(name="x", script="echo")
        assert p.final is True
        assert p.exclusive is False
        assert p.requires is None

    def test_chain_outcome_ran(self):
        outcome = ChainOutcome(ok=True, attempts=[
            Attempt(procedure="winget", status="skipped"),
            Attempt(procedure="fnm", status="ok"),
        ])
        assert outcome.ran == ["fnm"]

    def test_terminal_launch_state(self):
        assert TerminalLaunch(kind="tool", state="launched", message="m").launched
        assert not TerminalLaunch(kind="tool", state="launch_failed", message="m").launched
