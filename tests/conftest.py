"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from provisioner.adapters.mock import MockCommandRunner
from provisioner.core.context import set_os_override


@pytest.fixture(autouse=True)
def _reset_os_override():
    """The CLI --os flag sets a process-wide override; undo it per test."""
    yield
    set_os_override(None)


@pytest.fixture(autouse=True)
def _no_settings_env(monkeypatch):
    monkeypatch.delenv("OCP_CONFIG", raising=False)


@pytest.fixture
def runner() -> MockCommandRunner:
    """Mock runner modelling a clean Linux host."""
    return MockCommandRunner(host_os="linux")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Configuration root that does not exist yet."""
    return tmp_path / "openclaw"
