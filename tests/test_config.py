"""
Tests for settings loading — provisioner.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from provisioner.core.config.loader import (
    ConfigError,
    ProvisionerSettings,
    find_settings_file,
    load_settings,
)


@pytest.fixture
def flat_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        min_runtime_major: 24
        tool_package: openclaw@2026.1.0
        config_dir: ~/custom-openclaw
        default_config:
          gateway.mode: remote
    """)
    path = tmp_path / "provisioner.yml"
    path.write_text(content)
    return path


@pytest.fixture
def wrapped_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        provisioner:
          min_runtime_major: 23
          timeout: 600
    """)
    path = tmp_path / "provisioner.yml"
    path.write_text(content)
    return path


class TestDefaults:
    def test_defaults(self):
        s = ProvisionerSettings()
        assert s.min_runtime_major == 22
        assert s.runtime_command == "node"
        assert s.tool_command == "openclaw"
        assert s.tool_package == "openclaw@latest"
        assert s.default_config == {"gateway.mode": "local"}
        assert s.timeout is None

    def test_default_config_dir(self):
        assert ProvisionerSettings().resolved_config_dir() == Path.home() / ".openclaw"

    def test_expanded_config_dir(self):
        s = ProvisionerSettings(config_dir="~/x")
        assert s.resolved_config_dir() == Path.home() / "x"


class TestLoadSettings:
    def test_flat(self, flat_yml: Path):
        s = load_settings(flat_yml)
        assert s.min_runtime_major == 24
        assert s.tool_package == "openclaw@2026.1.0"
        assert s.default_config == {"gateway.mode": "remote"}
        assert s.resolved_config_dir() == Path.home() / "custom-openclaw"

    def test_wrapped(self, wrapped_yml: Path):
        s = load_settings(wrapped_yml)
        assert s.min_runtime_major == 23
        assert s.timeout == 600

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "provisioner.yml"
        path.write_text("")
        assert load_settings(path) == ProvisionerSettings()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "provisioner.yml"
        path.write_text("key: [unclosed")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "provisioner.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_values(self, tmp_path: Path):
        path = tmp_path / "provisioner.yml"
        path.write_text("min_runtime_major: zero\n")
        with pytest.raises(ConfigError, match="Invalid provisioner settings"):
            load_settings(path)

    def test_minimum_must_be_positive(self, tmp_path: Path):
        path = tmp_path / "provisioner.yml"
        path.write_text("min_runtime_major: 0\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_env_var(self, flat_yml: Path, monkeypatch):
        monkeypatch.setenv("OCP_CONFIG", str(flat_yml))
        assert load_settings().min_runtime_major == 24

    def test_search_upward(self, flat_yml: Path, monkeypatch):
        nested = flat_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_settings().min_runtime_major == 24


class TestFindSettingsFile:
    def test_found_in_parent(self, flat_yml: Path):
        nested = flat_yml.parent / "sub"
        nested.mkdir()
        assert find_settings_file(nested) == flat_yml

    def test_not_found(self, tmp_path: Path):
        found = find_settings_file(tmp_path)
        assert found is None or found.parent != tmp_path
