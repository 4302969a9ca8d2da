"""
Tests for logging setup and host context.
"""

import logging
from pathlib import Path

import pytest

from provisioner.core import context
from provisioner.core.observability.logging_config import configure, resolve_level, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags(self):
        assert resolve_level(debug=True, verbose=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("OCP_LOG_LEVEL", "INFO")
        assert resolve_level() == "INFO"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("OCP_LOG_LEVEL", raising=False)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, restore_root_logger):
        setup_logging("INFO")
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1

    def test_bad_level_defaults_to_warning(self, restore_root_logger):
        setup_logging("LOUD")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path: Path):
        log_file = tmp_path / "provisioner.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        assert restore_root_logger.level == logging.DEBUG
        logging.getLogger("provisioner.test").debug("written to file")
        for h in restore_root_logger.handlers:
            h.flush()
        assert "written to file" in log_file.read_text()


class TestConfigure:
    def test_file_from_env(self, restore_root_logger, monkeypatch, tmp_path: Path):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("OCP_LOG_FILE", str(log_file))
        monkeypatch.setenv("OCP_LOG_FILE_LEVEL", "INFO")
        configure(quiet=True)
        assert len(restore_root_logger.handlers) == 2
        assert restore_root_logger.level == logging.INFO
        logging.getLogger("provisioner.test").info("from env")
        for h in restore_root_logger.handlers:
            h.flush()
        assert "from env" in log_file.read_text()

    def test_no_file_without_env(self, restore_root_logger, monkeypatch):
        monkeypatch.delenv("OCP_LOG_FILE", raising=False)
        configure(debug=True)
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.DEBUG


class TestContext:
    def test_detects_macos(self, monkeypatch):
        monkeypatch.setattr(context.platform, "system", lambda: "Darwin")
        assert context.get_os_name() == "macos"
        assert context.get_host_os() == "macos"

    def test_unknown_os_keeps_name(self, monkeypatch):
        monkeypatch.setattr(context.platform, "system", lambda: "FreeBSD")
        assert context.get_os_name() == "freebsd"
        assert context.get_host_os() == "other"

    def test_override(self):
        context.set_os_override("windows")
        assert context.get_os_name() == "windows"
        context.set_os_override(None)

    def test_config_dir(self):
        assert context.get_config_dir() == Path.home() / ".openclaw"
