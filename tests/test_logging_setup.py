"""Tests for CLI logging setup."""

import logging

import pytest

from evdeploy.logging_setup import add_file_handler, setup_cli_logging
from evdeploy.redact import register_secret


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_cli_logging_prefixes(restore_root_logger, capsys):
    setup_cli_logging()
    log = logging.getLogger("evdeploy.test")
    log.info("plain line")
    log.warning("careful")
    log.error("broken")
    log.debug("hidden")

    out = capsys.readouterr().out.splitlines()
    assert out == ["plain line", "WARNING: careful", "ERROR: broken"]


def test_setup_cli_logging_verbose(restore_root_logger, capsys):
    setup_cli_logging(verbose=True)
    logging.getLogger("evdeploy.test").debug("details")
    assert capsys.readouterr().out == "details\n"


def test_console_redacts_child_logger_output(restore_root_logger, capsys):
    setup_cli_logging()
    register_secret("hunter2-but-longer")
    logging.getLogger("evdeploy.configure.patcher").info("passphrase hunter2-but-longer")
    assert capsys.readouterr().out == "passphrase ***\n"


def test_add_file_handler(restore_root_logger, tmp_path):
    setup_cli_logging()
    path = add_file_handler(tmp_path / "nested" / "run.log")
    logging.getLogger("evdeploy.test").warning("to file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = (tmp_path / "nested" / "run.log").read_text()
    assert path == str(tmp_path / "nested" / "run.log")
    assert "[WARNING] evdeploy.test: to file" in text
