"""CLI logging setup: plain message format on stdout, optional log file."""

import logging
import sys
from pathlib import Path

from evdeploy.redact import SecretRedactingFilter


class _ConsoleFormatter(logging.Formatter):
    """Plain messages; warnings and errors get a visible level prefix."""

    def format(self, record):
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"ERROR: {message}"
        if record.levelno >= logging.WARNING:
            return f"WARNING: {message}"
        return message


def setup_cli_logging(verbose=False):
    """Configure root logger with plain message format for CLI commands.

    Produces output identical to print() for INFO records. ``verbose``
    lowers the level to DEBUG.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_ConsoleFormatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)


def add_file_handler(log_file) -> str:
    """Append a timestamped file handler writing to ``log_file``.

    Raises:
        OSError: if the file cannot be opened for appending.

    Returns:
        Path to the log file.
    """
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    file_handler.addFilter(SecretRedactingFilter())
    logging.getLogger().addHandler(file_handler)

    return str(log_path)
