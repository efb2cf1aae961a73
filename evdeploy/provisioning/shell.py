"""Shell command execution helper."""

import logging
import subprocess

logger = logging.getLogger(__name__)


def run_shell_cmd(command, dry_run=False, timeout=600, cwd=None):
    """Run a command and return (returncode, stdout, stderr).

    Never raises for a failing command; callers decide what a non-zero
    return code means.

    Args:
        command: list of command arguments
        dry_run: if True, log the command instead of executing
        timeout: maximum seconds to wait for the command
        cwd: working directory for the command

    Returns:
        (returncode, stdout, stderr) tuple
    """
    if dry_run:
        suffix = f" (in {cwd})" if cwd else ""
        logger.info(f"[dry-run] {' '.join(str(c) for c in command)}{suffix}")
        return 0, "", ""

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return result.returncode, result.stdout or "", result.stderr or ""
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {' '.join(str(c) for c in command)}")
        return 1, "", ""
    except FileNotFoundError:
        logger.error(f"Error: '{command[0]}' not found. Is it installed and on PATH?")
        return 1, "", f"'{command[0]}' not found"
