"""
Subprocess execution utilities with consistent error handling.
"""

import subprocess

from ableton_fonts.core.errors import AppEnvironmentError
from ableton_fonts.utils.logging import logger


def run_command(
    cmd: list[str],
    description: str | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a subprocess command with consistent logging and error handling.

    Args:
        cmd: Command and arguments to run
        description: Optional description for logging
        check: Whether a non-zero exit status raises

    Returns:
        CompletedProcess result

    Raises:
        AppEnvironmentError: If the executable is not installed
        subprocess.CalledProcessError: If check is True and the command fails
    """
    if description:
        logger.info(description)

    try:
        result = subprocess.run(cmd, check=check, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise AppEnvironmentError(f"Required tool not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        logger.debug(f"Command failed: {' '.join(cmd)}")
        if e.stderr:
            logger.debug(e.stderr.strip())
        raise

    if result.stdout:
        logger.debug(result.stdout.strip())
    return result


def run_privileged(
    cmd: list[str],
    description: str | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run a command through sudo.

    sudo prompts on the controlling terminal, so the call blocks until the
    user answers.

    Args:
        cmd: Command and arguments to run as root
        description: Optional description for logging
        check: Whether a non-zero exit status raises

    Returns:
        CompletedProcess result
    """
    return run_command(["sudo", *cmd], description, check)
