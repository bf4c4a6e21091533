"""
External command execution.

Every external tool invocation goes through `run`, which maps a failed command
onto the error taxonomy of `hostprep.cli.lib.errors`.
"""

import logging
import shlex
import subprocess
from enum import Enum
from typing import List, Optional

from hostprep.cli.lib.errors import FatalError, StepAborted

LOG = logging.getLogger(__name__)


class OnError(Enum):
    """What to do when a command exits non-zero."""

    FATAL = "fatal"
    REPORT = "report"
    IGNORE = "ignore"


def _failure_detail(result: subprocess.CompletedProcess) -> str:
    return ((result.stderr or "") or (result.stdout or "")).strip()


def run(
    cmd: List[str],
    *,
    on_error: OnError = OnError.FATAL,
    error: Optional[str] = None,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Run an external command and capture its status and output.

    Args:
        cmd: Command and arguments
        on_error: FATAL raises FatalError, REPORT raises StepAborted,
            IGNORE returns the result untouched
        error: Short description of the action used in error messages
            (default: the command name)
        input: Text piped to the command's standard input

    Returns:
        The completed process

    Raises:
        FatalError: If the command fails and on_error is FATAL
        StepAborted: If the command fails and on_error is REPORT
    """
    what = error or cmd[0]
    LOG.debug("Running: %s", shlex.join(cmd))

    try:
        result = subprocess.run(cmd, input=input, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        result = subprocess.CompletedProcess(cmd, 127, stdout="", stderr=f"command not found: {cmd[0]}")

    if result.returncode == 0 or on_error is OnError.IGNORE:
        if result.returncode != 0:
            LOG.debug("Ignoring exit status %s from %s", result.returncode, cmd[0])
        return result

    detail = _failure_detail(result)
    message = f"{what} failed: {detail}" if detail else f"{what} failed"
    LOG.debug("%s (exit status %s)", message, result.returncode)
    if on_error is OnError.REPORT:
        raise StepAborted(message)
    raise FatalError(message)
