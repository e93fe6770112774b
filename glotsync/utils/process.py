"""Running external command-line tools."""

import logging
import shlex
import subprocess
from typing import Optional, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


def run_command(
    command: Sequence[str],
    cwd: Optional[str] = None,
    success_codes: Sequence[int] = (0,),
) -> subprocess.CompletedProcess:
    """
    Run a command without a shell and capture its output.

    Args:
        command: Program and arguments
        cwd: Working directory for the process
        success_codes: Exit codes that count as success (`git diff` exits 1 on changes)

    Returns:
        The completed process, with text stdout and stderr

    Raises:
        CommandError: If the program is missing or exits with another code
    """
    command = list(command)
    logger.debug("Running %s (cwd: %s)", shlex.join(command), cwd or ".")
    try:
        proc = subprocess.run(command, cwd=cwd, shell=False, text=True, capture_output=True)
    except FileNotFoundError as e:
        raise CommandError(command, 127, stderr=str(e)) from e

    if proc.returncode not in success_codes:
        raise CommandError(command, proc.returncode, proc.stdout, proc.stderr)
    return proc
