"""Subprocess boundary for every external collaborator.

The project generator, the dependency freezer, ``django-admin --version``
and the container orchestration tool are all reached through
``run_command``. Nothing else in the package calls ``subprocess``
directly, so tests substitute this one function.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from djdock.exceptions import DelegatedCommandError

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    capture: bool = True,
    timeout: int | None = None,
) -> subprocess.CompletedProcess[str]:
    r"""Run an external command and return the completed process.

    The return code is not checked here; callers decide which exit statuses
    are failures and raise a stage-specific error.

    Parameters
    ----------
    args : Sequence[str]
        Argument vector; ``args[0]`` is resolved on ``PATH`` of ``env``.
    cwd : Path
        Working directory of the child process.
    env : Mapping[str, str] | None, optional
        Full environment for the child; the current one when omitted.
    capture : bool, optional
        Capture stdout/stderr as text. When False the child inherits the
        terminal, which interactive commands require.
    timeout : int | None, optional
        Seconds before the child is killed. ``None`` waits indefinitely.

    Returns
    -------
    subprocess.CompletedProcess[str]
        The finished process, with output when ``capture`` is True.

    Raises
    ------
    DelegatedCommandError
        If the executable does not exist (return code 127).
    subprocess.TimeoutExpired
        If ``timeout`` elapses.
    """
    argv = [str(a) for a in args]
    logger.info("Running: %s (cwd=%s)", " ".join(argv), cwd)
    try:
        return subprocess.run(
            argv,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=capture,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise DelegatedCommandError(
            f"Command not found: {argv[0]}", returncode=127, command=argv
        ) from None


__all__ = ["run_command"]
