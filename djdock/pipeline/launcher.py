"""Runtime Launcher: delegate build, migrate and superuser creation.

Three calls to the orchestration tool, in order, from the project
directory. Each non-zero exit aborts with a message naming the step. The
superuser step inherits the terminal and blocks on operator input.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

from djdock.config import MANAGE_SCRIPT, WEB_SERVICE_NAME
from djdock.exceptions import DelegatedCommandError, InteractiveInputAborted
from djdock.setup import commands
from djdock.setup.i18n import _
from djdock.setup.ui.basic import ui_info, ui_success

logger = logging.getLogger(__name__)


def _delegate(
    args: list[str],
    project_dir: Path,
    env: Mapping[str, str] | None,
    failure: str,
    *,
    interactive: bool = False,
) -> None:
    result = commands.run_command(
        args, cwd=project_dir, env=env, capture=not interactive
    )
    if result.returncode != 0:
        logger.error(
            "%s (exit %s): %s",
            failure,
            result.returncode,
            (result.stderr or "").strip(),
        )
        raise DelegatedCommandError(
            failure, returncode=result.returncode, command=args
        )


def start_services(
    project_dir: Path, compose: Sequence[str], env: Mapping[str, str] | None = None
) -> None:
    """Build images and start every service in the background."""
    _delegate(
        [*compose, "up", "--build", "-d"],
        project_dir,
        env,
        "Failed to build and run Docker containers.",
    )
    ui_success(_("containers_running"))


def apply_migrations(
    project_dir: Path, compose: Sequence[str], env: Mapping[str, str] | None = None
) -> None:
    """Run ``manage.py migrate`` in a throwaway web container."""
    _delegate(
        [*compose, "run", "--rm", WEB_SERVICE_NAME, "python", MANAGE_SCRIPT, "migrate"],
        project_dir,
        env,
        "Failed to apply Django migrations.",
    )
    ui_success(_("migrations_applied"))


def create_superuser(
    project_dir: Path, compose: Sequence[str], env: Mapping[str, str] | None = None
) -> None:
    r"""Run the interactive ``createsuperuser`` command.

    Raises
    ------
    InteractiveInputAborted
        If the operator interrupts the prompt.
    DelegatedCommandError
        If the command exits non-zero.
    """
    ui_info(_("creating_superuser"))
    args = [*compose, "run", WEB_SERVICE_NAME, "python", MANAGE_SCRIPT, "createsuperuser"]
    try:
        _delegate(
            args,
            project_dir,
            env,
            "Failed to create Django superuser.",
            interactive=True,
        )
    except KeyboardInterrupt:
        raise InteractiveInputAborted(
            "Superuser creation was interrupted by the operator."
        ) from None


def launch(
    project_dir: Path, compose: Sequence[str], env: Mapping[str, str] | None = None
) -> None:
    r"""Start the stack, migrate, then create the administrative account.

    Parameters
    ----------
    project_dir : Path
        Directory holding ``Dockerfile`` and ``docker-compose.yml``; it is
        the build context and the working directory of every call.
    compose : Sequence[str]
        Argument prefix of the orchestration tool (``docker-compose``).
    env : Mapping[str, str] | None, optional
        Environment for the delegated calls.
    """
    start_services(project_dir, compose, env)
    apply_migrations(project_dir, compose, env)
    create_superuser(project_dir, compose, env)


__all__ = ["apply_migrations", "create_superuser", "launch", "start_services"]
