"""Project Materializer: generate the Django project once.

The project directory's existence is the idempotency flag. When it is
absent the generator (``django-admin startproject <name>``) runs from the
base path; when present generation is skipped. Either way the project
directory is returned for the later stages to work in.
"""

from __future__ import annotations

import logging
from pathlib import Path

from djdock.config import GENERATOR_COMMAND, SETTINGS_FILENAME
from djdock.exceptions import GeneratorInvocationError
from djdock.setup import commands
from djdock.setup.i18n import _
from djdock.setup.ui.basic import ui_info, ui_success
from djdock.setup.venv import ActiveEnvironment

logger = logging.getLogger(__name__)


def settings_path(project_dir: Path, project_name: str) -> Path:
    """Return the generated settings module of a project."""
    return project_dir / project_name / SETTINGS_FILENAME


def materialize_project(
    base: Path, project_name: str, active: ActiveEnvironment
) -> Path:
    r"""Ensure ``base / project_name`` exists, generating it if absent.

    Parameters
    ----------
    base : Path
        Directory the project is generated in.
    project_name : str
        Name handed to the generator; also the inner module name.
    active : ActiveEnvironment
        Environment the generator is resolved from and run with.

    Returns
    -------
    Path
        The project directory.

    Raises
    ------
    GeneratorInvocationError
        If the generator exits non-zero or does not produce the directory.
    """
    project_dir = base / project_name
    if project_dir.is_dir():
        ui_info(_("project_exists", name=project_name))
        return project_dir

    generator = active.executable(GENERATOR_COMMAND)
    args = [str(generator), "startproject", project_name]
    result = commands.run_command(args, cwd=base, env=active.environ)
    if result.returncode != 0:
        logger.error(
            "Generator failed (%s): %s", result.returncode, (result.stderr or "").strip()
        )
        raise GeneratorInvocationError(
            f"Failed to create Django project {project_name}.",
            context={"returncode": result.returncode, "command": args},
        )
    if not project_dir.is_dir():
        raise GeneratorInvocationError(
            f"Generator finished but {project_dir} does not exist.",
            context={"command": args},
        )
    logger.info("Generated project at %s", project_dir)
    ui_success(_("project_created", name=project_name))
    return project_dir


__all__ = ["materialize_project", "settings_path"]
