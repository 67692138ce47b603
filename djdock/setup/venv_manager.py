"""Environment Provisioner: create, verify and activate the project venv.

The environment lives at a fixed path under the base directory and is
created only when absent. Failure policy is *delete and fail*: when
creation fails, or the activation entry point is missing afterwards, the
environment directory is removed through the validated safe-removal
helper and the stage aborts. There is no fallback to a global interpreter.
"""

from __future__ import annotations

import logging
import subprocess
import venv
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Mapping, Sequence

from djdock.bootstrap_config import BootstrapConfig
from djdock.config import BOOTSTRAP_PACKAGES, GENERATOR_COMMAND
from djdock.exceptions import (
    DependencyInstallError,
    EnvironmentActivationError,
    EnvironmentCreationError,
)
from djdock.setup import commands
from djdock.setup.i18n import _
from djdock.setup.ui.basic import ui_error, ui_info, ui_success

from . import venv as venvmod
from .fs_utils import create_safe_path, describe_tree, safe_rmtree

logger = logging.getLogger(__name__)


def _discard_environment(venv_dir: Path, base: Path) -> None:
    """Remove a half-created environment; only ``venv_dir`` is whitelisted."""
    try:
        safe_rmtree(create_safe_path(venv_dir, base, [venv_dir]))
    except OSError as error:
        logger.error(f"Could not remove venv {venv_dir}: {error}")


def ensure_virtual_environment(venv_dir: Path, base: Path) -> Path:
    r"""Create the environment at ``venv_dir`` if absent and verify it.

    Parameters
    ----------
    venv_dir : Path
        Location of the environment (inside ``base``).
    base : Path
        The bootstrapped base path; bounds what may be removed.

    Returns
    -------
    Path
        The activation entry point of the environment.

    Raises
    ------
    EnvironmentCreationError
        If ``venv.create`` fails (typically a missing ``python3-venv``
        system package or ``ensurepip``).
    EnvironmentActivationError
        If the activation script is missing after creation.
    """
    if not venv_dir.exists():
        ui_info(_("creating_venv", path=venv_dir.name))
        try:
            venv.create(venv_dir, with_pip=True)
        except (OSError, subprocess.CalledProcessError) as error:
            logger.error(f"Error creating virtual environment: {error}")
            _discard_environment(venv_dir, base)
            ui_error(_("venv_create_failed"))
            raise EnvironmentCreationError(
                "Failed to create the virtual environment.",
                context={"venv_dir": str(venv_dir), "error": str(error)},
            ) from error

    activate_script = venvmod.get_venv_activate_script(venv_dir)
    if not activate_script.is_file():
        listing = describe_tree(venv_dir)
        logger.error(
            "Diagnostics: listing contents of %s\n%s", venv_dir, "\n".join(listing)
        )
        _discard_environment(venv_dir, base)
        ui_error(_("venv_activate_missing"))
        raise EnvironmentActivationError(
            "Virtual environment activation script not found.",
            context={"venv_dir": str(venv_dir), "listing": listing[:20]},
        )
    return activate_script


def install_framework_packages(
    active: venvmod.ActiveEnvironment, packages: Sequence[str], *, cwd: Path
) -> None:
    r"""Install the framework packages into the active environment.

    Upgrades the packaging tools first, then installs ``packages``, then
    checks that the project generator landed in the environment.

    Raises
    ------
    DependencyInstallError
        If either pip call exits non-zero or the generator is missing.
    """
    ui_info(_("installing_deps"))
    python = str(active.python)
    steps = [
        [python, "-m", "pip", "install", "--upgrade", *BOOTSTRAP_PACKAGES],
        [python, "-m", "pip", "install", *packages],
    ]
    for cmd in steps:
        cmd += ["--progress-bar", "off", "--disable-pip-version-check"]
        result = commands.run_command(cmd, cwd=cwd, env=active.environ)
        if result.returncode != 0:
            logger.error("pip failed (%s): %s", result.returncode, result.stderr)
            raise DependencyInstallError(
                "Django installation failed.",
                context={"returncode": result.returncode, "command": cmd},
            )

    if not active.executable(GENERATOR_COMMAND).exists():
        raise DependencyInstallError(
            f"Django installation failed: {GENERATOR_COMMAND} not found in "
            f"{active.venv_dir}.",
        )
    ui_success(_("deps_installed"))


@contextmanager
def provisioned_environment(
    base: Path,
    cfg: BootstrapConfig,
    environ: Mapping[str, str] | None = None,
) -> Iterator[venvmod.ActiveEnvironment]:
    r"""Ensure the project environment exists and keep it active for a block.

    Parameters
    ----------
    base : Path
        The bootstrapped base path.
    cfg : BootstrapConfig
        Supplies the environment directory name and package list.
    environ : Mapping[str, str] | None, optional
        Environment to activate on top of; ``os.environ`` when omitted.

    Yields
    ------
    ActiveEnvironment
        The activated environment, used by every later stage.

    Examples
    --------
    >>> with provisioned_environment(Path("."), load_config()) as env:  # doctest: +SKIP
    ...     env.executable("django-admin")
    """
    venv_dir = cfg.venv_path(base)
    ensure_virtual_environment(venv_dir, base)
    active = venvmod.ActiveEnvironment.activate(venv_dir, environ)
    ui_success(_("venv_activated"))
    install_framework_packages(active, cfg.packages, cwd=base)
    yield active
    # Reached on normal completion only; failures propagate past the yield.
    ui_info(_("venv_deactivated"))


__all__ = [
    "ensure_virtual_environment",
    "install_framework_packages",
    "provisioned_environment",
]
