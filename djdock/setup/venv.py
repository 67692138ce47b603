"""Virtual environment path helpers and activation.

Helpers for resolving platform-specific paths inside a Python virtual
environment, and ``ActiveEnvironment``: activating an environment means
deriving the process environment every later subprocess runs with. The
running interpreter's own ``os.environ`` is never modified.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


def get_venv_bin_dir(venv_path: Path) -> Path:
    """Return the platform-specific binary directory inside a virtualenv.

    Examples
    --------
    >>> from pathlib import Path
    >>> get_venv_bin_dir(Path('/tmp/venv')).name in ('bin', 'Scripts')
    True
    """
    return venv_path / ("Scripts" if sys.platform == "win32" else "bin")


def get_venv_python_executable(venv_path: Path) -> Path:
    """Return the python executable path for the given virtualenv."""
    bin_dir = get_venv_bin_dir(venv_path)
    return bin_dir / ("python.exe" if sys.platform == "win32" else "python")


def get_venv_activate_script(venv_path: Path) -> Path:
    """Return the activation entry point of the given virtualenv."""
    bin_dir = get_venv_bin_dir(venv_path)
    return bin_dir / ("activate.bat" if sys.platform == "win32" else "activate")


def get_venv_executable(venv_path: Path, name: str) -> Path:
    """Return the path of a console script installed into the virtualenv."""
    bin_dir = get_venv_bin_dir(venv_path)
    return bin_dir / (f"{name}.exe" if sys.platform == "win32" else name)


def activated_environ(venv_path: Path, base: Mapping[str, str]) -> dict[str, str]:
    r"""Return a copy of ``base`` with the virtualenv activated.

    Mirrors what the ``activate`` script does: sets ``VIRTUAL_ENV``, puts
    the environment's binary directory first on ``PATH`` and drops
    ``PYTHONHOME``.

    Parameters
    ----------
    venv_path : Path
        Root of the virtual environment.
    base : Mapping[str, str]
        Environment to derive from (usually ``os.environ``).

    Returns
    -------
    dict[str, str]
        The activated environment.

    Examples
    --------
    >>> from pathlib import Path
    >>> env = activated_environ(Path("/tmp/v"), {"PATH": "/usr/bin"})
    >>> env["VIRTUAL_ENV"]
    '/tmp/v'
    """
    environ = dict(base)
    bin_dir = str(get_venv_bin_dir(venv_path))
    current_path = environ.get("PATH", "")
    environ["PATH"] = bin_dir + (os.pathsep + current_path if current_path else "")
    environ["VIRTUAL_ENV"] = str(venv_path)
    environ.pop("PYTHONHOME", None)
    return environ


@dataclass(frozen=True)
class ActiveEnvironment:
    """An activated virtual environment handed to the later stages.

    Attributes
    ----------
    venv_dir : Path
        Root of the environment.
    environ : dict[str, str]
        Process environment with the venv activated.
    """

    venv_dir: Path
    environ: dict[str, str]

    @classmethod
    def activate(
        cls, venv_dir: Path, base: Mapping[str, str] | None = None
    ) -> ActiveEnvironment:
        """Build an activated environment from ``base`` (default ``os.environ``)."""
        return cls(
            venv_dir, activated_environ(venv_dir, base if base is not None else os.environ)
        )

    @property
    def python(self) -> Path:
        return get_venv_python_executable(self.venv_dir)

    def executable(self, name: str) -> Path:
        """Return the venv path of console script ``name``."""
        return get_venv_executable(self.venv_dir, name)


__all__ = [
    "ActiveEnvironment",
    "activated_environ",
    "get_venv_activate_script",
    "get_venv_bin_dir",
    "get_venv_executable",
    "get_venv_python_executable",
]
