"""Configuration record for the bootstrap pipeline.

This module provides ``BootstrapConfig``, the single immutable record of
every fixed value the pipeline uses (project name, image tags, port,
process manager settings, tool lists, denylist and env defaults), and
``load_config`` which builds it from the defaults in :mod:`djdock.config`
with optional ``DJDOCK_*`` overrides.

Examples
--------
>>> from djdock.bootstrap_config import load_config
>>> cfg = load_config(environ={})
>>> cfg.project_name
'my_docker_django_app'
>>> cfg.port
8000
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from djdock import config as _config
from djdock.exceptions import ConfigurationError


@dataclass(frozen=True)
class BootstrapConfig:
    r"""Every fixed constant consumed by the pipeline stages.

    Attributes
    ----------
    project_name : str
        Name passed to the project generator; also the Python module the
        image start command serves (``<project_name>.wsgi:application``).
    venv_dir_name : str
        Directory of the isolated environment, relative to the base path.
    base_image : str
        Base image for both stages of the image build file.
    port : int
        Port exposed by the image and published by the web service.
    workers : int
        Process manager worker count.
    bind_host : str
        Address the process manager binds to inside the container.
    db_image : str
        Image of the database service.
    secret_key : str
        Value written for ``DJANGO_SECRET_KEY`` in the environment file.
    required_tools : tuple[str, ...]
        External commands verified by the preflight stage.
    compose_command : tuple[str, ...]
        Argument prefix used to invoke the orchestration tool.
    packages : tuple[str, ...]
        Packages installed into the environment before generation.
    denylist : tuple[str, ...]
        Requirement lines stripped from the captured manifest.
    """

    project_name: str = _config.DEFAULT_PROJECT_NAME
    venv_dir_name: str = _config.DEFAULT_VENV_DIR_NAME
    base_image: str = _config.DEFAULT_BASE_IMAGE
    port: int = _config.DEFAULT_PORT
    workers: int = _config.DEFAULT_WORKERS
    bind_host: str = _config.DEFAULT_BIND_HOST
    db_image: str = _config.DEFAULT_DB_IMAGE
    secret_key: str = _config.DEFAULT_SECRET_KEY
    required_tools: tuple[str, ...] = _config.REQUIRED_TOOLS
    compose_command: tuple[str, ...] = _config.COMPOSE_COMMAND
    packages: tuple[str, ...] = _config.FRAMEWORK_PACKAGES
    denylist: tuple[str, ...] = _config.DEPENDENCY_DENYLIST
    env_defaults: tuple[tuple[str, str], ...] = field(
        default=_config.DEFAULT_ENV_VALUES
    )

    def __post_init__(self) -> None:
        if not self.project_name.isidentifier():
            raise ConfigurationError(
                f"Project name '{self.project_name}' is not a valid Python identifier.",
                context={"project_name": self.project_name},
            )
        if not 0 < self.port < 65536:
            raise ConfigurationError(
                f"Port {self.port} is out of range.", context={"port": self.port}
            )
        if self.workers < 1:
            raise ConfigurationError(
                "Worker count must be at least 1.", context={"workers": self.workers}
            )

    def venv_path(self, base: Path) -> Path:
        """Return the environment directory for a given base path."""
        return base / self.venv_dir_name

    def project_path(self, base: Path) -> Path:
        """Return the generated project directory for a given base path."""
        return base / self.project_name

    def env_values(self) -> tuple[tuple[str, str], ...]:
        """Return the environment file entries with the configured secret key."""
        return tuple(
            (key, self.secret_key if key == "DJANGO_SECRET_KEY" else value)
            for key, value in self.env_defaults
        )


_STR_OVERRIDES: dict[str, str] = {
    "DJDOCK_PROJECT_NAME": "project_name",
    "DJDOCK_VENV_DIR": "venv_dir_name",
    "DJDOCK_BASE_IMAGE": "base_image",
    "DJDOCK_DB_IMAGE": "db_image",
    "DJDOCK_SECRET_KEY": "secret_key",
    "DJDOCK_BIND_HOST": "bind_host",
}
_INT_OVERRIDES: dict[str, str] = {
    "DJDOCK_PORT": "port",
    "DJDOCK_WORKERS": "workers",
}


def load_config(
    environ: Mapping[str, str] | None = None, env_file: Path | None = None
) -> BootstrapConfig:
    r"""Build a ``BootstrapConfig`` from defaults plus ``DJDOCK_*`` overrides.

    When ``environ`` is omitted the process environment is used, after
    loading ``env_file`` (default :data:`djdock.config.BOOTSTRAP_ENV_FILE`)
    with ``python-dotenv``. Variables already present in the environment win
    over the file.

    Parameters
    ----------
    environ : Mapping[str, str] | None, optional
        Explicit variable mapping; disables ``.env`` loading when given.
    env_file : Path | None, optional
        Alternative dotenv file to load before reading ``os.environ``.

    Returns
    -------
    BootstrapConfig
        The validated configuration.

    Raises
    ------
    ConfigurationError
        If an integer override cannot be parsed or a value is invalid.

    Examples
    --------
    >>> load_config(environ={"DJDOCK_PORT": "9000"}).port
    9000
    """
    if environ is None:
        dotenv_path = env_file if env_file is not None else _config.BOOTSTRAP_ENV_FILE
        if dotenv_path.exists():
            load_dotenv(dotenv_path, override=False)
        environ = os.environ

    overrides: dict[str, object] = {}
    for var, attr in _STR_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overrides[attr] = value.strip()
    for var, attr in _INT_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        try:
            overrides[attr] = int(value)
        except ValueError:
            raise ConfigurationError(
                f"{var} must be an integer, got '{value}'.", context={var: value}
            ) from None

    return replace(BootstrapConfig(), **overrides)


__all__ = ["BootstrapConfig", "load_config"]
