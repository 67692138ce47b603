"""Orchestration file model and YAML serializer.

The compose file is built as ``ServiceSpec`` records, validated against the
environment file on that structured form, and only then dumped with
PyYAML. Key order is insertion order, so output is stable across runs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import yaml

from djdock import config as _config
from djdock.bootstrap_config import BootstrapConfig
from djdock.exceptions import DataValidationError

from .envfile import EnvFile

_VARIABLE_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?:[:?-][^}]*)?\}")


class _ComposeDumper(yaml.SafeDumper):
    """Safe dumper that writes null mapping values as empty (`postgres_data:`)."""


def _represent_none(dumper: yaml.SafeDumper, _: None) -> yaml.Node:
    return dumper.represent_scalar("tag:yaml.org,2002:null", "")


_ComposeDumper.add_representer(type(None), _represent_none)


def referenced_variables(data: Any) -> set[str]:
    """Collect every ``${NAME}`` referenced anywhere in a compose mapping.

    Examples
    --------
    >>> sorted(referenced_variables({"a": ["${X}", {"b": "${Y:-1}"}]}))
    ['X', 'Y']
    """
    found: set[str] = set()
    if isinstance(data, str):
        found.update(_VARIABLE_PATTERN.findall(data))
    elif isinstance(data, dict):
        for value in data.values():
            found |= referenced_variables(value)
    elif isinstance(data, (list, tuple)):
        for item in data:
            found |= referenced_variables(item)
    return found


@dataclass(frozen=True)
class ServiceSpec:
    """One service of the orchestration file."""

    name: str
    image: str | None = None
    build_context: str | None = None
    container_name: str | None = None
    ports: tuple[str, ...] = ()
    depends_on: tuple[str, ...] = ()
    volumes: tuple[str, ...] = ()
    environment: tuple[tuple[str, str], ...] = ()
    env_file: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {}
        if self.image:
            spec["image"] = self.image
        if self.build_context:
            spec["build"] = {"context": self.build_context}
        if self.container_name:
            spec["container_name"] = self.container_name
        if self.ports:
            spec["ports"] = list(self.ports)
        if self.depends_on:
            spec["depends_on"] = list(self.depends_on)
        if self.volumes:
            spec["volumes"] = list(self.volumes)
        if self.environment:
            spec["environment"] = dict(self.environment)
        if self.env_file:
            spec["env_file"] = list(self.env_file)
        return spec


@dataclass(frozen=True)
class ComposeSpec:
    services: tuple[ServiceSpec, ...]
    volumes: tuple[str, ...] = ()
    version: str | None = _config.COMPOSE_FILE_VERSION

    def service(self, name: str) -> ServiceSpec:
        for svc in self.services:
            if svc.name == name:
                return svc
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.version:
            data["version"] = self.version
        data["services"] = {svc.name: svc.to_dict() for svc in self.services}
        if self.volumes:
            data["volumes"] = {name: None for name in self.volumes}
        return data

    def referenced_variables(self) -> set[str]:
        return referenced_variables(self.to_dict())

    def render(self) -> str:
        return yaml.dump(
            self.to_dict(),
            Dumper=_ComposeDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def build_compose(cfg: BootstrapConfig) -> ComposeSpec:
    r"""Build the two-service orchestration spec for a configuration.

    The web service waits for the database service, publishes the
    configured port and passes the application variables through; the
    database host is pinned to the database service name.
    """
    db = _config.DB_SERVICE_NAME
    db_port = f"{_config.DB_PORT}:{_config.DB_PORT}"
    web_environment = tuple(
        (key, db if key == "DATABASE_HOST" else f"${{{key}}}")
        for key in _config.REQUIRED_ENV_KEYS
    )
    return ComposeSpec(
        services=(
            ServiceSpec(
                name=db,
                image=cfg.db_image,
                ports=(db_port,),
                volumes=(f"{_config.DB_VOLUME_NAME}:{_config.DB_DATA_PATH}",),
                environment=(
                    ("POSTGRES_DB", "${DATABASE_NAME}"),
                    ("POSTGRES_USER", "${DATABASE_USERNAME}"),
                    ("POSTGRES_PASSWORD", "${DATABASE_PASSWORD}"),
                ),
                env_file=(_config.ENV_FILENAME,),
            ),
            ServiceSpec(
                name=_config.WEB_SERVICE_NAME,
                build_context=".",
                container_name=_config.WEB_CONTAINER_NAME,
                ports=(f"{cfg.port}:{cfg.port}",),
                depends_on=(db,),
                environment=web_environment,
                env_file=(_config.ENV_FILENAME,),
            ),
        ),
        volumes=(_config.DB_VOLUME_NAME,),
    )


def check_consistency(compose: ComposeSpec, env: EnvFile) -> None:
    r"""Ensure every variable the compose file references is defined in ``env``.

    Raises
    ------
    DataValidationError
        Naming the undefined variables.
    """
    missing = sorted(compose.referenced_variables() - set(env.keys()))
    if missing:
        raise DataValidationError(
            "Orchestration file references variables missing from the env file: "
            + ", ".join(missing),
            context={"missing": missing},
        )


__all__ = [
    "ComposeSpec",
    "ServiceSpec",
    "build_compose",
    "check_consistency",
    "referenced_variables",
]
