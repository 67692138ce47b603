"""Config Emitter runner.

Captures the installed packages, builds the four artifact records
(manifest, image build file, orchestration file, env file), checks their
invariants on the structured form, and only then writes them into the
project directory. Writes are unconditional (last writer wins) and
byte-identical for identical inputs.

Examples
--------
>>> from djdock.pipeline.config_emitter.runner import emit_config
>>> emitted = emit_config(project_dir, cfg, active)  # doctest: +SKIP
>>> emitted.dockerfile.name
'Dockerfile'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from djdock import config as _config
from djdock.bootstrap_config import BootstrapConfig
from djdock.exceptions import DataValidationError, DelegatedCommandError
from djdock.setup import commands
from djdock.setup.i18n import _
from djdock.setup.ui.basic import ui_info, ui_success, ui_warning
from djdock.setup.venv import ActiveEnvironment

from .compose import build_compose, check_consistency, referenced_variables
from .dockerfile import ImageSpec
from .envfile import EnvFile
from .manifest import DependencyManifest, build_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmittedArtifacts:
    """Paths of the files written by ``emit_config``."""

    requirements: Path
    dockerfile: Path
    compose: Path
    env_file: Path

    def all(self) -> tuple[Path, ...]:
        return (self.requirements, self.dockerfile, self.compose, self.env_file)


def write_artifact(path: Path, content: str) -> None:
    """Write ``content`` as UTF-8 with ``\\n`` line endings, replacing any file."""
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)
    logger.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))


def build_image_spec(cfg: BootstrapConfig) -> ImageSpec:
    return ImageSpec(
        project_module=cfg.project_name,
        base_image=cfg.base_image,
        port=cfg.port,
        workers=cfg.workers,
        bind_host=cfg.bind_host,
        workdir=_config.DEFAULT_WORKDIR,
        app_user=_config.DEFAULT_APP_USER,
        environment=_config.IMAGE_ENVIRONMENT,
        requirements_file=_config.REQUIREMENTS_FILENAME,
    )


def capture_freeze(active: ActiveEnvironment, cwd: Path) -> str:
    """Return ``pip freeze`` output of the active environment."""
    args = [str(active.python), "-m", "pip", "freeze"]
    result = commands.run_command(args, cwd=cwd, env=active.environ)
    if result.returncode != 0:
        raise DelegatedCommandError(
            "Failed to capture installed packages.",
            returncode=result.returncode,
            command=args,
        )
    return result.stdout or ""


def framework_version(active: ActiveEnvironment, cwd: Path) -> str:
    """Ask the installed generator for the framework version."""
    args = [str(active.executable(_config.GENERATOR_COMMAND)), "--version"]
    result = commands.run_command(args, cwd=cwd, env=active.environ)
    version = (result.stdout or "").strip()
    if result.returncode != 0 or not version:
        raise DelegatedCommandError(
            "Could not determine the installed Django version.",
            returncode=result.returncode,
            command=args,
        )
    return version


def _check_module_matches(project_dir: Path, image: ImageSpec) -> None:
    wsgi = project_dir / image.project_module / "wsgi.py"
    if not wsgi.is_file():
        raise DataValidationError(
            f"Start command serves {image.wsgi_target} but {wsgi} does not exist.",
            context={"wsgi": str(wsgi)},
        )


def emit_config(
    project_dir: Path, cfg: BootstrapConfig, active: ActiveEnvironment
) -> EmittedArtifacts:
    r"""Generate the dependency manifest, Dockerfile, compose file and ``.env``.

    Parameters
    ----------
    project_dir : Path
        Directory returned by the project materializer.
    cfg : BootstrapConfig
        Template substitution values.
    active : ActiveEnvironment
        Environment whose packages are captured.

    Returns
    -------
    EmittedArtifacts
        Paths of the four written files.

    Raises
    ------
    DelegatedCommandError
        If the freeze or version query fails.
    DataValidationError
        If any artifact invariant is violated; nothing is written then.
        A failure of the read-back check after writing raises the same
        error with the files left in place.
    """
    manifest, removed, added = build_manifest(
        capture_freeze(active, project_dir),
        cfg.denylist,
        _config.FRAMEWORK_REQUIREMENT,
        lambda: framework_version(active, project_dir),
    )
    for requirement in removed:
        ui_warning(_("denylisted_removed", line=requirement.line))
    if added is not None:
        ui_info(_("framework_added", line=added.line))

    image = build_image_spec(cfg)
    _check_module_matches(project_dir, image)

    env_file = EnvFile(cfg.env_values())
    env_file.require(_config.REQUIRED_ENV_KEYS)
    compose = build_compose(cfg)
    check_consistency(compose, env_file)

    emitted = EmittedArtifacts(
        requirements=project_dir / _config.REQUIREMENTS_FILENAME,
        dockerfile=project_dir / _config.DOCKERFILE_FILENAME,
        compose=project_dir / _config.COMPOSE_FILENAME,
        env_file=project_dir / _config.ENV_FILENAME,
    )
    write_artifact(emitted.requirements, manifest.render())
    write_artifact(emitted.dockerfile, image.render())
    write_artifact(emitted.compose, compose.render())
    write_artifact(emitted.env_file, env_file.render())
    for path in emitted.all():
        ui_success(_("artifact_written", name=path.name))
    verify_artifacts(project_dir, cfg)
    return emitted


def verify_artifacts(project_dir: Path, cfg: BootstrapConfig) -> None:
    r"""Statically re-check the written artifacts against each other.

    Reads the compose file and env file back from disk and repeats the
    variable-consistency and denylist checks, without running anything.

    Raises
    ------
    DataValidationError
        If the files on disk violate an invariant.
    """
    env_file = EnvFile.load(project_dir / _config.ENV_FILENAME)
    env_file.require(_config.REQUIRED_ENV_KEYS)
    compose_data = yaml.safe_load(
        (project_dir / _config.COMPOSE_FILENAME).read_text(encoding="utf-8")
    )
    missing = sorted(referenced_variables(compose_data) - set(env_file.keys()))
    if missing:
        raise DataValidationError(
            "Orchestration file references variables missing from the env file: "
            + ", ".join(missing),
            context={"missing": missing},
        )
    manifest = DependencyManifest.parse(
        (project_dir / _config.REQUIREMENTS_FILENAME).read_text(encoding="utf-8")
    )
    manifest.validate(cfg.denylist, _config.FRAMEWORK_REQUIREMENT)


__all__ = [
    "EmittedArtifacts",
    "build_image_spec",
    "capture_freeze",
    "emit_config",
    "framework_version",
    "verify_artifacts",
    "write_artifact",
]
