"""Image build file model and serializer.

``ImageSpec`` holds the substitution points (base image, workdir,
environment, non-root user, port, process manager settings, project
module); ``build`` turns it into a two-stage ``Dockerfile`` record whose
``render`` output is byte-for-byte stable for equal inputs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from djdock.exceptions import DataValidationError


@dataclass(frozen=True)
class Instruction:
    """A single build instruction, optionally preceded by a comment."""

    keyword: str
    argument: str
    comment: str | None = None

    def render(self) -> list[str]:
        lines = [f"# {self.comment}"] if self.comment else []
        lines.append(f"{self.keyword} {self.argument}")
        return lines


@dataclass(frozen=True)
class BuildStage:
    base_image: str
    instructions: tuple[Instruction, ...]
    name: str | None = None
    comment: str | None = None

    def render(self) -> list[str]:
        lines = [f"# {self.comment}"] if self.comment else []
        lines.append(
            f"FROM {self.base_image} AS {self.name}" if self.name else f"FROM {self.base_image}"
        )
        for instruction in self.instructions:
            if instruction.comment:
                lines.append("")
            lines.extend(instruction.render())
        return lines


@dataclass(frozen=True)
class Dockerfile:
    stages: tuple[BuildStage, ...]

    def render(self) -> str:
        blocks = ["\n".join(stage.render()) for stage in self.stages]
        return "\n\n".join(blocks) + "\n"


@dataclass(frozen=True)
class ImageSpec:
    r"""Substitution points of the image build file.

    Attributes
    ----------
    project_module : str
        Python package of the generated project; the start command serves
        ``<project_module>.wsgi:application``.
    base_image : str
        Image for both stages.
    port : int
        Port exposed and bound by the process manager.
    workers : int
        Process manager worker count.
    bind_host : str
        Bind address of the process manager.
    workdir : str
        Application directory inside the image.
    app_user : str
        Non-root user the container runs as.
    environment : tuple[tuple[str, str], ...]
        ``ENV`` entries set in both stages.
    requirements_file : str
        Manifest copied into the builder stage.
    """

    project_module: str
    base_image: str
    port: int
    workers: int
    bind_host: str
    workdir: str
    app_user: str
    environment: tuple[tuple[str, str], ...] = field(default=())
    requirements_file: str = "requirements.txt"

    def __post_init__(self) -> None:
        if not self.project_module.isidentifier():
            raise DataValidationError(
                f"'{self.project_module}' is not an importable module name.",
                context={"project_module": self.project_module},
            )

    @property
    def wsgi_target(self) -> str:
        return f"{self.project_module}.wsgi:application"

    def command(self) -> list[str]:
        """Return the start command as an exec-form argument list."""
        return [
            "gunicorn",
            "--bind",
            f"{self.bind_host}:{self.port}",
            "--workers",
            str(self.workers),
            self.wsgi_target,
        ]

    def _env_instructions(self) -> tuple[Instruction, ...]:
        return tuple(
            Instruction("ENV", f"{key}={value}", "Set environment variables" if i == 0 else None)
            for i, (key, value) in enumerate(self.environment)
        )

    def build(self) -> Dockerfile:
        """Compose the builder and runtime stages."""
        workdir = self.workdir.rstrip("/")
        builder = BuildStage(
            self.base_image,
            self._env_instructions()
            + (
                Instruction("WORKDIR", self.workdir, "Set working directory"),
                Instruction(
                    "COPY",
                    f"{self.requirements_file} {workdir}/",
                    "Copy dependencies and install them",
                ),
                Instruction(
                    "RUN", f"pip install --no-cache-dir -r {self.requirements_file}"
                ),
            ),
            name="builder",
            comment="Use the official Python image",
        )
        runtime = BuildStage(
            self.base_image,
            self._env_instructions()
            + (
                Instruction("WORKDIR", self.workdir, "Set working directory"),
                Instruction(
                    "COPY", "--from=builder /usr/local /usr/local", "Copy dependencies and app code"
                ),
                Instruction("COPY", f". {self.workdir}"),
                Instruction(
                    "RUN",
                    f"useradd -m -r {self.app_user} && chown -R {self.app_user} {self.workdir}",
                    "Add a non-root user",
                ),
                Instruction("USER", self.app_user),
                Instruction(
                    "EXPOSE",
                    str(self.port),
                    "Expose the application port and define the startup command",
                ),
                Instruction("CMD", json.dumps(self.command())),
            ),
            comment="Final stage",
        )
        return Dockerfile((builder, runtime))

    def render(self) -> str:
        return self.build().render()


__all__ = ["BuildStage", "Dockerfile", "ImageSpec", "Instruction"]
