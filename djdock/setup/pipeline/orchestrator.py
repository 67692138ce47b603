"""Orchestrator for the bootstrap pipeline.

Walks the stages in order against an explicit base path:

``CHECKING -> PROVISIONING_ENV -> MATERIALIZING_PROJECT -> EMITTING_CONFIG
-> PATCHING_SETTINGS -> LAUNCHING -> DONE``

Every stage is announced with a rule line. The first ``AppError`` moves the
run to ``FAILED``: a labeled error line is printed, nothing already
written is rolled back, and no later stage runs. Anything that is not an
``AppError`` propagates to the caller.

Typical usage::

    from djdock.setup.pipeline import orchestrator
    result = orchestrator.run_pipeline(Path.cwd(), load_config())

"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import djdock.setup.i18n as i18n
from djdock.bootstrap_config import BootstrapConfig
from djdock.exceptions import AppError
from djdock.pipeline import launcher
from djdock.pipeline.config_emitter import emit_config
from djdock.pipeline.materializer import materialize_project, settings_path
from djdock.pipeline.settings_patcher import patch_settings
from djdock.setup.console_helpers import rprint
from djdock.setup.i18n import translate
from djdock.setup.preflight import check_required_tools
from djdock.setup.ui.basic import ui_error, ui_header, ui_info, ui_rule
from djdock.setup.venv_manager import provisioned_environment

from .status import _render_pipeline_table, _status_label

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    CHECKING = "checking"
    PROVISIONING_ENV = "provisioning_env"
    MATERIALIZING_PROJECT = "materializing_project"
    EMITTING_CONFIG = "emitting_config"
    PATCHING_SETTINGS = "patching_settings"
    LAUNCHING = "launching"
    DONE = "done"
    FAILED = "failed"

    @property
    def title(self) -> str:
        return translate(f"stage_{self.value}")


PIPELINE_STAGES: tuple[Stage, ...] = (
    Stage.CHECKING,
    Stage.PROVISIONING_ENV,
    Stage.MATERIALIZING_PROJECT,
    Stage.EMITTING_CONFIG,
    Stage.PATCHING_SETTINGS,
    Stage.LAUNCHING,
)


@dataclass(frozen=True)
class PipelineResult:
    """Terminal state of a run.

    Attributes
    ----------
    stage : Stage
        ``Stage.DONE`` or ``Stage.FAILED``.
    project_dir : Path | None
        The project directory, once materialized.
    error : AppError | None
        The error that moved the run to ``FAILED``.
    failed_stage : Stage | None
        The stage that was running when the error occurred.
    """

    stage: Stage
    project_dir: Path | None = None
    error: AppError | None = None
    failed_stage: Stage | None = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE

    @property
    def exit_code(self) -> int:
        return self.error.exit_code if self.error is not None else 0


class _Progress:
    """Per-stage status bookkeeping for one run."""

    def __init__(self) -> None:
        self.current: Stage = Stage.CHECKING
        self.statuses: dict[Stage, str] = {stage: "waiting" for stage in PIPELINE_STAGES}

    def enter(self, stage: Stage) -> None:
        self.current = stage
        self.statuses[stage] = "running"
        logger.info("Entering stage %s", stage.name)
        ui_rule(stage.title)

    def complete(self, status: str = "ok") -> None:
        self.statuses[self.current] = status

    def render(self) -> None:
        rows = [
            (stage.title, _status_label(i18n.LANG, self.statuses[stage]))
            for stage in PIPELINE_STAGES
        ]
        rprint(_render_pipeline_table(translate, rows))


def run_pipeline(
    base_path: Path,
    cfg: BootstrapConfig,
    *,
    launch: bool = True,
    environ: Mapping[str, str] | None = None,
) -> PipelineResult:
    r"""Run every bootstrap stage against ``base_path``.

    Parameters
    ----------
    base_path : Path
        Directory the environment and project are created in. The process
        working directory is never changed.
    cfg : BootstrapConfig
        Fixed values for every stage.
    launch : bool, optional
        When False the run stops after patching settings and the launch
        stage is reported as skipped.
    environ : Mapping[str, str] | None, optional
        Base process environment for the activated venv.

    Returns
    -------
    PipelineResult
        ``DONE`` on success, ``FAILED`` with the error otherwise.
    """
    base = Path(base_path).resolve()
    progress = _Progress()
    project_dir: Path | None = None
    try:
        progress.enter(Stage.CHECKING)
        check_required_tools(cfg.required_tools)
        progress.complete()

        progress.enter(Stage.PROVISIONING_ENV)
        with provisioned_environment(base, cfg, environ) as active:
            progress.complete()

            progress.enter(Stage.MATERIALIZING_PROJECT)
            project_dir = materialize_project(base, cfg.project_name, active)
            progress.complete()

            progress.enter(Stage.EMITTING_CONFIG)
            emit_config(project_dir, cfg, active)
            progress.complete()

            progress.enter(Stage.PATCHING_SETTINGS)
            patch_settings(settings_path(project_dir, cfg.project_name))
            progress.complete()

            if launch:
                progress.enter(Stage.LAUNCHING)
                launcher.launch(project_dir, cfg.compose_command, active.environ)
                progress.complete()
            else:
                progress.current = Stage.LAUNCHING
                progress.complete("skipped")
                ui_info(translate("launch_skipped"))
    except AppError as error:
        failed = progress.current
        progress.complete("fail")
        logger.error("Stage %s failed: %s %s", failed.name, error, error.context)
        progress.render()
        ui_error(translate("stage_failed", stage=failed.title))
        ui_error(error.message)
        return PipelineResult(Stage.FAILED, project_dir, error, failed)

    progress.render()
    ui_header(translate("setup_complete"))
    ui_info(translate("access_hint", port=cfg.port))
    return PipelineResult(Stage.DONE, project_dir)


__all__ = ["PIPELINE_STAGES", "PipelineResult", "Stage", "run_pipeline"]
