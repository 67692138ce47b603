"""Pipeline orchestration and status rendering for the bootstrap run."""

from .orchestrator import PIPELINE_STAGES, PipelineResult, Stage, run_pipeline

__all__ = ["PIPELINE_STAGES", "PipelineResult", "Stage", "run_pipeline"]
