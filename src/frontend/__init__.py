"""Pipeline glue for transpilation and output analysis."""

from .pipeline import PipelineResult, run_pipeline

__all__ = ["PipelineResult", "run_pipeline"]
