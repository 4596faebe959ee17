"""Pipeline orchestration."""

from .orchestrator import AnalysisState, PipelineOrchestrator, PipelineStage

__all__ = ["AnalysisState", "PipelineOrchestrator", "PipelineStage"]
