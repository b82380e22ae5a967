"""Progress tracking types shared across the CLI, API and pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PipelineStage(str, Enum):
    """Stages a single extraction request moves through."""

    RESOLVING = "resolving"
    ACQUIRING = "acquiring"
    CHAPTERS = "chapters"
    TRANSCRIPT = "transcript"
    AGGRESSIVE = "aggressive"
    LENIENT = "lenient"
    SYNTHESIZING = "synthesizing"
    FINALIZING = "finalizing"
    COMPLETE = "complete"


class ProgressUpdate(BaseModel):
    """Structured progress payload for UI rendering and logging."""

    stage: PipelineStage
    stage_progress: int = Field(ge=0, le=100)
    overall_progress: int = Field(ge=0, le=100)
    message: str
    video_url: str

    model_config = ConfigDict(extra="forbid")


__all__ = ["PipelineStage", "ProgressUpdate"]
