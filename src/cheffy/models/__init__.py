"""Pydantic domain models for the Cheffy pipeline."""

from cheffy.models.base import CheffyBaseModel
from cheffy.models.recipe import ExtractionResult, RecipeStep, StepCategory, StepSource
from cheffy.models.transcript import SegmentGroup, TranscriptSegment

__all__ = [
    "CheffyBaseModel",
    "ExtractionResult",
    "RecipeStep",
    "SegmentGroup",
    "StepCategory",
    "StepSource",
    "TranscriptSegment",
]
