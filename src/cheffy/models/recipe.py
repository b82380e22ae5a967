"""Pydantic models describing extracted recipe steps and pipeline results."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from cheffy.models.base import CheffyBaseModel
from cheffy.utils.time import format_time


class StepCategory(str, Enum):
    """Coarse cooking stage a step belongs to."""

    PREP = "prep"
    COOKING = "cooking"
    SERVING = "serving"


class StepSource(str, Enum):
    """Pipeline stage that produced the final step list."""

    CHAPTERS = "chapters"
    TRANSCRIPT = "transcript"
    AGGRESSIVE = "aggressive"
    LENIENT = "lenient"
    SYNTHESIZED = "synthesized"
    NONE = "none"


class RecipeStep(CheffyBaseModel):
    """A single timestamped instruction shown to the cook."""

    timestamp_seconds: int = Field(ge=0)
    instruction: str = Field(min_length=1)
    category: Optional[StepCategory] = None

    @property
    def display_time(self) -> str:
        """``M:SS`` rendering of :attr:`timestamp_seconds`."""

        return format_time(self.timestamp_seconds)

    def to_payload(self) -> dict[str, object]:
        """Serialise the step using the public response field names."""

        payload: dict[str, object] = {
            "timestamp": self.timestamp_seconds,
            "time": self.display_time,
            "instruction": self.instruction,
        }
        if self.category is not None:
            payload["category"] = self.category.value
        return payload


class ExtractionResult(CheffyBaseModel):
    """Outcome of one extraction request.

    ``needs_duration`` is set when no duration was known and nothing could be produced without
    one; callers are expected to obtain the duration and retry.
    """

    video_id: str = Field(min_length=1)
    steps: List[RecipeStep] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    needs_duration: bool = False
    source: StepSource = StepSource.NONE


__all__ = ["ExtractionResult", "RecipeStep", "StepCategory", "StepSource"]
