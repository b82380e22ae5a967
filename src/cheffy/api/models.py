from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from cheffy.models.recipe import ExtractionResult, StepCategory


class ExtractionRequest(BaseModel):
    url: Optional[str] = None
    duration: Optional[float] = None


class StepPayload(BaseModel):
    timestamp: int
    time: str
    instruction: str
    category: Optional[StepCategory] = None


class ExtractionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: str = Field(alias="videoId")
    steps: List[StepPayload] = Field(default_factory=list)
    duration: float = 0.0
    needs_duration: Optional[bool] = Field(default=None, alias="needsDuration")
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ExtractionResponse":
        return cls(
            video_id=result.video_id,
            steps=[StepPayload(**step.to_payload()) for step in result.steps],
            duration=result.duration_seconds,
            needs_duration=True if result.needs_duration else None,
        )


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
