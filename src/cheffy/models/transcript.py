"""Pydantic models for raw transcript segments and their time-coherent groups."""

from __future__ import annotations

from pydantic import Field

from cheffy.models.base import CheffyBaseModel


class TranscriptSegment(CheffyBaseModel):
    """One captioned utterance with millisecond timing.

    Offsets are always stored in milliseconds regardless of the unit the upstream source used.
    """

    offset_ms: int = Field(ge=0)
    duration_ms: int = Field(default=0, ge=0)
    text: str = Field(min_length=1)

    @property
    def start_seconds(self) -> int:
        """Whole seconds at which the segment starts."""

        return self.offset_ms // 1000

    @property
    def end_seconds(self) -> int:
        """Whole seconds at which the segment ends."""

        return (self.offset_ms + self.duration_ms) // 1000


class SegmentGroup(CheffyBaseModel):
    """Contiguous run of segments merged into one candidate instruction."""

    start_seconds: int = Field(ge=0)
    end_seconds: int = Field(ge=0)
    text: str


__all__ = ["SegmentGroup", "TranscriptSegment"]
