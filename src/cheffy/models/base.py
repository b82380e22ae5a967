"""Shared base model definitions for Cheffy domain objects."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CheffyBaseModel(BaseModel):
    """Base model configured for Cheffy-wide defaults."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


__all__ = ["CheffyBaseModel"]
