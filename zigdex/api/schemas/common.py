from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class OutputModel(BaseModel):
    """Response model populated from application dataclasses."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ValuePairResponse(OutputModel):
    native: float | None = None
    usd: float | None = None


class NotFoundResponse(BaseModel):
    success: bool = False
    error: str
