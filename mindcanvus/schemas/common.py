"""Shared response envelopes."""
from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Page metadata attached to every paginated listing."""

    model_config = ConfigDict(populate_by_name=True)

    current: int
    pages: int
    total: int
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current=page,
            pages=math.ceil(total / limit) if limit else 0,
            total=total,
            has_next=page * limit < total,
            has_prev=page > 1,
        )


class ActionResponse(BaseModel):
    success: bool = True
    message: str


__all__ = ["Pagination", "ActionResponse"]
