"""
Common schemas shared across subsystems.

**Domain Coverage**:
- DateRangeModel: Inclusive date range used by ledger filters
- PaginationInfo: Page metadata returned by list endpoints
- MessageResponse: Plain confirmation body
- ErrorResponse / FieldError: Uniform error bodies produced by the error handlers
"""
from __future__ import annotations

import math
from datetime import date as date_type
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, model_validator


class DateRangeModel(BaseModel):
    """
    Inclusive date range; either bound may be open.
    """
    model_config = ConfigDict(extra="forbid")

    start: Optional[date_type] = Field(default=None, description="First day included")
    end: Optional[date_type] = Field(default=None, description="Last day included")

    @model_validator(mode='after')
    def validate_order(self) -> DateRangeModel:
        if self.start and self.end and self.end < self.start:
            raise ValueError("end date must be on or after start date")
        return self


class PaginationInfo(BaseModel):
    """Pagination metadata: pages = ceil(total / limit)."""
    model_config = ConfigDict(extra="forbid")

    total: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> PaginationInfo:
        return cls(total=total, pages=math.ceil(total / limit), page=page, limit=limit)


class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    """Single field-level validation problem."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    detail: str
    errors: Optional[List[FieldError]] = None
    error: Optional[str] = Field(default=None, description="Internal detail (development only)")
