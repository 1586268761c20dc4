"""
Transaction schemas for BizLedger.

DTOs for ledger CRUD operations.
These schemas provide strict validation for API input/output.

**Naming Convention**:
- TX prefix: Transaction-related schemas
- Item suffix: Single item payload (e.g., TXCreateItem)

**Design Notes**:
- amount is coerced to money precision (2 decimals) before the > 0 check,
  so 0.001 is rejected like 0
- amount carries at most 15 significant digits (AMOUNT_MAX_DIGITS)
- date defaults to today (UTC), category defaults to "other"
- type cannot be changed by an update; TXUpdateItem accepts it only so the
  service can reject a mismatch explicitly
"""
from __future__ import annotations

from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from backend.app.db.models import TransactionType, DEFAULT_CATEGORY
from backend.app.schemas.common import DateRangeModel, PaginationInfo
from backend.app.utils.decimal_utils import to_money

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

# SQLite stores NUMERIC as a double: 15 significant digits keep cents exact
AMOUNT_MAX_DIGITS = 15


# =============================================================================
# SHARED VALIDATORS (DRY)
# =============================================================================

def coerce_amount(v):
    """Shared before-validator: numbers and numeric strings -> money Decimal."""
    if v is None:
        return None
    return to_money(v)


def normalize_category(v) -> str:
    """Trimmed category; missing or blank becomes the default."""
    if v is None:
        return DEFAULT_CATEGORY
    v = str(v).strip()
    return v or DEFAULT_CATEGORY


def require_text(v: Optional[str], field_name: str) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError(f"{field_name} is required")
    return v


# =============================================================================
# TRANSACTION CREATE
# =============================================================================

class TXCreateItem(BaseModel):
    """
    DTO for appending one transaction to a business ledger.

    Used by POST /api/v1/transactions endpoint.
    """
    model_config = ConfigDict(extra="forbid")

    business_id: int = Field(..., gt=0, description="Owning business ID")
    type: TransactionType = Field(..., description="investment | expense | sale")
    amount: Decimal = Field(..., gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=2, description="Positive amount")
    description: str = Field(..., max_length=1000)
    date: Optional[date_type] = Field(default=None, description="Defaults to today")
    category: str = Field(default=DEFAULT_CATEGORY, max_length=100)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v):
        return coerce_amount(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return require_text(v, "Description")

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, v):
        return normalize_category(v)


# =============================================================================
# TRANSACTION READ
# =============================================================================

class TXReadItem(BaseModel):
    """Transaction as returned by the API."""
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    business_id: int
    type: TransactionType
    amount: Decimal
    description: str
    date: date_type
    category: str
    created_at: datetime
    updated_at: datetime


class TXListResponse(BaseModel):
    """One page of a business ledger."""
    transactions: List[TXReadItem]
    pagination: PaginationInfo


# =============================================================================
# TRANSACTION UPDATE
# =============================================================================

class TXUpdateItem(BaseModel):
    """
    DTO for editing one transaction.

    Only provided fields are updated. A new amount moves the owning total by
    (new - old). Sending a type different from the stored one is rejected.
    """
    model_config = ConfigDict(extra="forbid")

    type: Optional[TransactionType] = Field(default=None, description="Must match the stored type")
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=2)
    description: Optional[str] = Field(default=None, max_length=1000)
    date: Optional[date_type] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=100)

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v):
        return coerce_amount(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return require_text(v, "Description")

    @field_validator('category', mode='before')
    @classmethod
    def validate_category(cls, v):
        return None if v is None else normalize_category(v)


# =============================================================================
# TRANSACTION QUERY
# =============================================================================

class TXQueryParams(BaseModel):
    """Filters and paging for GET /api/v1/transactions."""
    model_config = ConfigDict(extra="forbid")

    business_id: int = Field(..., gt=0)
    date_range: Optional[DateRangeModel] = None
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
