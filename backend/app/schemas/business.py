"""
Business schemas for BizLedger.

DTOs for the business profile endpoints.

**Naming Convention**:
- BZ prefix: Business-related schemas
- Item suffix: Single resource payload (e.g., BZCreateItem)

**Design Notes**:
- Totals are never accepted from clients; they move only through the ledger
- net_profit and roi are derived from the totals on read
- logo is an embedded image string ("data:image/...") or empty
"""
from __future__ import annotations

from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

LOGO_PREFIX = "data:image/"


def validate_logo(v: Optional[str]) -> Optional[str]:
    """Shared validator: None passes through, otherwise '' or a data:image/ URI."""
    if v is None:
        return None
    v = v.strip()
    if v and not v.startswith(LOGO_PREFIX):
        raise ValueError("Logo must be a valid base64 image string")
    return v


def validate_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Business name must be at least 2 characters long")
    if len(v) > 100:
        raise ValueError("Business name cannot exceed 100 characters")
    return v


# =============================================================================
# BUSINESS CREATE
# =============================================================================

class BZCreateItem(BaseModel):
    """
    DTO for creating the caller's business profile.

    Used by POST /api/v1/business. Totals start at 0.
    """
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Business name (2-100 chars)")
    description: str = Field(default="", max_length=1000)
    industry: str = Field(default="", max_length=100)
    founded_date: Optional[date_type] = Field(default=None)
    logo: Optional[str] = Field(default="", description="Embedded image data URI or empty")

    @field_validator('name')
    @classmethod
    def check_name(cls, v):
        return validate_name(v)

    @field_validator('logo')
    @classmethod
    def check_logo(cls, v):
        return validate_logo(v) or ""

    @field_validator('description', 'industry', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


# =============================================================================
# BUSINESS UPDATE
# =============================================================================

class BZUpdateItem(BaseModel):
    """
    DTO for editing profile fields.

    Only fields present in the request are written. Totals cannot be edited.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None, max_length=1000)
    industry: Optional[str] = Field(default=None, max_length=100)
    founded_date: Optional[date_type] = Field(default=None)
    logo: Optional[str] = Field(default=None)

    @field_validator('name')
    @classmethod
    def check_name(cls, v):
        if v is None:
            raise ValueError("Business name is required")
        return validate_name(v)

    @field_validator('logo')
    @classmethod
    def check_logo(cls, v):
        return validate_logo(v)

    def profile_changes(self) -> dict:
        """Fields explicitly sent by the client, with logo=None stored as ''."""
        changes = self.model_dump(exclude_unset=True)
        if "logo" in changes and changes["logo"] is None:
            changes["logo"] = ""
        for key in ("description", "industry"):
            if key in changes and changes[key] is None:
                changes[key] = ""
        return changes


# =============================================================================
# BUSINESS READ
# =============================================================================

class BZReadItem(BaseModel):
    """Business profile with running totals and derived figures."""
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: int
    user_id: int
    name: str
    description: str
    industry: str
    founded_date: Optional[date_type]
    logo: str

    total_investment: Decimal
    total_expenses: Decimal
    total_sales: Decimal
    net_profit: Decimal = Field(..., description="total_sales - total_expenses")
    roi: Decimal = Field(..., description="net_profit / total_investment * 100, or 0")

    created_at: datetime
    updated_at: datetime
