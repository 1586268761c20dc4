"""
Account schemas for BizLedger.

DTOs for the identity endpoints.

**Naming Convention**:
- AC prefix: Account-related schemas
- Item suffix: Single resource payload (e.g., ACRegisterItem)

**Design Notes**:
- The account id is the owner key of the caller's business
- Usernames are case-sensitive; emails are normalized to lower case
- Password hashes never leave the service layer
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"
MIN_PASSWORD_LENGTH = 8


# =============================================================================
# REQUESTS
# =============================================================================

class ACRegisterItem(BaseModel):
    """Body of POST /api/v1/auth/register."""
    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ACLoginItem(BaseModel):
    """Body of POST /api/v1/auth/login; `login` is a username or an email."""
    model_config = ConfigDict(extra="forbid")

    login: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


# =============================================================================
# RESPONSES
# =============================================================================

class ACReadItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Owner key of the caller's business")
    username: str
    email: str
    is_active: bool
    created_at: datetime


class ACSessionResponse(BaseModel):
    """Returned by register and login."""
    account: ACReadItem
    message: str


class ACMeResponse(BaseModel):
    """
    The caller's account and business, if any.

    business_id is None until POST /business succeeds; clients use it to
    decide between the dashboard and the business creation form.
    """
    account: ACReadItem
    business_id: Optional[int] = None
