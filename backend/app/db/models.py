"""
Database models for BizLedger.

All models use SQLModel (SQLAlchemy 2.x) with the following conventions:
- Money columns use Numeric(18, 2)
- Timestamps in UTC (created_at, updated_at)
- Foreign keys enforced with PRAGMA foreign_keys=ON
- One Business per User (unique businesses.user_id)
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Column,
    Index,
    Numeric,
    Text,
    CheckConstraint,
    Enum as SAEnum,
    )
from sqlmodel import Field, SQLModel

from backend.app.utils.datetime_utils import utcnow, today_date
from backend.app.utils.decimal_utils import ratio_percent, ZERO


# ============================================================================
# ENUMS
# ============================================================================

class TransactionType(str, Enum):
    """
    Ledger transaction types.

    Each type feeds exactly one running total on the owning Business:

    - INVESTMENT: capital put into the business -> total_investment
    - EXPENSE: money spent running the business -> total_expenses
    - SALE: revenue from selling goods/services -> total_sales
    """
    INVESTMENT = "investment"
    EXPENSE = "expense"
    SALE = "sale"

    @property
    def total_field(self) -> str:
        """Name of the Business column this type accumulates into."""
        return TOTAL_FIELD_BY_TYPE[self]


TOTAL_FIELD_BY_TYPE = {
    TransactionType.INVESTMENT: "total_investment",
    TransactionType.EXPENSE: "total_expenses",
    TransactionType.SALE: "total_sales",
    }

DEFAULT_CATEGORY = "other"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


# ============================================================================
# MODELS
# ============================================================================

class User(SQLModel, table=True):
    """
    Authenticated account.

    `id` is the opaque owner key carried through the identity layer and used
    as the join key into businesses; `email` is a display/login attribute only.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=50)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    hashed_password: str = Field(nullable=False)
    is_active: bool = Field(default=True, nullable=False)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Business(SQLModel, table=True):
    """
    The single financial profile owned by one user.

    Totals are running sums maintained incrementally by the ledger; they are
    clamped at zero on write. Net profit and ROI are derived on read.
    """
    __tablename__ = "businesses"
    __table_args__ = (
        Index("idx_businesses_user_created", "user_id", "created_at"),
        CheckConstraint("total_investment >= 0", name="ck_business_total_investment_non_negative"),
        CheckConstraint("total_expenses >= 0", name="ck_business_total_expenses_non_negative"),
        CheckConstraint("total_sales >= 0", name="ck_business_total_sales_non_negative"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, unique=True)

    name: str = Field(nullable=False, max_length=100)
    description: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    industry: str = Field(default="", max_length=100)
    founded_date: Optional[date_type] = Field(default=None)
    # Embedded image ("data:image/...;base64,...") or empty string
    logo: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))

    total_investment: Decimal = Field(default=ZERO, sa_column=Column(Numeric(18, 2), nullable=False, default=0))
    total_expenses: Decimal = Field(default=ZERO, sa_column=Column(Numeric(18, 2), nullable=False, default=0))
    total_sales: Decimal = Field(default=ZERO, sa_column=Column(Numeric(18, 2), nullable=False, default=0))

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def net_profit(self) -> Decimal:
        return (self.total_sales or ZERO) - (self.total_expenses or ZERO)

    @property
    def roi(self) -> Decimal:
        """Net profit as a percentage of total investment (0 when nothing was invested)."""
        return ratio_percent(self.net_profit, self.total_investment or ZERO)


class Transaction(SQLModel, table=True):
    """
    A dated financial event affecting one Business's totals.

    The owning Business is the authorization boundary: a transaction is only
    visible to the user owning `business_id`.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_business_date", "business_id", "date"),
        Index("idx_transactions_business_type", "business_id", "type"),
        Index("idx_transactions_business_category", "business_id", "category"),
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)
    business_id: int = Field(foreign_key="businesses.id", nullable=False, index=True)

    type: TransactionType = Field(
        sa_column=Column(
            SAEnum(TransactionType, values_callable=_enum_values, native_enum=False, length=16),
            nullable=False,
            )
        )
    amount: Decimal = Field(sa_column=Column(Numeric(18, 2), nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    date: date_type = Field(default_factory=today_date, nullable=False)
    category: str = Field(default=DEFAULT_CATEGORY, nullable=False, max_length=100)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
