"""
Business Service for BizLedger.

Owns the single Business profile of each user:
- Create (one per owner), lookup, profile updates
- Ownership lookup used as the authorization check by the ledger
- Atomic, clamped adjustment of the running totals

Design Notes:
- The owner key is the opaque User.id, never the email
- Profile updates never touch totals; totals move only via adjust_total()
- adjust_total() is a single UPDATE computed in the database, so concurrent
  ledger writes cannot lose each other's increments
- All methods are async and expect an AsyncSession.
  The caller is responsible for commit/rollback.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update, case, literal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Business, TransactionType
from backend.app.logging_config import get_logger
from backend.app.schemas.business import BZCreateItem, BZUpdateItem
from backend.app.utils.datetime_utils import utcnow

logger = get_logger(__name__)


class BusinessNotFoundError(Exception):
    """
    Raised when a business does not exist or is not owned by the caller.

    Both cases share one error so that other users' data cannot be discovered.
    """

    def __init__(self, message: str = "Business not found"):
        super().__init__(message)


class BusinessAlreadyExistsError(Exception):
    """Raised when the caller already owns a business."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("A business profile already exists for this user")


class BusinessService:
    """
    Service for the business aggregate.

    All methods are async and expect an AsyncSession.
    The caller is responsible for commit/rollback.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create(self, user_id: int, item: BZCreateItem) -> Business:
        """
        Create the caller's business with all totals at 0.

        Raises:
            BusinessAlreadyExistsError: If the caller already owns a business
        """
        if await self.find_for_user(user_id) is not None:
            raise BusinessAlreadyExistsError(user_id)

        now = utcnow()
        business = Business(
            user_id=user_id,
            name=item.name,
            description=item.description,
            industry=item.industry,
            founded_date=item.founded_date,
            logo=item.logo or "",
            total_investment=Decimal("0"),
            total_expenses=Decimal("0"),
            total_sales=Decimal("0"),
            created_at=now,
            updated_at=now,
            )
        self.session.add(business)
        try:
            await self.session.flush()  # Get ID
        except IntegrityError as e:
            # Unique user_id: a concurrent create for the same owner got there first.
            # The session needs a rollback, which is left to the caller
            raise BusinessAlreadyExistsError(user_id) from e

        logger.info("Business created", business_id=business.id, user_id=user_id)
        return business

    # =========================================================================
    # READ
    # =========================================================================

    async def find_for_user(self, user_id: int) -> Optional[Business]:
        stmt = select(Business).where(Business.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: int) -> Business:
        """
        The caller's business.

        Raises:
            BusinessNotFoundError: If the caller has not created one yet
        """
        business = await self.find_for_user(user_id)
        if business is None:
            raise BusinessNotFoundError()
        return business

    async def get_owned(self, business_id: int, user_id: int) -> Business:
        """
        Business `business_id` if it belongs to `user_id`.

        This is the authorization check for every ledger operation.

        Raises:
            BusinessNotFoundError: If absent or owned by someone else
        """
        stmt = select(Business).where(Business.id == business_id, Business.user_id == user_id)
        result = await self.session.execute(stmt)
        business = result.scalar_one_or_none()
        if business is None:
            logger.warning("Business lookup denied", business_id=business_id, user_id=user_id)
            raise BusinessNotFoundError("Business not found or unauthorized")
        return business

    # =========================================================================
    # UPDATE
    # =========================================================================

    async def update(self, user_id: int, item: BZUpdateItem) -> Business:
        """
        Overwrite the profile fields present in `item`. Totals are untouched.

        Raises:
            BusinessNotFoundError: If the caller has no business
        """
        business = await self.get_for_user(user_id)

        changes = item.profile_changes()
        for field_name, value in changes.items():
            setattr(business, field_name, value)
        business.updated_at = utcnow()

        await self.session.flush()
        logger.info("Business profile updated", business_id=business.id, fields=sorted(changes))
        return business

    # =========================================================================
    # TOTALS
    # =========================================================================

    async def adjust_total(self, business_id: int, tx_type: TransactionType, delta: Decimal) -> None:
        """
        Add `delta` to the total fed by `tx_type`, clamping the result at 0.

        Issued as one UPDATE so the read-modify-write happens inside the database.
        """
        if delta == 0:
            return

        column = getattr(Business, tx_type.total_field)
        new_value = column + delta
        stmt = (
            update(Business)
            .where(Business.id == business_id)
            .values({
                tx_type.total_field: case((new_value < 0, literal(0)), else_=new_value),
                "updated_at": utcnow(),
                })
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

        logger.info(
            "Business total adjusted",
            business_id=business_id,
            total=tx_type.total_field,
            delta=str(delta),
            )

    async def refresh(self, business: Business) -> Business:
        """Reload a business after adjust_total() so totals reflect the database."""
        await self.session.refresh(business)
        return business
