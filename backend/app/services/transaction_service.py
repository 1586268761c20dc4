"""
Transaction Service for BizLedger.

Centralizes all ledger business logic:
- CRUD operations with validation
- Ownership check through the owning Business before any write
- Incremental maintenance of the Business running totals

Design Notes:
- Every operation verifies ownership first and aborts before the first write
- The ledger write and the totals write are flushed in the same session; the
  endpoint commits once, so both land or neither does
- Totals move through BusinessService.adjust_total (atomic UPDATE)
- Changing a transaction's type on update is rejected
- All methods are async and expect an AsyncSession.
  The caller is responsible for commit/rollback.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Transaction, Business
from backend.app.logging_config import get_logger
from backend.app.schemas.transactions import (
    TXCreateItem,
    TXUpdateItem,
    TXQueryParams,
    )
from backend.app.services.business_service import BusinessService, BusinessNotFoundError
from backend.app.utils.datetime_utils import utcnow, today_date

logger = get_logger(__name__)


class TransactionNotFoundError(Exception):
    """
    Raised when a transaction does not exist or its business is not owned by
    the caller.
    """

    def __init__(self, tx_id: int, message: str = "Transaction not found"):
        self.tx_id = tx_id
        super().__init__(message)


class LedgerValidationError(Exception):
    """Raised when a request is well-formed but violates a ledger rule."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class TransactionService:
    """
    Service for managing ledger transactions.

    All methods are async and expect an AsyncSession.
    The caller is responsible for commit/rollback.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.business_service = BusinessService(session)

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create(self, user_id: int, item: TXCreateItem) -> Transaction:
        """
        Append a transaction and add its amount to the matching total.

        Process:
        1. Verify the caller owns item.business_id
        2. Insert the transaction (date defaults to today, category to "other")
        3. Increment the total fed by item.type

        Raises:
            BusinessNotFoundError: If the business is absent or not owned
        """
        await self.business_service.get_owned(item.business_id, user_id)

        now = utcnow()
        tx = Transaction(
            business_id=item.business_id,
            type=item.type,
            amount=item.amount,
            description=item.description,
            date=item.date or today_date(),
            category=item.category,
            created_at=now,
            updated_at=now,
            )
        self.session.add(tx)
        await self.session.flush()  # Get ID

        await self.business_service.adjust_total(item.business_id, item.type, item.amount)

        logger.info(
            "Transaction created",
            transaction_id=tx.id,
            business_id=tx.business_id,
            type=tx.type.value,
            amount=str(tx.amount),
            )
        return tx

    # =========================================================================
    # READ
    # =========================================================================

    async def query(self, user_id: int, params: TXQueryParams) -> Tuple[List[Transaction], int]:
        """
        One page of a business ledger, newest first.

        Returns:
            (transactions on the requested page, total matching count)

        Raises:
            BusinessNotFoundError: If the business is absent or not owned
        """
        await self.business_service.get_owned(params.business_id, user_id)

        conditions = [Transaction.business_id == params.business_id]

        if params.date_range:
            if params.date_range.start:
                conditions.append(Transaction.date >= params.date_range.start)
            if params.date_range.end:
                conditions.append(Transaction.date <= params.date_range.end)

        if params.type:
            conditions.append(Transaction.type == params.type)

        if params.category:
            conditions.append(Transaction.category == params.category.strip())

        count_stmt = select(func.count()).select_from(Transaction).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        # Order by date desc, id desc for consistent pagination
        stmt = (
            select(Transaction)
            .where(*conditions)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get(self, user_id: int, tx_id: int) -> Transaction:
        """
        A single transaction visible to the caller.

        Raises:
            TransactionNotFoundError: If absent or owned by another user
        """
        tx, _ = await self._get_owned(user_id, tx_id)
        return tx

    async def _get_owned(self, user_id: int, tx_id: int) -> Tuple[Transaction, Business]:
        tx = await self.session.get(Transaction, tx_id)
        if tx is None:
            raise TransactionNotFoundError(tx_id)

        try:
            business = await self.business_service.get_owned(tx.business_id, user_id)
        except BusinessNotFoundError as e:
            raise TransactionNotFoundError(tx_id, "Transaction not found or unauthorized") from e

        return tx, business

    # =========================================================================
    # UPDATE
    # =========================================================================

    async def update(self, user_id: int, tx_id: int, item: TXUpdateItem) -> Transaction:
        """
        Edit a transaction; a new amount moves the owning total by (new - old).

        Raises:
            TransactionNotFoundError: If absent or not owned
            LedgerValidationError: If item.type differs from the stored type
        """
        tx, business = await self._get_owned(user_id, tx_id)

        if item.type is not None and item.type != tx.type:
            raise LedgerValidationError(
                "type",
                f"Transaction type cannot be changed (stored: {tx.type.value}); "
                f"delete it and create a new one instead",
                )

        amount_diff = Decimal("0")
        if item.amount is not None:
            amount_diff = item.amount - tx.amount
            tx.amount = item.amount

        if item.description is not None:
            tx.description = item.description

        if item.date is not None:
            tx.date = item.date

        if item.category is not None:
            tx.category = item.category

        tx.updated_at = utcnow()
        await self.session.flush()

        await self.business_service.adjust_total(business.id, tx.type, amount_diff)

        logger.info(
            "Transaction updated",
            transaction_id=tx.id,
            business_id=business.id,
            amount_diff=str(amount_diff),
            )
        return tx

    # =========================================================================
    # DELETE
    # =========================================================================

    async def delete(self, user_id: int, tx_id: int) -> None:
        """
        Remove a transaction and subtract its amount from the matching total.

        Raises:
            TransactionNotFoundError: If absent or not owned
        """
        tx, business = await self._get_owned(user_id, tx_id)

        await self.business_service.adjust_total(business.id, tx.type, -tx.amount)
        await self.session.delete(tx)
        await self.session.flush()

        logger.info(
            "Transaction deleted",
            transaction_id=tx_id,
            business_id=business.id,
            type=tx.type.value,
            amount=str(tx.amount),
            )

