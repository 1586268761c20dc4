"""
Transaction API endpoints for BizLedger.

Provides RESTful endpoints for the business ledger:
- POST /transactions: Append a transaction (updates the matching total)
- GET /transactions: Paginated, filtered ledger of one business
- GET /transactions/{id}: Get single transaction
- PUT /transactions/{id}: Edit a transaction (amount delta moves the total)
- DELETE /transactions/{id}: Remove a transaction (subtracts from the total)

Every endpoint resolves the caller first; a transaction or business owned by
someone else is reported exactly like a missing one (404).
"""
from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.v1.auth import get_owner_id
from backend.app.db.models import TransactionType
from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger
from backend.app.schemas.common import DateRangeModel, ErrorResponse, MessageResponse, PaginationInfo
from backend.app.schemas.transactions import (
    TXCreateItem,
    TXReadItem,
    TXUpdateItem,
    TXQueryParams,
    TXListResponse,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    )
from backend.app.services.business_service import BusinessNotFoundError
from backend.app.services.transaction_service import (
    TransactionService,
    TransactionNotFoundError,
    LedgerValidationError,
    )

logger = get_logger(__name__)

tx_router = APIRouter(
    prefix="/transactions",
    tags=["TX (Transactions)"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        },
    )


# =============================================================================
# CREATE
# =============================================================================

@tx_router.post("", response_model=TXReadItem)
async def create_transaction(
    item: TXCreateItem,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> TXReadItem:
    """
    Append a transaction to one of the caller's businesses.

    The matching business total (investment / expenses / sales) grows by
    `amount` in the same commit.

    Raises:
        HTTPException 404: If the business is absent or not owned by the caller
    """
    service = TransactionService(session)
    try:
        tx = await service.create(owner_id, item)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    await session.commit()
    return TXReadItem.model_validate(tx)


# =============================================================================
# READ
# =============================================================================

@tx_router.get("", response_model=TXListResponse)
async def query_transactions(
    business_id: int = Query(..., gt=0, description="Business whose ledger to list"),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    start_date: Optional[date_type] = Query(None, description="First day included (YYYY-MM-DD)"),
    end_date: Optional[date_type] = Query(None, description="Last day included (YYYY-MM-DD)"),
    type: Optional[TransactionType] = Query(None, description="Filter by type"),
    category: Optional[str] = Query(None, max_length=100, description="Filter by category"),
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> TXListResponse:
    """
    List a business ledger, newest first.

    Pages past the last one return an empty list.

    Raises:
        HTTPException 400: If the date range is inverted
        HTTPException 404: If the business is absent or not owned by the caller
    """
    try:
        date_range = None
        if start_date or end_date:
            date_range = DateRangeModel(start=start_date, end=end_date)
        params = TXQueryParams(
            business_id=business_id,
            date_range=date_range,
            type=type,
            category=category or None,
            page=page,
            limit=limit,
            )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors()[0]["msg"])

    service = TransactionService(session)
    try:
        txs, total = await service.query(owner_id, params)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return TXListResponse(
        transactions=[TXReadItem.model_validate(tx) for tx in txs],
        pagination=PaginationInfo.build(total=total, page=params.page, limit=params.limit),
        )


@tx_router.get("/{tx_id}", response_model=TXReadItem)
async def get_transaction(
    tx_id: int,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> TXReadItem:
    """
    Get a single transaction by ID.

    Raises:
        HTTPException 404: If not found or not owned by the caller
    """
    service = TransactionService(session)
    try:
        tx = await service.get(owner_id, tx_id)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return TXReadItem.model_validate(tx)


# =============================================================================
# UPDATE
# =============================================================================

@tx_router.put("/{tx_id}", response_model=TXReadItem)
async def update_transaction(
    tx_id: int,
    item: TXUpdateItem,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> TXReadItem:
    """
    Edit a transaction.

    Only provided fields are updated. A new amount moves the business total
    of the transaction's type by (new - old). Type cannot be changed.

    Raises:
        HTTPException 400: If a different type is requested
        HTTPException 404: If not found or not owned by the caller
    """
    service = TransactionService(session)
    try:
        tx = await service.update(owner_id, tx_id, item)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except LedgerValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await session.commit()
    return TXReadItem.model_validate(tx)


# =============================================================================
# DELETE
# =============================================================================

@tx_router.delete("/{tx_id}", response_model=MessageResponse)
async def delete_transaction(
    tx_id: int,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> MessageResponse:
    """
    Delete a transaction and subtract its amount from the matching total.

    Raises:
        HTTPException 404: If not found or not owned by the caller
    """
    service = TransactionService(session)
    try:
        await service.delete(owner_id, tx_id)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    await session.commit()
    return MessageResponse(message="Transaction deleted successfully")
