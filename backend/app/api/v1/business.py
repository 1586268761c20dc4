"""
Business API endpoints for BizLedger.

Provides the caller's business profile:
- POST /business: Create the profile (one per user)
- GET /business: Get the profile with totals, net profit and ROI
- PUT /business: Update profile fields (never totals)
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.v1.auth import get_owner_id
from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger
from backend.app.schemas.business import BZCreateItem, BZUpdateItem, BZReadItem
from backend.app.schemas.common import ErrorResponse
from backend.app.services.business_service import (
    BusinessService,
    BusinessNotFoundError,
    BusinessAlreadyExistsError,
    )

logger = get_logger(__name__)

business_router = APIRouter(
    prefix="/business",
    tags=["BZ (Business)"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        },
    )


@business_router.post("", response_model=BZReadItem, status_code=201, responses={409: {"model": ErrorResponse}})
async def create_business(
    item: BZCreateItem,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> BZReadItem:
    """
    Create the caller's business profile with all totals at 0.

    Raises:
        HTTPException 409: If the caller already owns a business
    """
    service = BusinessService(session)
    try:
        business = await service.create(owner_id, item)
    except BusinessAlreadyExistsError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    await session.commit()
    return BZReadItem.model_validate(business)


@business_router.get("", response_model=BZReadItem)
async def get_business(
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> BZReadItem:
    """
    Get the caller's business.

    Raises:
        HTTPException 404: If none exists yet (clients redirect to creation)
    """
    service = BusinessService(session)
    try:
        business = await service.get_for_user(owner_id)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return BZReadItem.model_validate(business)


@business_router.put("", response_model=BZReadItem)
async def update_business(
    item: BZUpdateItem,
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> BZReadItem:
    """
    Update name, description, industry, founded_date and/or logo.

    Only fields present in the body are written. Totals are read-only here.

    Raises:
        HTTPException 404: If the caller has no business
    """
    service = BusinessService(session)
    try:
        business = await service.update(owner_id, item)
    except BusinessNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    await session.commit()
    return BZReadItem.model_validate(business)
