"""
Account API endpoints for BizLedger.

- POST /auth/register: Create an account and open a session
- POST /auth/login: Open a session (username or email)
- POST /auth/logout: Close the current session
- GET /auth/me: Caller's account and business id

`get_owner_id` is the dependency every business and ledger endpoint uses:
it turns the session cookie into the owner key and nothing more.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import get_settings
from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger, bind_request_context
from backend.app.schemas.account import (
    ACLoginItem,
    ACMeResponse,
    ACReadItem,
    ACRegisterItem,
    ACSessionResponse,
    )
from backend.app.schemas.common import ErrorResponse, MessageResponse
from backend.app.services.account_service import (
    AccountService,
    AccountAlreadyExistsError,
    InvalidCredentialsError,
    )
from backend.app.services.auth_service import session_store
from backend.app.services.business_service import BusinessService

logger = get_logger(__name__)

auth_router = APIRouter(
    prefix="/auth",
    tags=["AC (Account)"],
    responses={401: {"model": ErrorResponse}},
    )

SESSION_COOKIE_NAME = "session"
SESSION_COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"


async def get_owner_id(
    request: Request,
    session: AsyncSession = Depends(get_session_generator),
    ) -> int:
    """
    Owner key of the caller.

    Raises:
        HTTPException 401: No cookie, unknown or expired session, disabled account
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    owner_id: Optional[int] = session_store.resolve(session_id) if session_id else None
    if owner_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    # Deactivation closes sessions, but a deleted row or a manual DB edit does not
    if not await AccountService(session).is_active_owner(owner_id):
        session_store.close(session_id)
        raise HTTPException(status_code=401, detail="Not authenticated")

    bind_request_context(owner_id=owner_id)
    return owner_id


def _open_session(response: Response, owner_id: int) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_store.open(owner_id),
        max_age=get_settings().SESSION_EXPIRE_HOURS * 3600,
        httponly=True,
        samesite=SESSION_COOKIE_SAMESITE,
        secure=get_settings().SESSION_COOKIE_SECURE,
        )


@auth_router.post(
    "/register",
    response_model=ACSessionResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    )
async def register(
    item: ACRegisterItem,
    response: Response,
    session: AsyncSession = Depends(get_session_generator),
    ) -> ACSessionResponse:
    """
    Create an account and log it in.

    Raises:
        HTTPException 409: Username or email already registered
    """
    try:
        user = await AccountService(session).register(item)
    except AccountAlreadyExistsError as e:
        await session.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    await session.commit()

    _open_session(response, user.id)
    return ACSessionResponse(account=ACReadItem.model_validate(user), message="Account created")


@auth_router.post("/login", response_model=ACSessionResponse)
async def login(
    item: ACLoginItem,
    response: Response,
    session: AsyncSession = Depends(get_session_generator),
    ) -> ACSessionResponse:
    try:
        user = await AccountService(session).authenticate(item.login, item.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    _open_session(response, user.id)
    logger.info("Owner logged in", owner_id=user.id)
    return ACSessionResponse(account=ACReadItem.model_validate(user), message="Logged in")


@auth_router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response) -> MessageResponse:
    """Close the session if any; always succeeds."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        session_store.close(session_id)
    response.delete_cookie(key=SESSION_COOKIE_NAME, httponly=True, samesite=SESSION_COOKIE_SAMESITE)
    return MessageResponse(message="Logged out")


@auth_router.get("/me", response_model=ACMeResponse)
async def get_me(
    owner_id: int = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session_generator),
    ) -> ACMeResponse:
    user = await AccountService(session).get(owner_id)
    business = await BusinessService(session).find_for_user(owner_id)
    return ACMeResponse(
        account=ACReadItem.model_validate(user),
        business_id=business.id if business else None,
        )
