"""
Account Service for BizLedger.

Accounts are the owners of businesses. This service covers registration,
credential checks and terminal administration (reset, activate, deactivate).

Design Notes:
- User.id is the owner key handed to the business and ledger services
- Emails are stored lower-cased; login accepts username or email
- Failures raise AccountError subclasses, mapped to HTTP codes by the API
  and to messages by user_cli.py
- All methods are async and expect an AsyncSession.
  The caller is responsible for commit/rollback.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import User
from backend.app.logging_config import get_logger
from backend.app.schemas.account import ACRegisterItem, MIN_PASSWORD_LENGTH
from backend.app.services.auth_service import hash_password, verify_password, session_store
from backend.app.utils.datetime_utils import utcnow

logger = get_logger(__name__)


class AccountError(Exception):
    """Base class for expected account failures."""


class AccountAlreadyExistsError(AccountError):
    def __init__(self, field: str):
        self.field = field
        label = "Username already taken" if field == "username" else "Email already registered"
        super().__init__(label)


class AccountNotFoundError(AccountError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User '{username}' not found")


class InvalidCredentialsError(AccountError):
    """Unknown login, wrong password or disabled account."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class WeakPasswordError(AccountError):
    def __init__(self):
        super().__init__(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class AccountService:
    """
    Service for owner accounts.

    All methods are async and expect an AsyncSession.
    The caller is responsible for commit/rollback.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # LOOKUP
    # =========================================================================

    async def find_by_login(self, login: str) -> Optional[User]:
        stmt = select(User).where(or_(User.username == login, User.email == login.lower()))
        return (await self.session.execute(stmt)).scalars().first()

    async def get_by_username(self, username: str) -> User:
        stmt = select(User).where(User.username == username)
        user = (await self.session.execute(stmt)).scalars().first()
        if user is None:
            raise AccountNotFoundError(username)
        return user

    async def is_active_owner(self, owner_id: int) -> bool:
        """True if `owner_id` is an existing, enabled account."""
        stmt = select(User.is_active).where(User.id == owner_id)
        return bool((await self.session.execute(stmt)).scalar_one_or_none())

    async def get(self, owner_id: int) -> Optional[User]:
        return await self.session.get(User, owner_id)

    async def list(self) -> List[User]:
        stmt = select(User).order_by(User.id)
        return list((await self.session.execute(stmt)).scalars().all())

    # =========================================================================
    # REGISTER / AUTHENTICATE
    # =========================================================================

    async def register(self, item: ACRegisterItem, is_active: bool = True) -> User:
        """
        Create an account.

        Raises:
            AccountAlreadyExistsError: If username or email is taken
        """
        for field, column, value in (("username", User.username, item.username), ("email", User.email, item.email)):
            taken = await self.session.execute(select(User.id).where(column == value))
            if taken.first() is not None:
                raise AccountAlreadyExistsError(field)

        now = utcnow()
        user = User(
            username=item.username,
            email=item.email,
            hashed_password=hash_password(item.password),
            is_active=is_active,
            created_at=now,
            updated_at=now,
            )
        self.session.add(user)
        try:
            await self.session.flush()  # Get ID
        except IntegrityError as e:
            # A concurrent registration won the unique index
            raise AccountAlreadyExistsError("username") from e

        logger.info("Account registered", owner_id=user.id)
        return user

    async def authenticate(self, login: str, password: str) -> User:
        """
        Account matching `login` (username or email) and `password`.

        Raises:
            InvalidCredentialsError: Same error for unknown login and wrong password
        """
        user = await self.find_by_login(login)
        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Login rejected", login=login)
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.warning("Login rejected: account disabled", owner_id=user.id)
            raise InvalidCredentialsError("Account is disabled")
        return user

    # =========================================================================
    # ADMINISTRATION
    # =========================================================================

    async def reset_password(self, username: str, new_password: str) -> User:
        """Set a new password and close the owner's open sessions."""
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError()
        user = await self.get_by_username(username)
        user.hashed_password = hash_password(new_password)
        user.updated_at = utcnow()
        await self.session.flush()

        session_store.close_owner(user.id)
        logger.info("Password reset", owner_id=user.id)
        return user

    async def set_active(self, username: str, active: bool) -> User:
        """Enable or disable login. Disabling closes the owner's sessions."""
        user = await self.get_by_username(username)
        user.is_active = active
        user.updated_at = utcnow()
        await self.session.flush()

        if not active:
            session_store.close_owner(user.id)
        logger.info("Account activation changed", owner_id=user.id, active=active)
        return user
