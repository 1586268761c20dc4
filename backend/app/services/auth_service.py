"""
Authentication Service

Two concerns live here:
- Password hashing with bcrypt (cost from settings.BCRYPT_ROUNDS)
- SessionStore: the in-memory map from a random cookie value to the owner id

The owner id is User.id. It is the only identity the business and ledger
services ever see; usernames and emails stay inside the account layer.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import structlog

from backend.app.config import get_settings
from backend.app.utils.datetime_utils import utcnow

logger = structlog.get_logger(__name__)

SESSION_ID_BYTES = 32  # 256 bits of entropy
BCRYPT_MAX_BYTES = 72


# =============================================================================
# Password Hashing
# =============================================================================

def _password_bytes(password: str) -> bytes:
    # bcrypt ignores everything past 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False on mismatch and on a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning("Stored password hash is malformed", error=str(e))
        return False


# =============================================================================
# Owner Sessions (In-Memory)
# =============================================================================

@dataclass
class OwnerSession:
    owner_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore:
    """
    Cookie sessions keyed by an unguessable id.

    Expired entries are pruned whenever a session is opened, and lazily when
    an expired id is resolved, so the map never outgrows the live sessions
    plus the ones that expired since the last login.
    """

    def __init__(self):
        self._sessions: dict[str, OwnerSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, owner_id: int, ttl: Optional[timedelta] = None) -> str:
        """Start a session for `owner_id` and return the cookie value."""
        now = utcnow()
        self.prune(now)

        ttl = ttl if ttl is not None else timedelta(hours=get_settings().SESSION_EXPIRE_HOURS)
        session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
        self._sessions[session_id] = OwnerSession(owner_id=owner_id, created_at=now, expires_at=now + ttl)

        logger.info("Session opened", owner_id=owner_id, active_sessions=len(self._sessions))
        return session_id

    def resolve(self, session_id: str) -> Optional[int]:
        """Owner id of a live session, None if unknown or expired."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        if entry.is_expired(utcnow()):
            del self._sessions[session_id]
            return None
        return entry.owner_id

    def close(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def close_owner(self, owner_id: int) -> int:
        """Drop every session of one owner (password reset, deactivation)."""
        doomed = [sid for sid, entry in self._sessions.items() if entry.owner_id == owner_id]
        for sid in doomed:
            del self._sessions[sid]
        if doomed:
            logger.info("Owner sessions closed", owner_id=owner_id, count=len(doomed))
        return len(doomed)

    def prune(self, now: Optional[datetime] = None) -> int:
        """Remove expired sessions; returns how many were dropped."""
        now = now or utcnow()
        expired = [sid for sid, entry in self._sessions.items() if entry.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Expired sessions pruned", count=len(expired))
        return len(expired)


# Process-wide store used by the API
session_store = SessionStore()
