"""
Database module exports.
"""
from backend.app.db.base import (
    SQLModel,
    # Enums
    TransactionType,
    # Models
    User,
    Business,
    Transaction,
    )
from backend.app.db.session import (
    get_sync_engine,
    get_async_engine,
    get_session_generator,
    create_all_tables,
    )

__all__ = [
    "SQLModel",
    "get_sync_engine",  # For sync scripts (migrations)
    "get_async_engine",  # For async FastAPI app
    "get_session_generator",
    "create_all_tables",
    # Enums
    "TransactionType",
    # Models
    "User",
    "Business",
    "Transaction",
    ]
