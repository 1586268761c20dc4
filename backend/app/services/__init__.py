"""
Services package.
Business logic shared by the API and the CLI.

- BusinessService: business profile CRUD, ownership lookup, atomic totals
- TransactionService: ledger CRUD with totals maintenance
- AccountService: registration, login checks and terminal administration
- auth_service: password hashing and the owner session store
"""
from backend.app.services.business_service import (
    BusinessService,
    BusinessNotFoundError,
    BusinessAlreadyExistsError,
    )
from backend.app.services.account_service import (
    AccountService,
    AccountError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InvalidCredentialsError,
    )
from backend.app.services.transaction_service import (
    TransactionService,
    TransactionNotFoundError,
    LedgerValidationError,
    )

__all__ = [
    "AccountService",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "InvalidCredentialsError",
    "BusinessService",
    "BusinessNotFoundError",
    "BusinessAlreadyExistsError",
    "TransactionService",
    "TransactionNotFoundError",
    "LedgerValidationError",
    ]
