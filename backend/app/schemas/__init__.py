"""
Pydantic schemas for BizLedger.

Used by the API and service layers to validate data structures and
standardize data exchange between components.

**Organization by Domain**:
- common.py: Shared schemas (DateRangeModel, PaginationInfo, error bodies)
- account.py: Identity requests/responses (AC prefix)
- business.py: Business profile schemas (BZ prefix)
- transactions.py: Ledger CRUD schemas (TX prefix)
"""
from backend.app.schemas.common import (
    DateRangeModel,
    PaginationInfo,
    MessageResponse,
    FieldError,
    ErrorResponse,
    )
from backend.app.schemas.account import (
    ACRegisterItem,
    ACLoginItem,
    ACReadItem,
    ACSessionResponse,
    ACMeResponse,
    )
from backend.app.schemas.business import (
    BZCreateItem,
    BZUpdateItem,
    BZReadItem,
    )
from backend.app.schemas.transactions import (
    TXCreateItem,
    TXReadItem,
    TXUpdateItem,
    TXQueryParams,
    TXListResponse,
    )

__all__ = [
    # Common
    "DateRangeModel",
    "PaginationInfo",
    "MessageResponse",
    "FieldError",
    "ErrorResponse",
    # Account
    "ACRegisterItem",
    "ACLoginItem",
    "ACReadItem",
    "ACSessionResponse",
    "ACMeResponse",
    # Business
    "BZCreateItem",
    "BZUpdateItem",
    "BZReadItem",
    # Transactions
    "TXCreateItem",
    "TXReadItem",
    "TXUpdateItem",
    "TXQueryParams",
    "TXListResponse",
    ]
