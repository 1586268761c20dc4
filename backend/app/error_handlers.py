"""
Application-wide exception handlers.

Maps failures that escape the endpoints to uniform JSON bodies:
- Request validation errors -> 400 with field-level messages
- Store connectivity errors  -> 503
- Anything else              -> 500

Internal error text is only included when settings.is_development is true.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, InterfaceError, DisconnectionError

from backend.app.config import get_settings
from backend.app.logging_config import get_logger
from backend.app.schemas.common import ErrorResponse, FieldError

logger = get_logger(__name__)

_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in _LOCATION_PREFIXES]
    return ".".join(parts) or "request"


def _clean_message(msg: str) -> str:
    # Pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


def format_validation_errors(errors) -> list[FieldError]:
    return [FieldError(field=_field_name(err.get("loc", ())), message=_clean_message(err.get("msg", ""))) for err in errors]


def _error_response(status_code: int, detail: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(detail=detail)
    if get_settings().is_development:
        body.error = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    summary = "; ".join(f"{e.field}: {e.message}" for e in errors) or "Invalid request"
    logger.info("Request validation failed", path=request.url.path, errors=[e.model_dump() for e in errors])
    body = ErrorResponse(detail=summary, errors=errors)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Database unavailable", path=request.url.path, exc_info=exc)
    return _error_response(503, "Service temporarily unavailable", exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", path=request.url.path, exc_info=exc)
    return _error_response(500, "Internal server error", exc)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    for exc_class in (OperationalError, InterfaceError, DisconnectionError):
        app.add_exception_handler(exc_class, store_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
