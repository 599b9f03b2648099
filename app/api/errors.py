from __future__ import annotations

from typing import Any

import structlog
from fastapi import HTTPException

from app.db.errors import StorageUnavailableError
from app.game.sessions.errors import (
    GameSessionError,
    InviteNotFoundError,
    ProductNotInSessionError,
    SessionAccessError,
    SessionConflictError,
    SessionNotFoundError,
    SessionValidationError,
    UserNotFoundError,
)

DOMAIN_ERRORS = (GameSessionError, StorageUnavailableError)
_NOT_FOUND_ERRORS = (SessionNotFoundError, InviteNotFoundError, UserNotFoundError)

logger = structlog.get_logger(__name__)


def as_http_exception(exc: GameSessionError | StorageUnavailableError) -> HTTPException:
    """Translate a domain or storage failure into the API error envelope."""
    http_exc = _map_error(exc)
    logger.info("api_request_rejected", code=exc.code, status_code=http_exc.status_code)
    return http_exc


def _map_error(exc: GameSessionError | StorageUnavailableError) -> HTTPException:
    detail: dict[str, Any] = {"code": exc.code}
    if isinstance(exc, StorageUnavailableError):
        return HTTPException(status_code=503, detail=detail)
    if isinstance(exc, SessionValidationError):
        detail["field"] = exc.field
        detail["message"] = exc.message
        return HTTPException(status_code=400, detail=detail)
    if isinstance(exc, ProductNotInSessionError):
        return HTTPException(status_code=400, detail=detail)
    if isinstance(exc, _NOT_FOUND_ERRORS):
        return HTTPException(status_code=404, detail=detail)
    if isinstance(exc, SessionAccessError):
        detail["reason"] = exc.reason
        return HTTPException(status_code=403, detail=detail)
    if isinstance(exc, SessionConflictError):
        return HTTPException(status_code=409, detail=detail)
    return HTTPException(status_code=400, detail=detail)
