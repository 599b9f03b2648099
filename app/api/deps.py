from __future__ import annotations

import structlog
from fastapi import Header, HTTPException, Request

from app.core.config import get_settings
from app.db.session import SessionFactory
from app.services.auth import Principal, decode_principal, extract_bearer_token

logger = structlog.get_logger(__name__)


def get_session_factory(request: Request) -> SessionFactory:
    return request.app.state.session_factory


def _resolve_principal(authorization: str | None) -> Principal | None:
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    settings = get_settings()
    principal = decode_principal(
        token,
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    if principal is None:
        logger.info("auth_token_rejected")
    return principal


def get_optional_principal(
    authorization: str | None = Header(default=None),
) -> Principal | None:
    return _resolve_principal(authorization)


def get_principal(authorization: str | None = Header(default=None)) -> Principal:
    principal = _resolve_principal(authorization)
    if principal is None:
        raise HTTPException(status_code=401, detail={"code": "E_UNAUTHENTICATED"})
    return principal
