from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_session_factory
from app.db.session import SessionFactory

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)


async def _check_database(session_factory: SessionFactory) -> dict[str, Any]:
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        # Driver messages can carry DSN fragments; only the exception type is logged.
        logger.warning("health_database_check_failed", error_type=type(exc).__name__)
        return {"status": "failed", "error": "database_unavailable"}
    return {"status": "ok"}


async def _collect_checks(session_factory: SessionFactory) -> dict[str, dict[str, Any]]:
    return {"database": await _check_database(session_factory)}


def _all_checks_ok(checks: dict[str, dict[str, Any]]) -> bool:
    return all(check.get("status") == "ok" for check in checks.values())


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}


@router.get("/health")
async def health(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> JSONResponse:
    checks = await _collect_checks(session_factory)
    is_healthy = _all_checks_ok(checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if is_healthy else "degraded",
            "checks": checks,
        },
    )


@router.get("/ready")
async def ready(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> JSONResponse:
    checks = await _collect_checks(session_factory)
    is_ready = _all_checks_ok(checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        },
    )
