from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_optional_principal, get_principal, get_session_factory
from app.api.errors import DOMAIN_ERRORS, as_http_exception
from app.db.session import SessionFactory, transaction
from app.game.leaderboards.service import (
    get_friends_leaderboard,
    get_global_leaderboard,
    get_session_leaderboard,
)
from app.services.auth import Principal

from .leaderboard_models import (
    SessionLeaderboardResponse,
    UserLeaderboardResponse,
    session_entry_as_response,
    user_entry_as_response,
)
from .sessions_models import RowIdPath

router = APIRouter(tags=["leaderboard"])


@router.get("/api/leaderboard/global")
async def global_leaderboard(
    limit: int | None = Query(default=None),
    principal: Principal | None = Depends(get_optional_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> UserLeaderboardResponse:
    try:
        async with transaction(session_factory) as session:
            entries = await get_global_leaderboard(
                session,
                viewer_id=principal.user_id if principal is not None else None,
                limit=limit,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return UserLeaderboardResponse(
        scope="global",
        entries=[user_entry_as_response(entry) for entry in entries],
    )


@router.get("/api/leaderboard/friends")
async def friends_leaderboard(
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> UserLeaderboardResponse:
    try:
        async with transaction(session_factory) as session:
            entries = await get_friends_leaderboard(session, viewer_id=principal.user_id)
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return UserLeaderboardResponse(
        scope="friends",
        entries=[user_entry_as_response(entry) for entry in entries],
    )


@router.get("/api/leaderboard/session/{session_id}")
async def session_leaderboard(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SessionLeaderboardResponse:
    try:
        async with transaction(session_factory) as session:
            entries = await get_session_leaderboard(
                session,
                session_id=session_id,
                viewer_id=principal.user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return SessionLeaderboardResponse(
        session_id=session_id,
        entries=[session_entry_as_response(entry) for entry in entries],
    )
