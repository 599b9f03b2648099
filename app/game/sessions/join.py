from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.game.sessions.access import ensure_access
from app.game.sessions.constants import SESSION_STATUS_ACTIVE
from app.game.sessions.errors import SessionClosedError, SessionNotFoundError
from app.game.sessions.internal import (
    add_participant,
    build_participant_snapshot,
    ensure_can_add_participant,
)
from app.game.sessions.types import ParticipantSnapshot

logger = structlog.get_logger(__name__)


async def join_session(
    session: AsyncSession,
    *,
    session_id: int,
    user_id: int,
    now_utc: datetime,
) -> ParticipantSnapshot:
    # The row lock serialises concurrent joins so the capacity check cannot be overrun.
    game_session = await GameSessionsRepo.get_by_id_for_update(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    if game_session.status != SESSION_STATUS_ACTIVE:
        raise SessionClosedError
    await ensure_access(session, game_session=game_session, viewer_id=user_id)
    await ensure_can_add_participant(session, game_session=game_session, user_id=user_id)

    participant = await add_participant(
        session,
        game_session=game_session,
        user_id=user_id,
        now_utc=now_utc,
    )
    logger.info(
        "session_joined",
        session_id=session_id,
        user_id=user_id,
        participant_id=participant.id,
    )
    return build_participant_snapshot(participant)
