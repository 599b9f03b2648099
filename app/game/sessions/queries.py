from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.participants_repo import ParticipantsRepo
from app.db.repo.session_products_repo import SessionProductsRepo
from app.game.sessions.access import ensure_access
from app.game.sessions.constants import SESSION_STATUSES, SESSION_VISIBILITIES
from app.game.sessions.errors import (
    NotParticipantError,
    SessionNotFoundError,
    SessionValidationError,
)
from app.game.sessions.internal import build_session_snapshot
from app.game.sessions.types import ParticipantStanding, SessionProductView, SessionSnapshot


async def get_session(
    session: AsyncSession,
    *,
    session_id: int,
    viewer_id: int | None,
) -> SessionSnapshot:
    row = await GameSessionsRepo.get_summary(session, session_id=session_id, viewer_id=viewer_id)
    if row is None:
        raise SessionNotFoundError
    await ensure_access(session, game_session=row[0], viewer_id=viewer_id)
    return build_session_snapshot(row)


async def list_sessions(
    session: AsyncSession,
    *,
    viewer_id: int | None,
    status: str | None = None,
    visibility: str | None = None,
    creator_id: int | None = None,
) -> list[SessionSnapshot]:
    if status is not None and status not in SESSION_STATUSES:
        raise SessionValidationError("status", "Unknown session status.")
    if visibility is not None and visibility not in SESSION_VISIBILITIES:
        raise SessionValidationError("visibility", "Unknown session visibility.")
    rows = await GameSessionsRepo.list_summaries(
        session,
        viewer_id=viewer_id,
        status=status,
        visibility=visibility,
        creator_id=creator_id,
    )
    return [build_session_snapshot(row) for row in rows]


async def list_participants(
    session: AsyncSession,
    *,
    session_id: int,
    viewer_id: int | None,
) -> list[ParticipantStanding]:
    game_session = await GameSessionsRepo.get_by_id(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    await ensure_access(session, game_session=game_session, viewer_id=viewer_id)

    rows = await ParticipantsRepo.list_ranked_for_session(session, session_id=session_id)
    return [
        ParticipantStanding(
            participant_id=row[0].id,
            user_id=row[0].user_id,
            username=row.username,
            session_score=int(row[0].session_score),
            completed=bool(row[0].completed),
            answers_count=int(row.answers_count or 0),
            joined_at=row[0].created_at,
        )
        for row in rows
    ]


async def get_session_products(
    session: AsyncSession,
    *,
    session_id: int,
    viewer_id: int,
) -> list[SessionProductView]:
    game_session = await GameSessionsRepo.get_by_id(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    await ensure_access(session, game_session=game_session, viewer_id=viewer_id)
    participant = await ParticipantsRepo.get_for_session_user(
        session,
        session_id=session_id,
        user_id=viewer_id,
    )
    if participant is None:
        raise NotParticipantError

    rows = await SessionProductsRepo.list_for_session(session, session_id=session_id)
    return [
        SessionProductView(
            product_id=int(row.id),
            name=row.name,
            image_url=row.image_url,
            position=int(row.position),
        )
        for row in rows
    ]
