from __future__ import annotations

from sqlalchemy import Row, and_, delete, exists, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.db.models.answers import Answer
from app.db.models.game_sessions import GameSession
from app.db.models.participants import Participant
from app.db.models.session_invites import SessionInvite
from app.db.models.session_products import SessionProduct
from app.db.models.users import User
from app.db.repo.friendships_repo import friendship_exists_clause


def visible_to_viewer_clause(viewer_id: int | None) -> ColumnElement[bool]:
    """SQL form of the session access predicate, used to filter lists."""
    if viewer_id is None:
        return GameSession.visibility == "public"
    return or_(
        GameSession.creator_id == viewer_id,
        GameSession.visibility == "public",
        and_(
            GameSession.visibility == "friends_only",
            friendship_exists_clause(viewer_id, GameSession.creator_id),
        ),
        and_(
            GameSession.visibility == "private",
            exists().where(
                SessionInvite.session_id == GameSession.id,
                SessionInvite.invitee_id == viewer_id,
                SessionInvite.status == "accepted",
            ),
        ),
    )


def _summary_stmt(viewer_id: int | None):
    participant_count = (
        select(func.count(Participant.id))
        .where(Participant.session_id == GameSession.id)
        .correlate(GameSession)
        .scalar_subquery()
    )
    if viewer_id is None:
        is_participant: ColumnElement[bool] = false()
        has_completed: ColumnElement[bool] = false()
    else:
        is_participant = exists().where(
            Participant.session_id == GameSession.id,
            Participant.user_id == viewer_id,
        )
        has_completed = exists().where(
            Participant.session_id == GameSession.id,
            Participant.user_id == viewer_id,
            Participant.completed.is_(True),
        )
    return select(
        GameSession,
        User.username.label("creator_username"),
        participant_count.label("participant_count"),
        is_participant.label("is_participant"),
        has_completed.label("has_completed"),
    ).join(User, User.id == GameSession.creator_id)


class GameSessionsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, game_session: GameSession) -> GameSession:
        session.add(game_session)
        await session.flush()
        return game_session

    @staticmethod
    async def get_by_id(session: AsyncSession, session_id: int) -> GameSession | None:
        return await session.get(GameSession, session_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, session_id: int) -> GameSession | None:
        stmt = select(GameSession).where(GameSession.id == session_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_summary(
        session: AsyncSession,
        *,
        session_id: int,
        viewer_id: int | None,
    ) -> Row | None:
        stmt = _summary_stmt(viewer_id).where(GameSession.id == session_id)
        result = await session.execute(stmt)
        return result.one_or_none()

    @staticmethod
    async def list_summaries(
        session: AsyncSession,
        *,
        viewer_id: int | None,
        status: str | None = None,
        visibility: str | None = None,
        creator_id: int | None = None,
    ) -> list[Row]:
        stmt = _summary_stmt(viewer_id).where(visible_to_viewer_clause(viewer_id))
        if status is not None:
            stmt = stmt.where(GameSession.status == status)
        if visibility is not None:
            stmt = stmt.where(GameSession.visibility == visibility)
        if creator_id is not None:
            stmt = stmt.where(GameSession.creator_id == creator_id)
        stmt = stmt.order_by(GameSession.created_at.desc(), GameSession.id.desc())
        result = await session.execute(stmt)
        return list(result.all())

    @staticmethod
    async def delete_with_dependents(session: AsyncSession, *, session_id: int) -> int:
        participant_ids = select(Participant.id).where(Participant.session_id == session_id)
        await session.execute(delete(Answer).where(Answer.participant_id.in_(participant_ids)))
        await session.execute(delete(Participant).where(Participant.session_id == session_id))
        await session.execute(
            delete(SessionProduct).where(SessionProduct.session_id == session_id)
        )
        await session.execute(delete(SessionInvite).where(SessionInvite.session_id == session_id))
        result = await session.execute(delete(GameSession).where(GameSession.id == session_id))
        return int(result.rowcount or 0)
