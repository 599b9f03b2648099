from __future__ import annotations

from datetime import datetime

from sqlalchemy import Row, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.answers import Answer
from app.db.models.participants import Participant
from app.db.models.users import User


class ParticipantsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        session_id: int,
        user_id: int,
        now_utc: datetime,
    ) -> Participant:
        participant = Participant(
            session_id=session_id,
            user_id=user_id,
            session_score=0,
            completed=False,
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(participant)
        await session.flush()
        return participant

    @staticmethod
    async def get_for_session_user(
        session: AsyncSession,
        *,
        session_id: int,
        user_id: int,
    ) -> Participant | None:
        stmt = select(Participant).where(
            Participant.session_id == session_id,
            Participant.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_session_user_for_update(
        session: AsyncSession,
        *,
        session_id: int,
        user_id: int,
    ) -> Participant | None:
        stmt = (
            select(Participant)
            .where(
                Participant.session_id == session_id,
                Participant.user_id == user_id,
            )
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_for_session(session: AsyncSession, *, session_id: int) -> int:
        stmt = select(func.count(Participant.id)).where(Participant.session_id == session_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_ranked_for_session(session: AsyncSession, *, session_id: int) -> list[Row]:
        answers_count = (
            select(func.count(Answer.id))
            .where(Answer.participant_id == Participant.id)
            .correlate(Participant)
            .scalar_subquery()
        )
        stmt = (
            select(
                Participant,
                User.username.label("username"),
                answers_count.label("answers_count"),
            )
            .join(User, User.id == Participant.user_id)
            .where(Participant.session_id == session_id)
            .order_by(
                Participant.session_score.desc(),
                Participant.created_at.asc(),
                Participant.id.asc(),
            )
        )
        result = await session.execute(stmt)
        return list(result.all())
