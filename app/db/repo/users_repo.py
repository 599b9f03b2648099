from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, user_id: int) -> User | None:
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username(session: AsyncSession, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        email: str,
        username: str,
        now_utc: datetime,
        role: str = "user",
    ) -> User:
        user = User(
            email=email,
            username=username,
            role=role,
            total_score=0,
            games_played=0,
            best_session_score=0,
            average_score=Decimal("0"),
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(user)
        await session.flush()
        return user

    @staticmethod
    async def list_leaderboard(session: AsyncSession, *, limit: int) -> list[User]:
        stmt = (
            select(User)
            .where(User.games_played > 0)
            .order_by(
                User.total_score.desc(),
                User.best_session_score.desc(),
                User.id.asc(),
            )
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_leaderboard_for_ids(
        session: AsyncSession,
        *,
        user_ids: Sequence[int],
        always_include_user_id: int,
    ) -> list[User]:
        ids = tuple({int(user_id) for user_id in user_ids})
        stmt = (
            select(User)
            .where(
                (User.id == always_include_user_id)
                | (User.id.in_(ids) & (User.games_played > 0))
            )
            .order_by(
                User.total_score.desc(),
                User.best_session_score.desc(),
                User.id.asc(),
            )
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
