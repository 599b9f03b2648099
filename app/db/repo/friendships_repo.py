from __future__ import annotations

from datetime import datetime

from sqlalchemy import exists, select, union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.db.models.friendships import Friendship


def canonical_pair(user_a: int, user_b: int) -> tuple[int, int]:
    return (min(user_a, user_b), max(user_a, user_b))


def friendship_exists_clause(
    user_id: ColumnElement[int] | int,
    other_user_id: ColumnElement[int] | int,
) -> ColumnElement[bool]:
    return exists().where(
        ((Friendship.user_id_1 == user_id) & (Friendship.user_id_2 == other_user_id))
        | ((Friendship.user_id_1 == other_user_id) & (Friendship.user_id_2 == user_id))
    )


class FriendshipsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        user_a: int,
        user_b: int,
        now_utc: datetime,
    ) -> Friendship:
        user_id_1, user_id_2 = canonical_pair(user_a, user_b)
        friendship = Friendship(user_id_1=user_id_1, user_id_2=user_id_2, created_at=now_utc)
        session.add(friendship)
        await session.flush()
        return friendship

    @staticmethod
    async def are_friends(session: AsyncSession, *, user_a: int, user_b: int) -> bool:
        if user_a == user_b:
            return False
        user_id_1, user_id_2 = canonical_pair(user_a, user_b)
        stmt = select(Friendship.id).where(
            Friendship.user_id_1 == user_id_1,
            Friendship.user_id_2 == user_id_2,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_friend_ids(session: AsyncSession, *, user_id: int) -> list[int]:
        stmt = union(
            select(Friendship.user_id_2).where(Friendship.user_id_1 == user_id),
            select(Friendship.user_id_1).where(Friendship.user_id_2 == user_id),
        )
        result = await session.execute(stmt)
        return [int(friend_id) for friend_id in result.scalars().all()]
