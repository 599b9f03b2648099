from __future__ import annotations

from datetime import datetime

from sqlalchemy import Row, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.db.models.game_sessions import GameSession
from app.db.models.session_invites import SessionInvite
from app.db.models.users import User


class SessionInvitesRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        session_id: int,
        inviter_id: int,
        invitee_id: int,
        now_utc: datetime,
    ) -> SessionInvite:
        invite = SessionInvite(
            session_id=session_id,
            inviter_id=inviter_id,
            invitee_id=invitee_id,
            status="pending",
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(invite)
        await session.flush()
        return invite

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, invite_id: int) -> SessionInvite | None:
        stmt = select(SessionInvite).where(SessionInvite.id == invite_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_session_invitee_for_update(
        session: AsyncSession,
        *,
        session_id: int,
        invitee_id: int,
    ) -> SessionInvite | None:
        stmt = (
            select(SessionInvite)
            .where(
                SessionInvite.session_id == session_id,
                SessionInvite.invitee_id == invitee_id,
            )
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_accepted(
        session: AsyncSession,
        *,
        session_id: int,
        user_id: int,
    ) -> SessionInvite | None:
        stmt = select(SessionInvite).where(
            SessionInvite.session_id == session_id,
            SessionInvite.invitee_id == user_id,
            SessionInvite.status == "accepted",
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def set_status(
        session: AsyncSession,
        *,
        invite: SessionInvite,
        status: str,
        now_utc: datetime,
    ) -> SessionInvite:
        invite.status = status
        invite.updated_at = now_utc
        await session.flush()
        return invite

    @staticmethod
    async def delete_by_id(session: AsyncSession, *, invite_id: int) -> int:
        result = await session.execute(delete(SessionInvite).where(SessionInvite.id == invite_id))
        return int(result.rowcount or 0)

    @staticmethod
    async def list_for_session(session: AsyncSession, *, session_id: int) -> list[Row]:
        stmt = (
            select(
                SessionInvite,
                User.username.label("invitee_username"),
                GameSession.name.label("session_name"),
            )
            .join(User, User.id == SessionInvite.invitee_id)
            .join(GameSession, GameSession.id == SessionInvite.session_id)
            .where(SessionInvite.session_id == session_id)
            .order_by(SessionInvite.created_at.desc(), SessionInvite.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.all())

    @staticmethod
    async def list_received(
        session: AsyncSession,
        *,
        invitee_id: int,
        status: str | None = None,
    ) -> list[Row]:
        inviter = aliased(User)
        stmt = (
            select(
                SessionInvite,
                inviter.username.label("inviter_username"),
                GameSession.name.label("session_name"),
            )
            .join(inviter, inviter.id == SessionInvite.inviter_id)
            .join(GameSession, GameSession.id == SessionInvite.session_id)
            .where(SessionInvite.invitee_id == invitee_id)
        )
        if status is not None:
            stmt = stmt.where(SessionInvite.status == status)
        stmt = stmt.order_by(SessionInvite.created_at.desc(), SessionInvite.id.desc())
        result = await session.execute(stmt)
        return list(result.all())

    @staticmethod
    async def list_sent(session: AsyncSession, *, inviter_id: int) -> list[Row]:
        stmt = (
            select(
                SessionInvite,
                User.username.label("invitee_username"),
                GameSession.name.label("session_name"),
            )
            .join(User, User.id == SessionInvite.invitee_id)
            .join(GameSession, GameSession.id == SessionInvite.session_id)
            .where(SessionInvite.inviter_id == inviter_id)
            .order_by(SessionInvite.created_at.desc(), SessionInvite.id.desc())
        )
        result = await session.execute(stmt)
        return list(result.all())
