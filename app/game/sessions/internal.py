from __future__ import annotations

from datetime import datetime

from sqlalchemy import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.answers import Answer
from app.db.models.game_sessions import GameSession
from app.db.models.participants import Participant
from app.db.models.session_invites import SessionInvite
from app.db.repo.participants_repo import ParticipantsRepo
from app.game.sessions.errors import AlreadyParticipantError, SessionFullError
from app.game.sessions.types import (
    AnswerSnapshot,
    InviteSnapshot,
    ParticipantSnapshot,
    SessionSnapshot,
)


def build_session_snapshot(row: Row) -> SessionSnapshot:
    game_session: GameSession = row[0]
    return SessionSnapshot(
        session_id=game_session.id,
        name=game_session.name,
        creator_id=game_session.creator_id,
        creator_username=row.creator_username,
        status=game_session.status,
        difficulty=game_session.difficulty,
        visibility=game_session.visibility,
        max_participants=game_session.max_participants,
        participant_count=int(row.participant_count or 0),
        is_participant=bool(row.is_participant),
        has_completed=bool(row.has_completed),
        created_at=game_session.created_at,
        updated_at=game_session.updated_at,
    )


def build_participant_snapshot(participant: Participant) -> ParticipantSnapshot:
    return ParticipantSnapshot(
        participant_id=participant.id,
        session_id=participant.session_id,
        user_id=participant.user_id,
        session_score=int(participant.session_score),
        completed=bool(participant.completed),
        created_at=participant.created_at,
    )


def build_answer_snapshot(answer: Answer) -> AnswerSnapshot:
    return AnswerSnapshot(
        answer_id=answer.id,
        participant_id=answer.participant_id,
        product_id=answer.product_id,
        guessed_price=answer.guessed_price,
        score=int(answer.score),
        created_at=answer.created_at,
    )


def build_invite_snapshot(
    invite: SessionInvite,
    *,
    session_name: str | None = None,
    inviter_username: str | None = None,
    invitee_username: str | None = None,
) -> InviteSnapshot:
    return InviteSnapshot(
        invite_id=invite.id,
        session_id=invite.session_id,
        inviter_id=invite.inviter_id,
        invitee_id=invite.invitee_id,
        status=invite.status,
        created_at=invite.created_at,
        updated_at=invite.updated_at,
        session_name=session_name,
        inviter_username=inviter_username,
        invitee_username=invitee_username,
    )


async def ensure_can_add_participant(
    session: AsyncSession,
    *,
    game_session: GameSession,
    user_id: int,
) -> None:
    """Membership and capacity checks; the caller must hold the session row lock."""
    existing = await ParticipantsRepo.get_for_session_user(
        session,
        session_id=game_session.id,
        user_id=user_id,
    )
    if existing is not None:
        raise AlreadyParticipantError
    participants_total = await ParticipantsRepo.count_for_session(
        session,
        session_id=game_session.id,
    )
    if participants_total >= int(game_session.max_participants):
        raise SessionFullError


async def add_participant(
    session: AsyncSession,
    *,
    game_session: GameSession,
    user_id: int,
    now_utc: datetime,
) -> Participant:
    try:
        return await ParticipantsRepo.create(
            session,
            session_id=game_session.id,
            user_id=user_id,
            now_utc=now_utc,
        )
    except IntegrityError as exc:
        raise AlreadyParticipantError from exc
