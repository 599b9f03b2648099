from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.session_invites_repo import SessionInvitesRepo
from app.db.repo.users_repo import UsersRepo
from app.game.sessions.access import ensure_creator_or_admin
from app.game.sessions.constants import (
    ACCESS_REASON_NOT_INVITER_OR_ADMIN,
    CLOSED_SESSION_STATUSES,
    INVITE_STATUS_ACCEPTED,
    INVITE_STATUS_PENDING,
    INVITE_STATUS_REJECTED,
    INVITE_STATUSES,
)
from app.game.sessions.errors import (
    InviteAlreadyAcceptedError,
    InviteAlreadyProcessedError,
    InviteNotFoundError,
    InvitePendingError,
    SessionAccessError,
    SessionClosedError,
    SessionNotFoundError,
    SessionValidationError,
    UserNotFoundError,
)
from app.game.sessions.internal import (
    add_participant,
    build_invite_snapshot,
    build_participant_snapshot,
    ensure_can_add_participant,
)
from app.game.sessions.types import AcceptInviteResult, InviteSnapshot, SendInviteResult
from app.services.auth import Principal

logger = structlog.get_logger(__name__)


async def _resolve_invitee(
    session: AsyncSession,
    *,
    invitee_id: int | None,
    invitee_username: str | None,
    invitee_email: str | None,
) -> User:
    if invitee_id is not None:
        user = await UsersRepo.get_by_id(session, invitee_id)
    elif invitee_email:
        user = await UsersRepo.get_by_email(session, invitee_email)
    elif invitee_username:
        user = await UsersRepo.get_by_username(session, invitee_username)
    else:
        raise SessionValidationError(
            "invitee",
            "One of invitee_id, invitee_username or invitee_email is required.",
        )
    if user is None:
        raise UserNotFoundError
    return user


async def send_invite(
    session: AsyncSession,
    *,
    session_id: int,
    principal: Principal,
    now_utc: datetime,
    invitee_id: int | None = None,
    invitee_username: str | None = None,
    invitee_email: str | None = None,
) -> SendInviteResult:
    game_session = await GameSessionsRepo.get_by_id_for_update(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    ensure_creator_or_admin(principal, creator_id=game_session.creator_id)
    if game_session.status in CLOSED_SESSION_STATUSES:
        raise SessionClosedError

    invitee = await _resolve_invitee(
        session,
        invitee_id=invitee_id,
        invitee_username=invitee_username,
        invitee_email=invitee_email,
    )
    if invitee.id == principal.user_id:
        raise SessionValidationError("invitee", "You cannot invite yourself.")
    await ensure_can_add_participant(session, game_session=game_session, user_id=invitee.id)

    existing = await SessionInvitesRepo.get_for_session_invitee_for_update(
        session,
        session_id=session_id,
        invitee_id=invitee.id,
    )
    if existing is not None:
        if existing.status == INVITE_STATUS_PENDING:
            raise InvitePendingError
        if existing.status == INVITE_STATUS_ACCEPTED:
            raise InviteAlreadyAcceptedError
        # Rejected invites go back to pending instead of creating a second row.
        invite = await SessionInvitesRepo.set_status(
            session,
            invite=existing,
            status=INVITE_STATUS_PENDING,
            now_utc=now_utc,
        )
        logger.info(
            "session_invite_resent",
            session_id=session_id,
            invite_id=invite.id,
            invitee_id=invitee.id,
        )
        return SendInviteResult(
            invite=build_invite_snapshot(
                invite,
                session_name=game_session.name,
                invitee_username=invitee.username,
            ),
            resent=True,
        )

    try:
        invite = await SessionInvitesRepo.create(
            session,
            session_id=session_id,
            inviter_id=principal.user_id,
            invitee_id=invitee.id,
            now_utc=now_utc,
        )
    except IntegrityError as exc:
        raise InvitePendingError from exc
    logger.info(
        "session_invite_sent",
        session_id=session_id,
        invite_id=invite.id,
        inviter_id=principal.user_id,
        invitee_id=invitee.id,
    )
    return SendInviteResult(
        invite=build_invite_snapshot(
            invite,
            session_name=game_session.name,
            invitee_username=invitee.username,
        ),
        resent=False,
    )


async def list_session_invites(
    session: AsyncSession,
    *,
    session_id: int,
    principal: Principal,
) -> list[InviteSnapshot]:
    game_session = await GameSessionsRepo.get_by_id(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    ensure_creator_or_admin(principal, creator_id=game_session.creator_id)

    rows = await SessionInvitesRepo.list_for_session(session, session_id=session_id)
    return [
        build_invite_snapshot(
            row[0],
            session_name=row.session_name,
            invitee_username=row.invitee_username,
        )
        for row in rows
    ]


async def list_received_invites(
    session: AsyncSession,
    *,
    user_id: int,
    status: str | None = None,
) -> list[InviteSnapshot]:
    if status is not None and status not in INVITE_STATUSES:
        raise SessionValidationError("status", "Unknown invite status.")
    rows = await SessionInvitesRepo.list_received(session, invitee_id=user_id, status=status)
    return [
        build_invite_snapshot(
            row[0],
            session_name=row.session_name,
            inviter_username=row.inviter_username,
        )
        for row in rows
    ]


async def list_sent_invites(session: AsyncSession, *, user_id: int) -> list[InviteSnapshot]:
    rows = await SessionInvitesRepo.list_sent(session, inviter_id=user_id)
    return [
        build_invite_snapshot(
            row[0],
            session_name=row.session_name,
            invitee_username=row.invitee_username,
        )
        for row in rows
    ]


async def accept_invite(
    session: AsyncSession,
    *,
    invite_id: int,
    user_id: int,
    now_utc: datetime,
) -> AcceptInviteResult:
    invite = await SessionInvitesRepo.get_by_id_for_update(session, invite_id)
    if invite is None or invite.invitee_id != user_id:
        raise InviteNotFoundError
    if invite.status != INVITE_STATUS_PENDING:
        raise InviteAlreadyProcessedError

    game_session = await GameSessionsRepo.get_by_id_for_update(session, invite.session_id)
    if game_session is None:
        raise SessionNotFoundError
    if game_session.status in CLOSED_SESSION_STATUSES:
        raise SessionClosedError
    await ensure_can_add_participant(session, game_session=game_session, user_id=user_id)

    await SessionInvitesRepo.set_status(
        session,
        invite=invite,
        status=INVITE_STATUS_ACCEPTED,
        now_utc=now_utc,
    )
    participant = await add_participant(
        session,
        game_session=game_session,
        user_id=user_id,
        now_utc=now_utc,
    )
    logger.info(
        "session_invite_accepted",
        session_id=game_session.id,
        invite_id=invite.id,
        user_id=user_id,
        participant_id=participant.id,
    )
    return AcceptInviteResult(
        invite=build_invite_snapshot(invite, session_name=game_session.name),
        participant=build_participant_snapshot(participant),
    )


async def reject_invite(
    session: AsyncSession,
    *,
    invite_id: int,
    user_id: int,
    now_utc: datetime,
) -> InviteSnapshot:
    invite = await SessionInvitesRepo.get_by_id_for_update(session, invite_id)
    if invite is None or invite.invitee_id != user_id:
        raise InviteNotFoundError
    if invite.status != INVITE_STATUS_PENDING:
        raise InviteAlreadyProcessedError

    await SessionInvitesRepo.set_status(
        session,
        invite=invite,
        status=INVITE_STATUS_REJECTED,
        now_utc=now_utc,
    )
    logger.info("session_invite_rejected", invite_id=invite.id, user_id=user_id)
    return build_invite_snapshot(invite)


async def cancel_invite(
    session: AsyncSession,
    *,
    invite_id: int,
    principal: Principal,
) -> int:
    invite = await SessionInvitesRepo.get_by_id_for_update(session, invite_id)
    if invite is None:
        raise InviteNotFoundError
    if invite.inviter_id != principal.user_id and not principal.is_admin:
        raise SessionAccessError(ACCESS_REASON_NOT_INVITER_OR_ADMIN)

    await SessionInvitesRepo.delete_by_id(session, invite_id=invite_id)
    logger.info("session_invite_canceled", invite_id=invite_id, canceled_by=principal.user_id)
    return invite_id
