"""Session access predicate.

``can_access`` is pure: it only looks at the visibility mode and the viewer's relationship to
the creator. The async helpers load those relationships through the social-graph repos and
raise ``SessionAccessError`` on denial. The SQL form used for list filtering lives in
``app.db.repo.game_sessions_repo.visible_to_viewer_clause``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_sessions import GameSession
from app.db.repo.friendships_repo import FriendshipsRepo
from app.db.repo.session_invites_repo import SessionInvitesRepo
from app.game.sessions.constants import (
    ACCESS_REASON_FRIENDS_ONLY,
    ACCESS_REASON_NOT_CREATOR_OR_ADMIN,
    ACCESS_REASON_PRIVATE_SESSION,
    VISIBILITY_FRIENDS_ONLY,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)
from app.game.sessions.errors import SessionAccessError
from app.services.auth import Principal


@dataclass(frozen=True, slots=True)
class AccessContext:
    visibility: str
    creator_id: int
    viewer_id: int | None
    is_friend: bool = False
    has_accepted_invite: bool = False


@dataclass(frozen=True, slots=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None


ACCESS_ALLOWED = AccessDecision(allowed=True)


def _denied_reason(visibility: str) -> str:
    if visibility == VISIBILITY_FRIENDS_ONLY:
        return ACCESS_REASON_FRIENDS_ONLY
    return ACCESS_REASON_PRIVATE_SESSION


def can_access(context: AccessContext) -> AccessDecision:
    if context.visibility == VISIBILITY_PUBLIC:
        return ACCESS_ALLOWED
    if context.viewer_id is None:
        return AccessDecision(allowed=False, reason=_denied_reason(context.visibility))
    if context.viewer_id == context.creator_id:
        return ACCESS_ALLOWED
    if context.visibility == VISIBILITY_FRIENDS_ONLY and context.is_friend:
        return ACCESS_ALLOWED
    if context.visibility == VISIBILITY_PRIVATE and context.has_accepted_invite:
        return ACCESS_ALLOWED
    return AccessDecision(allowed=False, reason=_denied_reason(context.visibility))


def is_creator_or_admin(principal: Principal, *, creator_id: int) -> bool:
    return principal.user_id == creator_id or principal.is_admin


def ensure_creator_or_admin(principal: Principal, *, creator_id: int) -> None:
    if not is_creator_or_admin(principal, creator_id=creator_id):
        raise SessionAccessError(ACCESS_REASON_NOT_CREATOR_OR_ADMIN)


async def load_access_context(
    session: AsyncSession,
    *,
    game_session: GameSession,
    viewer_id: int | None,
) -> AccessContext:
    is_friend = False
    has_accepted_invite = False
    needs_lookup = (
        viewer_id is not None
        and viewer_id != game_session.creator_id
        and game_session.visibility != VISIBILITY_PUBLIC
    )
    if needs_lookup and game_session.visibility == VISIBILITY_FRIENDS_ONLY:
        is_friend = await FriendshipsRepo.are_friends(
            session,
            user_a=viewer_id,
            user_b=game_session.creator_id,
        )
    elif needs_lookup and game_session.visibility == VISIBILITY_PRIVATE:
        invite = await SessionInvitesRepo.get_accepted(
            session,
            session_id=game_session.id,
            user_id=viewer_id,
        )
        has_accepted_invite = invite is not None
    return AccessContext(
        visibility=game_session.visibility,
        creator_id=game_session.creator_id,
        viewer_id=viewer_id,
        is_friend=is_friend,
        has_accepted_invite=has_accepted_invite,
    )


async def evaluate_access(
    session: AsyncSession,
    *,
    game_session: GameSession,
    viewer_id: int | None,
) -> AccessDecision:
    context = await load_access_context(session, game_session=game_session, viewer_id=viewer_id)
    return can_access(context)


async def ensure_access(
    session: AsyncSession,
    *,
    game_session: GameSession,
    viewer_id: int | None,
) -> None:
    decision = await evaluate_access(session, game_session=game_session, viewer_id=viewer_id)
    if not decision.allowed:
        raise SessionAccessError(decision.reason or ACCESS_REASON_PRIVATE_SESSION)
