"""Ranked views over participant and user aggregates.

Ranks are output positions: equal scores still get consecutive, distinct ranks, ordered by
the tie-breakers of each query.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User
from app.db.repo.friendships_repo import FriendshipsRepo
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.participants_repo import ParticipantsRepo
from app.db.repo.users_repo import UsersRepo
from app.game.leaderboards.types import SessionLeaderboardEntry, UserLeaderboardEntry
from app.game.sessions.access import ensure_access
from app.game.sessions.errors import SessionNotFoundError

GLOBAL_LEADERBOARD_DEFAULT_LIMIT = 50
GLOBAL_LEADERBOARD_MAX_LIMIT = 100


def resolve_leaderboard_limit(limit: int | None) -> int:
    if limit is None or limit < 1:
        return GLOBAL_LEADERBOARD_DEFAULT_LIMIT
    return min(int(limit), GLOBAL_LEADERBOARD_MAX_LIMIT)


def _user_entries(users: list[User], *, viewer_id: int | None) -> list[UserLeaderboardEntry]:
    return [
        UserLeaderboardEntry(
            rank=position,
            user_id=user.id,
            username=user.username,
            total_score=int(user.total_score),
            games_played=int(user.games_played),
            best_session_score=int(user.best_session_score),
            average_score=Decimal(user.average_score),
            is_me=user.id == viewer_id,
        )
        for position, user in enumerate(users, start=1)
    ]


async def get_session_leaderboard(
    session: AsyncSession,
    *,
    session_id: int,
    viewer_id: int,
) -> list[SessionLeaderboardEntry]:
    game_session = await GameSessionsRepo.get_by_id(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    viewer_participant = await ParticipantsRepo.get_for_session_user(
        session,
        session_id=session_id,
        user_id=viewer_id,
    )
    if viewer_participant is None:
        await ensure_access(session, game_session=game_session, viewer_id=viewer_id)

    rows = await ParticipantsRepo.list_ranked_for_session(session, session_id=session_id)
    return [
        SessionLeaderboardEntry(
            rank=position,
            participant_id=row[0].id,
            user_id=row[0].user_id,
            username=row.username,
            session_score=int(row[0].session_score),
            answers_count=int(row.answers_count or 0),
            completed=bool(row[0].completed),
            is_me=row[0].user_id == viewer_id,
        )
        for position, row in enumerate(rows, start=1)
    ]


async def get_global_leaderboard(
    session: AsyncSession,
    *,
    viewer_id: int | None,
    limit: int | None = None,
) -> list[UserLeaderboardEntry]:
    users = await UsersRepo.list_leaderboard(session, limit=resolve_leaderboard_limit(limit))
    return _user_entries(users, viewer_id=viewer_id)


async def get_friends_leaderboard(
    session: AsyncSession,
    *,
    viewer_id: int,
) -> list[UserLeaderboardEntry]:
    friend_ids = await FriendshipsRepo.list_friend_ids(session, user_id=viewer_id)
    users = await UsersRepo.list_leaderboard_for_ids(
        session,
        user_ids=friend_ids,
        always_include_user_id=viewer_id,
    )
    return _user_entries(users, viewer_id=viewer_id)
