from __future__ import annotations

from pydantic import BaseModel, Field

from app.game.leaderboards.types import SessionLeaderboardEntry, UserLeaderboardEntry


class SessionLeaderboardEntryResponse(BaseModel):
    rank: int = Field(ge=1)
    participant_id: int
    user_id: int
    username: str
    session_score: int = Field(ge=0)
    answers_count: int = Field(ge=0)
    completed: bool
    is_me: bool


class SessionLeaderboardResponse(BaseModel):
    session_id: int
    entries: list[SessionLeaderboardEntryResponse]


class UserLeaderboardEntryResponse(BaseModel):
    rank: int = Field(ge=1)
    user_id: int
    username: str
    total_score: int = Field(ge=0)
    games_played: int = Field(ge=0)
    best_session_score: int = Field(ge=0)
    average_score: float = Field(ge=0.0)
    is_me: bool


class UserLeaderboardResponse(BaseModel):
    scope: str
    entries: list[UserLeaderboardEntryResponse]


def session_entry_as_response(entry: SessionLeaderboardEntry) -> SessionLeaderboardEntryResponse:
    return SessionLeaderboardEntryResponse(
        rank=entry.rank,
        participant_id=entry.participant_id,
        user_id=entry.user_id,
        username=entry.username,
        session_score=entry.session_score,
        answers_count=entry.answers_count,
        completed=entry.completed,
        is_me=entry.is_me,
    )


def user_entry_as_response(entry: UserLeaderboardEntry) -> UserLeaderboardEntryResponse:
    return UserLeaderboardEntryResponse(
        rank=entry.rank,
        user_id=entry.user_id,
        username=entry.username,
        total_score=entry.total_score,
        games_played=entry.games_played,
        best_session_score=entry.best_session_score,
        average_score=float(entry.average_score),
        is_me=entry.is_me,
    )
