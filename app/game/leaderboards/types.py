from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(slots=True)
class SessionLeaderboardEntry:
    rank: int
    participant_id: int
    user_id: int
    username: str
    session_score: int
    answers_count: int
    completed: bool
    is_me: bool


@dataclass(slots=True)
class UserLeaderboardEntry:
    rank: int
    user_id: int
    username: str
    total_score: int
    games_played: int
    best_session_score: int
    average_score: Decimal
    is_me: bool
