from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.game.sessions.constants import MAX_ANSWER_SCORE

_WHOLE_POINTS = Decimal("1")
_CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class UserAggregates:
    total_score: int
    games_played: int
    best_session_score: int
    average_score: Decimal


def compute_answer_score(*, guessed_price: Decimal, actual_price: Decimal) -> int:
    """100 minus the absolute price gap, rounded half-up, never below zero."""
    raw = Decimal(MAX_ANSWER_SCORE) - abs(Decimal(guessed_price) - Decimal(actual_price))
    rounded = raw.quantize(_WHOLE_POINTS, rounding=ROUND_HALF_UP)
    return max(0, int(rounded))


def normalize_guessed_price(guessed_price: Decimal) -> Decimal:
    """Guesses are kept in cents, so the stored value is the one that gets scored."""
    return Decimal(guessed_price).quantize(_CENTS, rounding=ROUND_HALF_UP)


def compute_average_score(*, total_score: int, games_played: int) -> Decimal:
    if games_played <= 0:
        return Decimal("0.00")
    return (Decimal(total_score) / Decimal(games_played)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def apply_completed_session(current: UserAggregates, *, session_score: int) -> UserAggregates:
    total_score = current.total_score + session_score
    games_played = current.games_played + 1
    return UserAggregates(
        total_score=total_score,
        games_played=games_played,
        best_session_score=max(current.best_session_score, session_score),
        average_score=compute_average_score(total_score=total_score, games_played=games_played),
    )
