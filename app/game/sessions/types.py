from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(slots=True)
class SessionOptions:
    name: str
    difficulty: str
    visibility: str
    max_participants: int


@dataclass(slots=True)
class SessionSnapshot:
    session_id: int
    name: str
    creator_id: int
    creator_username: str
    status: str
    difficulty: str
    visibility: str
    max_participants: int
    participant_count: int
    is_participant: bool
    has_completed: bool
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class SessionProductView:
    product_id: int
    name: str
    image_url: str | None
    position: int


@dataclass(slots=True)
class ParticipantSnapshot:
    participant_id: int
    session_id: int
    user_id: int
    session_score: int
    completed: bool
    created_at: datetime


@dataclass(slots=True)
class ParticipantStanding:
    participant_id: int
    user_id: int
    username: str
    session_score: int
    completed: bool
    answers_count: int
    joined_at: datetime


@dataclass(slots=True)
class AnswerSnapshot:
    answer_id: int
    participant_id: int
    product_id: int
    guessed_price: Decimal
    score: int
    created_at: datetime


@dataclass(slots=True)
class AnswerResult:
    answer: AnswerSnapshot
    score: int
    actual_price: Decimal
    session_score: int
    completed: bool
    answers_count: int


@dataclass(slots=True)
class InviteSnapshot:
    invite_id: int
    session_id: int
    inviter_id: int
    invitee_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    session_name: str | None = None
    inviter_username: str | None = None
    invitee_username: str | None = None


@dataclass(slots=True)
class SendInviteResult:
    invite: InviteSnapshot
    resent: bool


@dataclass(slots=True)
class AcceptInviteResult:
    invite: InviteSnapshot
    participant: ParticipantSnapshot
