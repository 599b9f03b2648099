from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, Field

from app.game.sessions.constants import DB_INT_MAX
from app.game.sessions.types import (
    AnswerResult,
    InviteSnapshot,
    ParticipantSnapshot,
    ParticipantStanding,
    SessionProductView,
    SessionSnapshot,
)

# Ids land in 32-bit integer columns.
RowIdPath = Annotated[int, Path(gt=0, le=DB_INT_MAX)]


class SessionCreateRequest(BaseModel):
    name: str | None = None
    difficulty: str | None = None
    visibility: str | None = None
    max_participants: int | None = Field(default=None, le=DB_INT_MAX)


class SessionStatusRequest(BaseModel):
    status: str = Field(min_length=1, max_length=32)


class AnswerRequest(BaseModel):
    product_id: int = Field(gt=0, le=DB_INT_MAX)
    guessed_price: Decimal


class InviteRequest(BaseModel):
    invitee_id: int | None = Field(default=None, gt=0, le=DB_INT_MAX)
    invitee_username: str | None = Field(default=None, max_length=255)
    invitee_email: str | None = Field(default=None, max_length=255)


class SessionResponse(BaseModel):
    id: int
    name: str
    creator_id: int
    creator_username: str
    status: str
    difficulty: str
    visibility: str
    max_participants: int
    participant_count: int = Field(ge=0)
    is_participant: bool
    has_completed: bool
    created_at: datetime
    updated_at: datetime


class ParticipantResponse(BaseModel):
    id: int
    session_id: int
    user_id: int
    session_score: int = Field(ge=0)
    completed: bool
    created_at: datetime


class ParticipantStandingResponse(BaseModel):
    id: int
    user_id: int
    username: str
    session_score: int = Field(ge=0)
    completed: bool
    answers_count: int = Field(ge=0)
    joined_at: datetime


class SessionProductResponse(BaseModel):
    id: int
    name: str
    image_url: str | None = None
    position: int = Field(ge=1, le=4)


class AnswerResponse(BaseModel):
    answer_id: int
    product_id: int
    guessed_price: float
    score: int = Field(ge=0, le=100)
    actual_price: float
    session_score: int = Field(ge=0)
    completed: bool
    answers_count: int = Field(ge=0)


class InviteResponse(BaseModel):
    id: int
    session_id: int
    inviter_id: int
    invitee_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    session_name: str | None = None
    inviter_username: str | None = None
    invitee_username: str | None = None


class SendInviteResponse(InviteResponse):
    resent: bool = False


class AcceptInviteResponse(BaseModel):
    invite: InviteResponse
    participant: ParticipantResponse


def session_as_response(snapshot: SessionSnapshot) -> SessionResponse:
    return SessionResponse(
        id=snapshot.session_id,
        name=snapshot.name,
        creator_id=snapshot.creator_id,
        creator_username=snapshot.creator_username,
        status=snapshot.status,
        difficulty=snapshot.difficulty,
        visibility=snapshot.visibility,
        max_participants=snapshot.max_participants,
        participant_count=snapshot.participant_count,
        is_participant=snapshot.is_participant,
        has_completed=snapshot.has_completed,
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
    )


def participant_as_response(snapshot: ParticipantSnapshot) -> ParticipantResponse:
    return ParticipantResponse(
        id=snapshot.participant_id,
        session_id=snapshot.session_id,
        user_id=snapshot.user_id,
        session_score=snapshot.session_score,
        completed=snapshot.completed,
        created_at=snapshot.created_at,
    )


def standing_as_response(standing: ParticipantStanding) -> ParticipantStandingResponse:
    return ParticipantStandingResponse(
        id=standing.participant_id,
        user_id=standing.user_id,
        username=standing.username,
        session_score=standing.session_score,
        completed=standing.completed,
        answers_count=standing.answers_count,
        joined_at=standing.joined_at,
    )


def product_as_response(view: SessionProductView) -> SessionProductResponse:
    return SessionProductResponse(
        id=view.product_id,
        name=view.name,
        image_url=view.image_url,
        position=view.position,
    )


def answer_as_response(result: AnswerResult) -> AnswerResponse:
    return AnswerResponse(
        answer_id=result.answer.answer_id,
        product_id=result.answer.product_id,
        guessed_price=float(result.answer.guessed_price),
        score=result.score,
        actual_price=float(result.actual_price),
        session_score=result.session_score,
        completed=result.completed,
        answers_count=result.answers_count,
    )


def invite_as_response(snapshot: InviteSnapshot) -> InviteResponse:
    return InviteResponse(
        id=snapshot.invite_id,
        session_id=snapshot.session_id,
        inviter_id=snapshot.inviter_id,
        invitee_id=snapshot.invitee_id,
        status=snapshot.status,
        created_at=snapshot.created_at,
        updated_at=snapshot.updated_at,
        session_name=snapshot.session_name,
        inviter_username=snapshot.inviter_username,
        invitee_username=snapshot.invitee_username,
    )
