from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_optional_principal, get_principal, get_session_factory
from app.api.errors import DOMAIN_ERRORS, as_http_exception
from app.api.routes.leaderboard_models import SessionLeaderboardResponse, session_entry_as_response
from app.db.session import SessionFactory, transaction
from app.game.leaderboards.service import get_session_leaderboard
from app.game.sessions import service as sessions_service
from app.game.sessions.constants import DB_INT_MAX
from app.services.auth import Principal

from .sessions_models import (
    AnswerRequest,
    AnswerResponse,
    InviteRequest,
    InviteResponse,
    ParticipantResponse,
    ParticipantStandingResponse,
    RowIdPath,
    SendInviteResponse,
    SessionCreateRequest,
    SessionProductResponse,
    SessionResponse,
    SessionStatusRequest,
    answer_as_response,
    invite_as_response,
    participant_as_response,
    product_as_response,
    session_as_response,
    standing_as_response,
)

router = APIRouter(tags=["sessions"])


def _viewer_id(principal: Principal | None) -> int | None:
    return principal.user_id if principal is not None else None


@router.post("/api/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreateRequest,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SessionResponse:
    try:
        async with transaction(session_factory) as session:
            snapshot = await sessions_service.create_session(
                session,
                creator_id=principal.user_id,
                name=payload.name,
                difficulty=payload.difficulty,
                visibility=payload.visibility,
                max_participants=payload.max_participants,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return session_as_response(snapshot)


@router.get("/api/sessions")
async def list_sessions(
    status_filter: str | None = Query(default=None, alias="status"),
    visibility: str | None = Query(default=None),
    creator_id: int | None = Query(default=None, gt=0, le=DB_INT_MAX),
    principal: Principal | None = Depends(get_optional_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[SessionResponse]:
    try:
        async with transaction(session_factory) as session:
            snapshots = await sessions_service.list_sessions(
                session,
                viewer_id=_viewer_id(principal),
                status=status_filter,
                visibility=visibility,
                creator_id=creator_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [session_as_response(snapshot) for snapshot in snapshots]


@router.get("/api/sessions/{session_id}")
async def get_session(
    session_id: RowIdPath,
    principal: Principal | None = Depends(get_optional_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SessionResponse:
    try:
        async with transaction(session_factory) as session:
            snapshot = await sessions_service.get_session(
                session,
                session_id=session_id,
                viewer_id=_viewer_id(principal),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return session_as_response(snapshot)


@router.delete("/api/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Response:
    try:
        async with transaction(session_factory) as session:
            await sessions_service.delete_session(
                session,
                session_id=session_id,
                principal=principal,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/api/sessions/{session_id}/status")
async def update_session_status(
    session_id: RowIdPath,
    payload: SessionStatusRequest,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SessionResponse:
    try:
        async with transaction(session_factory) as session:
            snapshot = await sessions_service.update_session_status(
                session,
                session_id=session_id,
                principal=principal,
                status=payload.status,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return session_as_response(snapshot)


@router.post("/api/sessions/{session_id}/join", status_code=status.HTTP_201_CREATED)
async def join_session(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> ParticipantResponse:
    try:
        async with transaction(session_factory) as session:
            participant = await sessions_service.join_session(
                session,
                session_id=session_id,
                user_id=principal.user_id,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return participant_as_response(participant)


@router.get("/api/sessions/{session_id}/participants")
async def list_participants(
    session_id: RowIdPath,
    principal: Principal | None = Depends(get_optional_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[ParticipantStandingResponse]:
    try:
        async with transaction(session_factory) as session:
            standings = await sessions_service.list_participants(
                session,
                session_id=session_id,
                viewer_id=_viewer_id(principal),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [standing_as_response(standing) for standing in standings]


@router.get("/api/sessions/{session_id}/products")
async def get_session_products(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[SessionProductResponse]:
    try:
        async with transaction(session_factory) as session:
            products = await sessions_service.get_session_products(
                session,
                session_id=session_id,
                viewer_id=principal.user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [product_as_response(product) for product in products]


@router.post("/api/sessions/{session_id}/answer")
async def submit_answer(
    session_id: RowIdPath,
    payload: AnswerRequest,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> AnswerResponse:
    try:
        async with transaction(session_factory) as session:
            result = await sessions_service.submit_answer(
                session,
                session_id=session_id,
                user_id=principal.user_id,
                product_id=payload.product_id,
                guessed_price=payload.guessed_price,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return answer_as_response(result)


@router.get("/api/sessions/{session_id}/leaderboard")
async def session_leaderboard(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SessionLeaderboardResponse:
    try:
        async with transaction(session_factory) as session:
            entries = await get_session_leaderboard(
                session,
                session_id=session_id,
                viewer_id=principal.user_id,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return SessionLeaderboardResponse(
        session_id=session_id,
        entries=[session_entry_as_response(entry) for entry in entries],
    )


@router.post("/api/sessions/{session_id}/invite", status_code=status.HTTP_201_CREATED)
async def send_invite(
    session_id: RowIdPath,
    payload: InviteRequest,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> SendInviteResponse:
    try:
        async with transaction(session_factory) as session:
            result = await sessions_service.send_invite(
                session,
                session_id=session_id,
                principal=principal,
                invitee_id=payload.invitee_id,
                invitee_username=payload.invitee_username,
                invitee_email=payload.invitee_email,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc

    invite = invite_as_response(result.invite)
    return SendInviteResponse(**invite.model_dump(), resent=result.resent)


@router.get("/api/sessions/{session_id}/invites")
async def list_session_invites(
    session_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[InviteResponse]:
    try:
        async with transaction(session_factory) as session:
            invites = await sessions_service.list_session_invites(
                session,
                session_id=session_id,
                principal=principal,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [invite_as_response(invite) for invite in invites]
