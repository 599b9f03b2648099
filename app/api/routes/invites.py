from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_principal, get_session_factory
from app.api.errors import DOMAIN_ERRORS, as_http_exception
from app.db.session import SessionFactory, transaction
from app.game.sessions import service as sessions_service
from app.services.auth import Principal

from .sessions_models import (
    AcceptInviteResponse,
    InviteResponse,
    RowIdPath,
    invite_as_response,
    participant_as_response,
)

router = APIRouter(tags=["invites"])


@router.get("/api/invites")
async def list_received_invites(
    status_filter: str | None = Query(default=None, alias="status"),
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[InviteResponse]:
    try:
        async with transaction(session_factory) as session:
            invites = await sessions_service.list_received_invites(
                session,
                user_id=principal.user_id,
                status=status_filter,
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [invite_as_response(invite) for invite in invites]


@router.get("/api/invites/sent")
async def list_sent_invites(
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> list[InviteResponse]:
    try:
        async with transaction(session_factory) as session:
            invites = await sessions_service.list_sent_invites(session, user_id=principal.user_id)
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return [invite_as_response(invite) for invite in invites]


@router.post("/api/invites/{invite_id}/accept")
async def accept_invite(
    invite_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> AcceptInviteResponse:
    try:
        async with transaction(session_factory) as session:
            result = await sessions_service.accept_invite(
                session,
                invite_id=invite_id,
                user_id=principal.user_id,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return AcceptInviteResponse(
        invite=invite_as_response(result.invite),
        participant=participant_as_response(result.participant),
    )


@router.post("/api/invites/{invite_id}/reject")
async def reject_invite(
    invite_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> InviteResponse:
    try:
        async with transaction(session_factory) as session:
            invite = await sessions_service.reject_invite(
                session,
                invite_id=invite_id,
                user_id=principal.user_id,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return invite_as_response(invite)


@router.delete("/api/invites/{invite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_invite(
    invite_id: RowIdPath,
    principal: Principal = Depends(get_principal),
    session_factory: SessionFactory = Depends(get_session_factory),
) -> Response:
    try:
        async with transaction(session_factory) as session:
            await sessions_service.cancel_invite(session, invite_id=invite_id, principal=principal)
    except DOMAIN_ERRORS as exc:
        raise as_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
