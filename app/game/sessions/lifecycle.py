from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.game_sessions import GameSession
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.products_repo import ProductsRepo
from app.db.repo.session_products_repo import SessionProductsRepo
from app.db.repo.users_repo import UsersRepo
from app.game.sessions.access import ensure_creator_or_admin
from app.game.sessions.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_MAX_PARTICIPANTS,
    DEFAULT_VISIBILITY,
    PRODUCTS_PER_SESSION,
    SESSION_DIFFICULTIES,
    SESSION_NAME_MAX_LENGTH,
    SESSION_STATUS_ACTIVE,
    SESSION_STATUS_TRANSITIONS,
    SESSION_STATUSES,
    SESSION_VISIBILITIES,
)
from app.game.sessions.errors import (
    InsufficientCatalogError,
    InvalidStatusTransitionError,
    SessionNotFoundError,
    SessionValidationError,
    UserNotFoundError,
)
from app.game.sessions.internal import build_session_snapshot
from app.game.sessions.types import SessionOptions, SessionSnapshot
from app.services.auth import Principal

logger = structlog.get_logger(__name__)


def resolve_session_options(
    *,
    name: str | None,
    difficulty: str | None = None,
    visibility: str | None = None,
    max_participants: int | None = None,
) -> SessionOptions:
    resolved_name = (name or "").strip()
    if not resolved_name:
        raise SessionValidationError("name", "Session name is required.")
    if len(resolved_name) > SESSION_NAME_MAX_LENGTH:
        raise SessionValidationError(
            "name",
            f"Session name must be at most {SESSION_NAME_MAX_LENGTH} characters.",
        )
    return SessionOptions(
        name=resolved_name,
        difficulty=difficulty if difficulty in SESSION_DIFFICULTIES else DEFAULT_DIFFICULTY,
        visibility=visibility if visibility in SESSION_VISIBILITIES else DEFAULT_VISIBILITY,
        max_participants=(
            int(max_participants)
            if max_participants is not None and int(max_participants) > 0
            else DEFAULT_MAX_PARTICIPANTS
        ),
    )


async def create_session(
    session: AsyncSession,
    *,
    creator_id: int,
    name: str | None,
    now_utc: datetime,
    difficulty: str | None = None,
    visibility: str | None = None,
    max_participants: int | None = None,
) -> SessionSnapshot:
    options = resolve_session_options(
        name=name,
        difficulty=difficulty,
        visibility=visibility,
        max_participants=max_participants,
    )
    creator = await UsersRepo.get_by_id(session, creator_id)
    if creator is None:
        raise UserNotFoundError

    game_session = await GameSessionsRepo.create(
        session,
        game_session=GameSession(
            name=options.name,
            creator_id=creator_id,
            status=SESSION_STATUS_ACTIVE,
            difficulty=options.difficulty,
            visibility=options.visibility,
            max_participants=options.max_participants,
            created_at=now_utc,
            updated_at=now_utc,
        ),
    )
    product_ids = await ProductsRepo.pick_random_ids(session, count=PRODUCTS_PER_SESSION)
    if len(product_ids) < PRODUCTS_PER_SESSION:
        logger.warning(
            "session_create_insufficient_catalog",
            creator_id=creator_id,
            products_available=len(product_ids),
        )
        raise InsufficientCatalogError
    await SessionProductsRepo.bind_products(
        session,
        session_id=game_session.id,
        product_ids=product_ids[:PRODUCTS_PER_SESSION],
    )

    row = await GameSessionsRepo.get_summary(
        session,
        session_id=game_session.id,
        viewer_id=creator_id,
    )
    if row is None:
        raise SessionNotFoundError
    logger.info(
        "session_created",
        session_id=game_session.id,
        creator_id=creator_id,
        visibility=options.visibility,
        difficulty=options.difficulty,
        max_participants=options.max_participants,
    )
    return build_session_snapshot(row)


async def delete_session(
    session: AsyncSession,
    *,
    session_id: int,
    principal: Principal,
) -> int:
    game_session = await GameSessionsRepo.get_by_id_for_update(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    ensure_creator_or_admin(principal, creator_id=game_session.creator_id)

    await GameSessionsRepo.delete_with_dependents(session, session_id=session_id)
    logger.info(
        "session_deleted",
        session_id=session_id,
        deleted_by=principal.user_id,
        by_admin=principal.user_id != game_session.creator_id,
    )
    return session_id


async def update_session_status(
    session: AsyncSession,
    *,
    session_id: int,
    principal: Principal,
    status: str,
    now_utc: datetime,
) -> SessionSnapshot:
    if status not in SESSION_STATUSES:
        raise SessionValidationError("status", "Unknown session status.")
    game_session = await GameSessionsRepo.get_by_id_for_update(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    ensure_creator_or_admin(principal, creator_id=game_session.creator_id)

    previous_status = game_session.status
    if previous_status != status:
        if (previous_status, status) not in SESSION_STATUS_TRANSITIONS:
            raise InvalidStatusTransitionError
        game_session.status = status
        game_session.updated_at = now_utc
        await session.flush()
        logger.info(
            "session_status_changed",
            session_id=session_id,
            from_status=previous_status,
            to_status=status,
            changed_by=principal.user_id,
        )

    row = await GameSessionsRepo.get_summary(
        session,
        session_id=session_id,
        viewer_id=principal.user_id,
    )
    if row is None:
        raise SessionNotFoundError
    return build_session_snapshot(row)
