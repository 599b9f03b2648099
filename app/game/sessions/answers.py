from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.game_sessions_repo import GameSessionsRepo
from app.db.repo.participants_repo import ParticipantsRepo
from app.db.repo.session_products_repo import SessionProductsRepo
from app.db.repo.users_repo import UsersRepo
from app.game.sessions.constants import (
    CLOSED_SESSION_STATUSES,
    MAX_GUESSED_PRICE,
    PRODUCTS_PER_SESSION,
)
from app.game.sessions.errors import (
    AnswerAlreadySubmittedError,
    NotParticipantError,
    ProductNotInSessionError,
    SessionClosedError,
    SessionNotFoundError,
    SessionValidationError,
    UserNotFoundError,
)
from app.game.sessions.internal import build_answer_snapshot
from app.game.sessions.scoring import (
    UserAggregates,
    apply_completed_session,
    compute_answer_score,
    normalize_guessed_price,
)
from app.game.sessions.types import AnswerResult

logger = structlog.get_logger(__name__)


async def _record_completed_session(
    session: AsyncSession,
    *,
    user_id: int,
    session_score: int,
    now_utc: datetime,
) -> UserAggregates:
    user = await UsersRepo.get_by_id_for_update(session, user_id)
    if user is None:
        raise UserNotFoundError
    updated = apply_completed_session(
        UserAggregates(
            total_score=int(user.total_score),
            games_played=int(user.games_played),
            best_session_score=int(user.best_session_score),
            average_score=Decimal(user.average_score),
        ),
        session_score=session_score,
    )
    user.total_score = updated.total_score
    user.games_played = updated.games_played
    user.best_session_score = updated.best_session_score
    user.average_score = updated.average_score
    user.updated_at = now_utc
    await session.flush()
    return updated


async def submit_answer(
    session: AsyncSession,
    *,
    session_id: int,
    user_id: int,
    product_id: int,
    guessed_price: Decimal,
    now_utc: datetime,
) -> AnswerResult:
    if not guessed_price.is_finite() or guessed_price < 0:
        raise SessionValidationError("guessed_price", "Guessed price must be >= 0.")
    # Checked before quantizing; huge exponents overflow the decimal context.
    if guessed_price > MAX_GUESSED_PRICE:
        raise SessionValidationError(
            "guessed_price",
            f"Guessed price must be <= {MAX_GUESSED_PRICE}.",
        )
    guessed_price = normalize_guessed_price(guessed_price)

    # Locking the participant serialises answers from the same player.
    participant = await ParticipantsRepo.get_for_session_user_for_update(
        session,
        session_id=session_id,
        user_id=user_id,
    )
    if participant is None:
        raise NotParticipantError

    game_session = await GameSessionsRepo.get_by_id(session, session_id)
    if game_session is None:
        raise SessionNotFoundError
    if game_session.status in CLOSED_SESSION_STATUSES:
        raise SessionClosedError

    actual_price = await SessionProductsRepo.get_bound_price(
        session,
        session_id=session_id,
        product_id=product_id,
    )
    if actual_price is None:
        raise ProductNotInSessionError

    already_answered = await AnswersRepo.exists_for_participant_product(
        session,
        participant_id=participant.id,
        product_id=product_id,
    )
    if already_answered:
        raise AnswerAlreadySubmittedError

    score = compute_answer_score(guessed_price=guessed_price, actual_price=actual_price)
    try:
        answer = await AnswersRepo.create(
            session,
            participant_id=participant.id,
            product_id=product_id,
            guessed_price=guessed_price,
            score=score,
            now_utc=now_utc,
        )
    except IntegrityError as exc:
        raise AnswerAlreadySubmittedError from exc

    answers_count = await AnswersRepo.count_for_participant(
        session,
        participant_id=participant.id,
    )
    was_completed = bool(participant.completed)
    participant.session_score = int(participant.session_score) + score
    participant.completed = answers_count >= PRODUCTS_PER_SESSION
    participant.updated_at = now_utc
    await session.flush()

    completed_now = participant.completed and not was_completed
    if completed_now:
        aggregates = await _record_completed_session(
            session,
            user_id=user_id,
            session_score=participant.session_score,
            now_utc=now_utc,
        )
        logger.info(
            "session_participant_completed",
            session_id=session_id,
            user_id=user_id,
            session_score=participant.session_score,
            total_score=aggregates.total_score,
            games_played=aggregates.games_played,
        )

    logger.info(
        "session_answer_submitted",
        session_id=session_id,
        user_id=user_id,
        product_id=product_id,
        score=score,
        answers_count=answers_count,
    )
    return AnswerResult(
        answer=build_answer_snapshot(answer),
        score=score,
        actual_price=actual_price,
        session_score=int(participant.session_score),
        completed=bool(participant.completed),
        answers_count=answers_count,
    )
