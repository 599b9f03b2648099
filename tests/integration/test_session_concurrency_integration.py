from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.db.models.answers import Answer
from app.db.models.participants import Participant
from app.db.repo.session_products_repo import SessionProductsRepo
from app.db.repo.users_repo import UsersRepo
from app.db.session import SessionLocal
from app.game.sessions import service as sessions_service
from app.game.sessions.errors import (
    AlreadyParticipantError,
    AnswerAlreadySubmittedError,
    SessionFullError,
)
from tests.game.game_fixtures import (
    _create_game_session,
    _create_products,
    _create_user,
    _join,
)

UTC = timezone.utc


@pytest.mark.asyncio
async def test_parallel_duplicate_answers_store_one_row() -> None:
    now_utc = datetime.now(UTC)
    creator_id = await _create_user(SessionLocal, "conc_creator")
    player_id = await _create_user(SessionLocal, "conc_player")
    await _create_products(SessionLocal)
    created = await _create_game_session(SessionLocal, creator_id=creator_id, now_utc=now_utc)
    await _join(SessionLocal, session_id=created.session_id, user_id=player_id, now_utc=now_utc)
    async with SessionLocal() as session:
        rows = await SessionProductsRepo.list_for_session(session, session_id=created.session_id)
    product_id = rows[0].id
    barrier = asyncio.Event()

    async def _attempt(guess: str) -> str:
        await barrier.wait()
        try:
            async with SessionLocal.begin() as session:
                await sessions_service.submit_answer(
                    session,
                    session_id=created.session_id,
                    user_id=player_id,
                    product_id=product_id,
                    guessed_price=Decimal(guess),
                    now_utc=now_utc,
                )
            return "accepted"
        except AnswerAlreadySubmittedError:
            return "already_answered"

    tasks = [asyncio.create_task(_attempt(guess)) for guess in ("10", "20", "30")]
    barrier.set()
    outcomes = await asyncio.gather(*tasks)

    assert sorted(outcomes) == ["accepted", "already_answered", "already_answered"]
    async with SessionLocal() as session:
        assert await session.scalar(select(func.count(Answer.id))) == 1
        participant_score = await session.scalar(
            select(Participant.session_score).where(Participant.user_id == player_id)
        )
        answer_score = await session.scalar(select(Answer.score))
    assert participant_score == answer_score


@pytest.mark.asyncio
async def test_parallel_joins_respect_capacity() -> None:
    now_utc = datetime.now(UTC)
    creator_id = await _create_user(SessionLocal, "cap_creator")
    player_ids = [await _create_user(SessionLocal, f"cap_player_{index}") for index in range(4)]
    await _create_products(SessionLocal)
    created = await _create_game_session(
        SessionLocal,
        creator_id=creator_id,
        max_participants=2,
        now_utc=now_utc,
    )
    barrier = asyncio.Event()

    async def _attempt(user_id: int) -> str:
        await barrier.wait()
        try:
            await _join(SessionLocal, session_id=created.session_id, user_id=user_id, now_utc=now_utc)
            return "joined"
        except SessionFullError:
            return "full"

    tasks = [asyncio.create_task(_attempt(user_id)) for user_id in player_ids]
    barrier.set()
    outcomes = await asyncio.gather(*tasks)

    assert sorted(outcomes) == ["full", "full", "joined", "joined"]
    async with SessionLocal() as session:
        count = await session.scalar(
            select(func.count(Participant.id)).where(Participant.session_id == created.session_id)
        )
    assert count == 2


@pytest.mark.asyncio
async def test_parallel_duplicate_join_surfaces_already_participant() -> None:
    now_utc = datetime.now(UTC)
    creator_id = await _create_user(SessionLocal, "dup_creator")
    player_id = await _create_user(SessionLocal, "dup_player")
    await _create_products(SessionLocal)
    created = await _create_game_session(SessionLocal, creator_id=creator_id, now_utc=now_utc)
    barrier = asyncio.Event()

    async def _attempt() -> str:
        await barrier.wait()
        try:
            await _join(SessionLocal, session_id=created.session_id, user_id=player_id, now_utc=now_utc)
            return "joined"
        except AlreadyParticipantError:
            return "already_participant"

    tasks = [asyncio.create_task(_attempt()) for _ in range(2)]
    barrier.set()
    outcomes = await asyncio.gather(*tasks)

    assert sorted(outcomes) == ["already_participant", "joined"]


@pytest.mark.asyncio
async def test_completion_updates_user_aggregates_exactly_once() -> None:
    now_utc = datetime.now(UTC)
    creator_id = await _create_user(SessionLocal, "agg_creator")
    player_id = await _create_user(SessionLocal, "agg_player")
    await _create_products(SessionLocal)
    created = await _create_game_session(SessionLocal, creator_id=creator_id, now_utc=now_utc)
    await _join(SessionLocal, session_id=created.session_id, user_id=player_id, now_utc=now_utc)
    async with SessionLocal() as session:
        rows = await SessionProductsRepo.list_for_session(session, session_id=created.session_id)

    async def _answer(product_id: int) -> None:
        async with SessionLocal.begin() as session:
            await sessions_service.submit_answer(
                session,
                session_id=created.session_id,
                user_id=player_id,
                product_id=product_id,
                guessed_price=Decimal("0"),
                now_utc=now_utc,
            )

    await asyncio.gather(*(_answer(row.id) for row in rows))

    async with SessionLocal() as session:
        user = await UsersRepo.get_by_id(session, player_id)
        total = await session.scalar(select(func.sum(Answer.score)))
    assert user.games_played == 1
    assert user.total_score == total
