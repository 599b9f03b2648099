from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.db.models.answers import Answer
from app.db.repo.answers_repo import AnswersRepo
from app.db.repo.participants_repo import ParticipantsRepo
from app.db.repo.users_repo import UsersRepo
from app.game.sessions import service as sessions_service
from app.game.sessions.errors import (
    AnswerAlreadySubmittedError,
    NotParticipantError,
    ProductNotInSessionError,
    SessionClosedError,
    SessionValidationError,
)
from app.services.auth import Principal
from tests.game.game_fixtures import (
    NOW_UTC,
    _bound_prices,
    _create_game_session,
    _create_products,
    _create_user,
    _join,
    _later,
)

PRICES = (Decimal("100.00"), Decimal("50.00"), Decimal("20.00"), Decimal("10.00"))


async def _answer(session_factory, *, session_id: int, user_id: int, product_id: int, guess: str):  # noqa: ANN001, ANN202
    async with session_factory.begin() as session:
        return await sessions_service.submit_answer(
            session,
            session_id=session_id,
            user_id=user_id,
            product_id=product_id,
            guessed_price=Decimal(guess),
            now_utc=NOW_UTC,
        )


async def _setup(session_factory):  # noqa: ANN001, ANN202
    creator_id = await _create_user(session_factory, "alice")
    player_id = await _create_user(session_factory, "bob")
    await _create_products(session_factory, prices=PRICES)
    created = await _create_game_session(session_factory, creator_id=creator_id)
    await _join(session_factory, session_id=created.session_id, user_id=player_id)
    prices = await _bound_prices(session_factory, session_id=created.session_id)
    return creator_id, player_id, created.session_id, prices


@pytest.mark.asyncio
async def test_submit_answer_scores_and_reveals_price(session_factory) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    product_id = next(pid for pid, price in prices.items() if price == Decimal("100.00"))

    result = await _answer(
        session_factory,
        session_id=session_id,
        user_id=player_id,
        product_id=product_id,
        guess="80",
    )

    assert result.score == 80
    assert result.actual_price == Decimal("100.00")
    assert result.session_score == 80
    assert result.answers_count == 1
    assert result.completed is False
    assert result.answer.product_id == product_id


@pytest.mark.asyncio
async def test_duplicate_answer_is_rejected_without_changing_score(session_factory) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    product_id = next(iter(prices))
    first = await _answer(
        session_factory,
        session_id=session_id,
        user_id=player_id,
        product_id=product_id,
        guess="5",
    )

    with pytest.raises(AnswerAlreadySubmittedError):
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=product_id,
            guess="6",
        )

    async with session_factory() as session:
        participant = await ParticipantsRepo.get_for_session_user(
            session,
            session_id=session_id,
            user_id=player_id,
        )
        answers_total = await session.scalar(select(func.count(Answer.id)))
    assert participant.session_score == first.session_score
    assert answers_total == 1


@pytest.mark.asyncio
async def test_fourth_answer_completes_and_updates_aggregates_once(session_factory) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    results = []
    for product_id, price in prices.items():
        results.append(
            await _answer(
                session_factory,
                session_id=session_id,
                user_id=player_id,
                product_id=product_id,
                guess=str(price),
            )
        )

    assert [result.completed for result in results] == [False, False, False, True]
    assert [result.answers_count for result in results] == [1, 2, 3, 4]
    assert results[-1].session_score == 400

    async with session_factory() as session:
        user = await UsersRepo.get_by_id(session, player_id)
        answer_scores = await AnswersRepo.sum_scores_for_participant(
            session,
            participant_id=results[-1].answer.participant_id,
        )
    assert answer_scores == 400
    assert user.total_score == 400
    assert user.games_played == 1
    assert user.best_session_score == 400
    assert Decimal(user.average_score) == Decimal("400.00")


@pytest.mark.asyncio
async def test_average_score_tracks_several_sessions(session_factory) -> None:
    creator_id, player_id, first_session_id, first_prices = await _setup(session_factory)
    for product_id, price in first_prices.items():
        await _answer(
            session_factory,
            session_id=first_session_id,
            user_id=player_id,
            product_id=product_id,
            guess=str(price),
        )
    second = await _create_game_session(session_factory, creator_id=creator_id, now_utc=_later(5))
    await _join(session_factory, session_id=second.session_id, user_id=player_id)
    second_prices = await _bound_prices(session_factory, session_id=second.session_id)
    for product_id, price in second_prices.items():
        # 50 points off every product
        await _answer(
            session_factory,
            session_id=second.session_id,
            user_id=player_id,
            product_id=product_id,
            guess=str(price + 50),
        )

    async with session_factory() as session:
        user = await UsersRepo.get_by_id(session, player_id)
    assert user.total_score == 600
    assert user.games_played == 2
    assert user.best_session_score == 400
    assert Decimal(user.average_score) == Decimal("300.00")


@pytest.mark.asyncio
async def test_submit_answer_guards(session_factory) -> None:
    creator_id, player_id, session_id, prices = await _setup(session_factory)
    product_id = next(iter(prices))
    outsider_id = await _create_user(session_factory, "mallory")
    stray_product_id = max(prices) + 1000

    with pytest.raises(SessionValidationError) as exc_info:
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=product_id,
            guess="-1",
        )
    assert exc_info.value.field == "guessed_price"

    with pytest.raises(NotParticipantError):
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=outsider_id,
            product_id=product_id,
            guess="1",
        )

    with pytest.raises(ProductNotInSessionError):
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=stray_product_id,
            guess="1",
        )

    async with session_factory.begin() as session:
        await sessions_service.update_session_status(
            session,
            session_id=session_id,
            principal=Principal(user_id=creator_id),
            status="completed",
            now_utc=_later(1),
        )
    with pytest.raises(SessionClosedError):
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=product_id,
            guess="1",
        )


@pytest.mark.asyncio
async def test_session_status_stays_active_when_everyone_finishes(session_factory) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    for product_id in prices:
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=product_id,
            guess="0",
        )

    async with session_factory() as session:
        snapshot = await sessions_service.get_session(
            session,
            session_id=session_id,
            viewer_id=player_id,
        )
    assert snapshot.status == "active"
    assert snapshot.has_completed is True


@pytest.mark.asyncio
async def test_guess_is_scored_on_the_stored_cents_value(session_factory) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    product_id = next(pid for pid, price in prices.items() if price == Decimal("100.00"))

    result = await _answer(
        session_factory,
        session_id=session_id,
        user_id=player_id,
        product_id=product_id,
        guess="79.495",
    )

    async with session_factory() as session:
        stored = await session.scalar(select(Answer).where(Answer.id == result.answer.answer_id))
    assert Decimal(stored.guessed_price) == Decimal("79.50")
    assert result.answer.guessed_price == Decimal("79.50")
    assert result.score == 80
    assert stored.score == result.score


@pytest.mark.asyncio
@pytest.mark.parametrize("guess", ["100000000", "99999999.996", "1E+40", "NaN"])
async def test_guess_outside_price_column_is_rejected(session_factory, guess: str) -> None:
    _, player_id, session_id, prices = await _setup(session_factory)
    product_id = next(iter(prices))

    with pytest.raises(SessionValidationError) as exc_info:
        await _answer(
            session_factory,
            session_id=session_id,
            user_id=player_id,
            product_id=product_id,
            guess=guess,
        )

    assert exc_info.value.field == "guessed_price"
    async with session_factory() as session:
        answers_total = await session.scalar(select(func.count(Answer.id)))
    assert answers_total == 0
