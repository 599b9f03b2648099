from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.answers import Answer


class AnswersRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        participant_id: int,
        product_id: int,
        guessed_price: Decimal,
        score: int,
        now_utc: datetime,
    ) -> Answer:
        answer = Answer(
            participant_id=participant_id,
            product_id=product_id,
            guessed_price=guessed_price,
            score=score,
            created_at=now_utc,
        )
        session.add(answer)
        await session.flush()
        return answer

    @staticmethod
    async def exists_for_participant_product(
        session: AsyncSession,
        *,
        participant_id: int,
        product_id: int,
    ) -> bool:
        stmt = select(Answer.id).where(
            Answer.participant_id == participant_id,
            Answer.product_id == product_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def count_for_participant(session: AsyncSession, *, participant_id: int) -> int:
        stmt = select(func.count(Answer.id)).where(Answer.participant_id == participant_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def sum_scores_for_participant(session: AsyncSession, *, participant_id: int) -> int:
        stmt = select(func.coalesce(func.sum(Answer.score), 0)).where(
            Answer.participant_id == participant_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
