from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import Row, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.products import Product
from app.db.models.session_products import SessionProduct


class SessionProductsRepo:
    @staticmethod
    async def bind_products(
        session: AsyncSession,
        *,
        session_id: int,
        product_ids: Sequence[int],
    ) -> list[SessionProduct]:
        rows = [
            SessionProduct(session_id=session_id, product_id=product_id, position=position)
            for position, product_id in enumerate(product_ids, start=1)
        ]
        session.add_all(rows)
        await session.flush()
        return rows

    @staticmethod
    async def list_for_session(session: AsyncSession, *, session_id: int) -> list[Row]:
        stmt = (
            select(
                Product.id,
                Product.name,
                Product.image_url,
                SessionProduct.position,
            )
            .join(Product, Product.id == SessionProduct.product_id)
            .where(SessionProduct.session_id == session_id)
            .order_by(SessionProduct.position.asc())
        )
        result = await session.execute(stmt)
        return list(result.all())

    @staticmethod
    async def list_positions(session: AsyncSession, *, session_id: int) -> list[int]:
        stmt = (
            select(SessionProduct.position)
            .where(SessionProduct.session_id == session_id)
            .order_by(SessionProduct.position.asc())
        )
        result = await session.execute(stmt)
        return [int(position) for position in result.scalars().all()]

    @staticmethod
    async def get_bound_price(
        session: AsyncSession,
        *,
        session_id: int,
        product_id: int,
    ) -> Decimal | None:
        stmt = (
            select(Product.price)
            .join(SessionProduct, SessionProduct.product_id == Product.id)
            .where(
                SessionProduct.session_id == session_id,
                SessionProduct.product_id == product_id,
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
