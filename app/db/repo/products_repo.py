from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.products import Product


class ProductsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        name: str,
        price: Decimal,
        now_utc: datetime,
        image_url: str | None = None,
    ) -> Product:
        product = Product(name=name, price=price, image_url=image_url, created_at=now_utc)
        session.add(product)
        await session.flush()
        return product

    @staticmethod
    async def pick_random_ids(session: AsyncSession, *, count: int) -> list[int]:
        stmt = select(Product.id).order_by(func.random()).limit(max(1, int(count)))
        result = await session.execute(stmt)
        return [int(product_id) for product_id in result.scalars().all()]

