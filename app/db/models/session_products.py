from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class SessionProduct(Base):
    __tablename__ = "session_products"
    __table_args__ = (
        CheckConstraint("position BETWEEN 1 AND 4", name="ck_session_products_position_range"),
        UniqueConstraint("session_id", "position", name="uq_session_products_session_position"),
    )

    session_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("game_sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
