from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class GameSession(Base):
    __tablename__ = "game_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active','completed','archived')",
            name="ck_game_sessions_status",
        ),
        CheckConstraint(
            "difficulty IN ('easy','medium','hard')",
            name="ck_game_sessions_difficulty",
        ),
        CheckConstraint(
            "visibility IN ('public','private','friends_only')",
            name="ck_game_sessions_visibility",
        ),
        CheckConstraint("max_participants > 0", name="ck_game_sessions_max_participants_positive"),
        Index("idx_game_sessions_creator", "creator_id"),
        Index("idx_game_sessions_visibility_created", "visibility", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    visibility: Mapped[str] = mapped_column(String(16), nullable=False)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
