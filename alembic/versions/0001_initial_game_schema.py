"""initial game schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default=sa.text("'user'")),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("best_session_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("average_score", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('user','admin')", name="ck_users_role"),
        sa.CheckConstraint("total_score >= 0", name="ck_users_total_score_non_negative"),
        sa.CheckConstraint("games_played >= 0", name="ck_users_games_played_non_negative"),
        sa.CheckConstraint("best_session_score >= 0", name="ck_users_best_session_score_non_negative"),
        sa.CheckConstraint("average_score >= 0", name="ck_users_average_score_non_negative"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("idx_users_leaderboard", "users", ["total_score", "best_session_score"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    op.create_table(
        "friendships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id_1", sa.Integer(), nullable=False),
        sa.Column("user_id_2", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("user_id_1 < user_id_2", name="ck_friendships_canonical_order"),
        sa.ForeignKeyConstraint(["user_id_1"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id_2"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id_1", "user_id_2", name="uq_friendships_pair"),
    )
    op.create_index("idx_friendships_user_id_2", "friendships", ["user_id_2"])

    op.create_table(
        "game_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("difficulty", sa.String(16), nullable=False),
        sa.Column("visibility", sa.String(16), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active','completed','archived')", name="ck_game_sessions_status"),
        sa.CheckConstraint("difficulty IN ('easy','medium','hard')", name="ck_game_sessions_difficulty"),
        sa.CheckConstraint(
            "visibility IN ('public','private','friends_only')",
            name="ck_game_sessions_visibility",
        ),
        sa.CheckConstraint("max_participants > 0", name="ck_game_sessions_max_participants_positive"),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_game_sessions_creator", "game_sessions", ["creator_id"])
    op.create_index(
        "idx_game_sessions_visibility_created",
        "game_sessions",
        ["visibility", "created_at"],
    )

    op.create_table(
        "session_products",
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.CheckConstraint("position BETWEEN 1 AND 4", name="ck_session_products_position_range"),
        sa.ForeignKeyConstraint(["session_id"], ["game_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("session_id", "product_id"),
        sa.UniqueConstraint("session_id", "position", name="uq_session_products_session_position"),
    )

    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("session_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint("session_score >= 0", name="ck_participants_session_score_non_negative"),
        sa.ForeignKeyConstraint(["session_id"], ["game_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_participants_session_user"),
    )
    op.create_index(
        "idx_participants_session_score",
        "participants",
        ["session_id", "session_score", "created_at"],
    )
    op.create_index("idx_participants_user", "participants", ["user_id"])

    op.create_table(
        "answers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("guessed_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("guessed_price >= 0", name="ck_answers_guessed_price_non_negative"),
        sa.CheckConstraint("score >= 0 AND score <= 100", name="ck_answers_score_range"),
        sa.ForeignKeyConstraint(["participant_id"], ["participants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("participant_id", "product_id", name="uq_answers_participant_product"),
    )

    op.create_table(
        "session_invites",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("inviter_id", sa.Integer(), nullable=False),
        sa.Column("invitee_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending','accepted','rejected')",
            name="ck_session_invites_status",
        ),
        sa.ForeignKeyConstraint(["session_id"], ["game_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inviter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["invitee_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("session_id", "invitee_id", name="uq_session_invites_session_invitee"),
    )
    op.create_index(
        "idx_session_invites_invitee_status",
        "session_invites",
        ["invitee_id", "status"],
    )
    op.create_index("idx_session_invites_inviter", "session_invites", ["inviter_id"])


def downgrade() -> None:
    op.drop_index("idx_session_invites_inviter", table_name="session_invites")
    op.drop_index("idx_session_invites_invitee_status", table_name="session_invites")
    op.drop_table("session_invites")
    op.drop_table("answers")
    op.drop_index("idx_participants_user", table_name="participants")
    op.drop_index("idx_participants_session_score", table_name="participants")
    op.drop_table("participants")
    op.drop_table("session_products")
    op.drop_index("idx_game_sessions_visibility_created", table_name="game_sessions")
    op.drop_index("idx_game_sessions_creator", table_name="game_sessions")
    op.drop_table("game_sessions")
    op.drop_index("idx_friendships_user_id_2", table_name="friendships")
    op.drop_table("friendships")
    op.drop_table("products")
    op.drop_index("idx_users_leaderboard", table_name="users")
    op.drop_table("users")
