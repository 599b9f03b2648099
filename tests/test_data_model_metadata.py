from __future__ import annotations

from sqlalchemy import CheckConstraint, UniqueConstraint

from app.db.models import (
    Answer,
    Base,
    Friendship,
    Participant,
    SessionInvite,
    SessionProduct,
)


def _unique_column_sets(model) -> set[tuple[str, ...]]:  # noqa: ANN001
    return {
        tuple(column.name for column in constraint.columns)
        for constraint in model.__table__.constraints
        if isinstance(constraint, UniqueConstraint)
    }


def _check_names(model) -> set[str]:  # noqa: ANN001
    return {
        str(constraint.name)
        for constraint in model.__table__.constraints
        if isinstance(constraint, CheckConstraint)
    }


def test_all_game_tables_registered() -> None:
    assert set(Base.metadata.tables) == {
        "users",
        "products",
        "friendships",
        "game_sessions",
        "session_products",
        "participants",
        "answers",
        "session_invites",
    }


def test_one_answer_per_participant_and_product() -> None:
    assert ("participant_id", "product_id") in _unique_column_sets(Answer)
    assert "ck_answers_score_range" in _check_names(Answer)


def test_one_participant_row_per_user_and_session() -> None:
    assert ("session_id", "user_id") in _unique_column_sets(Participant)


def test_session_products_have_dense_unique_positions() -> None:
    assert ("session_id", "position") in _unique_column_sets(SessionProduct)
    assert "ck_session_products_position_range" in _check_names(SessionProduct)
    primary_key = [column.name for column in SessionProduct.__table__.primary_key.columns]
    assert primary_key == ["session_id", "product_id"]


def test_friendships_are_stored_in_canonical_order() -> None:
    assert "ck_friendships_canonical_order" in _check_names(Friendship)
    assert ("user_id_1", "user_id_2") in _unique_column_sets(Friendship)


def test_one_invite_per_session_and_invitee() -> None:
    assert ("session_id", "invitee_id") in _unique_column_sets(SessionInvite)


def test_session_children_cascade_on_delete() -> None:
    for model in (SessionProduct, Participant, SessionInvite):
        session_fk = next(
            fk for fk in model.__table__.foreign_keys if fk.column.table.name == "game_sessions"
        )
        assert session_fk.ondelete == "CASCADE"
