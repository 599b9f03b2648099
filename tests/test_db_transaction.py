from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.db.errors import StorageUnavailableError
from app.db.models.users import User
from app.db.repo.users_repo import UsersRepo
from app.db.session import transaction

UTC = timezone.utc


@pytest.mark.asyncio
async def test_transaction_commits_on_success(session_factory) -> None:
    async with transaction(session_factory) as session:
        await UsersRepo.create(
            session,
            email="alice@pirho.test",
            username="alice",
            now_utc=datetime(2026, 1, 1, tzinfo=UTC),
        )

    async with session_factory() as session:
        assert await session.scalar(select(func.count(User.id))) == 1


@pytest.mark.asyncio
async def test_transaction_rolls_back_domain_errors(session_factory) -> None:
    with pytest.raises(LookupError):
        async with transaction(session_factory) as session:
            await UsersRepo.create(
                session,
                email="alice@pirho.test",
                username="alice",
                now_utc=datetime(2026, 1, 1, tzinfo=UTC),
            )
            raise LookupError("stop")

    async with session_factory() as session:
        assert await session.scalar(select(func.count(User.id))) == 0


@pytest.mark.asyncio
async def test_transaction_reports_driver_failures_as_storage_unavailable(session_factory) -> None:
    with pytest.raises(StorageUnavailableError) as exc_info:
        async with transaction(session_factory):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    assert exc_info.value.code == "E_STORAGE_UNAVAILABLE"
    assert isinstance(exc_info.value.__cause__, OperationalError)
