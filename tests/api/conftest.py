from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.db.models import Base
from app.db.session import build_engine, build_session_factory
from app.main import create_app
from app.services.auth import Principal, issue_token

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


async def _create_schema(engine) -> None:  # noqa: ANN001
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def _auth_headers(user_id: int, *, role: str = "user") -> dict[str, str]:
    settings = get_settings()
    token = issue_token(
        Principal(user_id=user_id, role=role),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api():
    """TestClient over a fresh in-memory database; ``api.run`` executes coroutines on its loop."""
    engine = build_engine(SQLITE_MEMORY_URL)
    session_factory = build_session_factory(engine)
    with TestClient(create_app(session_factory)) as client:
        client.portal.call(_create_schema, engine)
        yield SimpleNamespace(
            client=client,
            session_factory=session_factory,
            run=client.portal.call,
            auth=_auth_headers,
        )
        client.portal.call(engine.dispose)
