from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.engine import make_url

TEST_DB_NAME_RE = re.compile(r"test", re.IGNORECASE)
LOCAL_TEST_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "postgres", "pirho_postgres"})


@dataclass(frozen=True, slots=True)
class IntegrationDbCheck:
    is_safe: bool
    reason: str
    database_name: str
    host: str


def check_integration_db(database_url: str) -> IntegrationDbCheck:
    """Decide whether a database may be wiped by the Postgres-only concurrency tests."""
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    def _unsafe(reason: str) -> IntegrationDbCheck:
        return IntegrationDbCheck(False, reason, database_name, host)

    if url.get_backend_name() != "postgresql":
        return _unsafe("only PostgreSQL databases are used for integration runs")
    if not database_name:
        return _unsafe("database name is empty")
    if TEST_DB_NAME_RE.search(database_name) is None:
        return _unsafe("database name does not contain 'test'")
    if host not in LOCAL_TEST_HOSTS:
        return _unsafe(f"host {host!r} is not a local test host")
    return IntegrationDbCheck(True, "ok", database_name, host)


def assert_safe_integration_db(database_url: str) -> None:
    check = check_integration_db(database_url)
    if check.is_safe:
        return
    raise RuntimeError(
        "Refusing to TRUNCATE tables for integration tests: "
        f"{check.reason} (database={check.database_name!r}, host={check.host!r}). "
        "Point DATABASE_URL at a local database such as 'pirho_games_test'."
    )
