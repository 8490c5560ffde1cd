"""Engine for PostgreSQL in deployments and SQLite for tests and quick local runs."""

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from app.core.config import settings

POSTGRES_POOL_OPTIONS: dict[str, Any] = {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


def create_db_engine(url: str | None = None) -> Engine:
    parsed = make_url(url or settings.DATABASE_URL)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(parsed, **POSTGRES_POOL_OPTIONS)

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    # Each connection to an in-memory database gets its own empty database
    if parsed.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return create_engine(parsed, **options)


engine = create_db_engine()
