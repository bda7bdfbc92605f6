from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from src.core.config import Settings, get_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(url: str, settings: Settings, *, read_only: bool = False) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` suited to the URL's backend.

    Postgres connections get pool sizing, a statement timeout and, for the report
    readers, a read-only default transaction. SQLite files keep the driver defaults.
    """
    options: dict[str, Any] = {"pool_pre_ping": True}
    if make_url(url).get_backend_name() != "postgresql":
        return options

    server_settings = {
        "application_name": settings.app_name,
        "statement_timeout": str(settings.db_statement_timeout_ms),
    }
    if read_only:
        server_settings["default_transaction_read_only"] = "on"
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        connect_args={"server_settings": server_settings},
    )
    return options


def build_engine(url: str, *, read_only: bool = False) -> AsyncEngine:
    options = engine_options(url, get_settings(), read_only=read_only)
    return create_async_engine(url, echo=False, **options)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Process-wide read-only session factory shared by the record stores."""
    global _engine, _session_factory

    if _session_factory is None:
        _engine = build_engine(get_settings().async_database_url, read_only=True)
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections; the next ``get_session_factory`` call reconnects."""
    global _engine, _session_factory

    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
