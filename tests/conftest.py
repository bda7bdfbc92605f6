from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.api.deps import (
    get_db_session_factory,
    get_event_analytics_service,
    get_workspace_analytics_service,
)
from src.api.main import app
from src.core.config import AnalyticsThresholds
from src.domain.services import EventAnalyticsService, WorkspaceAnalyticsService
from src.infrastructure.db.base import Base
from src.infrastructure.db.session import build_engine

from tests.utils import NOW, FakeEventStore, FakeWorkspaceStore


@pytest.fixture
def now() -> datetime:
    """Fixed reference time shared by the service clocks."""
    return NOW


@pytest.fixture
def thresholds() -> AnalyticsThresholds:
    return AnalyticsThresholds()


@pytest.fixture
def event_store() -> FakeEventStore:
    return FakeEventStore()


@pytest.fixture
def workspace_store() -> FakeWorkspaceStore:
    return FakeWorkspaceStore()


@pytest.fixture
def event_service(
    event_store: FakeEventStore, thresholds: AnalyticsThresholds
) -> EventAnalyticsService:
    return EventAnalyticsService(event_store, thresholds=thresholds, clock=lambda: NOW)


@pytest.fixture
def workspace_service(
    workspace_store: FakeWorkspaceStore, thresholds: AnalyticsThresholds
) -> WorkspaceAnalyticsService:
    return WorkspaceAnalyticsService(workspace_store, thresholds=thresholds, clock=lambda: NOW)


@pytest.fixture
async def session_factory(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """File-backed SQLite database with the full schema, one per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'insights.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the SQLite-backed record stores."""
    app.dependency_overrides[get_db_session_factory] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def fake_client(
    event_service: EventAnalyticsService,
    workspace_service: WorkspaceAnalyticsService,
) -> AsyncIterator[AsyncClient]:
    """HTTP client whose services read from the in-memory fake stores."""
    app.dependency_overrides[get_event_analytics_service] = lambda: event_service
    app.dependency_overrides[get_workspace_analytics_service] = lambda: workspace_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
