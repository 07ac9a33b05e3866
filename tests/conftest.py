"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from manualbot.app.config import Settings
from manualbot.app.db.engine import create_schema, create_session_factory
from manualbot.app.db.inmemory import InMemoryCorpus, InMemoryRecordStore
from manualbot.app.db.seed_dev import SAMPLE_MANUALS
from manualbot.app.dialogue.controller import DialogueController
from manualbot.app.dialogue.session_store import InMemorySessionStore
from manualbot.app.models.records import UserRecord
from manualbot.app.router import RequestRouter
from manualbot.app.search.engine import SearchEngine


class FakeClock:
    """Manually advanced clock for session expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 4, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class RecordingSink:
    """Notification sink that remembers every call."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[list[str], dict]] = []

    async def notify(self, recipients: list[str], payload: dict) -> None:
        self.calls.append((recipients, payload))
        if self.fail:
            raise ConnectionError("webhook unreachable")


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        use_inmemory_store=True,
        record_store_timeout_ms=200,
        notification_timeout_ms=200,
        admin_recipients=["admin@company.com"],
        notification_webhook_url="",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(clock: FakeClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def registered_user() -> UserRecord:
    return UserRecord(
        email="suzuki@company.com",
        name="鈴木花子",
        permission="一般",
        user_key="U-registered",
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def controller(
    session_store: InMemorySessionStore,
    record_store: InMemoryRecordStore,
    settings: Settings,
    sink: RecordingSink,
) -> DialogueController:
    return DialogueController(
        session_store,
        record_store,
        settings=settings,
        notification_sink=sink,
    )


@pytest.fixture
def search_engine() -> SearchEngine:
    return SearchEngine()


@pytest.fixture
def corpus() -> InMemoryCorpus:
    return InMemoryCorpus(SAMPLE_MANUALS)


@pytest.fixture
def request_router(
    controller: DialogueController,
    record_store: InMemoryRecordStore,
    corpus: InMemoryCorpus,
    search_engine: SearchEngine,
    settings: Settings,
) -> RequestRouter:
    return RequestRouter(controller, record_store, corpus, search_engine, settings=settings)


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared across connections, schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker:
    return create_session_factory(sqlite_engine)
