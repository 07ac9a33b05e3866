"""Dependency providers for the HTTP layer.

Each provider is cached so the process shares one session store, record
store and corpus. Tests swap them with app.dependency_overrides.
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from manualbot.app.adapters.notifications import LoggingNotificationSink, WebhookNotificationSink
from manualbot.app.config import get_settings
from manualbot.app.db.engine import create_async_engine_from_settings, create_session_factory
from manualbot.app.db.inmemory import InMemoryCorpus, InMemoryRecordStore
from manualbot.app.db.repositories import CorpusAccess, NotificationSink, RecordStore
from manualbot.app.db.seed_dev import SAMPLE_MANUALS
from manualbot.app.db.sql_repositories import SqlCorpus, SqlRecordStore
from manualbot.app.dialogue.controller import DialogueController
from manualbot.app.dialogue.session_store import InMemorySessionStore
from manualbot.app.router import RequestRouter
from manualbot.app.search.engine import SearchEngine


@lru_cache
def get_engine() -> AsyncEngine:
    return create_async_engine_from_settings(get_settings())


@lru_cache
def get_session_factory() -> async_sessionmaker:
    return create_session_factory(get_engine())


@lru_cache
def get_session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@lru_cache
def get_record_store() -> RecordStore:
    if get_settings().use_inmemory_store:
        return InMemoryRecordStore()
    return SqlRecordStore(get_session_factory())


@lru_cache
def get_corpus() -> CorpusAccess:
    if get_settings().use_inmemory_store:
        return InMemoryCorpus(SAMPLE_MANUALS)
    return SqlCorpus(get_session_factory())


@lru_cache
def get_notification_sink() -> NotificationSink:
    settings = get_settings()
    if settings.notification_webhook_url:
        return WebhookNotificationSink(
            settings.notification_webhook_url,
            timeout_s=settings.notification_timeout_ms / 1000,
        )
    return LoggingNotificationSink()


@lru_cache
def get_search_engine() -> SearchEngine:
    settings = get_settings()
    return SearchEngine(
        max_results=settings.search_max_results,
        score_threshold=settings.search_score_threshold,
        min_query_length=settings.search_min_query_length,
        max_query_length=settings.search_max_query_length,
        detail_threshold=settings.detail_score_threshold,
    )


@lru_cache
def get_controller() -> DialogueController:
    return DialogueController(
        get_session_store(),
        get_record_store(),
        settings=get_settings(),
        notification_sink=get_notification_sink(),
    )


@lru_cache
def get_request_router() -> RequestRouter:
    return RequestRouter(
        get_controller(),
        get_record_store(),
        get_corpus(),
        get_search_engine(),
        settings=get_settings(),
    )
