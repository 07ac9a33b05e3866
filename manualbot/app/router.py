"""Request router - entry point for one inbound text message.

Order of dispatch:
1. Active flow -> DialogueController
2. Unregistered user -> registration trigger or registration prompt
3. Exact commands (help, usage, menu, inquiry, categories, cancel)
4. Category alias -> category listing
5. Exact title -> detail view
6. Keyword search -> detail view (single strong hit) or result list
"""

import logging
import time
from dataclasses import dataclass

from manualbot.app.config import Settings, get_settings
from manualbot.app.db.repositories import CorpusAccess, RecordStore, bounded_call
from manualbot.app.dialogue import messages
from manualbot.app.dialogue.classifier import CancelMatcher
from manualbot.app.dialogue.controller import DialogueController, DialogueOutcome
from manualbot.app.errors import InvalidQuery, PersistenceError
from manualbot.app.models.common import FlowName, PermissionLevel
from manualbot.app.models.manual import Manual
from manualbot.app.models.records import AccessLogEntry, UserRecord
from manualbot.app.permissions import level_of
from manualbot.app.search.engine import SearchEngine
from manualbot.app.search.render import (
    render_categories,
    render_category_results,
    render_detail,
    render_results,
)
from manualbot.app.utils.logging import StructuredDialogueLogger
from manualbot.app.utils.metrics import PrometheusDialogueMetrics

logger = logging.getLogger(__name__)

REGISTRATION_TRIGGERS = frozenset(
    {"登録", "とうろく", "register", "始める", "はじめる", "start", "ユーザー登録", "新規登録"}
)

COMMANDS: dict[str, frozenset[str]] = {
    "help": frozenset({"ヘルプ", "help", "?", "？"}),
    "usage": frozenset({"使い方", "機能"}),
    "menu": frozenset({"メニュー", "menu"}),
    "inquiry": frozenset({"問い合わせ", "お問い合わせ", "inquiry"}),
    "categories": frozenset({"カテゴリ", "カテゴリー", "category", "categories"}),
}


@dataclass(frozen=True)
class RouterReply:
    """Reply text and a short tag describing what was done."""

    text: str
    action: str


def match_command(text: str) -> str | None:
    """Exact (case-folded) command match; searches never hit a command."""
    folded = text.strip().casefold()
    for command, words in COMMANDS.items():
        if folded in {w.casefold() for w in words}:
            return command
    return None


class RequestRouter:
    """Dispatches inbound text to the dialogue controller or search."""

    def __init__(
        self,
        controller: DialogueController,
        record_store: RecordStore,
        corpus: CorpusAccess,
        engine: SearchEngine,
        *,
        settings: Settings | None = None,
        metrics: PrometheusDialogueMetrics | None = None,
        structured_logger: StructuredDialogueLogger | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._controller = controller
        self._records = record_store
        self._corpus = corpus
        self._engine = engine
        self._cancel = CancelMatcher(settings.cancel_phrases)
        self._timeout_s = settings.record_store_timeout_ms / 1000
        self._related_limit = settings.related_max_items
        self._metrics = metrics or PrometheusDialogueMetrics()
        self._log = structured_logger or StructuredDialogueLogger()

    async def route(self, user_key: str, raw_text: str) -> RouterReply:
        """Handle one message.

        Args:
            user_key: Conversation participant
            raw_text: Inbound text

        Returns:
            RouterReply with the text to send back
        """
        text = (raw_text or "").strip()

        dialogue = await self._controller.handle(user_key, text)
        if dialogue.outcome != DialogueOutcome.no_flow:
            flow = dialogue.flow.value if dialogue.flow else "dialogue"
            return RouterReply(dialogue.reply, f"{flow}_{dialogue.outcome.value}")

        try:
            user = await bounded_call(
                self._records.find_by_user_key(user_key), self._timeout_s, "find_by_user_key"
            )
        except PersistenceError:
            logger.error("User lookup failed for %s", user_key, exc_info=True)
            return RouterReply(messages.service_unavailable(), "error")

        if user is None:
            if text.casefold() in {t.casefold() for t in REGISTRATION_TRIGGERS}:
                started = self._controller.start(FlowName.registration, user_key)
                return RouterReply(started.reply, "registration_started")
            return RouterReply(messages.registration_required(), "registration_prompt")

        return await self._route_registered(user, text)

    async def _route_registered(self, user: UserRecord, text: str) -> RouterReply:
        command = match_command(text)
        if command == "help":
            return RouterReply(messages.help_text(), "help")
        if command == "usage":
            return RouterReply(messages.usage_text(), "usage")
        if command == "menu":
            return RouterReply(messages.menu_text(user.name), "menu")
        if command == "inquiry":
            started = self._controller.start(
                FlowName.inquiry,
                user.user_key,
                seed={"user_name": user.name, "email": user.email},
            )
            return RouterReply(started.reply, "inquiry_started")

        if self._cancel.matches(text):
            return RouterReply(messages.nothing_to_cancel(), "nothing_to_cancel")
        if text.casefold() in {t.casefold() for t in REGISTRATION_TRIGGERS}:
            return RouterReply(messages.already_registered(user.name), "already_registered")

        level = level_of(user.permission)
        try:
            corpus = await bounded_call(self._corpus.all_active(), self._timeout_s, "all_active")
        except PersistenceError:
            logger.error("Corpus load failed", exc_info=True)
            return RouterReply(messages.service_unavailable(), "error")

        if command == "categories":
            counts = self._engine.available_categories(level, corpus)
            return RouterReply(render_categories(counts), "categories")

        category = self._engine.resolve_category(text)
        if category is not None:
            started_at = time.perf_counter()
            results = self._engine.search_by_category(category, level, corpus)
            self._observe_search(user, "category", category, len(results), started_at)
            await self._log_access(user, "SEARCH", keyword=category, result_count=len(results))
            return RouterReply(render_category_results(category, results), "category_search")

        manual = self._engine.find_by_title(text, level, corpus)
        if manual is not None:
            return await self._detail(user, manual, level, corpus)

        started_at = time.perf_counter()
        try:
            results = self._engine.search(text, level, corpus)
        except InvalidQuery as e:
            self._metrics.record_search("keyword", "invalid", 0.0)
            return RouterReply(messages.invalid_query(e.reason), "invalid_query")

        self._observe_search(user, "keyword", text, len(results), started_at)
        await self._log_access(user, "SEARCH", keyword=text, result_count=len(results))

        if not results:
            return RouterReply(messages.no_results(text), "no_results")
        if self._engine.is_detail_candidate(results):
            return await self._detail(user, results[0].document, level, corpus)
        return RouterReply(render_results(text, results), "search_results")

    async def _detail(
        self,
        user: UserRecord,
        manual: Manual,
        level: PermissionLevel,
        corpus: list[Manual],
    ) -> RouterReply:
        related = self._engine.related(manual, level, corpus, limit=self._related_limit)
        await self._log_access(user, "VIEW", manual_id=manual.id)
        return RouterReply(render_detail(manual, related), "manual_detail")

    def _observe_search(
        self, user: UserRecord, kind: str, query: str, count: int, started_at: float
    ) -> None:
        latency_ms = (time.perf_counter() - started_at) * 1000
        self._metrics.record_search(kind, "hit" if count else "miss", latency_ms)
        self._log.log_search(user.user_key, kind, query, count, latency_ms)

    async def _log_access(
        self,
        user: UserRecord,
        action: str,
        *,
        keyword: str | None = None,
        manual_id: str | None = None,
        result_count: int | None = None,
    ) -> None:
        entry = AccessLogEntry(
            user_key=user.user_key,
            user_name=user.name,
            action=action,
            keyword=keyword,
            manual_id=manual_id,
            result_count=result_count,
        )
        try:
            await bounded_call(self._records.log_access(entry), self._timeout_s, "log_access")
        except PersistenceError:
            logger.warning("Failed to write access log for %s", user.user_key, exc_info=True)
