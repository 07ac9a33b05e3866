"""Permission-aware keyword and category search over a manual snapshot.

Scoring strategy (contributions are independent and summed, then clamped
to 1.0):
- exact title equality           1.0
- partial title containment      0.6 (only when not exact)
- tag containment                0.45
- body containment               0.3
- category synonym association   0.2

Results below the threshold are dropped. Sorting is by score descending;
Python's sort is stable, so equal scores keep corpus order.
"""

import logging
from collections.abc import Iterable

from manualbot.app.errors import InvalidQuery
from manualbot.app.models.common import MatchKind, PermissionLevel
from manualbot.app.models.manual import Manual, ScoredResult
from manualbot.app.permissions import is_visible
from manualbot.app.search.categories import CATEGORY_SYNONYMS, resolve_category_alias

logger = logging.getLogger(__name__)

EXACT_TITLE_WEIGHT = 1.0
PARTIAL_TITLE_WEIGHT = 0.6
TAG_WEIGHT = 0.45
CONTENT_WEIGHT = 0.3
CATEGORY_WEIGHT = 0.2

RELATED_CATEGORY_WEIGHT = 0.6
RELATED_TAG_WEIGHT = 0.2
RELATED_TITLE_WORD_WEIGHT = 0.1


def normalize_query(raw_query: str, min_length: int = 2, max_length: int = 100) -> str:
    """Trim and case-fold a query.

    Raises:
        InvalidQuery: If the trimmed query is shorter than min_length or
            longer than max_length.
    """
    cleaned = (raw_query or "").strip()

    if len(cleaned) < min_length:
        raise InvalidQuery(f"キーワードは{min_length}文字以上で入力してください")
    if len(cleaned) > max_length:
        raise InvalidQuery(f"キーワードが長すぎます（{max_length}文字以内）")

    return cleaned.casefold()


def score_manual(manual: Manual, query: str) -> tuple[float, MatchKind | None]:
    """Score a manual against an already-normalized query.

    Returns:
        (score, match_kind); match_kind is None when nothing matched.
    """
    title = manual.title.strip().casefold()
    signals: list[tuple[MatchKind, float]] = []

    if title == query:
        signals.append((MatchKind.exact_title, EXACT_TITLE_WEIGHT))
    elif query in title:
        signals.append((MatchKind.partial_title, PARTIAL_TITLE_WEIGHT))

    if any(query in tag.strip().casefold() for tag in manual.tags):
        signals.append((MatchKind.tag, TAG_WEIGHT))

    if manual.body and query in manual.body.casefold():
        signals.append((MatchKind.content, CONTENT_WEIGHT))

    synonyms = CATEGORY_SYNONYMS.get(manual.category_path.major, ())
    if any(query in syn.casefold() or syn.casefold() in query for syn in synonyms):
        signals.append((MatchKind.category, CATEGORY_WEIGHT))

    if not signals:
        return (0.0, None)

    score = min(sum(weight for _, weight in signals), 1.0)
    # Signals are appended strongest first
    return (score, signals[0][0])


def visible_manuals(
    corpus: Iterable[Manual], user_level: PermissionLevel
) -> list[Manual]:
    """Filter to active manuals the user may view, keeping corpus order."""
    return [
        manual
        for manual in corpus
        if manual.active and is_visible(user_level, manual.required_permission)
    ]


class SearchEngine:
    """Keyword and category search. Pure functions of (query, level, corpus)."""

    def __init__(
        self,
        *,
        max_results: int = 10,
        score_threshold: float = 0.3,
        min_query_length: int = 2,
        max_query_length: int = 100,
        detail_threshold: float = 0.9,
    ) -> None:
        self.max_results = max_results
        self.score_threshold = score_threshold
        self.min_query_length = min_query_length
        self.max_query_length = max_query_length
        self.detail_threshold = detail_threshold

    def search(
        self, raw_query: str, user_level: PermissionLevel, corpus: Iterable[Manual]
    ) -> list[ScoredResult]:
        """Keyword search.

        Args:
            raw_query: User text
            user_level: Viewer's permission level
            corpus: Manual snapshot in storage order

        Returns:
            Results sorted by score descending, at most max_results

        Raises:
            InvalidQuery: If the query length is out of bounds
        """
        query = normalize_query(raw_query, self.min_query_length, self.max_query_length)

        results: list[ScoredResult] = []
        for manual in visible_manuals(corpus, user_level):
            score, kind = score_manual(manual, query)
            if kind is None or score < self.score_threshold:
                continue
            results.append(ScoredResult(document=manual, score=score, match_kind=kind))

        results.sort(key=lambda r: -r.score)
        logger.debug("Keyword search %r matched %d manuals", query, len(results))
        return results[: self.max_results]

    def search_by_category(
        self, category_name: str, user_level: PermissionLevel, corpus: Iterable[Manual]
    ) -> list[ScoredResult]:
        """Exact major-category listing; every match scores 1.0, no threshold."""
        return [
            ScoredResult(document=manual, score=1.0, match_kind=MatchKind.category)
            for manual in visible_manuals(corpus, user_level)
            if manual.category_path.major == category_name
        ]

    def is_detail_candidate(self, results: list[ScoredResult]) -> bool:
        """Exactly one result scoring at least the detail threshold."""
        return len(results) == 1 and results[0].score >= self.detail_threshold

    def resolve_category(self, text: str) -> str | None:
        """Map an exact category alias (e.g. "けいり") to its major category."""
        return resolve_category_alias(text)

    def find_by_title(
        self, text: str, user_level: PermissionLevel, corpus: Iterable[Manual]
    ) -> Manual | None:
        """First visible manual whose title equals text, case-folded."""
        wanted = text.strip().casefold()
        if not wanted:
            return None

        for manual in visible_manuals(corpus, user_level):
            if manual.title.strip().casefold() == wanted:
                return manual
        return None

    def related(
        self,
        manual: Manual,
        user_level: PermissionLevel,
        corpus: Iterable[Manual],
        limit: int = 3,
    ) -> list[ScoredResult]:
        """Manuals related to `manual` by category, shared tags and title words."""
        base_tags = {tag.strip().casefold() for tag in manual.tags}
        base_words = {w for w in manual.title.casefold().split() if len(w) > 1}

        scored: list[ScoredResult] = []
        for other in visible_manuals(corpus, user_level):
            if other.id == manual.id:
                continue

            score = 0.0
            if other.category_path.major == manual.category_path.major:
                score += RELATED_CATEGORY_WEIGHT

            other_tags = {tag.strip().casefold() for tag in other.tags}
            score += len(base_tags & other_tags) * RELATED_TAG_WEIGHT

            other_words = set(other.title.casefold().split())
            score += len(base_words & other_words) * RELATED_TITLE_WORD_WEIGHT

            score = min(score, 1.0)
            if score > 0:
                scored.append(
                    ScoredResult(document=other, score=score, match_kind=MatchKind.category)
                )

        scored.sort(key=lambda r: -r.score)
        return scored[:limit]

    def available_categories(
        self, user_level: PermissionLevel, corpus: Iterable[Manual]
    ) -> dict[str, int]:
        """Major category -> number of visible manuals, in first-seen order."""
        counts: dict[str, int] = {}
        for manual in visible_manuals(corpus, user_level):
            major = manual.category_path.major or "その他"
            counts[major] = counts.get(major, 0) + 1
        return counts
