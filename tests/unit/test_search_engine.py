"""Tests for keyword and category search."""

import random

import pytest

from manualbot.app.db.seed_dev import SAMPLE_MANUALS
from manualbot.app.errors import InvalidQuery
from manualbot.app.models.common import MatchKind, PermissionLevel
from manualbot.app.models.manual import CategoryPath, Manual
from manualbot.app.search.engine import SearchEngine, normalize_query, score_manual


def make_manual(
    manual_id: str,
    title: str,
    *,
    major: str = "経理",
    body: str = "",
    tags: tuple[str, ...] = (),
    level: PermissionLevel = PermissionLevel.general,
    active: bool = True,
) -> Manual:
    return Manual(
        id=manual_id,
        category_path=CategoryPath(major=major),
        title=title,
        body=body,
        tags=frozenset(tags),
        required_permission=level,
        active=active,
    )


class TestNormalizeQuery:
    """Query bounds."""

    def test_trims_and_casefolds(self) -> None:
        assert normalize_query("  VPN  ") == "vpn"

    @pytest.mark.parametrize("raw", ["", " ", "a", " 経 "])
    def test_too_short_raises(self, raw: str) -> None:
        with pytest.raises(InvalidQuery):
            normalize_query(raw)

    def test_too_long_raises(self) -> None:
        with pytest.raises(InvalidQuery) as exc_info:
            normalize_query("あ" * 101)
        assert "100" in exc_info.value.reason

    def test_boundaries_accepted(self) -> None:
        assert normalize_query("ab") == "ab"
        assert normalize_query("あ" * 100) == "あ" * 100


class TestKeywordSearch:
    """SearchEngine.search."""

    def test_partial_title_example(self, search_engine: SearchEngine) -> None:
        """'経費' against a single General manual titled '経費精算'."""
        corpus = [make_manual("M1", "経費精算")]

        results = search_engine.search("経費", PermissionLevel.general, corpus)

        assert len(results) == 1
        assert results[0].match_kind == MatchKind.partial_title
        assert 0.5 <= results[0].score < 0.9
        assert not search_engine.is_detail_candidate(results)

    def test_exact_title_scores_one(self, search_engine: SearchEngine) -> None:
        corpus = [make_manual("M1", "経費精算")]

        results = search_engine.search("経費精算", PermissionLevel.general, corpus)

        assert results[0].score == 1.0
        assert results[0].match_kind == MatchKind.exact_title
        assert search_engine.is_detail_candidate(results)

    def test_match_kind_is_strongest_signal(self, search_engine: SearchEngine) -> None:
        corpus = [
            make_manual("T", "社内規程", tags=("出張",), major="総務"),
            make_manual("C", "社内規程2", body="出張の際は事前申請", major="総務"),
        ]

        results = search_engine.search("出張", PermissionLevel.general, corpus)

        kinds = {r.document.id: r.match_kind for r in results}
        assert kinds == {"T": MatchKind.tag, "C": MatchKind.content}

    def test_category_only_match_is_below_threshold(self, search_engine: SearchEngine) -> None:
        """A synonym hit alone (0.2) does not pass the 0.3 threshold."""
        corpus = [make_manual("M1", "月次締め", major="経理")]

        assert search_engine.search("会計", PermissionLevel.general, corpus) == []

    def test_results_respect_permission(self, search_engine: SearchEngine) -> None:
        corpus = [
            make_manual("open", "評価シート記入例", major="人事"),
            make_manual("secret", "評価制度", major="人事", level=PermissionLevel.executive),
        ]

        general = search_engine.search("評価", PermissionLevel.general, corpus)
        executive = search_engine.search("評価", PermissionLevel.executive, corpus)

        assert [r.document.id for r in general] == ["open"]
        assert {r.document.id for r in executive} == {"open", "secret"}

    def test_inactive_manuals_excluded(self, search_engine: SearchEngine) -> None:
        corpus = [make_manual("old", "経費精算", active=False)]

        assert search_engine.search("経費精算", PermissionLevel.executive, corpus) == []

    def test_truncates_to_max_results(self) -> None:
        engine = SearchEngine(max_results=10)
        corpus = [make_manual(f"M{i:02d}", f"申請ガイド{i}") for i in range(15)]

        results = engine.search("申請", PermissionLevel.general, corpus)

        assert len(results) == 10

    def test_equal_scores_keep_corpus_order(self, search_engine: SearchEngine) -> None:
        corpus = [make_manual(f"M{i}", f"申請ガイド{i}") for i in range(5)]

        results = search_engine.search("申請", PermissionLevel.general, corpus)

        assert [r.document.id for r in results] == ["M0", "M1", "M2", "M3", "M4"]

    def test_sorted_by_score_descending(self, search_engine: SearchEngine) -> None:
        corpus = [
            make_manual("body", "手順書", body="パスワードの変更"),
            make_manual("exact", "パスワード"),
            make_manual("partial", "パスワード変更手順"),
        ]

        results = search_engine.search("パスワード", PermissionLevel.general, corpus)

        assert [r.document.id for r in results] == ["exact", "partial", "body"]

    def test_score_is_clamped(self, search_engine: SearchEngine) -> None:
        """Exact title + tag + body + category would exceed 1.0 unclamped."""
        manual = make_manual("M1", "経費", body="経費の説明", tags=("経費",), major="経理")

        score, kind = score_manual(manual, "経費")

        assert score == 1.0
        assert kind == MatchKind.exact_title

    def test_score_bound_over_random_corpus(self, search_engine: SearchEngine) -> None:
        """Every result lies in [0, 1] for arbitrary queries and documents."""
        rng = random.Random(20250401)
        vocabulary = ["経費", "精算", "申請", "有給", "VPN", "会議室", "契約", "評価", "パスワード"]

        for _ in range(50):
            corpus = [
                make_manual(
                    f"M{i}",
                    "".join(rng.sample(vocabulary, 2)),
                    major=rng.choice(["経理", "人事", "IT", "総務", "営業"]),
                    body=" ".join(rng.sample(vocabulary, 3)),
                    tags=tuple(rng.sample(vocabulary, 2)),
                    level=rng.choice(list(PermissionLevel)),
                )
                for i in range(8)
            ]
            query = rng.choice(vocabulary)
            level = rng.choice(list(PermissionLevel))

            for result in search_engine.search(query, level, corpus):
                assert 0.0 <= result.score <= 1.0
                assert result.score >= search_engine.score_threshold
                assert result.document.required_permission <= level


class TestCategorySearch:
    """SearchEngine.search_by_category and friends."""

    def test_returns_exactly_visible_active_in_category(self, search_engine: SearchEngine) -> None:
        results = search_engine.search_by_category("経理", PermissionLevel.general, SAMPLE_MANUALS)

        expected = [
            m.id
            for m in SAMPLE_MANUALS
            if m.category_path.major == "経理" and m.required_permission <= PermissionLevel.general
        ]
        assert [r.document.id for r in results] == expected
        assert all(r.score == 1.0 for r in results)

    def test_unknown_category_is_empty(self, search_engine: SearchEngine) -> None:
        assert search_engine.search_by_category("法務", PermissionLevel.executive, SAMPLE_MANUALS) == []

    @pytest.mark.parametrize(
        "alias,category",
        [("けいり", "経理"), ("HR", "人事"), ("pc", "IT"), ("総務", "総務"), ("sales", "営業")],
    )
    def test_resolve_category_alias(self, search_engine: SearchEngine, alias: str, category: str) -> None:
        assert search_engine.resolve_category(alias) == category

    def test_resolve_category_requires_exact_alias(self, search_engine: SearchEngine) -> None:
        assert search_engine.resolve_category("経理の手続き") is None

    def test_available_categories_counts(self, search_engine: SearchEngine) -> None:
        counts = search_engine.available_categories(PermissionLevel.general, SAMPLE_MANUALS)

        assert counts == {"経理": 2, "人事": 1, "IT": 2, "総務": 1}
        assert list(counts) == ["経理", "人事", "IT", "総務"]

    def test_available_categories_grow_with_level(self, search_engine: SearchEngine) -> None:
        general = search_engine.available_categories(PermissionLevel.general, SAMPLE_MANUALS)
        executive = search_engine.available_categories(PermissionLevel.executive, SAMPLE_MANUALS)

        assert sum(executive.values()) == len(SAMPLE_MANUALS)
        assert all(executive[name] >= count for name, count in general.items())


class TestDetailHelpers:
    """Title lookup and related manuals."""

    def test_find_by_title_is_case_insensitive(self, search_engine: SearchEngine) -> None:
        manual = search_engine.find_by_title("vpn接続設定方法", PermissionLevel.general, SAMPLE_MANUALS)

        assert manual is not None
        assert manual.id == "M007"

    def test_find_by_title_hides_restricted(self, search_engine: SearchEngine) -> None:
        assert (
            search_engine.find_by_title("人事評価制度について", PermissionLevel.general, SAMPLE_MANUALS)
            is None
        )

    def test_related_prefers_same_category(self, search_engine: SearchEngine) -> None:
        base = next(m for m in SAMPLE_MANUALS if m.id == "M006")

        related = search_engine.related(base, PermissionLevel.general, SAMPLE_MANUALS)

        assert related
        assert related[0].document.id == "M007"
        assert all(r.document.id != base.id for r in related)
        assert len(related) <= 3

    def test_related_drops_unrelated(self, search_engine: SearchEngine) -> None:
        base = make_manual("A", "単独", major="製造")
        corpus = [base, make_manual("B", "別件", major="営業")]

        assert search_engine.related(base, PermissionLevel.general, corpus) == []

    def test_detail_candidate_requires_single_strong_result(self, search_engine: SearchEngine) -> None:
        corpus = [make_manual("A", "経費精算"), make_manual("B", "経費精算の注意点")]

        results = search_engine.search("経費精算", PermissionLevel.general, corpus)

        assert len(results) == 2
        assert not search_engine.is_detail_candidate(results)
