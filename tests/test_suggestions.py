"""Tests for pioneer_chrome.features.suggestions."""

from __future__ import annotations

import pytest

from pioneer_chrome.features.suggestions import SuggestionRanker
from pioneer_chrome.persistence import BookmarkStore, HistoryLog


@pytest.fixture
def bookmarks(storage) -> BookmarkStore:
    return BookmarkStore(storage)


@pytest.fixture
def history(storage) -> HistoryLog:
    return HistoryLog(storage)


@pytest.fixture
def empty_bookmarks(storage) -> BookmarkStore:
    storage.set("bookmarks", [])
    return BookmarkStore(storage)


class TestRank:
    def test_bookmark_title_match_scores_highest(self, bookmarks, history):
        ranker = SuggestionRanker(bookmarks, history)
        results = ranker.rank("ele")
        assert results[0].title == "Electrobun"
        assert results[0].url == "https://electrobun.dev"
        assert results[0].score == 2.0
        assert results[0].source == "bookmark"

    def test_empty_query_returns_nothing(self, bookmarks, history):
        ranker = SuggestionRanker(bookmarks, history)
        assert ranker.rank("") == []
        assert ranker.rank("   ") == []

    def test_case_insensitive(self, bookmarks, history):
        ranker = SuggestionRanker(bookmarks, history)
        assert [s.title for s in ranker.rank("ELECTROBUN GIT")] == ["Electrobun GitHub"]

    def test_url_only_bookmark_match(self, bookmarks, history):
        ranker = SuggestionRanker(bookmarks, history)
        (hit,) = ranker.rank("bsky.app")
        assert hit.title == "Yoav on Bluesky"
        assert hit.score == 1.0

    def test_history_scores(self, empty_bookmarks, history):
        history.record("Python docs", "https://docs.python.org")
        history.record("Release notes", "https://example.com/python")
        ranker = SuggestionRanker(empty_bookmarks, history)
        results = ranker.rank("python")
        assert [(s.url, s.score) for s in results] == [
            ("https://docs.python.org", 1.5),
            ("https://example.com/python", 0.5),
        ]
        assert {s.source for s in results} == {"history"}

    def test_bookmark_beats_history_for_same_url(self, bookmarks, history):
        history.record("Electrobun home", "https://electrobun.dev")
        ranker = SuggestionRanker(bookmarks, history)
        hits = [s for s in ranker.rank("electrobun") if s.url == "https://electrobun.dev"]
        assert len(hits) == 1
        assert hits[0].source == "bookmark"

    def test_history_duplicates_appear_once(self, empty_bookmarks, history):
        history.record("Docs", "https://docs.python.org")
        history.record("Other", "https://other.org")
        history.record("Docs again", "https://docs.python.org")
        ranker = SuggestionRanker(empty_bookmarks, history)
        results = ranker.rank("docs")
        assert [s.title for s in results] == ["Docs again"]

    def test_ties_keep_bookmark_order(self, bookmarks, history):
        ranker = SuggestionRanker(bookmarks, history)
        assert [s.title for s in ranker.rank("electrobun")] == [
            "Electrobun",
            "Electrobun GitHub",
        ]

    def test_result_limit(self, empty_bookmarks, history):
        for i in range(12):
            history.record(f"Page {i}", f"https://site{i}.com")
        ranker = SuggestionRanker(empty_bookmarks, history)
        assert len(ranker.rank("page")) == 8
        ranker.max_results = 3
        assert len(ranker.rank("page")) == 3

    def test_ranking_does_not_mutate_stores(self, bookmarks, history):
        history.record("Electron", "https://electronjs.org")
        before = (bookmarks.all(), history.entries())
        SuggestionRanker(bookmarks, history).rank("e")
        assert (bookmarks.all(), history.entries()) == before
