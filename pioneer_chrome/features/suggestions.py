"""Address-bar autocomplete over bookmarks and history."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import (
    MAX_SUGGESTIONS,
    SCORE_BOOKMARK_TITLE,
    SCORE_BOOKMARK_URL,
    SCORE_HISTORY_TITLE,
    SCORE_HISTORY_URL,
)
from ..persistence import BookmarkStore, HistoryLog


@dataclass(frozen=True)
class Suggestion:
    title: str
    url: str
    score: float
    source: str  # "bookmark" or "history"


class SuggestionRanker:
    """Ranks bookmarks and history entries against a typed prefix.

    Matching is a case-insensitive substring test on title and URL; a title
    hit outranks a URL-only hit, and bookmarks outrank history.  Each URL
    appears at most once, from its highest-priority source.  Read-only: the
    ranker never mutates either store.
    """

    def __init__(
        self,
        bookmarks: BookmarkStore,
        history: HistoryLog,
        max_results: int = MAX_SUGGESTIONS,
    ) -> None:
        self._bookmarks = bookmarks
        self._history = history
        self.max_results = max_results

    def rank(self, query: str) -> list[Suggestion]:
        q = query.strip().lower()
        if not q:
            return []

        results: list[Suggestion] = []
        seen: set[str] = set()

        for bm in self._bookmarks.all():
            if q in bm.title.lower():
                score = SCORE_BOOKMARK_TITLE
            elif q in bm.url.lower():
                score = SCORE_BOOKMARK_URL
            else:
                continue
            seen.add(bm.url)
            results.append(Suggestion(bm.title, bm.url, score, "bookmark"))

        for entry in self._history.entries():
            if entry.url in seen:
                continue
            if q in entry.title.lower():
                score = SCORE_HISTORY_TITLE
            elif q in entry.url.lower():
                score = SCORE_HISTORY_URL
            else:
                continue
            seen.add(entry.url)
            results.append(Suggestion(entry.title, entry.url, score, "history"))

        # list.sort is stable, so ties keep bookmark-then-history order
        results.sort(key=lambda s: s.score, reverse=True)
        return results[: self.max_results]
