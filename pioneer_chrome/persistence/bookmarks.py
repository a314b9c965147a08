"""Bookmark persistence store."""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import BOOKMARKS_KEY, DEFAULT_BOOKMARKS, MAX_QUICK_LINKS
from ..log import logger
from ._base import KeyValueStore


@dataclass
class Bookmark:
    """A saved page.  ``created_at`` is epoch milliseconds."""

    id: str
    title: str
    url: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Bookmark:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            url=str(data["url"]),
            created_at=int(data.get("createdAt", 0)),
        )


class BookmarkStore:
    """Bookmarks keyed by URL, written through to storage on every mutation.

    On-disk format (key ``bookmarks``): ``[bookmark_dict, ...]`` in insertion
    order.  A missing or unreadable blob seeds the default set.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._bookmarks: dict[str, Bookmark] = {}
        self._load()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _load(self) -> None:
        raw = self._storage.get(BOOKMARKS_KEY)
        if not isinstance(raw, list):
            if raw is not None:
                logger.debug("bookmarks blob is not a list, reseeding defaults")
            self._seed_defaults()
            self._save()
            return
        for item in raw:
            if not isinstance(item, dict):
                logger.debug("skipping malformed bookmark %r", item)
                continue
            try:
                bookmark = Bookmark.from_dict(item)
            except (KeyError, TypeError, ValueError):
                logger.debug("skipping malformed bookmark %r", item)
                continue
            self._bookmarks[bookmark.url] = bookmark

    def _save(self) -> None:
        try:
            self._storage.set(BOOKMARKS_KEY, [b.to_dict() for b in self._bookmarks.values()])
        except OSError:
            logger.debug("failed to save bookmarks", exc_info=True)

    def _seed_defaults(self) -> None:
        base = self._now_ms()
        for i, (title, url) in enumerate(DEFAULT_BOOKMARKS):
            self._bookmarks[url] = Bookmark(
                id=f"bookmark-default-{i}",
                title=title,
                url=url,
                created_at=base + i,
            )

    # -- queries ---------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._bookmarks)

    def all(self) -> list[Bookmark]:
        """Bookmarks in insertion order."""
        return list(self._bookmarks.values())

    def get(self, url: str) -> Bookmark | None:
        return self._bookmarks.get(url)

    def is_bookmarked(self, url: str) -> bool:
        return url in self._bookmarks

    def quick_links(self, limit: int = MAX_QUICK_LINKS) -> list[Bookmark]:
        """The first *limit* bookmarks, shown on the welcome screen."""
        return self.all()[:limit]

    # -- mutations -------------------------------------------------------------

    def add(self, title: str, url: str) -> Bookmark:
        """Bookmark *url*, replacing any existing bookmark for it."""
        bookmark = Bookmark(
            id=f"bookmark-{uuid.uuid4().hex[:12]}",
            title=title or "Untitled",
            url=url,
            created_at=self._now_ms(),
        )
        self._bookmarks.pop(url, None)
        self._bookmarks[url] = bookmark
        self._save()
        return bookmark

    def remove(self, url: str) -> bool:
        """Remove the bookmark for *url*.  Returns False if there was none."""
        if self._bookmarks.pop(url, None) is None:
            return False
        self._save()
        return True

    def toggle(self, url: str, title: str) -> bool:
        """Add if absent, remove if present.  Returns True if now bookmarked."""
        if url in self._bookmarks:
            self.remove(url)
            return False
        self.add(title, url)
        return True

    def reset(self) -> None:
        """Drop every bookmark and reinstate the default set."""
        self._bookmarks.clear()
        self._seed_defaults()
        self._save()
