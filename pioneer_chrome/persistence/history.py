"""Browsing history log."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..constants import HISTORY_KEY, MAX_HISTORY_ENTRIES
from ..log import logger
from ._base import KeyValueStore


@dataclass(frozen=True)
class HistoryEntry:
    """One visited page.  ``timestamp`` is epoch milliseconds."""

    title: str
    url: str
    timestamp: int

    def to_dict(self) -> dict:
        return {"title": self.title, "url": self.url, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        return cls(
            title=str(data.get("title", "")),
            url=str(data["url"]),
            timestamp=int(data.get("timestamp", 0)),
        )


class HistoryLog:
    """Bounded, most-recent-first log of visited pages.

    Entries are only ever prepended; the oldest fall off once the log holds
    ``max_entries``.  Visiting the URL already at the head is not recorded
    again.  On-disk format (key ``browsingHistory``): ``[entry_dict, ...]``.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        max_entries: int = MAX_HISTORY_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self.max_entries = max_entries
        self._entries: list[HistoryEntry] = []  # newest first
        self._load()

    def _load(self) -> None:
        raw = self._storage.get(HISTORY_KEY, [])
        if not isinstance(raw, list):
            logger.debug("history blob is not a list, starting empty")
            return
        for item in raw:
            if not isinstance(item, dict):
                logger.debug("skipping malformed history entry %r", item)
                continue
            try:
                self._entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.debug("skipping malformed history entry %r", item)
        del self._entries[self.max_entries :]

    def _save(self) -> None:
        try:
            self._storage.set(HISTORY_KEY, [e.to_dict() for e in self._entries])
        except OSError:
            logger.debug("failed to save history", exc_info=True)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[HistoryEntry]:
        """All entries, most recent first."""
        return list(self._entries)

    def record(self, title: str, url: str) -> bool:
        """Prepend a visit.  Returns False when suppressed as a repeat of the head."""
        if not url:
            return False
        if self._entries and self._entries[0].url == url:
            return False
        entry = HistoryEntry(title=title, url=url, timestamp=int(self._clock() * 1000))
        self._entries.insert(0, entry)
        del self._entries[self.max_entries :]
        self._save()
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._save()
