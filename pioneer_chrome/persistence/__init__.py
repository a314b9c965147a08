"""Persistence layer – each store owns its storage key, data format, and I/O."""

from ._base import KeyValueStore
from .bookmarks import Bookmark, BookmarkStore
from .history import HistoryEntry, HistoryLog

__all__ = [
    "Bookmark",
    "BookmarkStore",
    "HistoryEntry",
    "HistoryLog",
    "KeyValueStore",
]
