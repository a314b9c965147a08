"""Module-level constants for Pioneer Chrome."""

from __future__ import annotations

from pathlib import Path

DATA_DIR = Path.home() / ".pioneer"

PLACEHOLDER_TITLE = "New Tab"
HOME_URL = "https://electrobun.dev"
SEARCH_URL = "https://www.google.com/search?q={query}"

# Storage keys (one JSON blob each)
BOOKMARKS_KEY = "bookmarks"
HISTORY_KEY = "browsingHistory"

MAX_HISTORY_ENTRIES = 1000
MAX_SUGGESTIONS = 8
MAX_QUICK_LINKS = 6
MAX_TAB_TITLE = 20

# Suggestion scores: (source, matched field) -> score
SCORE_BOOKMARK_TITLE = 2.0
SCORE_BOOKMARK_URL = 1.0
SCORE_HISTORY_TITLE = 1.5
SCORE_HISTORY_URL = 0.5

# Navigation progress timings, in seconds
PROGRESS_FALLBACK_SECONDS = 10.0
PROGRESS_COMPLETE_SECONDS = 0.3

DEFAULT_BOOKMARKS: tuple[tuple[str, str], ...] = (
    ("Electrobun", "https://electrobun.dev"),
    ("Electrobun GitHub", "https://github.com/blackboardsh/electrobun"),
    ("Yoav on Bluesky", "https://bsky.app/profile/yoav.codes"),
    ("Blackboard", "https://www.blackboard.sh"),
)
