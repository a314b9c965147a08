"""User preferences for Pioneer Chrome.

Loads settings from ~/.pioneer/preferences.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    DATA_DIR,
    HOME_URL,
    MAX_HISTORY_ENTRIES,
    PROGRESS_COMPLETE_SECONDS,
    PROGRESS_FALLBACK_SECONDS,
    SEARCH_URL,
)
from .log import logger

PREFS_PATH = DATA_DIR / "preferences.yaml"

_DEFAULT_YAML = f"""\
# Pioneer Chrome Preferences
# Delete this file to reset to defaults.

browsing:
  home_url: "{HOME_URL}"
  search_url: "{SEARCH_URL}"   # {{query}} is replaced with the encoded input

history:
  max_entries: {MAX_HISTORY_ENTRIES}            # oldest entries are dropped first

progress:
  fallback_seconds: {PROGRESS_FALLBACK_SECONDS}        # hide the loading bar if the page never reports done
  complete_seconds: {PROGRESS_COMPLETE_SECONDS}         # how long the full bar stays visible

storage:
  data_dir: ""                   # empty = ~/.pioneer
"""


@dataclass
class BrowsingPreferences:
    """Where new navigations go."""

    home_url: str = HOME_URL
    search_url: str = SEARCH_URL


@dataclass
class ProgressPreferences:
    """Loading indicator timings (seconds)."""

    fallback_seconds: float = PROGRESS_FALLBACK_SECONDS
    complete_seconds: float = PROGRESS_COMPLETE_SECONDS


@dataclass
class Preferences:
    """Top-level preferences."""

    browsing: BrowsingPreferences = field(default_factory=BrowsingPreferences)
    progress: ProgressPreferences = field(default_factory=ProgressPreferences)
    max_history_entries: int = MAX_HISTORY_ENTRIES
    data_dir: Path = DATA_DIR


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if not isinstance(data, dict):
                raise ValueError("preferences file must hold a mapping")
            if isinstance(data.get("browsing"), dict):
                bdata = data["browsing"]
                if bdata.get("home_url"):
                    prefs.browsing.home_url = str(bdata["home_url"])
                if bdata.get("search_url") and "{query}" in str(bdata["search_url"]):
                    prefs.browsing.search_url = str(bdata["search_url"])
            if isinstance(data.get("history"), dict):
                hdata = data["history"]
                if "max_entries" in hdata:
                    prefs.max_history_entries = max(1, int(hdata["max_entries"]))
            if isinstance(data.get("progress"), dict):
                pdata = data["progress"]
                if "fallback_seconds" in pdata:
                    prefs.progress.fallback_seconds = float(pdata["fallback_seconds"])
                if "complete_seconds" in pdata:
                    prefs.progress.complete_seconds = float(pdata["complete_seconds"])
            if isinstance(data.get("storage"), dict):
                sdata = data["storage"]
                if sdata.get("data_dir"):
                    prefs.data_dir = Path(str(sdata["data_dir"])).expanduser()
        except (yaml.YAMLError, OSError, TypeError, ValueError):
            logger.debug("failed to load preferences from %s", path, exc_info=True)
            return Preferences()
    else:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("could not write default preferences to %s", path)

    return prefs
