"""Key-value JSON blob storage."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..log import logger


class KeyValueStore:
    """Maps a storage key to one pretty-printed JSON file under *root*.

    ``get`` never raises: missing, unreadable, or corrupt blobs return the
    caller's default.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """Read and parse the blob for *key*, returning *default* on any error."""
        path = self.path_for(key)
        try:
            if path.exists():
                return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.debug("failed to load %r from %s", key, path, exc_info=True)
        return default

    def set(self, key: str, data: Any) -> None:
        """Write *data* as JSON, creating parents as needed."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError:
            logger.debug("failed to delete %r", key, exc_info=True)
