"""Address-bar input helpers."""

from __future__ import annotations

import re
from urllib.parse import quote

from .constants import MAX_TAB_TITLE, SEARCH_URL

_LOCAL_HOST_RE = re.compile(
    r"^(?:localhost|\d{1,3}(?:\.\d{1,3}){3})(?::\d+)?(?:[/?#]\S*)?$",
    re.IGNORECASE,
)
# The last label must start with a letter so "3.14" is searched, not visited.
_DOMAIN_RE = re.compile(
    r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
    r"(?:\.[a-z0-9](?:[a-z0-9-]*[a-z0-9])?)*"
    r"\.[a-z][a-z0-9-]*"
    r"(?::\d+)?(?:[/?#]\S*)?$",
    re.IGNORECASE,
)


def normalize_url(text: str, search_url: str = SEARCH_URL) -> str:
    """Turn address-bar input into a navigable URL.

    - ``http://`` / ``https://`` URLs pass through unchanged
    - ``localhost`` and dotted-quad IPv4 hosts get ``http://``
    - domain names (``label(.label)+``) get ``https://``
    - anything else becomes a search query on *search_url*

    Raises ``ValueError`` on empty input.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty address")
    lowered = text.lower()
    if lowered.startswith(("http://", "https://")):
        return text
    if _LOCAL_HOST_RE.match(text):
        return f"http://{text}"
    if _DOMAIN_RE.match(text):
        return f"https://{text}"
    return search_url.replace("{query}", quote(text, safe="!*'()"))


def truncate_title(title: str, max_length: int = MAX_TAB_TITLE) -> str:
    if len(title) <= max_length:
        return title
    return title[: max_length - 3] + "..."
