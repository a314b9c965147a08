"""Textual widgets for the browser chrome."""

from .bars import AddressBar, SuggestionBar
from .indicators import LoadingIndicator, WelcomeScreen
from .screens import BookmarksScreen
from .tabs import TabBar, TabButton, TabCloseButton, tab_label

__all__ = [
    "AddressBar",
    "BookmarksScreen",
    "LoadingIndicator",
    "SuggestionBar",
    "TabBar",
    "TabButton",
    "TabCloseButton",
    "WelcomeScreen",
    "tab_label",
]
