"""Controllers that sit between UI input and the session store."""

from .drag_reorder import DragReorderController, TabSlot
from .progress import LoopTimer, NavigationProgressController, ProgressState
from .suggestions import Suggestion, SuggestionRanker

__all__ = [
    "DragReorderController",
    "LoopTimer",
    "NavigationProgressController",
    "ProgressState",
    "Suggestion",
    "SuggestionRanker",
    "TabSlot",
]
