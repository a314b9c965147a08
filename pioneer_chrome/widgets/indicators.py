"""Loading indicator and welcome screen widgets."""

from __future__ import annotations

from textual.widgets import Static

from ..features.progress import ProgressState
from ..persistence import Bookmark
from ..urls import truncate_title


class LoadingIndicator(Static):
    """One-line progress bar mirroring NavigationProgressController."""

    def show_state(self, state: ProgressState) -> None:
        self.set_class(state is ProgressState.INDETERMINATE, "indeterminate")
        self.set_class(state is ProgressState.COMPLETING, "completing")
        if state is ProgressState.HIDDEN:
            self.display = False
            return
        self.display = True
        if state is ProgressState.COMPLETING:
            self.update("[green]" + "━" * 40 + "[/green] 100%")
        else:
            self.update("[dim]━━━━ loading…[/dim]")


class WelcomeScreen(Static):
    """Shown when no tabs are open: quick links to the first bookmarks."""

    def show_links(self, links: list[Bookmark]) -> None:
        lines = ["[bold]Pioneer[/bold]", ""]
        if not links:
            lines.append("[dim]No bookmarks yet[/dim]")
        for i, bm in enumerate(links, 1):
            lines.append(f"  {i}. {truncate_title(bm.title, 15)}  [dim]{bm.url}[/dim]")
        self.update("\n".join(lines))
