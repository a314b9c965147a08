"""Textual theme for the Pioneer chrome.

Controls the base UI colors ($background, $surface, $panel, $primary, ...)
referenced by styles.tcss.
"""

from textual.theme import Theme

PIONEER_THEME = Theme(
    name="pioneer",
    primary="#4a9eff",
    secondary="#7aa2c8",
    accent="#f0b429",
    background="#101216",
    surface="#1a1d23",
    panel="#2a2e36",
    success="#3fb950",
    warning="#d29922",
    error="#f85149",
    dark=True,
)
