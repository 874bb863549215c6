"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Dark/light mode configuration

To add a new theme, define it here and add it to THEMES.
"""

from textual.theme import Theme

from .config import THEME_DARK, THEME_LIGHT

# Catppuccin Mocha, the default dark palette
CATPPUCCIN_MOCHA = Theme(
    name=THEME_DARK,
    primary="#89b4fa",
    secondary="#cba6f7",
    accent="#f9e2af",
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "input-cursor-background": "#cdd6f4",
        "input-selection-background": "#89b4fa 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "footer-key-foreground": "#f9e2af",
        "text-muted": "#6c7086",
    },
)

# Light chat-bubble look: pale green for the user, light grey for the model
CHAT_LIGHT = Theme(
    name=THEME_LIGHT,
    primary="#3a7d44",
    secondary="#6b6b6b",
    accent="#b58900",
    foreground="#1f1f1f",
    background="#fafafa",
    success="#dcf8c6",
    warning="#c77d00",
    error="#c62828",
    surface="#f0f0f0",
    panel="#ffffff",
    dark=False,
    variables={
        "border": "#d3d3d3",
        "border-blurred": "#e0e0e0",
        "scrollbar": "#d3d3d3",
        "scrollbar-hover": "#bdbdbd",
        "scrollbar-active": "#3a7d44",
        "text-muted": "#7a7a7a",
    },
)

THEMES = {
    "dark": CATPPUCCIN_MOCHA,
    "light": CHAT_LIGHT,
}
