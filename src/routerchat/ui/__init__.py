"""Terminal UI module for routerchat.

Provides a Textual-based TUI for chatting with the completion endpoint.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input bar, status line, log panel, chat history)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- formatting.py: How message bodies are cleaned and classified
- callbacks.py: How dispatch threads reach the log panel
- app.py: Application orchestration (the polling interaction loop)
"""

from .app import ChatTextualApp, run_textual_tui
from .callbacks import TUIDebugCallback
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, StatusPanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ChatTextualApp",
    "DebugPanel",
    "LogLevel",
    "StatusPanel",
    "TUIDebugCallback",
    "run_textual_tui",
]
