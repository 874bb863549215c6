"""Diagnostic routing from dispatch threads into the TUI.

Hides the details of how the TUI receives log messages from components
that run off the UI thread.
"""

import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


class TUIDebugCallback:
    """Routes `(level, component, message)` diagnostics to the log panel.

    Uses call_from_thread for thread-safe UI updates from dispatch threads.
    """

    def __init__(self, panel: "DebugPanel", app: "App | None" = None) -> None:
        self.panel = panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any) -> None:
        """Call a function in a thread-safe manner for UI updates."""
        if self.app is not None and self.app._thread_id != threading.get_ident():
            try:
                self.app.call_from_thread(func, *args)
            except RuntimeError:
                # App already shut down; late dispatches log nowhere
                pass
        else:
            func(*args)

    def __call__(self, level: str, component: str, message: str) -> None:
        handlers = {
            "debug": self.panel.debug,
            "info": self.panel.info,
            "warning": self.panel.warning,
            "error": self.panel.error,
        }
        handler = handlers.get(level, self.panel.debug)
        self._call_thread_safe(handler, component, message)
