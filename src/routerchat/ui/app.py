"""Main Textual TUI application.

Drives the interaction loop: every timer tick polls the relay without
blocking, applies results to the transcript and refreshes the pending
indicator. Submissions are handled after a poll.
"""

import asyncio
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..dispatch import DispatchFailure
from ..session import ChatSession
from .callbacks import TUIDebugCallback
from .config import RELAY_POLL_INTERVAL, LogLevel
from .styles import APP_CSS
from .themes import THEMES
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, StatusPanel

WELCOME_TEXT = "Chat with the LLM. Type your message and press Ctrl+J or Send."


class ChatTextualApp(App):
    """Textual TUI for a single chat session."""

    CSS = APP_CSS
    TITLE = "routerchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+l", "clear_log", "Clear Log"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+y", "copy_status", "Copy Status"),
        Binding("ctrl+b", "toggle_maximize_chat", "Max Chat"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        session: ChatSession,
        dispatcher: Any | None = None,
        log_level: str | None = None,
        theme_name: str = "dark",
        poll_interval: float = RELAY_POLL_INTERVAL,
    ) -> None:
        super().__init__()
        self._session = session
        self._dispatcher = dispatcher
        self._log_level = log_level
        self._theme_name = theme_name
        self._poll_interval = poll_interval
        self._was_waiting = False
        self._log_shown_before_maximize = False

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        with Vertical(id="bottom-bar"):
            yield StatusPanel(id="status", model=self._session.model_id)
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        theme = THEMES.get(self._theme_name, THEMES["dark"])
        for registered in THEMES.values():
            self.register_theme(registered)
        self.theme = theme.name

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        if self._dispatcher is not None and hasattr(self._dispatcher, "set_debug_callback"):
            self._dispatcher.set_debug_callback(TUIDebugCallback(log_panel, app=self))

        self.sub_title = self._session.model_id

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.show_notice(WELCOME_TEXT)
        chat.sync(self._session.transcript.snapshot())

        self.set_interval(self._poll_interval, self._poll_relay)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Stop observing the relay; in-flight dispatches finish unobserved."""
        self._session.close()

    def _poll_relay(self) -> None:
        """One loop tick: apply relay results and refresh the indicators."""
        log_panel = self.query_one("#debug-panel", DebugPanel)

        for result in self._session.poll():
            if isinstance(result, DispatchFailure):
                log_panel.error("Session", f"Dispatch failed ({result.kind.value}): {result.reason}")
                self.notify(result.reason[:80], severity="error", timeout=5)
            else:
                log_panel.info("Session", "Assistant message appended")

        self._refresh_view()

    def _refresh_view(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.sync(self._session.transcript.snapshot())

        failure = self._session.last_failure
        self.query_one("#status", StatusPanel).update_status(
            pending=self._session.pending,
            message_count=len(self._session.transcript),
            last_error=failure.reason if failure else None,
        )

        waiting = self._session.is_waiting
        if waiting != self._was_waiting:
            input_bar = self.query_one("#chat-input-bar", ChatInputBar)
            input_bar.set_waiting(waiting)
            if not waiting:
                input_bar.focus_input()
            self._was_waiting = waiting

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        # Deliver any finished response before accepting new input
        self._poll_relay()

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if not self._session.submit(event.value):
            log_panel.warning("Session", "Submission rejected while awaiting a response")
            self.notify("Still waiting for the previous response", severity="warning", timeout=2)
            return

        log_panel.info("Session", f"Dispatching: '{event.value[:50]}'")
        self._refresh_view()

    def action_clear_log(self) -> None:
        """Clear the log panel."""
        self.query_one("#debug-panel", DebugPanel).clear()
        self.notify("Log cleared", timeout=2)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        is_visible = self.query_one("#debug-panel", DebugPanel).toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_toggle_maximize_chat(self) -> None:
        """Toggle hiding everything but the chat history."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        log_panel = self.query_one("#debug-panel", DebugPanel)
        if chat.has_class("-maximized"):
            chat.remove_class("-maximized")
            log_panel.display = self._log_shown_before_maximize
        else:
            chat.add_class("-maximized")
            self._log_shown_before_maximize = bool(log_panel.display)
            log_panel.display = False

    def action_copy_status(self) -> None:
        """Copy the status line to clipboard."""
        text = self.query_one("#status", StatusPanel).get_plain_text()
        self.copy_to_clipboard(text)
        self.notify("Status copied")

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        message = self._session.transcript.last_assistant()
        if message:
            self.copy_to_clipboard(message.content)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    session: ChatSession,
    dispatcher: Any | None = None,
    log_level: str | None = None,
    theme_name: str = "dark",
) -> None:
    """Run the Textual TUI.

    Args:
        session: Chat session owning transcript and relay
        dispatcher: Dispatcher whose diagnostics go to the log panel
        log_level: Log level for panel (debug/info/warning/error), None to hide
        theme_name: 'dark' or 'light'
    """
    app = ChatTextualApp(
        session=session,
        dispatcher=dispatcher,
        log_level=log_level,
        theme_name=theme_name,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
