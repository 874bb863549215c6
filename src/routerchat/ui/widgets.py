"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management and the disabled-while-waiting send bar
- Pending indicator formatting
- Log rendering and level filtering
- Chat message rendering from transcript snapshots
"""

from collections.abc import Sequence
from datetime import datetime

from rich.markup import escape
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..conversation import Message, Role
from ..session import PendingState
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    SPINNER_FRAMES,
    LogLevel,
)
from .formatting import ContentKind, classify_content, clean_latex, fence_code


def copy_text(widget, text: str, label: str) -> None:
    """Copy text to the system clipboard, falling back to OSC 52."""
    try:
        import pyperclip
        pyperclip.copy(text)
        widget.app.notify(f"{label} copied", timeout=2)
    except Exception:
        widget.app.copy_to_clipboard(text)
        widget.app.notify(f"{label} copied (terminal)", timeout=2)


class ClickableMessage(Vertical):
    """A chat message container that copies its raw content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        copy_text(self, self._content, "Message")


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    Submissions are only posted while the bar is enabled; the app disables
    it while a response is pending.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._waiting = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    @property
    def waiting(self) -> bool:
        return self._waiting

    def set_waiting(self, waiting: bool) -> None:
        """Disable the send action while a response is pending."""
        self._waiting = waiting
        self.query_one("#send-btn", Button).disabled = waiting
        self.set_class(waiting, "-waiting")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._waiting:
            self.app.notify("Still waiting for the previous response", severity="warning", timeout=2)
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class StatusPanel(Static):
    """One-line status: model, message count and the pending indicator."""

    def __init__(self, *args, model: str = "", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._model = model
        self._pending = PendingState()
        self._message_count = 0
        self._last_error: str | None = None
        self._frame = 0

    def on_mount(self) -> None:
        self._update_display()

    def update_status(
        self,
        pending: PendingState,
        message_count: int,
        last_error: str | None = None,
    ) -> None:
        """Refresh from the session state (called on every poll tick)."""
        self._pending = pending
        self._message_count = message_count
        self._last_error = last_error
        self._frame = (self._frame + 1) % len(SPINNER_FRAMES)
        self._update_display()

    def _update_display(self) -> None:
        parts = [
            f"[bold cyan]Model:[/] {escape(self._model)}",
            f"[bold green]Messages:[/] {self._message_count}",
        ]
        if self._pending.is_waiting:
            parts.append(
                f"[bold yellow]{SPINNER_FRAMES[self._frame]} Waiting for response[/] "
                f"[dim]{self._pending.elapsed():.1f}s[/]"
            )
        elif self._last_error:
            parts.append(f"[bold red]Last request failed:[/] {escape(self._last_error)}")
        else:
            parts.append("[dim]Ready[/]")

        self.set_class(self._pending.is_waiting, "-waiting")
        self.set_class(not self._pending.is_waiting and bool(self._last_error), "-failed")
        self.update("  ".join(parts))

    def get_plain_text(self) -> str:
        state = "waiting" if self._pending.is_waiting else "ready"
        return f"Model: {self._model}  Messages: {self._message_count}  State: {state}"


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "Dispatch": "yellow",
        "LLM": "magenta",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        copy_text(self, text, "Log")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history rendered from transcript snapshots.

    The widget never owns conversation state: `sync()` mounts whatever
    part of the snapshot has not been rendered yet.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered = 0

    @property
    def rendered_count(self) -> int:
        return self._rendered

    def sync(self, messages: Sequence[Message]) -> int:
        """Render messages appended since the last sync.

        Returns:
            Number of newly rendered messages
        """
        new_messages = messages[self._rendered:]
        for msg in new_messages:
            self._render_message(msg)
        self._rendered = len(messages)

        if new_messages:
            self.border_subtitle = f"{self._rendered} messages"
            self.scroll_end(animate=False)
        return len(new_messages)

    def show_notice(self, text: str) -> None:
        """Show a line that is not part of the conversation."""
        self.mount(Static(text, classes="notice"))

    def _render_message(self, msg: Message) -> None:
        speaker = "You" if msg.role == Role.USER else "LLM"
        meta = f"{speaker}  {msg.created_at.strftime('%H:%M:%S')}"

        bubble = ClickableMessage(content=msg.content, classes=f"bubble -{msg.role.value}")
        bubble.compose_add_child(Static(meta, classes="bubble-meta", markup=False))
        bubble.compose_add_child(self._body(msg))
        self.mount(bubble)

    @staticmethod
    def _body(msg: Message) -> Static | Markdown:
        """User text is shown verbatim; replies are classified first."""
        cleaned = clean_latex(msg.content)
        if msg.role == Role.USER:
            return Static(cleaned, classes="bubble-body", markup=False)

        kind = classify_content(cleaned)
        if kind == ContentKind.CODE:
            return Markdown(fence_code(cleaned), classes="bubble-body")
        if kind == ContentKind.PLAIN:
            return Static(cleaned, classes="bubble-body", markup=False)
        return Markdown(cleaned, classes="bubble-body")
