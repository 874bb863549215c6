"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout, top to bottom: header, chat history, optional log panel,
status line + input bar, footer.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }

    &.-maximized {
        height: 1fr;
    }
}

/* ============================================
   Log Panel (hidden by default)
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;

    &:focus {
        border: round $warning;
    }
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status {
    height: 1;
    padding: 0 2;
    background: $surface;
    color: $foreground;

    &.-waiting {
        color: $warning;
        text-style: bold;
    }

    &.-failed {
        color: $error;
    }
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    &.-waiting {
        border: round $warning 60%;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:focus {
        background: transparent;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    text-style: bold;

    &:disabled {
        opacity: 50%;
    }
}

/* ============================================
   Conversation bubbles
   User turns sit on the right, replies on the left
   ============================================ */
.bubble {
    height: auto;
    padding: 0 1;
    margin-bottom: 1;

    &.-user {
        margin-left: 12;
        border: round $success 50%;
        background: $success 10%;

        & .bubble-meta {
            color: $success;
            text-align: right;
        }
    }

    &.-assistant {
        margin-right: 6;
        border: round $surface-lighten-2;
        background: $surface;

        & .bubble-meta {
            color: $accent;
        }
    }
}

.bubble-meta {
    height: 1;
    text-style: bold;
}

.bubble-body {
    height: auto;
    color: $foreground;
}

.notice {
    height: auto;
    margin-bottom: 1;
    color: $text-muted;
    text-style: italic;
    text-align: center;
}

/* ============================================
   Notifications
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-error {
        border: tall $error;
    }

    &.-warning {
        border: tall $warning;
    }
}

Header {
    background: $panel;
    height: 1;
}

Markdown {
    margin: 0;
    padding: 0;
}

MarkdownFence {
    background: $surface;
    margin: 1 0;
}
"""
