"""
routerchat: an interactive chat client for OpenRouter-compatible endpoints.

The conversation core keeps the transcript on the owning thread, runs each
completion exchange in the background and hands results back through a
non-blocking relay.
"""

__version__ = "0.1.0"

from .config import ChatConfig
from .conversation import Message, Role, Transcript
from .dispatch import (
    CompletionDispatcher,
    DispatchFailure,
    DispatchSuccess,
    FailureKind,
    ResponseRelay,
)
from .session import ChatSession, PendingState, SessionState

__all__ = [
    "ChatConfig",
    "ChatSession",
    "CompletionDispatcher",
    "DispatchFailure",
    "DispatchSuccess",
    "FailureKind",
    "Message",
    "PendingState",
    "ResponseRelay",
    "Role",
    "SessionState",
    "Transcript",
]
