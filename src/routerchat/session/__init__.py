"""Interaction loop module for routerchat."""

from .loop import ChatSession, Dispatcher
from .models import PendingState, SessionState

__all__ = [
    "ChatSession",
    "Dispatcher",
    "PendingState",
    "SessionState",
]
