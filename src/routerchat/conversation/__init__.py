"""Conversation transcript module for routerchat.

Holds the session-only chat history; nothing is persisted.
"""

from .models import Message, Role
from .transcript import Transcript

__all__ = [
    "Message",
    "Role",
    "Transcript",
]
