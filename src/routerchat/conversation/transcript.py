"""Append-only conversation transcript.

Owned by the interaction loop. Dispatch executions only ever see the
tuples returned by `snapshot()`, so the live list is never shared.
"""

from collections.abc import Iterable, Iterator

from .models import Message, Role


class Transcript:
    """Ordered sequence of messages; insertion order is conversation order.

    Role alternation is a convention only and is not enforced.
    """

    def __init__(self, messages: Iterable[Message] | None = None):
        self._messages: list[Message] = list(messages or [])

    def append(self, message: Message) -> None:
        """Add a message at the end."""
        self._messages.append(message)

    def snapshot(self) -> tuple[Message, ...]:
        """Return an independent, immutable copy of the current sequence."""
        return tuple(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def last_assistant(self) -> Message | None:
        """Get the most recent assistant message."""
        for msg in reversed(self._messages):
            if msg.role == Role.ASSISTANT:
                return msg
        return None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"Transcript({len(self._messages)} messages)"
