"""Payloads carried by the response relay.

Every dispatch execution produces exactly one of these, so the
interaction loop can always leave the waiting state.
"""

from dataclasses import dataclass
from enum import Enum

from ..conversation import Message


class FailureKind(str, Enum):
    """Why a dispatch produced no message."""

    TRANSPORT = "transport"
    STATUS = "status"
    DECODE = "decode"
    EMPTY = "empty"
    INTERNAL = "internal"


@dataclass(frozen=True)
class DispatchSuccess:
    """The endpoint returned an assistant message."""

    message: Message

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class DispatchFailure:
    """The exchange failed; nothing is appended to the transcript."""

    kind: FailureKind
    reason: str
    status_code: int | None = None
    detail: str | None = None  # raw body text, when there is one

    @property
    def ok(self) -> bool:
        return False


DispatchResult = DispatchSuccess | DispatchFailure
