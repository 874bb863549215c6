"""State types for the interaction loop."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SessionState(str, Enum):
    """Whether a dispatch is in flight."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass(frozen=True)
class PendingState:
    """Pending-response indicator consumed by renderers."""

    is_waiting: bool = False
    started_at: datetime | None = None

    @classmethod
    def waiting(cls) -> "PendingState":
        return cls(is_waiting=True, started_at=datetime.now())

    def elapsed(self, now: datetime | None = None) -> float:
        """Seconds spent waiting so far (0.0 when idle)."""
        if not self.is_waiting or self.started_at is None:
            return 0.0
        return ((now or datetime.now()) - self.started_at).total_seconds()
