"""Interaction loop state machine.

The session is owned by a single thread (the UI or the terminal loop).
It is the only writer of the transcript; dispatch threads talk back to it
exclusively through the relay.

    Idle --submit--> AwaitingResponse --relay result--> Idle
"""

import time
from typing import Any, Protocol

from ..conversation import Message, Transcript
from ..dispatch import DispatchFailure, DispatchResult, DispatchSuccess, ResponseRelay
from ..llm import DispatchRequest
from .models import PendingState, SessionState


class Dispatcher(Protocol):
    """Anything that can start a background exchange."""

    def spawn(self, request: DispatchRequest, relay: ResponseRelay) -> Any: ...


class ChatSession:
    """Owns the transcript, the relay and the pending flag.

    At most one dispatch is in flight: submissions are rejected while a
    response is awaited.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        model_id: str,
        relay: ResponseRelay | None = None,
        transcript: Transcript | None = None,
    ):
        self._dispatcher = dispatcher
        self._model_id = model_id
        self._relay = relay if relay is not None else ResponseRelay()
        self._transcript = transcript if transcript is not None else Transcript()
        self._state = SessionState.IDLE
        self._pending = PendingState()
        self._last_failure: DispatchFailure | None = None

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending(self) -> PendingState:
        return self._pending

    @property
    def is_waiting(self) -> bool:
        return self._state == SessionState.AWAITING_RESPONSE

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def relay(self) -> ResponseRelay:
        return self._relay

    @property
    def last_failure(self) -> DispatchFailure | None:
        """Most recent failure, cleared by the next successful response."""
        return self._last_failure

    def submit(self, text: str) -> bool:
        """Handle a user submission.

        Returns:
            True if a dispatch was started, False if the text was empty
            or a response is still pending
        """
        content = text.strip()
        if not content or self.is_waiting:
            return False

        self._transcript.append(Message.user(content))
        request = DispatchRequest(
            conversation_snapshot=self._transcript.snapshot(),
            model_id=self._model_id,
        )
        self._state = SessionState.AWAITING_RESPONSE
        self._pending = PendingState.waiting()
        self._dispatcher.spawn(request, self._relay)
        return True

    def poll(self) -> list[DispatchResult]:
        """Apply every queued relay result without blocking.

        Returns:
            The results that were applied, oldest first
        """
        results = self._relay.drain()
        for result in results:
            if isinstance(result, DispatchSuccess):
                self._transcript.append(result.message)
                self._last_failure = None
            else:
                self._last_failure = result
            self._state = SessionState.IDLE
            self._pending = PendingState()
        return results

    def wait(self, poll_interval: float = 0.05, timeout: float | None = None) -> list[DispatchResult]:
        """Poll until the pending response arrives.

        For line-based surfaces that have nothing else to do meanwhile.

        Args:
            poll_interval: Seconds to sleep between polls
            timeout: Give up after this many seconds (None waits indefinitely)

        Returns:
            The results applied while waiting
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        results = self.poll()
        while self.is_waiting:
            if deadline is not None and time.monotonic() >= deadline:
                break
            time.sleep(poll_interval)
            results.extend(self.poll())
        return results

    def close(self) -> None:
        """Stop accepting relay results (in-flight dispatches finish unobserved)."""
        self._relay.close()
