"""One-way channel from dispatch threads back to the interaction loop.

Design:
- Any number of dispatch threads call send()
- Exactly one consumer (the interaction loop) calls try_receive()
- Neither side ever blocks
"""

import queue

from .models import DispatchResult


class ResponseRelay:
    """Multi-producer, single-consumer FIFO of dispatch results.

    Example:
        relay = ResponseRelay()
        dispatcher.spawn(request, relay)   # producer side, on its own thread

        # consumer side, once per UI tick
        result = relay.try_receive()
        if result is not None:
            ...
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[DispatchResult] = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, result: DispatchResult) -> None:
        """Queue a result (called from a dispatch thread).

        Never blocks. Once the consumer has closed the relay this is a no-op.
        """
        if self._closed:
            return
        self._queue.put_nowait(result)

    def try_receive(self) -> DispatchResult | None:
        """Return the next result, or None immediately if there is none."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[DispatchResult]:
        """Receive everything currently queued, oldest first."""
        results = []
        while (result := self.try_receive()) is not None:
            results.append(result)
        return results

    def close(self) -> None:
        """Mark the consumer as gone; later sends are dropped."""
        self._closed = True
        self.drain()
