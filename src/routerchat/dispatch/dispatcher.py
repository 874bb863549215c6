"""Completion dispatcher.

Runs one completion exchange per send action on a dedicated thread with
its own event loop, and reports the outcome through a ResponseRelay.
"""

import asyncio
import itertools
import threading
from collections.abc import Callable
from typing import Any

from ..config import ChatConfig
from ..conversation import Message
from ..errors import ResponseDecodeError, ResponseStatusError, TransportError
from ..llm import DispatchRequest, LLMProvider, create_llm_provider
from .models import DispatchFailure, DispatchResult, DispatchSuccess, FailureKind
from .relay import ResponseRelay

ProviderFactory = Callable[[ChatConfig], LLMProvider]


def _truncate(text: str, max_len: int = 200) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def _default_provider(config: ChatConfig) -> LLMProvider:
    return create_llm_provider("openrouter", config=config)


class CompletionDispatcher:
    """Fire-and-forget completion exchanges.

    Hidden design decisions:
    - Execution context (a daemon thread running its own event loop)
    - Provider construction per dispatch
    - First-choice extraction
    - Conversion of every failure mode into a DispatchFailure

    The caller never waits for an execution. Cancellation is not supported;
    an execution runs until the exchange completes or fails.
    """

    _ids = itertools.count(1)

    def __init__(
        self,
        config: ChatConfig,
        provider_factory: ProviderFactory | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            config: Static endpoint settings, shared read-only by all executions
            provider_factory: Builds a provider for each execution
                (defaults to the OpenRouter provider)
        """
        self._config = config
        self._provider_factory = provider_factory or _default_provider
        self._debug_callback: Any | None = None

    @property
    def config(self) -> ChatConfig:
        return self._config

    def set_debug_callback(self, callback: Any) -> None:
        """Set callback for diagnostic messages.

        Args:
            callback: Function(level: str, component: str, message: str).
                Called from dispatch threads.
        """
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _failure(
        self,
        kind: FailureKind,
        reason: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> DispatchFailure:
        self._debug("error", "Dispatch", reason)
        if detail:
            self._debug("debug", "Dispatch", f"Error details: {_truncate(detail)}")
        return DispatchFailure(kind=kind, reason=reason, status_code=status_code, detail=detail)

    async def execute(self, request: DispatchRequest) -> DispatchResult:
        """Perform one exchange and resolve it to a single result.

        Never raises for transport, status or decode failures.
        """
        self._debug(
            "info",
            "LLM",
            f"Sending {len(request.conversation_snapshot)} message(s) to {request.model_id}"
        )

        try:
            async with self._provider_factory(self._config) as provider:
                response = await provider.chat_completion(request)
        except TransportError as e:
            return self._failure(FailureKind.TRANSPORT, f"Error sending request: {e}")
        except ResponseStatusError as e:
            return self._failure(FailureKind.STATUS, str(e), status_code=e.status_code, detail=e.body)
        except ResponseDecodeError as e:
            return self._failure(FailureKind.DECODE, str(e), detail=e.raw)

        content = response.first_content()
        if content is None:
            return self._failure(FailureKind.EMPTY, "No message received from LLM.")

        if len(response.choices) > 1:
            self._debug("debug", "LLM", f"Discarding {len(response.choices) - 1} extra choice(s)")
        self._debug("info", "LLM", f"Response received ({len(content)} chars)")
        self._debug("debug", "LLM", f"Response preview: {_truncate(content, 150)}")

        return DispatchSuccess(message=Message.assistant(content))

    def _run(self, request: DispatchRequest, relay: ResponseRelay) -> None:
        """Thread body: run the exchange and relay exactly one result."""
        try:
            result = asyncio.run(self.execute(request))
        except Exception as e:
            result = self._failure(FailureKind.INTERNAL, f"Unexpected dispatch error: {e!r}")
        relay.send(result)

    def spawn(self, request: DispatchRequest, relay: ResponseRelay) -> threading.Thread:
        """Start an execution for `request` and return immediately.

        Args:
            request: Snapshot and model id for this exchange
            relay: Channel that receives the single result

        Returns:
            The started daemon thread (callers normally ignore it)
        """
        thread = threading.Thread(
            target=self._run,
            args=(request, relay),
            name=f"dispatch-{next(self._ids)}",
            daemon=True,
        )
        thread.start()
        return thread
