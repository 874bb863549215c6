from abc import ABC, abstractmethod
from typing import Any

from .models import ChatCompletionResponse, DispatchRequest


class LLMProvider(ABC):
    """Abstract base class for completion endpoints.

    This module hides the design decision of how a completion exchange is
    carried out. Implementations must handle:
    - HTTP client setup and authentication headers
    - Request/response format conversion
    - Mapping transport, status and decode failures onto CompletionError

    Implementations never retry.

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.chat_completion(request)
        # Automatically cleaned up
    """

    @abstractmethod
    async def chat_completion(self, request: DispatchRequest) -> ChatCompletionResponse:
        """Perform one completion exchange.

        Args:
            request: Conversation snapshot and model identifier

        Returns:
            Decoded response body

        Raises:
            TransportError: Connection or timeout failure
            ResponseStatusError: Non-success HTTP status
            ResponseDecodeError: Body could not be decoded
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
