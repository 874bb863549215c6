from .base import LLMProvider
from .factory import create_llm_provider
from .models import (
    ChatChoice,
    ChatCompletionRequest,
    ChatCompletionResponse,
    DispatchRequest,
    WireMessage,
)
from .providers import OpenRouterProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatChoice",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "DispatchRequest",
    "OpenRouterProvider",
    "WireMessage",
]
