from typing import Any

from .base import LLMProvider
from .providers import OpenRouterProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for providers.

    Args:
        provider: Provider type ('openrouter')
        **config: Provider-specific configuration
            For OpenRouter:
                - config: ChatConfig (required)
                - transport: httpx.AsyncBaseTransport | None

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "openrouter",
        ...     config=ChatConfig(api_key="sk-or-...")
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "openrouter":
        if "config" not in config:
            raise TypeError("OpenRouter provider requires 'config' in config")
        return OpenRouterProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openrouter'"
    )
