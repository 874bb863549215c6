import httpx
from pydantic import ValidationError

from ...config import ChatConfig
from ...errors import ResponseDecodeError, ResponseStatusError, TransportError
from ..base import LLMProvider
from ..models import ChatCompletionResponse, DispatchRequest


class OpenRouterProvider(LLMProvider):
    """OpenRouter (or any OpenAI-compatible) chat completions endpoint.

    Hidden design decisions:
    - HTTP client initialization (httpx)
    - Static header handling
    - Status check before body decoding
    - Mapping of httpx/pydantic errors onto CompletionError
    """

    def __init__(
        self,
        config: ChatConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            config: Endpoint URL, credential and optional headers
            transport: Optional httpx transport (used by tests to fake the endpoint)
        """
        self._config = config
        self._client = httpx.AsyncClient(
            headers=config.headers(),
            timeout=config.request_timeout,
            transport=transport,
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._config.model

    @property
    def url(self) -> str:
        return self._config.api_url

    async def chat_completion(self, request: DispatchRequest) -> ChatCompletionResponse:
        """POST the conversation and decode the response."""
        payload = request.to_payload().model_dump()

        try:
            response = await self._client.post(self._config.api_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        # Status decides before the body is looked at
        if not response.is_success:
            raise ResponseStatusError(response.status_code, response.text)

        try:
            return ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"{e.error_count()} validation error(s)", raw=response.text
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
