"""Client configuration.

Hides where settings come from. Business logic receives a ChatConfig
instance and never reads the process environment itself.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "cognitivecomputations/dolphin3.0-mistral-24b:free"


class ChatConfig(BaseModel):
    """Static settings for talking to the completion endpoint."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(description="Bearer credential for the endpoint")
    api_url: str = Field(default=DEFAULT_API_URL, description="Full chat completions URL")
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier sent with each request")
    http_referer: str | None = Field(default=None, description="Optional HTTP-Referer header")
    x_title: str | None = Field(default=None, description="Optional X-Title header")
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds before a request is abandoned (None waits indefinitely)"
    )

    @field_validator("api_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("api_key must not be empty")
        return value.strip()

    def headers(self) -> dict[str, str]:
        """Build the static request headers."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.http_referer:
            headers["HTTP-Referer"] = self.http_referer
        if self.x_title:
            headers["X-Title"] = self.x_title
        return headers

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "ChatConfig":
        """Create a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Values that take precedence over the environment

        Environment variables:
            OPENROUTER_API_KEY: Credential (required)
            OPENROUTER_API_URL: Endpoint URL (default: OpenRouter chat completions)
            OPENROUTER_MODEL: Model identifier
            HTTP_REFERER: Optional referer header
            X_TITLE: Optional title header
            OPENROUTER_TIMEOUT: Optional request timeout in seconds

        Raises:
            ConfigError: If the credential is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        api_key = env.get("OPENROUTER_API_KEY")
        if not api_key:
            raise ConfigError("OPENROUTER_API_KEY must be set in the environment")

        values: dict[str, object] = {
            "api_key": api_key,
            "api_url": env.get("OPENROUTER_API_URL") or DEFAULT_API_URL,
            "model": env.get("OPENROUTER_MODEL") or DEFAULT_MODEL,
            "http_referer": env.get("HTTP_REFERER") or None,
            "x_title": env.get("X_TITLE") or None,
            "request_timeout": env.get("OPENROUTER_TIMEOUT") or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
