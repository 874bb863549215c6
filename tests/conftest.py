"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from routerchat.config import ChatConfig
from routerchat.conversation import Message
from routerchat.dispatch import DispatchResult, DispatchSuccess, ResponseRelay
from routerchat.llm import DispatchRequest, OpenRouterProvider

TEST_URL = "https://llm.test/api/v1/chat/completions"


def completion_body(*contents: str) -> dict[str, Any]:
    """Build a success response body with one choice per content string."""
    return {
        "id": "gen-123",
        "object": "chat.completion",
        "created": 1700000000,
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
            for i, content in enumerate(contents)
        ],
    }


def mock_provider_factory(handler: Callable[[httpx.Request], httpx.Response]):
    """Provider factory whose providers talk to `handler` instead of the network."""
    def factory(config: ChatConfig) -> OpenRouterProvider:
        return OpenRouterProvider(config, transport=httpx.MockTransport(handler))
    return factory


class FakeDispatcher:
    """Records requests; optionally answers each one synchronously."""

    def __init__(self, reply: Callable[[DispatchRequest], DispatchResult] | None = None):
        self.requests: list[DispatchRequest] = []
        self.reply = reply

    def spawn(self, request: DispatchRequest, relay: ResponseRelay) -> None:
        self.requests.append(request)
        if self.reply is not None:
            relay.send(self.reply(request))


def echo_reply(request: DispatchRequest) -> DispatchResult:
    last = request.conversation_snapshot[-1]
    return DispatchSuccess(message=Message.assistant(f"echo: {last.content}"))


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openrouter": os.getenv("OPENROUTER_API_KEY"),
    }


@pytest.fixture
def chat_config():
    """Config pointing at a fake endpoint."""
    return ChatConfig(
        api_key="test-key",
        api_url=TEST_URL,
        model="test/model",
        http_referer="https://example.com",
        x_title="routerchat tests",
    )


@pytest.fixture
def fake_dispatcher():
    return FakeDispatcher()


@pytest.fixture
def echo_dispatcher():
    return FakeDispatcher(reply=echo_reply)
