"""Unit tests for the completion dispatcher."""
import asyncio
import threading
import time

import httpx
import pytest
from conftest import completion_body, mock_provider_factory
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from routerchat.conversation import Message, Role
from routerchat.dispatch import (
    CompletionDispatcher,
    DispatchFailure,
    DispatchSuccess,
    FailureKind,
    ResponseRelay,
)
from routerchat.llm import DispatchRequest


def _request(text: str = "hello") -> DispatchRequest:
    return DispatchRequest(conversation_snapshot=(Message.user(text),), model_id="test/model")


def _dispatcher(chat_config, handler) -> CompletionDispatcher:
    return CompletionDispatcher(chat_config, provider_factory=mock_provider_factory(handler))


class TestExecute:
    """Tests for a single exchange resolved to a result."""

    @pytest.mark.asyncio
    async def test_success_uses_first_choice(self, chat_config):
        """Test that only the first choice becomes the reply."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(200, json=completion_body("first", "second")),
        )
        result = await dispatcher.execute(_request())

        assert isinstance(result, DispatchSuccess)
        assert result.ok
        assert result.message.role == Role.ASSISTANT
        assert result.message.content == "first"

    @pytest.mark.asyncio
    async def test_empty_choices_is_failure(self, chat_config):
        """Test that a response without choices yields no message."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(200, json=completion_body()),
        )
        result = await dispatcher.execute(_request())

        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.EMPTY
        assert result.reason == "No message received from LLM."

    @pytest.mark.asyncio
    async def test_status_failure_keeps_body(self, chat_config):
        """Test that a status failure carries the code and body."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(429, text='{"error": "rate limited"}'),
        )
        result = await dispatcher.execute(_request())

        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.STATUS
        assert result.status_code == 429
        assert result.reason == "Request failed with status: 429"
        assert result.detail == '{"error": "rate limited"}'

    @given(st.integers(min_value=400, max_value=599))
    @settings(max_examples=20, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_error_status_never_produces_message(self, chat_config, status: int):
        """Property test: a non-success status fails even with a valid body."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(status, json=completion_body("should be ignored")),
        )
        result = asyncio.run(dispatcher.execute(_request()))

        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.STATUS
        assert result.status_code == status

    @pytest.mark.asyncio
    async def test_decode_failure_keeps_raw_body(self, chat_config):
        """Test that an undecodable body yields a decode failure with the raw text."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(200, text="not json at all"),
        )
        result = await dispatcher.execute(_request())

        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.DECODE
        assert result.reason.startswith("Failed to parse response")
        assert result.detail == "not json at all"

    @pytest.mark.asyncio
    async def test_transport_failure(self, chat_config):
        """Test that a connection error yields a transport failure."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _dispatcher(chat_config, handler).execute(_request())

        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.TRANSPORT
        assert result.reason.startswith("Error sending request")

    @pytest.mark.asyncio
    async def test_debug_callback_receives_diagnostics(self, chat_config):
        """Test that diagnostics reach the debug callback."""
        events: list[tuple[str, str, str]] = []
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(503, text="unavailable"),
        )
        dispatcher.set_debug_callback(lambda level, component, message: events.append((level, component, message)))

        await dispatcher.execute(_request())

        assert ("info", "LLM", "Sending 1 message(s) to test/model") in events
        assert ("error", "Dispatch", "Request failed with status: 503") in events
        assert ("debug", "Dispatch", "Error details: unavailable") in events


class TestSpawn:
    """Tests for background execution."""

    def test_spawn_returns_before_response(self, chat_config):
        """Test that spawn returns while the exchange is still running."""
        gate = threading.Event()

        def handler(request: httpx.Request) -> httpx.Response:
            gate.wait(timeout=5)
            return httpx.Response(200, json=completion_body("late"))

        relay = ResponseRelay()
        start = time.monotonic()
        thread = _dispatcher(chat_config, handler).spawn(_request(), relay)

        assert time.monotonic() - start < 1.0
        assert thread.daemon
        assert relay.try_receive() is None

        gate.set()
        thread.join(timeout=5)

        result = relay.try_receive()
        assert isinstance(result, DispatchSuccess)
        assert result.message.content == "late"

    def test_exactly_one_result_per_spawn(self, chat_config):
        """Test that each spawn relays exactly one result."""
        relay = ResponseRelay()
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(500, text="boom"),
        )
        thread = dispatcher.spawn(_request(), relay)
        thread.join(timeout=5)

        results = relay.drain()
        assert len(results) == 1
        assert results[0].kind == FailureKind.STATUS

    def test_unexpected_error_still_relays_failure(self, chat_config):
        """Test that an unexpected error still relays an internal failure."""
        def broken_factory(config):
            raise RuntimeError("provider exploded")

        relay = ResponseRelay()
        dispatcher = CompletionDispatcher(chat_config, provider_factory=broken_factory)
        dispatcher.spawn(_request(), relay).join(timeout=5)

        result = relay.try_receive()
        assert isinstance(result, DispatchFailure)
        assert result.kind == FailureKind.INTERNAL
        assert "provider exploded" in result.reason

    def test_threads_are_named(self, chat_config):
        """Test that dispatch threads get numbered names."""
        dispatcher = _dispatcher(
            chat_config,
            lambda request: httpx.Response(200, json=completion_body("ok")),
        )
        thread = dispatcher.spawn(_request(), ResponseRelay())
        thread.join(timeout=5)
        assert thread.name.startswith("dispatch-")
