"""Unit tests for the interaction loop."""
from datetime import datetime, timedelta

import httpx
from conftest import FakeDispatcher, completion_body, echo_reply, mock_provider_factory
from hypothesis import given
from hypothesis import strategies as st

from routerchat.conversation import Message, Role, Transcript
from routerchat.dispatch import (
    CompletionDispatcher,
    DispatchFailure,
    DispatchSuccess,
    FailureKind,
    ResponseRelay,
)
from routerchat.session import ChatSession, PendingState, SessionState


class TestPendingState:
    """Tests for the pending indicator."""

    def test_idle_by_default(self):
        """Test that a fresh pending state is idle with no elapsed time."""
        pending = PendingState()
        assert not pending.is_waiting
        assert pending.started_at is None
        assert pending.elapsed() == 0.0

    def test_waiting_records_start(self):
        """Test that waiting() records when the wait started."""
        pending = PendingState.waiting()
        assert pending.is_waiting
        assert pending.elapsed(now=pending.started_at + timedelta(seconds=3)) == 3.0


class TestSubmit:
    """Tests for the Idle -> AwaitingResponse transition."""

    def test_submit_appends_and_dispatches(self, fake_dispatcher):
        """Test that a submission is appended and dispatched with a snapshot."""
        session = ChatSession(fake_dispatcher, model_id="test/model")

        assert session.submit("  hello  ")

        assert [m.content for m in session.transcript] == ["hello"]
        assert session.state == SessionState.AWAITING_RESPONSE
        assert session.is_waiting
        assert len(fake_dispatcher.requests) == 1
        request = fake_dispatcher.requests[0]
        assert request.model_id == "test/model"
        assert [m.content for m in request.conversation_snapshot] == ["hello"]

    def test_pending_started_at_is_set(self, fake_dispatcher):
        """Test that submitting sets the pending start time."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        before = datetime.now()
        session.submit("hello")

        assert session.pending.is_waiting
        assert before <= session.pending.started_at <= datetime.now()

    def test_empty_text_is_ignored(self, fake_dispatcher):
        """Test that empty or whitespace-only text starts nothing."""
        session = ChatSession(fake_dispatcher, model_id="test/model")

        assert not session.submit("")
        assert not session.submit("   \n")
        assert len(session.transcript) == 0
        assert fake_dispatcher.requests == []
        assert session.state == SessionState.IDLE

    def test_rejected_while_waiting(self, fake_dispatcher):
        """Test that a second submission is rejected while a response is pending."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("first")

        assert not session.submit("second")
        assert [m.content for m in session.transcript] == ["first"]
        assert len(fake_dispatcher.requests) == 1

    def test_injected_empty_transcript_is_shared(self, fake_dispatcher):
        """Test that an empty transcript passed in is the one the session appends to."""
        shared = Transcript()
        session = ChatSession(fake_dispatcher, model_id="test/model", transcript=shared)

        session.submit("hello")

        assert session.transcript is shared
        assert [m.content for m in shared] == ["hello"]

    def test_injected_relay_is_used(self, fake_dispatcher):
        """Test that a relay passed in is the one the session drains."""
        relay = ResponseRelay()
        session = ChatSession(fake_dispatcher, model_id="test/model", relay=relay)
        session.submit("hello")
        relay.send(DispatchSuccess(message=Message.assistant("hi")))

        session.poll()

        assert session.relay is relay
        assert len(session.transcript) == 2

    def test_snapshot_is_independent_of_transcript(self, fake_dispatcher):
        """Test that a dispatched snapshot does not grow with the transcript."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("hello")
        session.relay.send(DispatchSuccess(message=Message.assistant("hi")))
        session.poll()

        assert len(fake_dispatcher.requests[0].conversation_snapshot) == 1


class TestPoll:
    """Tests for the AwaitingResponse -> Idle transition."""

    def test_poll_with_nothing_queued(self, fake_dispatcher):
        """Test that polling an empty relay keeps the session waiting."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("hello")

        assert session.poll() == []
        assert session.is_waiting

    def test_success_appends_and_clears_pending(self, fake_dispatcher):
        """Test that a success appends the reply and returns to idle."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("hello")
        session.relay.send(DispatchSuccess(message=Message.assistant("hi there")))

        session.poll()

        assert [(m.role, m.content) for m in session.transcript] == [
            (Role.USER, "hello"),
            (Role.ASSISTANT, "hi there"),
        ]
        assert session.state == SessionState.IDLE
        assert session.pending == PendingState()

    def test_failure_clears_pending_without_message(self, fake_dispatcher):
        """Test that a failure returns to idle without appending anything."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("ping")
        failure = DispatchFailure(kind=FailureKind.TRANSPORT, reason="Error sending request: refused")
        session.relay.send(failure)

        session.poll()

        assert [m.content for m in session.transcript] == ["ping"]
        assert not session.is_waiting
        assert session.last_failure is failure

    def test_success_clears_last_failure(self, fake_dispatcher):
        """Test that a later success clears the recorded failure."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("ping")
        session.relay.send(DispatchFailure(kind=FailureKind.EMPTY, reason="No message received from LLM."))
        session.poll()

        session.submit("ping again")
        session.relay.send(DispatchSuccess(message=Message.assistant("pong")))
        session.poll()

        assert session.last_failure is None

    def test_submit_allowed_after_failure(self, fake_dispatcher):
        """Test that the user can submit again after a failure."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("ping")
        session.relay.send(DispatchFailure(kind=FailureKind.STATUS, reason="x", status_code=500))
        session.poll()

        assert session.submit("retry")
        assert [m.content for m in session.transcript] == ["ping", "retry"]

    @given(st.lists(st.text(min_size=1).filter(lambda s: s.strip()), max_size=15))
    def test_echo_conversation_alternates(self, texts: list[str]):
        """Property test: N successful exchanges yield 2N alternating messages."""
        session = ChatSession(FakeDispatcher(reply=echo_reply), model_id="test/model")
        for text in texts:
            assert session.submit(text)
            session.poll()

        messages = session.transcript.snapshot()
        assert len(messages) == 2 * len(texts)
        for i, msg in enumerate(messages):
            assert msg.role == (Role.USER if i % 2 == 0 else Role.ASSISTANT)
        assert not session.is_waiting

    def test_results_after_close_are_dropped(self, fake_dispatcher):
        """Test that results arriving after close are not applied."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("hello")
        session.close()
        session.relay.send(DispatchSuccess(message=Message.assistant("late")))

        assert session.poll() == []
        assert len(session.transcript) == 1


class TestWithCompletionDispatcher:
    """End-to-end exchanges through a real dispatcher and a mock endpoint."""

    def test_hello_round_trip(self, chat_config):
        """Test a full hello exchange through the dispatcher."""
        dispatcher = CompletionDispatcher(
            chat_config,
            provider_factory=mock_provider_factory(
                lambda request: httpx.Response(200, json=completion_body("hi there"))
            ),
        )
        session = ChatSession(dispatcher, model_id=chat_config.model)

        assert session.submit("hello")
        session.wait(timeout=5)

        assert [(m.role, m.content) for m in session.transcript] == [
            (Role.USER, "hello"),
            (Role.ASSISTANT, "hi there"),
        ]
        assert not session.is_waiting

    def test_server_error_leaves_only_user_message(self, chat_config):
        """Test that an HTTP 500 leaves only the user message and clears pending."""
        dispatcher = CompletionDispatcher(
            chat_config,
            provider_factory=mock_provider_factory(
                lambda request: httpx.Response(500, text="internal error")
            ),
        )
        session = ChatSession(dispatcher, model_id=chat_config.model)

        session.submit("ping")
        session.wait(timeout=5)

        assert [m.content for m in session.transcript] == ["ping"]
        assert not session.is_waiting
        assert session.last_failure.kind == FailureKind.STATUS
        assert session.last_failure.status_code == 500

    def test_wait_gives_up_after_timeout(self, fake_dispatcher):
        """Test that wait() returns after its timeout while still waiting."""
        session = ChatSession(fake_dispatcher, model_id="test/model")
        session.submit("hello")

        assert session.wait(poll_interval=0.01, timeout=0.05) == []
        assert session.is_waiting
