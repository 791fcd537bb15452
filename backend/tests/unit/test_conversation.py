"""Unit tests for the chat conversation accumulator."""

import asyncio
from contextlib import asynccontextmanager

import pytest

from cirkit.domain.chat.conversation import (
    AUTH_REQUIRED_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    QUOTA_EXHAUSTED_MESSAGE,
    RATE_LIMITED_MESSAGE,
    Conversation,
    ConversationState,
)
from cirkit.domain.chat.types import ChatMessage
from cirkit.infrastructure.ai.chat_client import error_for_status
from cirkit.shared.exceptions import (
    AIServiceError,
    EmptyMessageError,
    MessageFinalizedError,
    TurnInProgressError,
)
from conftest import SSE_DONE, FakeTransport, sse_delta


class GatedTransport:
    """Sends one delta, then waits until released before finishing."""

    def __init__(self) -> None:
        self.first_delta_sent = asyncio.Event()
        self.release = asyncio.Event()

    @asynccontextmanager
    async def stream(self, messages):
        async def body():
            yield sse_delta("Partial").encode()
            self.first_delta_sent.set()
            await self.release.wait()
            yield sse_delta(" answer").encode()
            yield SSE_DONE.encode()

        yield body()


class TestSuccessfulTurn:
    """Test a turn that streams to completion."""

    @pytest.mark.asyncio
    async def test_deltas_concatenate_and_message_freezes(self):
        conversation = Conversation(FakeTransport([sse_delta("Hi"), sse_delta(" there"), SSE_DONE]))

        await conversation.submit("hello")

        messages = conversation.messages
        assert [(m.role, m.content) for m in messages] == [
            ("user", "hello"),
            ("assistant", "Hi there"),
        ]
        assert messages[-1].streaming is False
        assert conversation.state is ConversationState.IDLE

    @pytest.mark.asyncio
    async def test_finished_message_rejects_appends(self):
        conversation = Conversation(FakeTransport([sse_delta("Hi"), SSE_DONE]))
        await conversation.submit("hello")

        # Internal message, not the snapshot
        assistant = conversation._messages[-1]
        with pytest.raises(MessageFinalizedError):
            assistant.append("more")

    @pytest.mark.asyncio
    async def test_malformed_frame_does_not_affect_text(self):
        conversation = Conversation(
            FakeTransport([sse_delta("A"), "data: {invalid json\n", sse_delta("B"), SSE_DONE])
        )

        await conversation.submit("x")

        assert conversation.messages[-1].content == "AB"

    @pytest.mark.asyncio
    async def test_deltas_after_done_are_not_applied(self):
        transport = FakeTransport([sse_delta("kept"), SSE_DONE, sse_delta("ignored")])
        conversation = Conversation(transport)

        await conversation.submit("x")

        assert conversation.messages[-1].content == "kept"
        assert transport.closed == 1

    @pytest.mark.asyncio
    async def test_stream_end_without_done_finalizes(self):
        conversation = Conversation(FakeTransport([sse_delta("no sentinel")]))

        await conversation.submit("x")

        assert conversation.messages[-1].content == "no sentinel"
        assert conversation.messages[-1].streaming is False

    @pytest.mark.asyncio
    async def test_input_is_trimmed(self):
        transport = FakeTransport([SSE_DONE])
        conversation = Conversation(transport)

        await conversation.submit("  a gaming pc  ")

        assert transport.requests[0] == [{"role": "user", "content": "a gaming pc"}]

    @pytest.mark.asyncio
    async def test_history_is_sent_in_order(self):
        transport = FakeTransport([sse_delta("first"), SSE_DONE], [sse_delta("second"), SSE_DONE])
        conversation = Conversation(transport)

        await conversation.submit("one")
        await conversation.submit("two")

        assert transport.requests[1] == [
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "first"},
            {"role": "user", "content": "two"},
        ]

    @pytest.mark.asyncio
    async def test_snapshots_grow_monotonically(self):
        conversation = Conversation(
            FakeTransport([sse_delta("a"), sse_delta("bc"), sse_delta("def"), SSE_DONE])
        )
        lengths: list[int] = []

        def record(snapshot: tuple[ChatMessage, ...]) -> None:
            if snapshot and snapshot[-1].role == "assistant":
                lengths.append(len(snapshot[-1].content))

        conversation.subscribe(record)
        await conversation.submit("x")

        assert lengths == sorted(lengths)
        assert lengths[-1] == 6

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_notifications(self):
        conversation = Conversation(FakeTransport([SSE_DONE]))
        calls = []
        unsubscribe = conversation.subscribe(calls.append)
        unsubscribe()

        await conversation.submit("x")

        assert calls == []

    @pytest.mark.asyncio
    async def test_suggestion_options_from_finished_answer(self):
        answer = "### Option 1: Budget Build\nCheap.\n### Option 2: Pro Build\nFast."
        conversation = Conversation(FakeTransport([sse_delta(answer), SSE_DONE]))

        await conversation.submit("x")

        assert [o.title for o in conversation.suggestion_options] == ["Budget Build", "Pro Build"]


class TestSubmitGuards:
    """Test input and state validation."""

    @pytest.mark.asyncio
    async def test_empty_input_rejected(self):
        conversation = Conversation(FakeTransport())

        with pytest.raises(EmptyMessageError):
            await conversation.submit("   ")

        assert conversation.messages == ()

    @pytest.mark.asyncio
    async def test_second_submit_while_streaming_rejected(self):
        transport = GatedTransport()
        conversation = Conversation(transport)

        first = asyncio.create_task(conversation.submit("first"))
        await transport.first_delta_sent.wait()
        await asyncio.sleep(0)
        before = conversation.messages

        with pytest.raises(TurnInProgressError):
            await conversation.submit("second")

        assert conversation.messages == before
        assert conversation.messages[-1].content == "Partial"
        assert conversation.messages[-1].streaming is True

        transport.release.set()
        await first

        assert conversation.messages[-1].content == "Partial answer"
        assert len(conversation.messages) == 2

    @pytest.mark.asyncio
    async def test_clear_while_streaming_rejected(self):
        transport = GatedTransport()
        conversation = Conversation(transport)

        first = asyncio.create_task(conversation.submit("first"))
        await transport.first_delta_sent.wait()

        with pytest.raises(TurnInProgressError):
            conversation.clear()

        transport.release.set()
        await first
        conversation.clear()

        assert conversation.messages == ()


class TestFailedTurn:
    """Test error handling during a turn."""

    @pytest.mark.asyncio
    async def test_auth_failure_removes_user_message(self):
        conversation = Conversation(FakeTransport(error_for_status(401)))

        await conversation.submit("hello")

        messages = conversation.messages
        assert len(messages) == 1
        assert messages[-1].role == "assistant"
        assert messages[-1].content == AUTH_REQUIRED_MESSAGE
        assert messages[-1].error is True
        assert conversation.state is ConversationState.IDLE

    @pytest.mark.asyncio
    async def test_auth_failure_keeps_earlier_turns(self):
        transport = FakeTransport([sse_delta("answer"), SSE_DONE], error_for_status(401))
        conversation = Conversation(transport)

        await conversation.submit("one")
        await conversation.submit("two")

        assert [m.content for m in conversation.messages] == ["one", "answer", AUTH_REQUIRED_MESSAGE]

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            (429, RATE_LIMITED_MESSAGE),
            (402, QUOTA_EXHAUSTED_MESSAGE),
            (500, GENERIC_FAILURE_MESSAGE),
            (503, GENERIC_FAILURE_MESSAGE),
        ],
    )
    @pytest.mark.asyncio
    async def test_status_failures_keep_user_message(self, status, expected):
        conversation = Conversation(FakeTransport(error_for_status(status)))

        await conversation.submit("hello")

        assert [(m.role, m.content) for m in conversation.messages] == [
            ("user", "hello"),
            ("assistant", expected),
        ]

    @pytest.mark.asyncio
    async def test_mid_stream_failure_replaces_partial_answer(self):
        async def body():
            yield sse_delta("Half an ans").encode()
            raise AIServiceError("Chat stream was interrupted")

        class BrokenTransport:
            @asynccontextmanager
            async def stream(self, messages):
                yield body()

        conversation = Conversation(BrokenTransport())

        await conversation.submit("hello")

        assert [(m.role, m.content) for m in conversation.messages] == [
            ("user", "hello"),
            ("assistant", GENERIC_FAILURE_MESSAGE),
        ]
        assert conversation.state is ConversationState.IDLE

    @pytest.mark.asyncio
    async def test_notices_are_not_sent_upstream(self):
        transport = FakeTransport(error_for_status(500), [SSE_DONE])
        conversation = Conversation(transport)

        await conversation.submit("one")
        await conversation.submit("two")

        assert transport.requests[1] == [
            {"role": "user", "content": "one"},
            {"role": "user", "content": "two"},
        ]

    @pytest.mark.asyncio
    async def test_new_turn_allowed_after_failure(self):
        transport = FakeTransport(error_for_status(429), [sse_delta("ok"), SSE_DONE])
        conversation = Conversation(transport)

        await conversation.submit("one")
        await conversation.submit("two")

        assert conversation.messages[-1].content == "ok"
        assert conversation.suggestion_options == []


class TestSubscribers:
    """Test that observers cannot break a turn."""

    @pytest.mark.asyncio
    async def test_failing_subscriber_leaves_conversation_usable(self):
        transport = FakeTransport([sse_delta("first"), SSE_DONE], [sse_delta("second"), SSE_DONE])
        conversation = Conversation(transport)
        calls = []

        def flaky(snapshot):
            calls.append(snapshot)
            if len(calls) == 1:
                raise RuntimeError("render failed")

        conversation.subscribe(flaky)

        await conversation.submit("one")

        assert conversation.state is ConversationState.IDLE
        assert conversation.messages[-1].content == "first"

        await conversation.submit("two")
        conversation.clear()

        assert conversation.messages == ()

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_replace_answer(self):
        conversation = Conversation(FakeTransport([sse_delta("Hi"), sse_delta("!"), SSE_DONE]))

        def broken(snapshot):
            raise ValueError("always")

        seen = []
        conversation.subscribe(broken)
        conversation.subscribe(seen.append)

        await conversation.submit("x")

        assert conversation.messages[-1].content == "Hi!"
        assert conversation.messages[-1].error is False
        # Later subscribers still get every snapshot
        assert seen[-1] == conversation.messages


class TestUnexpectedFailures:
    """Test failures outside the error taxonomy."""

    @pytest.mark.asyncio
    async def test_os_error_becomes_notice(self):
        conversation = Conversation(FakeTransport(ConnectionResetError("reset")))

        await conversation.submit("hello")

        assert conversation.messages[-1].content == GENERIC_FAILURE_MESSAGE
        assert conversation.messages[-1].error is True
        assert conversation.state is ConversationState.IDLE

    @pytest.mark.asyncio
    async def test_invalid_utf8_frame_does_not_abort_turn(self):
        conversation = Conversation(
            FakeTransport([sse_delta("Hello"), b'data: {"x": "\xff"}\n', sse_delta(" world"), SSE_DONE])
        )

        await conversation.submit("x")

        assert conversation.messages[-1].content == "Hello world"
        assert conversation.messages[-1].error is False


class TestDeterminism:
    """Test that identical streams give identical conversations."""

    @pytest.mark.asyncio
    async def test_same_events_same_messages(self):
        script = [sse_delta("### Option 1: Line follower\n"), sse_delta("Uses ₹ 900 of parts."), SSE_DONE]
        first = Conversation(FakeTransport(list(script)))
        second = Conversation(FakeTransport(list(script)))

        await first.submit("robot ideas")
        await second.submit("robot ideas")

        assert first.messages == second.messages
        assert first.suggestion_options == second.suggestion_options


class TestOptionsWhileStreaming:
    """Test that options only appear once the answer is finished."""

    @pytest.mark.asyncio
    async def test_no_options_until_answer_finishes(self):
        class OptionGate(GatedTransport):
            @asynccontextmanager
            async def stream(self, messages):
                async def body():
                    yield sse_delta("### Option 1: Budget Build\nCheap.\n").encode()
                    self.first_delta_sent.set()
                    await self.release.wait()
                    yield sse_delta("### Option 2: Pro Build\nFast.").encode()
                    yield SSE_DONE.encode()

                yield body()

        transport = OptionGate()
        conversation = Conversation(transport)

        turn = asyncio.create_task(conversation.submit("x"))
        await transport.first_delta_sent.wait()
        await asyncio.sleep(0)

        assert conversation.messages[-1].streaming is True
        assert "Option 1" in conversation.messages[-1].content
        assert conversation.suggestion_options == []

        transport.release.set()
        await turn

        assert [o.title for o in conversation.suggestion_options] == ["Budget Build", "Pro Build"]
