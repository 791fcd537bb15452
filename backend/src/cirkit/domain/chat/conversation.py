"""Conversation state for the AI suggest chat.

``Conversation`` owns the message list. One turn at a time: ``submit`` appends
the user message, streams the assistant answer into a single open message and
freezes it when the stream ends. Subscribers get an immutable snapshot of the
list after every change.
"""

from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import AbstractAsyncContextManager, aclosing
from enum import Enum
from typing import Protocol

from cirkit.domain.chat.events import aiter_events
from cirkit.domain.chat.options import extract_options
from cirkit.domain.chat.types import ChatMessage, SuggestionOption
from cirkit.shared.exceptions import (
    AIQuotaError,
    AIRateLimitError,
    AIServiceError,
    ChatAuthError,
    EmptyMessageError,
    TurnInProgressError,
)
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

AUTH_REQUIRED_MESSAGE = "Please sign in to chat with the Cirkit AI assistant."
RATE_LIMITED_MESSAGE = "Too many requests right now. Please wait a moment and try again."
QUOTA_EXHAUSTED_MESSAGE = "The AI assistant has run out of credits. Please try again later."
GENERIC_FAILURE_MESSAGE = "Sorry, I couldn't get a response. Please try again."

Snapshot = tuple[ChatMessage, ...]
Subscriber = Callable[[Snapshot], None]


class ChatTransport(Protocol):
    """Anything that can open a chat response byte stream."""

    def stream(
        self, messages: Sequence[dict[str, str]]
    ) -> AbstractAsyncContextManager[AsyncIterator[bytes]]: ...


class ConversationState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"


class Conversation:
    """Single-turn-at-a-time chat accumulator."""

    def __init__(self, transport: ChatTransport) -> None:
        self.transport = transport
        self._messages: list[ChatMessage] = []
        self._state = ConversationState.IDLE
        self._subscribers: list[Subscriber] = []

    # ----- Observation -----

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def messages(self) -> Snapshot:
        return tuple(message.snapshot() for message in self._messages)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for snapshots; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        """Deliver a snapshot to every subscriber.

        A failing subscriber is logged and skipped; it never reaches the turn.
        """
        snapshot = self.messages
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("chat_subscriber_failed", subscriber=repr(callback))

    @property
    def suggestion_options(self) -> list[SuggestionOption]:
        """Options of the latest assistant answer, once it has finished."""
        if not self._messages:
            return []
        last = self._messages[-1]
        if last.role != "assistant" or last.streaming or last.error:
            return []
        return extract_options(last.content)

    # ----- Turns -----

    async def submit(self, text: str) -> None:
        """Run one conversational turn.

        Raises:
            EmptyMessageError: ``text`` is blank
            TurnInProgressError: A previous turn is still streaming

        Transport failures never escape; they end the turn with an error
        message in place of the assistant answer.
        """
        content = text.strip()
        if not content:
            raise EmptyMessageError()
        if self._state is not ConversationState.IDLE:
            raise TurnInProgressError()

        self._state = ConversationState.STREAMING
        user_message = ChatMessage(role="user", content=content)
        self._messages.append(user_message)
        self._publish()

        history = self._history()
        assistant: ChatMessage | None = None
        logger.info("chat_turn_started", history_length=len(history))

        try:
            async with self.transport.stream(history) as chunks:
                assistant = ChatMessage(role="assistant", streaming=True)
                self._messages.append(assistant)
                self._publish()

                async with aclosing(aiter_events(chunks)) as events:
                    async for event in events:
                        if event.kind == "done":
                            break
                        assistant.append(event.text)
                        self._publish()

                assistant.finalize()

            logger.info("chat_turn_completed", response_length=len(assistant.content))

        except ChatAuthError:
            # The turn never started upstream, so the optimistic message goes too
            logger.warning("chat_turn_auth_required")
            self._discard(user_message)
            self._fail(assistant, AUTH_REQUIRED_MESSAGE)
        except AIRateLimitError:
            logger.warning("chat_turn_rate_limited")
            self._fail(assistant, RATE_LIMITED_MESSAGE)
        except AIQuotaError:
            logger.warning("chat_turn_quota_exhausted")
            self._fail(assistant, QUOTA_EXHAUSTED_MESSAGE)
        except AIServiceError as e:
            logger.error("chat_turn_failed", error=e.message, status=e.status_code)
            self._fail(assistant, GENERIC_FAILURE_MESSAGE)
        except OSError as e:
            logger.error("chat_turn_transport_error", error=str(e), error_type=type(e).__name__)
            self._fail(assistant, GENERIC_FAILURE_MESSAGE)
        except Exception as e:
            # Not a transport failure: a defect in our own stream handling
            logger.exception("chat_turn_internal_error", error_type=type(e).__name__)
            self._fail(assistant, GENERIC_FAILURE_MESSAGE)
        finally:
            self._state = ConversationState.IDLE
            self._publish()

    def _position(self, message: ChatMessage) -> int | None:
        for index, candidate in enumerate(self._messages):
            if candidate is message:
                return index
        return None

    def _discard(self, message: ChatMessage) -> None:
        index = self._position(message)
        if index is not None:
            del self._messages[index]

    def _fail(self, assistant: ChatMessage | None, text: str) -> None:
        """Put a failure notice where the open assistant message was."""
        notice = ChatMessage(role="assistant", content=text, error=True)
        index = self._position(assistant) if assistant is not None else None
        if index is None:
            self._messages.append(notice)
        else:
            self._messages[index] = notice

    def _history(self) -> list[dict[str, str]]:
        """Messages sent upstream; failure notices are not part of the dialogue."""
        return [message.to_payload() for message in self._messages if not message.error]

    def clear(self) -> None:
        """Start a new conversation."""
        if self._state is not ConversationState.IDLE:
            raise TurnInProgressError()
        self._messages.clear()
        self._publish()
