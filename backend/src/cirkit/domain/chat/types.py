"""Shared chat domain types.

Kept free of HTTP and framework imports so the transport, the parser and the
conversation state can all depend on them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cirkit.shared.exceptions import MessageFinalizedError

Role = Literal["user", "assistant"]
EventKind = Literal["delta", "done", "ignorable"]


@dataclass
class ChatMessage:
    """A message in the chat conversation.

    Assistant messages start out ``streaming`` and grow through ``append``;
    ``finalize`` freezes them. User messages are created final. ``error``
    marks failure notices shown in place of an answer.
    """

    role: Role
    content: str = ""
    streaming: bool = False
    error: bool = False

    def append(self, text: str) -> None:
        if not self.streaming:
            raise MessageFinalizedError()
        self.content += text

    def finalize(self) -> None:
        self.streaming = False

    def to_payload(self) -> dict[str, str]:
        """Wire representation for the chat endpoint."""
        return {"role": self.role, "content": self.content}

    def snapshot(self) -> ChatMessage:
        return ChatMessage(
            role=self.role,
            content=self.content,
            streaming=self.streaming,
            error=self.error,
        )


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """One classified SSE line."""

    kind: EventKind
    text: str = ""

    @classmethod
    def delta(cls, text: str) -> StreamEvent:
        return cls(kind="delta", text=text)

    @classmethod
    def done(cls) -> StreamEvent:
        return cls(kind="done")

    @classmethod
    def ignorable(cls) -> StreamEvent:
        return cls(kind="ignorable")


@dataclass(frozen=True, slots=True)
class SuggestionOption:
    """A quick-reply option parsed from a finished assistant message."""

    number: str
    title: str
    full_text: str

