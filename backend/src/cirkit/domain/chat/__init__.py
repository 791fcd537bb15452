"""Chat domain module.

Streaming pipeline for the AI suggest assistant:
- transport: bytes -> complete lines
- events: lines -> content deltas / [DONE]
- conversation: per-turn message state
- options: numbered quick-reply options from finished answers
"""

from cirkit.domain.chat.conversation import Conversation, ConversationState
from cirkit.domain.chat.events import aiter_events, parse_event_line
from cirkit.domain.chat.options import extract_options
from cirkit.domain.chat.transport import LineDecoder, aiter_lines
from cirkit.domain.chat.types import ChatMessage, StreamEvent, SuggestionOption

__all__ = [
    "ChatMessage",
    "Conversation",
    "ConversationState",
    "LineDecoder",
    "StreamEvent",
    "SuggestionOption",
    "aiter_events",
    "aiter_lines",
    "extract_options",
    "parse_event_line",
]
