"""Classification of chat SSE lines into stream events."""

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from cirkit.domain.chat.transport import aiter_lines
from cirkit.domain.chat.types import StreamEvent
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def parse_event_line(line: str) -> StreamEvent:
    """Classify one newline-stripped SSE line.

    Never raises: anything that is not a usable content delta or the
    ``[DONE]`` sentinel is ignorable, including frames with broken JSON.
    """
    if not line.strip():
        return StreamEvent.ignorable()
    if line.startswith(":"):
        return StreamEvent.ignorable()
    if not line.startswith(DATA_PREFIX):
        return StreamEvent.ignorable()

    payload = line[len(DATA_PREFIX) :].strip()
    if payload == DONE_SENTINEL:
        return StreamEvent.done()

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("sse_malformed_frame", length=len(payload))
        return StreamEvent.ignorable()

    content = _delta_content(parsed)
    if content is None:
        return StreamEvent.ignorable()
    return StreamEvent.delta(content)


def _delta_content(parsed: Any) -> str | None:
    """Return ``choices[0].delta.content`` when it is a non-empty string."""
    if not isinstance(parsed, dict):
        return None
    choices = parsed.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if not isinstance(content, str) or not content:
        return None
    return content


async def aiter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamEvent]:
    """Yield the non-ignorable events of a chat byte stream, in order."""
    async for line in aiter_lines(chunks):
        event = parse_event_line(line)
        if event.kind != "ignorable":
            yield event
