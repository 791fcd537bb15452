"""Line framing for server-sent event byte streams.

Chunks from the network are arbitrary slices of the body: a chunk may end in
the middle of a line or in the middle of a multi-byte UTF-8 character. The
decoder keeps both remainders (undecoded bytes inside the incremental codec,
undelimited text in ``_pending``) until the next chunk completes them.
Bytes that are not valid UTF-8 are replaced, never raised.
"""

import codecs
from collections.abc import AsyncIterable, AsyncIterator


class LineDecoder:
    """Incremental bytes -> complete lines decoder."""

    def __init__(self) -> None:
        # Invalid bytes become U+FFFD instead of failing the whole stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return every line it completes.

        Lines are returned without the ``\\n``; a trailing ``\\r`` is removed.
        """
        self._pending += self._decoder.decode(chunk)

        lines: list[str] = []
        while True:
            newline_idx = self._pending.find("\n")
            if newline_idx == -1:
                break

            line = self._pending[:newline_idx]
            self._pending = self._pending[newline_idx + 1 :]

            if line.endswith("\r"):
                line = line[:-1]
            lines.append(line)

        return lines

    @property
    def pending(self) -> str:
        """Text received after the last newline."""
        return self._pending


async def aiter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield complete lines from an async byte stream.

    Each call owns a fresh decoder. A trailing partial line without a newline
    is dropped at end of stream; errors from ``chunks`` propagate unchanged.
    """
    decoder = LineDecoder()
    async for chunk in chunks:
        for line in decoder.feed(chunk):
            yield line
