"""
Incremental line framing for upstream completion streams.

Upstream bytes arrive in chunks that do not respect line boundaries. A
``LineBuffer`` accumulates decoded text and hands back only complete lines,
keeping the unterminated tail for the next chunk, so the sequence of lines is
the same however the byte stream was split.
"""

import codecs
import json
from typing import Any

from ..config.constants import DATA_PREFIX, DONE_SENTINEL, KEEPALIVE_SENTINEL
from ..exceptions import StreamParseError


class LineBuffer:
    """Stateful newline splitter owned by a single stream."""

    def __init__(self, encoding: str = "utf-8"):
        # Incremental decoding keeps multi-byte characters split across chunks intact
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last newline."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        """Append a chunk and return every line it completed, in order, without the newline."""
        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        if not text:
            return []
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        return lines

    def flush(self) -> str | None:
        """Return the unterminated remainder at end of stream, or None if it is blank."""
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return remainder if remainder.strip() else None


def extract_payload(line: str) -> str | None:
    """
    Return the JSON payload carried by one stream line.

    Blank lines, the ``data: [DONE]`` terminator, ``: keep-alive`` and other
    SSE comment lines carry no payload and yield None. A leading ``data:``
    field name is stripped.
    """
    stripped = line.strip()
    if not stripped or stripped in (DONE_SENTINEL, KEEPALIVE_SENTINEL):
        return None
    if stripped.startswith(":"):
        return None
    if stripped.startswith(DATA_PREFIX):
        stripped = stripped[len(DATA_PREFIX):].strip()
        if not stripped or stripped == "[DONE]":
            return None
    return stripped


def parse_payload(payload: str) -> dict[str, Any]:
    """Decode one payload into a JSON object, raising StreamParseError otherwise."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise StreamParseError(f"Malformed stream payload: {e}", payload) from e
    if not isinstance(data, dict):
        raise StreamParseError("Stream payload is not a JSON object", payload)
    return data
