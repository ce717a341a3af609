"""
Client-side consumption of the normalized completion stream.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from ..config.constants import THINK_OPEN
from .streaming import CompletionEvent

logger = logging.getLogger(__name__)

_THINK_TAGS = re.compile(r"</?think>")


@dataclass
class ReportAccumulator:
    """Accumulates report content and reasoning from normalized stream output."""

    content: str = ""
    raw_reasoning: str = ""
    events: int = 0
    skipped_lines: int = field(default=0, repr=False)

    @property
    def reasoning(self) -> str:
        """Reasoning text with the ``<think>`` markers removed."""
        return _THINK_TAGS.sub("", self.raw_reasoning)

    def add_event(self, event: CompletionEvent) -> None:
        self.events += 1
        if event.reasoning_delta:
            self.raw_reasoning += event.reasoning_delta
        elif event.content_delta and not event.content_delta.startswith(THINK_OPEN):
            self.content += event.content_delta

    def feed_line(self, line: str) -> None:
        """Consume one newline-delimited JSON line from the completion route."""
        if not line.strip():
            return
        try:
            parsed = json.loads(line)
            delta = parsed["choices"][0]["delta"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            self.skipped_lines += 1
            logger.debug(f"Error parsing chunk: {e}")
            return
        self.add_event(
            CompletionEvent(
                id=str(parsed.get("id") or ""),
                content_delta=delta.get("content") or "",
                reasoning_delta=delta.get("reasoning_content") or "",
            )
        )
