"""
LLM package: backend selection, stream framing, streaming proxy, prompt composition.
"""

from .backends import CompletionBackend, is_reasoning_model, select_backend
from .consumer import ReportAccumulator
from .framing import LineBuffer, extract_payload, parse_payload
from .prompt import build_messages, build_research_prompt, build_sources_table
from .streaming import (
    CompletionEvent,
    CompletionProxy,
    CompletionStream,
    event_from_payload,
    split_delta,
)

__all__ = [
    "CompletionBackend",
    "CompletionEvent",
    "CompletionProxy",
    "CompletionStream",
    "LineBuffer",
    "ReportAccumulator",
    "build_messages",
    "build_research_prompt",
    "build_sources_table",
    "event_from_payload",
    "extract_payload",
    "is_reasoning_model",
    "parse_payload",
    "select_backend",
    "split_delta",
]
