"""
Custom types for the research proxy backend.

This module defines TypedDict types for configuration tables and for the
JSON shapes exchanged with the browser.
"""

from typing import Any, Literal, Optional, TypedDict


# ============================================================================
# Configuration Structures
# ============================================================================

BackendName = Literal["openai", "groq", "deepseek"]
MessageRole = Literal["system", "user", "assistant"]


class ProviderConfigDict(TypedDict):
    """Static upstream configuration for one search provider."""
    label: str
    endpoint: str
    credential: Optional[str]  # Settings attribute holding the API key, None if keyless
    params: dict[str, Any]


class CompletionBackendDict(TypedDict):
    """Static upstream configuration for one chat-completion backend."""
    label: str
    url: str
    credential: str  # Settings attribute holding the API key
    extra_params: dict[str, Any]


class ModelInfoDict(TypedDict):
    """Entry of the selectable model catalog."""
    name: str
    label: str
    has_reasoning: bool


# ============================================================================
# Wire Shapes
# ============================================================================


class ImageDict(TypedDict):
    url: str
    description: str


class SearchResultDict(TypedDict, total=False):
    title: str
    content: str
    url: str
    snippet: str
    image: ImageDict
    date: str
    source: str
    citations: int
    authors: list[str]


class SearchResponseDict(TypedDict, total=False):
    results: list[SearchResultDict]
    images: list[ImageDict]
    answer: str


class DeltaDict(TypedDict, total=False):
    content: str
    reasoning_content: str


class ChoiceDict(TypedDict):
    delta: DeltaDict


class CompletionChunkDict(TypedDict):
    """One line of the normalized completion stream."""
    id: str
    choices: list[ChoiceDict]
