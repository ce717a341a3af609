"""
Pydantic request/response models for the HTTP surface.
"""

from pydantic import BaseModel, ConfigDict, Field

from .config.constants import DEFAULT_MODEL
from .types import MessageRole


class ChatMessage(BaseModel):
    role: MessageRole
    content: str

    model_config = ConfigDict(
        json_schema_extra={"example": {"role": "user", "content": "capital of France"}}
    )


class SearchRequest(BaseModel):
    # Optional so a missing query is reported as an input error, not a schema error
    query: str | None = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"query": "capital of France"}},
    )


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
    model: str = DEFAULT_MODEL

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "messages": [{"role": "user", "content": "Summarize the research data"}],
                "model": "gpt-4o-mini",
            }
        }
    )


class ErrorResponse(BaseModel):
    error: str


class ProviderInfo(BaseModel):
    name: str
    label: str
    route: str


class ModelInfo(BaseModel):
    name: str
    label: str
    has_reasoning: bool
    backend: str
    available: bool
