"""
Chat-completion backend selection.
"""

from dataclasses import dataclass, field
from typing import Any

from ..config.constants import COMPLETION_BACKENDS, REASONING_MODELS
from ..config.settings import Settings
from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class CompletionBackend:
    """One upstream chat-completion API."""

    name: str
    label: str
    url: str
    credential: str
    extra_params: dict[str, Any] = field(default_factory=dict)

    def api_key(self, app_settings: Settings) -> str:
        """Return the backend credential or raise ConfigurationError if it is absent."""
        key = getattr(app_settings, self.credential, None)
        if not key:
            raise ConfigurationError(f"API key not found for {self.label}")
        return key


def get_backend(name: str) -> CompletionBackend:
    config = COMPLETION_BACKENDS[name]
    return CompletionBackend(
        name=name,
        label=config["label"],
        url=config["url"],
        credential=config["credential"],
        extra_params=dict(config["extra_params"]),
    )


def select_backend(model_name: str) -> CompletionBackend:
    """
    Pick the backend serving ``model_name``.

    Pure function of the model identifier: ``gpt-`` models go to OpenAI,
    R1 distillations go to Groq, everything else to DeepSeek.
    """
    if model_name.startswith("gpt-"):
        return get_backend("openai")
    if "deepseek-r1" in model_name:
        return get_backend("groq")
    return get_backend("deepseek")


def is_reasoning_model(model_name: str) -> bool:
    """Return True if the model streams ``<think>`` reasoning alongside its answer."""
    return model_name in REASONING_MODELS
