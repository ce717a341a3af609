"""
Application constants and configuration values.

This module contains the static provider tables:
- Search provider endpoints and fixed query parameters
- Chat-completion backends and the model catalog
- Stream framing sentinels

All constants should be imported from this module to maintain a single source of truth.
"""

from ..types import CompletionBackendDict, ModelInfoDict, ProviderConfigDict


# ============================================================================
# Search Providers
# ============================================================================
# Fixed locale and page size shared by every Serper endpoint

SERPER_BASE_PARAMS = {"num": 10, "gl": "us", "hl": "en"}
SERPER_IMAGES_URL = "https://google.serper.dev/images"

SEARCH_PROVIDER_CONFIG: dict[str, ProviderConfigDict] = {
    "scraper": {
        "label": "Go Quack",
        "endpoint": "https://html.duckduckgo.com/html/",
        "credential": None,
        "params": {},
    },
    "serper": {
        "label": "Googler",
        "endpoint": "https://google.serper.dev/search",
        "credential": "serper_api_key",
        "params": SERPER_BASE_PARAMS,
    },
    "gnews": {
        "label": "GNews",
        "endpoint": "https://google.serper.dev/news",
        "credential": "serper_api_key",
        "params": SERPER_BASE_PARAMS,
    },
    "gbrains": {
        "label": "GBrains",
        "endpoint": "https://google.serper.dev/scholar",
        "credential": "serper_api_key",
        "params": SERPER_BASE_PARAMS,
    },
    "bing": {
        "label": "Binger",
        "endpoint": "https://api.bing.microsoft.com/v7.0/search",
        "credential": "bing_api_key",
        "params": {"count": 5},
    },
    "mojeek": {
        "label": "Jeeker",
        "endpoint": "https://api.mojeek.com/search",
        "credential": "mojeek_api_key",
        "params": {"t": 20, "fmt": "json"},
    },
}

BING_IMAGE_URL = "https://api.bing.microsoft.com/v7.0/images/search"
BING_VIDEO_URL = "https://api.bing.microsoft.com/v7.0/videos/search"
BING_VIDEO_PARAMS = {"count": 5, "pricing": "Free", "embedded": "player"}

DUCKDUCKGO_HOME_URL = "https://duckduckgo.com/"
DUCKDUCKGO_IMAGES_URL = "https://duckduckgo.com/i.js"
DUCKDUCKGO_MAX_IMAGES = 10

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

UNTITLED = "Untitled"
MOJEEK_IMAGE_DESCRIPTION = "Search result image"


# ============================================================================
# Chat Completion Backends
# ============================================================================

COMPLETION_BACKENDS: dict[str, CompletionBackendDict] = {
    "openai": {
        "label": "OpenAI",
        "url": "https://api.openai.com/v1/chat/completions",
        "credential": "openai_api_key",
        "extra_params": {},
    },
    "groq": {
        "label": "Groq",
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "credential": "groq_api_key",
        "extra_params": {"max_tokens": 8000},
    },
    "deepseek": {
        "label": "DeepSeek",
        "url": "https://api.deepseek.com/chat/completions",
        "credential": "deepseek_api_key",
        "extra_params": {},
    },
}

DEFAULT_MODEL = "deepseek-reasoner"
COMPLETION_TEMPERATURE = 0.7

MODEL_CATALOG: list[ModelInfoDict] = [
    {"name": "deepseek-chat", "label": "DpSk Chat", "has_reasoning": False},
    {"name": "deepseek-reasoner", "label": "DpSk Reasoner", "has_reasoning": True},
    {"name": "gpt-4o-mini", "label": "GPT 4o Mini", "has_reasoning": False},
    {"name": "deepseek-r1-distill-llama-70b", "label": "Groq Reasoner", "has_reasoning": True},
]

REASONING_MODELS = frozenset(m["name"] for m in MODEL_CATALOG if m["has_reasoning"])


# ============================================================================
# Stream Framing
# ============================================================================

DONE_SENTINEL = "data: [DONE]"
KEEPALIVE_SENTINEL = ": keep-alive"
DATA_PREFIX = "data:"
THINK_OPEN = "<think>"
THINK_CLOSE = "</think>"
