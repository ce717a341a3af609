"""
FastAPI dependencies for per-request services.

Each request gets its own aggregator and proxy; only the read-only settings
object is shared across requests.
"""

from fastapi import Request

from .config.settings import Settings
from .llm.streaming import CompletionProxy
from .search.aggregator import SearchAggregator


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_aggregator(request: Request) -> SearchAggregator:
    return SearchAggregator(get_settings(request))


def get_completion_proxy(request: Request) -> CompletionProxy:
    return CompletionProxy(get_settings(request))
