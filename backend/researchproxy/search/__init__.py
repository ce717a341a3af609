"""
Search provider abstraction layer.

This package provides a unified interface over the supported search backends
(Serper web/news/scholar, Bing, Mojeek, DuckDuckGo scraping) so the rest of the
application only deals with SearchResponse objects.
"""

from .aggregator import SearchAggregator
from .base import (
    PROVIDER_REGISTRY,
    Image,
    SearchProvider,
    SearchResponse,
    SearchResult,
    register_provider,
)
from .bing import BingSearchProvider
from .duckduckgo import DuckDuckGoScraperProvider
from .factory import SearchProviderFactory
from .mojeek import MojeekSearchProvider
from .serper import SerperNewsProvider, SerperScholarProvider, SerperSearchProvider

__all__ = [
    "Image",
    "SearchResult",
    "SearchResponse",
    "SearchProvider",
    "SearchProviderFactory",
    "SearchAggregator",
    "PROVIDER_REGISTRY",
    "register_provider",
    "BingSearchProvider",
    "DuckDuckGoScraperProvider",
    "MojeekSearchProvider",
    "SerperSearchProvider",
    "SerperNewsProvider",
    "SerperScholarProvider",
]
