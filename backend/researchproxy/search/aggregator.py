"""
Search aggregation: dispatch a query to exactly one provider and normalize the output.
"""

import asyncio
import logging

import httpx

from ..config.settings import Settings, settings
from ..exceptions import EmptyResultError, UpstreamError
from .base import SearchResponse, require_query
from .factory import SearchProviderFactory

logger = logging.getLogger(__name__)


class SearchAggregator:
    """Runs one provider per request and surfaces the uniform error taxonomy."""

    def __init__(self, app_settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = app_settings or settings
        self._client = client

    async def handle(self, provider_name: str, query: str) -> SearchResponse:
        """
        Search ``query`` with the provider registered as ``provider_name``.

        Result and image lists are merged by index, so ``results[i].image``
        falls back to ``images[i]`` when the provider did not pair them itself.

        Raises:
            InputError: Empty query or unknown provider (checked before any request)
            ConfigurationError: Provider credential missing
            EmptyResultError: Provider succeeded with no usable results
            UpstreamError: Provider failure
        """
        query = require_query(query)
        provider = SearchProviderFactory.get_provider(provider_name, self.settings, self._client)

        logger.info(f"Searching {provider_name} for '{query[:50]}'")
        try:
            response = await provider.search(query)
        except asyncio.CancelledError:
            logger.info(f"Search on {provider_name} was aborted by the caller")
            raise
        except EmptyResultError:
            logger.info(f"No results from {provider_name} for '{query[:50]}'")
            raise
        except UpstreamError as e:
            logger.error(f"{provider_name} search failed (status={e.status_code}): {e}")
            raise

        response = response.with_aligned_images()
        logger.info(
            f"{provider_name} returned {len(response.results)} results and {len(response.images)} images"
        )
        return response
