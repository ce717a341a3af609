"""
Mojeek Search API provider implementation.
"""

import logging

from ..config.constants import MOJEEK_IMAGE_DESCRIPTION, UNTITLED
from ..exceptions import UpstreamError
from .base import Image, SearchProvider, SearchResponse, SearchResult, absolute_url, register_provider
from .schemas import MojeekPayload

logger = logging.getLogger(__name__)


@register_provider
class MojeekSearchProvider(SearchProvider):
    """Mojeek independent web index."""

    name = "mojeek"

    async def _search(self, query: str) -> SearchResponse:
        params = {"api_key": self.api_key or "", "q": query, **self.config["params"]}

        async with self._session() as client:
            response = await self._request(
                client, "GET", self.config["endpoint"], params=params, headers={"Accept": "application/json"}
            )

        # The raw body is never logged: it echoes the request, API key included
        body = self._parse(response, MojeekPayload).response

        if body.status and "access denied" in body.status.lower():
            logger.error(f"Mojeek refused the request: {body.status}")
            raise UpstreamError("Search service temporarily unavailable", provider=self.name)

        if body.results is None:
            logger.error("Mojeek response has no results array")
            raise UpstreamError(f"Invalid response format from {self.label} API", provider=self.name)

        results = []
        for item in body.results:
            url = absolute_url(item.url)
            if url is None:
                continue
            image = None
            if item.image and item.image.url:
                image = Image(url=item.image.url, description=item.title or MOJEEK_IMAGE_DESCRIPTION)
            results.append(
                SearchResult(
                    title=item.title or UNTITLED,
                    content=item.desc or "",
                    url=url,
                    snippet=item.desc or "",
                    image=image,
                )
            )

        images = [r.image for r in results if r.image is not None]
        return SearchResponse(results=results, images=images)
