"""
DuckDuckGo HTML scrape provider (keyless fallback).

Web results are parsed from the HTML-only endpoint with CSS selectors. Images
need a second, independent request sequence: the ``vqd`` session token is read
from the main search page and then passed to the image endpoint. The image
sequence is best-effort; when it fails the search still succeeds with no images.
"""

import asyncio
import logging
import re

import httpx
from bs4 import BeautifulSoup  # type: ignore[import-untyped]

from ..config.constants import (
    BROWSER_HEADERS,
    DUCKDUCKGO_HOME_URL,
    DUCKDUCKGO_IMAGES_URL,
    DUCKDUCKGO_MAX_IMAGES,
    UNTITLED,
)
from ..exceptions import UpstreamError
from .base import Image, SearchProvider, SearchResponse, SearchResult, absolute_url, register_provider
from .schemas import DuckDuckGoImagesPayload

logger = logging.getLogger(__name__)

_VQD_PATTERNS = (
    re.compile(r"""vqd=["']([^"']+)["']"""),
    re.compile(r"vqd=([\d-]+)&"),
)


def parse_result_page(html: str) -> list[SearchResult]:
    """Extract results from a DuckDuckGo HTML results page."""
    soup = BeautifulSoup(html, "html.parser")
    results = []

    for element in soup.select(".result"):
        title_el = element.select_one(".result__title")
        link_el = element.select_one(".result__url")
        snippet_el = element.select_one(".result__snippet")

        title = title_el.get_text(" ", strip=True) if title_el else ""
        link = link_el.get_text(strip=True) if link_el else ""
        snippet = snippet_el.get_text(" ", strip=True) if snippet_el else ""

        url = absolute_url(link)
        if url is None:
            # Nothing to cite without a link
            continue

        results.append(
            SearchResult(
                title=title or UNTITLED,
                content=snippet or title,
                url=url,
            )
        )

    return results


def extract_vqd_token(html: str) -> str | None:
    """Find the image-search session token embedded in the search page scripts."""
    for pattern in _VQD_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1)
    return None


@register_provider
class DuckDuckGoScraperProvider(SearchProvider):
    """DuckDuckGo via HTML scraping, no credential required."""

    name = "scraper"

    def is_available(self) -> bool:
        # Gated by ENABLE_DUCKDUCKGO in the factory instead of a key
        return True

    async def _search(self, query: str) -> SearchResponse:
        async with self._session() as client:
            results, images = await asyncio.gather(
                self._fetch_results(client, query),
                self._fetch_images(client, query),
            )
        logger.info(f"DuckDuckGo found {len(results)} results and {len(images)} images")
        return SearchResponse(results=results, images=images)

    async def _fetch_results(self, client: httpx.AsyncClient, query: str) -> list[SearchResult]:
        response = await self._request(
            client,
            "GET",
            self.config["endpoint"],
            params={"q": query},
            headers=BROWSER_HEADERS,
            timeout=self.timeout,
        )
        return parse_result_page(response.text)

    async def _fetch_images(self, client: httpx.AsyncClient, query: str) -> list[Image]:
        try:
            page = await self._request(
                client, "GET", DUCKDUCKGO_HOME_URL, params={"q": query}, headers=BROWSER_HEADERS
            )
            vqd = extract_vqd_token(page.text)
            if not vqd:
                logger.warning("Could not find DuckDuckGo vqd token; continuing without images")
                return []

            response = await self._request(
                client,
                "GET",
                DUCKDUCKGO_IMAGES_URL,
                params={"q": query, "vqd": vqd, "f": ",,,", "p": "1"},
                headers={**BROWSER_HEADERS, "Accept": "application/json", "Referer": DUCKDUCKGO_HOME_URL},
                timeout=self.timeout,
            )
            payload = self._parse(response, DuckDuckGoImagesPayload)
        except UpstreamError as e:
            logger.warning(f"DuckDuckGo image search failed, continuing without images: {e}")
            return []

        images = []
        for item in payload.results[:DUCKDUCKGO_MAX_IMAGES]:
            image_url = item.image or item.thumbnail
            if image_url and item.title:
                images.append(Image(url=image_url, description=item.title))
        return images
