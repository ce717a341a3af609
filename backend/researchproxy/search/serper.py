"""
Serper (Google) search provider implementations.

Serper exposes web, news and scholar endpoints with the same request body.
Each variant issues its text query and an image query concurrently and pairs
the two lists by index.
"""

import asyncio
import logging
from typing import Any, ClassVar

from pydantic import BaseModel

from ..config.constants import SERPER_IMAGES_URL, UNTITLED
from .base import (
    Image,
    SearchProvider,
    SearchResponse,
    SearchResult,
    absolute_url,
    align_images,
    register_provider,
)
from .schemas import (
    SerperImagesPayload,
    SerperItem,
    SerperNewsPayload,
    SerperScholarPayload,
    SerperWebPayload,
)

logger = logging.getLogger(__name__)


class SerperProvider(SearchProvider):
    """Shared request/normalization logic for the Serper endpoints."""

    payload_model: ClassVar[type[BaseModel]]
    results_field: ClassVar[str]

    async def _search(self, query: str) -> SearchResponse:
        headers = {"X-API-KEY": self.api_key or "", "Content-Type": "application/json"}
        body = {"q": query, **self.config["params"]}

        async with self._session() as client:
            text_response, image_response = await asyncio.gather(
                self._request(client, "POST", self.config["endpoint"], json=body, headers=headers),
                self._request(client, "POST", SERPER_IMAGES_URL, json=body, headers=headers),
            )

        payload = self._parse(text_response, self.payload_model)
        image_payload = self._parse(image_response, SerperImagesPayload)

        results = []
        for item in getattr(payload, self.results_field):
            result = self._to_result(item)
            if result is None:
                logger.debug(f"Skipping {self.label} result without a link: {item.title}")
                continue
            results.append(result)

        images = [
            Image(url=image.imageUrl, description=image.title or "")
            for image in image_payload.images
            if image.imageUrl
        ]

        return SearchResponse(
            results=align_images(results, images),
            images=images,
            answer=self._answer(payload),
        )

    def _to_result(self, item: SerperItem) -> SearchResult | None:
        url = absolute_url(item.link)
        if url is None:
            return None
        text = item.snippet or item.description or ""
        return SearchResult(
            title=item.title or UNTITLED,
            content=text,
            url=url,
            snippet=text,
            **self._extras(item),
        )

    def _extras(self, item: SerperItem) -> dict[str, Any]:
        """Provider-specific metadata copied onto the result."""
        return {}

    def _answer(self, payload: Any) -> str | None:
        return None


@register_provider
class SerperSearchProvider(SerperProvider):
    """Google web search via Serper, including the answer box."""

    name = "serper"
    payload_model = SerperWebPayload
    results_field = "organic"

    def _answer(self, payload: SerperWebPayload) -> str | None:
        answer_box = payload.answerBox
        knowledge_graph = payload.knowledgeGraph
        answer = (
            (answer_box.answer if answer_box else None)
            or (knowledge_graph.description if knowledge_graph else None)
            or (answer_box.snippet if answer_box else None)
        )
        return answer or None


@register_provider
class SerperNewsProvider(SerperProvider):
    """Google News via Serper."""

    name = "gnews"
    payload_model = SerperNewsPayload
    results_field = "news"

    def _extras(self, item: SerperItem) -> dict[str, Any]:
        return {"date": item.date or "", "source": item.source or ""}


@register_provider
class SerperScholarProvider(SerperProvider):
    """Google Scholar via Serper."""

    name = "gbrains"
    payload_model = SerperScholarPayload
    results_field = "organic"

    def _extras(self, item: SerperItem) -> dict[str, Any]:
        return {
            "date": item.publicationDate or "",
            "source": item.source or "",
            "citations": _as_int(item.citations),
            "authors": _as_names(item.authors),
        }


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_names(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    names = []
    for author in value:
        if isinstance(author, dict):
            author = author.get("name")
        if author:
            names.append(str(author))
    return tuple(names)
