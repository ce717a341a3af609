"""
Base classes and interfaces for search providers.

This module defines the common result shapes every adapter produces, the
abstract base class all search providers implement, and the registry that maps
a provider name onto its adapter class.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..config.constants import SEARCH_PROVIDER_CONFIG
from ..exceptions import EmptyResultError, InputError, UpstreamError
from ..types import ImageDict, ProviderConfigDict, SearchResponseDict, SearchResultDict
from ..utils.error_handling import extract_error_message

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", bound=BaseModel)


@dataclass(frozen=True)
class Image:
    """An image that can be embedded in the report."""

    url: str
    description: str = ""

    def to_dict(self) -> ImageDict:
        return {"url": self.url, "description": self.description}


@dataclass(frozen=True)
class SearchResult:
    """Represents a single search result."""

    title: str
    content: str
    url: str
    snippet: str | None = None
    image: Image | None = None
    # Optional metadata carried by the news and scholar providers
    date: str | None = None
    source: str | None = None
    citations: int | None = None
    authors: tuple[str, ...] | None = None

    def to_dict(self) -> SearchResultDict:
        data: dict[str, Any] = {"title": self.title, "content": self.content, "url": self.url}
        if self.snippet is not None:
            data["snippet"] = self.snippet
        if self.image is not None:
            data["image"] = self.image.to_dict()
        for key in ("date", "source", "citations"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.authors is not None:
            data["authors"] = list(self.authors)
        return data  # type: ignore[return-value]


@dataclass(frozen=True)
class SearchResponse:
    """Aggregate returned by a provider: results, images and an optional direct answer."""

    results: list[SearchResult] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    answer: str | None = None

    def with_aligned_images(self) -> "SearchResponse":
        """Return a copy where results lacking an image borrow ``images[i]``."""
        return replace(self, results=align_images(self.results, self.images))

    def to_dict(self) -> SearchResponseDict:
        data: SearchResponseDict = {
            "results": [r.to_dict() for r in self.results],
            "images": [i.to_dict() for i in self.images],
        }
        if self.answer:
            data["answer"] = self.answer
        return data


def align_images(results: list[SearchResult], images: list[Image]) -> list[SearchResult]:
    """
    Attach images to results by positional index.

    The alignment is best-effort: providers query web results and images
    independently, so ``images[i]`` is not guaranteed to depict ``results[i]``.
    Results that already carry an image keep it.
    """
    aligned = []
    for index, result in enumerate(results):
        if result.image is None and index < len(images):
            result = replace(result, image=images[index])
        aligned.append(result)
    return aligned


def require_query(query: str | None) -> str:
    """Return the stripped query or raise InputError when it is missing or blank."""
    if not isinstance(query, str) or not query.strip():
        raise InputError("Query parameter is required")
    return query.strip()


def absolute_url(link: str | None) -> str | None:
    """Normalize a provider link to an absolute URL, or None when it is unusable."""
    if not link or not link.strip():
        return None
    link = link.strip()
    if link.startswith(("http://", "https://")):
        return link
    if link.startswith("//"):
        return f"https:{link}"
    return f"https://{link}"


class SearchProvider(ABC):
    """Abstract base class for search providers."""

    # Registry key, also the HTTP route name
    name: ClassVar[str] = ""

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the provider.

        Args:
            api_key: Provider credential (None for keyless providers)
            client: Optional shared HTTP client; a fresh one is created per search otherwise
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    @property
    def config(self) -> ProviderConfigDict:
        return SEARCH_PROVIDER_CONFIG[self.name]

    @property
    def label(self) -> str:
        return self.config["label"]

    async def search(self, query: str) -> SearchResponse:
        """
        Perform a search query.

        Args:
            query: The search query string

        Returns:
            SearchResponse with at least one result

        Raises:
            InputError: If the query is empty (no request is sent)
            UpstreamError: If the upstream fails or returns an unexpected shape
            EmptyResultError: If the upstream succeeded with zero usable results
        """
        query = require_query(query)
        if not self.is_available():
            raise UpstreamError(f"{self.label} API key is not configured", provider=self.name)

        response = await self._search(query)

        if not response.results:
            logger.info(f"{self.label} returned no usable results for query '{query[:50]}'")
            raise EmptyResultError()
        return response

    @abstractmethod
    async def _search(self, query: str) -> SearchResponse:
        """Issue the upstream request(s) and normalize the payload."""
        pass

    def is_available(self) -> bool:
        """Check if the provider is available (API key configured, etc.)."""
        return bool(self.api_key)

    def get_provider_name(self) -> str:
        """Get the name of this provider."""
        return self.name

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a fresh one closed on exit."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            yield client

    async def _request(
        self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one request and raise UpstreamError for network failures or non-success status."""
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{self.label} request timed out: {e}")
            raise UpstreamError(f"{self.label} request timed out", provider=self.name) from e
        except httpx.RequestError as e:
            logger.error(f"{self.label} request error: {e}")
            raise UpstreamError(
                f"Failed to connect to {self.label} API: {str(e)}", provider=self.name
            ) from e

        if not response.is_success:
            detail = extract_error_message(response)
            logger.error(f"{self.label} API error: {response.status_code} - {detail or response.reason_phrase}")
            message = f"{self.label} API error: {response.status_code}"
            if detail:
                message = f"{message} - {detail}"
            raise UpstreamError(message, provider=self.name, status_code=response.status_code)
        return response

    def _parse(self, response: httpx.Response, model: type[PayloadT]) -> PayloadT:
        """Validate a JSON body against the expected upstream shape."""
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{self.label} returned a non-JSON body")
            raise UpstreamError(f"Failed to process {self.label} response", provider=self.name) from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid {self.label} response format: {e.error_count()} error(s): {e.errors()[:3]}")
            raise UpstreamError(
                f"Invalid response format from {self.label} API", provider=self.name
            ) from e


PROVIDER_REGISTRY: dict[str, type[SearchProvider]] = {}


def register_provider(cls: type[SearchProvider]) -> type[SearchProvider]:
    """Class decorator adding a provider variant to the registry under ``cls.name``."""
    if cls.name not in SEARCH_PROVIDER_CONFIG:
        raise ValueError(f"No provider configuration for '{cls.name}'")
    PROVIDER_REGISTRY[cls.name] = cls
    return cls
