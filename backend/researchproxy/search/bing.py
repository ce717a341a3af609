"""
Bing Search API provider implementation.

Web, image and video searches are issued concurrently. Web results borrow the
image at the same index; videos carry their own thumbnail and are dropped when
they have none, since a video without a thumbnail cannot be rendered.
"""

import asyncio
import logging

from ..config.constants import BING_IMAGE_URL, BING_VIDEO_PARAMS, BING_VIDEO_URL, UNTITLED
from .base import Image, SearchProvider, SearchResponse, SearchResult, absolute_url, register_provider
from .schemas import BingImagesPayload, BingVideo, BingVideosPayload, BingWebPayload

logger = logging.getLogger(__name__)


@register_provider
class BingSearchProvider(SearchProvider):
    """Bing web + image + video search."""

    name = "bing"

    async def _search(self, query: str) -> SearchResponse:
        headers = {"Ocp-Apim-Subscription-Key": self.api_key or "", "Accept": "application/json"}
        params = {"q": query, **self.config["params"]}

        async with self._session() as client:
            web_response, image_response, video_response = await asyncio.gather(
                self._request(client, "GET", self.config["endpoint"], params=params, headers=headers),
                self._request(client, "GET", BING_IMAGE_URL, params=params, headers=headers),
                self._request(
                    client, "GET", BING_VIDEO_URL, params={"q": query, **BING_VIDEO_PARAMS}, headers=headers
                ),
            )

        web = self._parse(web_response, BingWebPayload)
        image_values = self._parse(image_response, BingImagesPayload).value
        videos = self._parse(video_response, BingVideosPayload).value

        web_results = []
        pages = web.webPages.value if web.webPages else []
        for index, page in enumerate(pages):
            url = absolute_url(page.url)
            if url is None:
                continue
            image = None
            if index < len(image_values) and image_values[index].thumbnailUrl:
                image = Image(
                    url=image_values[index].thumbnailUrl,
                    description=image_values[index].name or "",
                )
            web_results.append(
                SearchResult(
                    title=page.name or UNTITLED,
                    content=page.snippet or "",
                    url=url,
                    snippet=page.snippet or "",
                    image=image,
                )
            )

        video_results = [r for r in (self._video_result(v) for v in videos) if r is not None]
        logger.debug(
            f"Bing returned {len(web_results)} web and {len(video_results)} usable video results "
            f"({len(videos) - len(video_results)} videos skipped)"
        )

        results = web_results + video_results
        images = [r.image for r in results if r.image is not None]
        return SearchResponse(results=results, images=images)

    def _video_result(self, video: BingVideo) -> SearchResult | None:
        """Map one video, or None when it has no thumbnail or link."""
        thumbnail_url = video.thumbnailUrl or video.motionThumbnailUrl
        if not thumbnail_url:
            logger.debug(f"Skipping video due to missing thumbnail: {video.name}")
            return None

        url = absolute_url(video.contentUrl or video.hostPageUrl)
        if url is None:
            logger.debug(f"Skipping video without a link: {video.name}")
            return None

        title = video.name or UNTITLED
        content = video.description or video.name or ""
        return SearchResult(
            title=title,
            content=content,
            url=url,
            snippet=content,
            image=Image(url=thumbnail_url, description=video.name or ""),
        )
