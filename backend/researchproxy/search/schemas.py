"""
Expected upstream payload shapes for each search provider.

Adapters validate every JSON body against these models before mapping it, so a
provider that changes its response format fails with UpstreamError instead of
leaking half-populated results. Unknown fields are ignored; only the fields an
adapter actually depends on are declared.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ============================================================================
# Serper (web, news, scholar, images)
# ============================================================================


class SerperItem(UpstreamModel):
    title: str | None = None
    link: str | None = None
    snippet: str | None = None
    description: str | None = None
    date: str | None = None
    publicationDate: str | None = None
    source: str | None = None
    citations: Any = None
    authors: Any = None


class SerperAnswerBox(UpstreamModel):
    answer: str | None = None
    snippet: str | None = None


class SerperKnowledgeGraph(UpstreamModel):
    description: str | None = None


class SerperWebPayload(UpstreamModel):
    organic: list[SerperItem]
    answerBox: SerperAnswerBox | None = None
    knowledgeGraph: SerperKnowledgeGraph | None = None


class SerperNewsPayload(UpstreamModel):
    news: list[SerperItem]


class SerperScholarPayload(UpstreamModel):
    organic: list[SerperItem]


class SerperImage(UpstreamModel):
    imageUrl: str | None = None
    title: str | None = None


class SerperImagesPayload(UpstreamModel):
    images: list[SerperImage] = []


# ============================================================================
# Bing (web, images, videos)
# ============================================================================


class BingWebPage(UpstreamModel):
    name: str | None = None
    snippet: str | None = None
    url: str | None = None


class BingWebPages(UpstreamModel):
    value: list[BingWebPage] = []


class BingWebPayload(UpstreamModel):
    # Bing omits webPages entirely when the query has no web hits
    webPages: BingWebPages | None = None


class BingImage(UpstreamModel):
    name: str | None = None
    thumbnailUrl: str | None = None


class BingImagesPayload(UpstreamModel):
    value: list[BingImage]


class BingVideo(UpstreamModel):
    name: str | None = None
    description: str | None = None
    thumbnailUrl: str | None = None
    motionThumbnailUrl: str | None = None
    contentUrl: str | None = None
    hostPageUrl: str | None = None


class BingVideosPayload(UpstreamModel):
    value: list[BingVideo]


# ============================================================================
# Mojeek
# ============================================================================


class MojeekImage(UpstreamModel):
    url: str | None = None


class MojeekResult(UpstreamModel):
    title: str | None = None
    desc: str | None = None
    url: str | None = None
    image: MojeekImage | None = None


class MojeekBody(UpstreamModel):
    status: str | None = None
    # Checked by the adapter after the status, since error bodies carry no results
    results: list[MojeekResult] | None = None


class MojeekPayload(UpstreamModel):
    response: MojeekBody


# ============================================================================
# DuckDuckGo image endpoint
# ============================================================================


class DuckDuckGoImage(UpstreamModel):
    title: str | None = None
    image: str | None = None
    thumbnail: str | None = None
    url: str | None = None


class DuckDuckGoImagesPayload(UpstreamModel):
    results: list[DuckDuckGoImage]
