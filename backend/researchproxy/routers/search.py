"""Search routes: one POST endpoint per configured search provider."""

import logging

from fastapi import APIRouter, Depends

from ..config.constants import SEARCH_PROVIDER_CONFIG
from ..config.settings import Settings
from ..dependencies import get_aggregator
from ..schemas import ErrorResponse, SearchRequest
from ..search.aggregator import SearchAggregator
from ..search.factory import SearchProviderFactory

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or empty query"},
    404: {"model": ErrorResponse, "description": "Provider returned no results"},
    500: {"model": ErrorResponse, "description": "Provider failure"},
}


def _search_endpoint(provider_name: str):
    async def search(
        body: SearchRequest,
        aggregator: SearchAggregator = Depends(get_aggregator),
    ):
        response = await aggregator.handle(provider_name, body.query)
        return response.to_dict()

    search.__name__ = f"search_{provider_name}"
    return search


def build_search_router(app_settings: Settings) -> APIRouter:
    """
    Build the router for the providers that have credentials.

    Providers without a credential get no route at all, so a request for one
    is answered by the framework's 404 rather than a provider error.
    """
    router = APIRouter(tags=["Search"])
    for name in SearchProviderFactory.get_available_providers(app_settings):
        label = SEARCH_PROVIDER_CONFIG[name]["label"]
        router.add_api_route(
            f"/{name}",
            _search_endpoint(name),
            methods=["POST"],
            summary=f"Search with {label}",
            responses=ERROR_RESPONSES,
        )
        logger.debug(f"Registered search route /api/{name}")
    return router
