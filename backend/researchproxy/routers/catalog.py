"""Catalog routes: which search providers and models this deployment can serve."""

from fastapi import APIRouter, Depends

from ..config.constants import MODEL_CATALOG, SEARCH_PROVIDER_CONFIG
from ..config.settings import Settings
from ..config.validation import is_backend_configured
from ..dependencies import get_settings
from ..llm.backends import select_backend
from ..schemas import ModelInfo, ProviderInfo
from ..search.factory import SearchProviderFactory

router = APIRouter(tags=["Catalog"])


@router.get("/providers", response_model=list[ProviderInfo])
async def list_providers(app_settings: Settings = Depends(get_settings)):
    return [
        ProviderInfo(name=name, label=SEARCH_PROVIDER_CONFIG[name]["label"], route=f"/api/{name}")
        for name in SearchProviderFactory.get_available_providers(app_settings)
    ]


@router.get("/models", response_model=list[ModelInfo])
async def list_models(app_settings: Settings = Depends(get_settings)):
    """List the known models and whether their backend has a credential."""
    models = []
    for entry in MODEL_CATALOG:
        backend = select_backend(entry["name"])
        models.append(
            ModelInfo(
                name=entry["name"],
                label=entry["label"],
                has_reasoning=entry["has_reasoning"],
                backend=backend.name,
                available=is_backend_configured(backend.name, app_settings),
            )
        )
    return models
