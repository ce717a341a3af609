"""
Search provider factory for creating search provider instances.

Providers register themselves in ``PROVIDER_REGISTRY`` by name; the factory
resolves a name to a configured instance. Adding a provider means adding one
registered class and one ``SEARCH_PROVIDER_CONFIG`` entry.
"""

import logging

import httpx

from ..config.constants import SEARCH_PROVIDER_CONFIG
from ..config.settings import Settings, settings
from ..config.validation import is_search_provider_configured
from ..exceptions import ConfigurationError, InputError
from .base import PROVIDER_REGISTRY, SearchProvider

# Imported for registration side effects
from . import bing, duckduckgo, mojeek, serper  # noqa: F401

logger = logging.getLogger(__name__)


class SearchProviderFactory:
    """Factory for creating search provider instances."""

    @staticmethod
    def get_provider(
        provider_name: str,
        app_settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> SearchProvider:
        """
        Get a search provider instance based on provider name.

        Args:
            provider_name: Registered provider name ("serper", "bing", ...)
            app_settings: Settings to read credentials from (defaults to the process settings)
            client: Optional HTTP client shared with the provider

        Returns:
            Configured SearchProvider instance

        Raises:
            InputError: If no provider is registered under that name
            ConfigurationError: If the provider's credential is not configured
        """
        app_settings = app_settings or settings

        provider_cls = PROVIDER_REGISTRY.get(provider_name)
        if provider_cls is None:
            logger.warning(f"Unknown search provider: {provider_name}")
            raise InputError(f"Unknown search provider: {provider_name}")

        if not is_search_provider_configured(provider_name, app_settings):
            logger.warning(f"API key not configured for provider: {provider_name}")
            raise ConfigurationError(f"Search provider '{provider_name}' is not configured")

        credential = SEARCH_PROVIDER_CONFIG[provider_name]["credential"]
        api_key = getattr(app_settings, credential) if credential else None
        timeout = app_settings.scraper_timeout if credential is None else app_settings.search_timeout

        return provider_cls(api_key=api_key, client=client, timeout=timeout)

    @staticmethod
    def get_available_providers(app_settings: Settings | None = None) -> list[str]:
        """
        Get list of provider names that can be served.

        Returns:
            Provider names in display order
        """
        app_settings = app_settings or settings
        return [
            name
            for name in SEARCH_PROVIDER_CONFIG
            if name in PROVIDER_REGISTRY and is_search_provider_configured(name, app_settings)
        ]
