"""
Backend configuration module.

This module provides a centralized configuration system with:
- Settings: Environment-based configuration using Pydantic Settings v2
- Constants: Provider endpoints, completion backends, stream sentinels
- Validation: Startup credential checks and configuration logging

Example:
    from researchproxy.config import settings, validate_config
"""

from .constants import (
    COMPLETION_BACKENDS,
    DEFAULT_MODEL,
    MODEL_CATALOG,
    REASONING_MODELS,
    SEARCH_PROVIDER_CONFIG,
)
from .settings import Settings, settings
from .validation import (
    ConfigReport,
    is_backend_configured,
    is_search_provider_configured,
    log_configuration,
    mask_secret,
    validate_config,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Constants
    "COMPLETION_BACKENDS",
    "DEFAULT_MODEL",
    "MODEL_CATALOG",
    "REASONING_MODELS",
    "SEARCH_PROVIDER_CONFIG",
    # Validation
    "ConfigReport",
    "is_backend_configured",
    "is_search_provider_configured",
    "log_configuration",
    "mask_secret",
    "validate_config",
]
