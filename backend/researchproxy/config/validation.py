"""
Configuration validation functions.

The startup pass inspects every provider's credential and reports which routes
can be served. A missing search credential only disables that provider's route;
the process refuses to start only when no completion backend is usable at all.
"""

import logging
from dataclasses import dataclass, field

from ..exceptions import ConfigurationError
from .constants import COMPLETION_BACKENDS, SEARCH_PROVIDER_CONFIG
from .settings import Settings

# Setup logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigReport:
    """Outcome of the startup validation pass."""

    search_providers: tuple[str, ...]
    completion_backends: tuple[str, ...]
    missing_credentials: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def completion_available(self) -> bool:
        return bool(self.completion_backends)


def is_search_provider_configured(name: str, settings: Settings) -> bool:
    """Return True if the named search provider can be served with these settings."""
    config = SEARCH_PROVIDER_CONFIG.get(name)
    if config is None:
        return False
    if config["credential"] is None:
        # Keyless scrape fallback is opt-in
        return settings.enable_duckduckgo
    return bool(getattr(settings, config["credential"], None))


def is_backend_configured(name: str, settings: Settings) -> bool:
    """Return True if the named completion backend has a credential."""
    backend = COMPLETION_BACKENDS.get(name)
    if backend is None:
        return False
    return bool(getattr(settings, backend["credential"], None))


def validate_config(settings: Settings, strict: bool = False) -> ConfigReport:
    """
    Validate configuration on startup.

    Args:
        settings: Settings instance to inspect
        strict: If True, raise ConfigurationError when no completion backend
            credential is present

    Returns:
        ConfigReport listing the servable providers and missing credentials

    Raises:
        ConfigurationError: In strict mode, if no completion backend is usable
    """
    missing: list[str] = []
    warnings: list[str] = []

    search_providers = []
    for name, config in SEARCH_PROVIDER_CONFIG.items():
        if is_search_provider_configured(name, settings):
            search_providers.append(name)
        elif config["credential"] is not None:
            env_name = config["credential"].upper()
            if env_name not in missing:
                missing.append(env_name)

    completion_backends = []
    for name, backend in COMPLETION_BACKENDS.items():
        if is_backend_configured(name, settings):
            completion_backends.append(name)
        else:
            missing.append(backend["credential"].upper())

    if not search_providers:
        warnings.append("No search provider is configured; every search route is disabled")

    if settings.completion_timeout < 1:
        warnings.append("completion_timeout must be at least 1 second; using 1")
    elif settings.completion_timeout > 600:
        warnings.append(
            f"completion_timeout is very high ({settings.completion_timeout}s). "
            "This may cause long-running requests."
        )

    if not settings.frontend_url.startswith(("http://", "https://")):
        warnings.append(
            f"FRONTEND_URL should start with http:// or https://. Got: {settings.frontend_url}"
        )

    for env_name in missing:
        logger.warning(f"Configuration warning: {env_name} is not set; dependent routes are disabled")
    for warning in warnings:
        logger.warning(f"Configuration warning: {warning}")

    report = ConfigReport(
        search_providers=tuple(search_providers),
        completion_backends=tuple(completion_backends),
        missing_credentials=tuple(missing),
        warnings=tuple(warnings),
    )

    if strict and not report.completion_available:
        raise ConfigurationError(
            "No completion API keys set. Configure at least one of: "
            + ", ".join(b["credential"].upper() for b in COMPLETION_BACKENDS.values())
        )

    logger.debug("Configuration validation passed")
    return report


def mask_secret(value: str | None, show_chars: int = 4) -> str:
    """
    Mask a secret value, showing only the first and last few characters.

    Args:
        value: The secret value to mask
        show_chars: Number of characters to show at the start and end

    Returns:
        Masked string (e.g., "sk-1...wxyz")
    """
    if not value or len(value) <= show_chars * 2:
        return "***" if value else "(not set)"

    return f"{value[:show_chars]}...{value[-show_chars:]}"


def log_configuration(settings: Settings, report: ConfigReport) -> None:
    """Log essential configuration on startup (concise, secrets masked)."""
    logger.info(
        f"Config: env={settings.environment} | "
        f"frontend={settings.frontend_url} | "
        f"search={','.join(report.search_providers) or 'none'} | "
        f"completion={','.join(report.completion_backends) or 'none'}"
    )
    for name, backend in COMPLETION_BACKENDS.items():
        logger.debug(f"  {name}: {mask_secret(getattr(settings, backend['credential'], None))}")
