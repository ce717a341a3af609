"""
Unit tests for configuration loading and startup validation.
"""

import logging

import pytest

from researchproxy.config import Settings, mask_secret, validate_config
from researchproxy.config.validation import is_backend_configured, is_search_provider_configured
from researchproxy.exceptions import ConfigurationError
from tests.factories import build_settings


@pytest.mark.unit
class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("COMPLETION_TIMEOUT", "ENABLE_DUCKDUCKGO", "FRONTEND_URL", "ENVIRONMENT"):
            monkeypatch.delenv(name, raising=False)

        app_settings = Settings(_env_file=None)

        assert app_settings.completion_timeout == 60
        assert app_settings.enable_duckduckgo is False
        assert app_settings.frontend_url == "http://localhost:3000"

    def test_environment_variables_are_read(self, monkeypatch):
        monkeypatch.setenv("SERPER_API_KEY", "from-env")
        monkeypatch.setenv("ENABLE_DUCKDUCKGO", "true")

        app_settings = Settings(_env_file=None)

        assert app_settings.serper_api_key == "from-env"
        assert app_settings.enable_duckduckgo is True

    def test_blank_key_is_unset(self):
        assert build_settings(bing_api_key="   ").bing_api_key is None


@pytest.mark.unit
class TestValidateConfig:
    def test_fully_configured(self):
        report = validate_config(build_settings())

        assert report.search_providers == ("scraper", "serper", "gnews", "gbrains", "bing", "mojeek")
        assert report.completion_backends == ("openai", "groq", "deepseek")
        assert report.missing_credentials == ()
        assert report.completion_available

    def test_missing_keys_are_reported(self, caplog):
        app_settings = build_settings(serper_api_key=None, groq_api_key=None, enable_duckduckgo=False)

        with caplog.at_level(logging.WARNING):
            report = validate_config(app_settings)

        assert "serper" not in report.search_providers
        assert "scraper" not in report.search_providers
        assert report.missing_credentials == ("SERPER_API_KEY", "GROQ_API_KEY")
        assert "SERPER_API_KEY is not set" in caplog.text

    def test_strict_requires_a_completion_backend(self):
        app_settings = build_settings(deepseek_api_key=None, openai_api_key=None, groq_api_key=None)

        assert validate_config(app_settings).completion_available is False
        with pytest.raises(ConfigurationError, match="No completion API keys set"):
            validate_config(app_settings, strict=True)

    def test_strict_passes_with_one_backend(self):
        app_settings = build_settings(openai_api_key=None, groq_api_key=None)
        assert validate_config(app_settings, strict=True).completion_backends == ("deepseek",)

    def test_timeout_warning(self):
        report = validate_config(build_settings(completion_timeout=0))
        assert any("completion_timeout" in w for w in report.warnings)

    def test_is_configured_helpers(self):
        app_settings = build_settings(enable_duckduckgo=False, openai_api_key=None)
        assert is_search_provider_configured("scraper", app_settings) is False
        assert is_search_provider_configured("bing", app_settings) is True
        assert is_search_provider_configured("nope", app_settings) is False
        assert is_backend_configured("openai", app_settings) is False
        assert is_backend_configured("deepseek", app_settings) is True


@pytest.mark.unit
class TestMaskSecret:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "(not set)"),
            ("", "(not set)"),
            ("short", "***"),
            ("sk-1234567890abcdef", "sk-1...cdef"),
        ],
    )
    def test_mask_secret(self, value, expected):
        assert mask_secret(value) == expected
