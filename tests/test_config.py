"""Tests for configuration module."""

from frete_search.config import (
    SEARCH_CONFIG,
    ApiConfig,
    GeocodingConfig,
    RateLimitConfig,
    RegistryConfig,
    SearchSettings,
    get_search_settings,
)


ENV_VARS = [
    "HOME_COUNTRY", "FRETES_API_BASE", "FRETES_LISTINGS_PATH", "FRETES_AUTH_TOKEN",
    "FRETES_TIMEOUT_SECONDS", "IBGE_BASE_URL", "IBGE_TIMEOUT_SECONDS",
    "NOMINATIM_BASE_URL", "NOMINATIM_USER_AGENT", "GEOCODING_TIMEOUT_SECONDS",
    "GEOCODING_COUNTRY", "PREFETCH_DELAY_SECONDS", "PREFETCH_MAX_BATCH",
]


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_search_config_exists():
    """Test that SEARCH_CONFIG dictionary is properly defined."""
    assert isinstance(SEARCH_CONFIG, dict)
    for key in ("home_country", "api", "registry", "geocoding", "rate_limiting"):
        assert key in SEARCH_CONFIG


def test_search_settings_defaults():
    """Test that SearchSettings builds every nested config."""
    settings = SearchSettings()

    assert settings.home_country == "Brasil"
    assert isinstance(settings.api, ApiConfig)
    assert settings.api.listings_path == "/api/fretes/todos"
    assert settings.api.auth_token is None
    assert settings.api.timeout_seconds == 12

    assert isinstance(settings.registry, RegistryConfig)
    assert settings.registry.timeout_seconds == 8

    assert isinstance(settings.geocoding, GeocodingConfig)
    assert settings.geocoding.timeout_seconds == 10
    assert settings.geocoding.country == "Brasil"
    assert "nominatim" in settings.geocoding.base_url

    assert isinstance(settings.rate_limiting, RateLimitConfig)
    assert settings.rate_limiting.delay_seconds == 0.35
    assert settings.rate_limiting.max_batch_size == 80


def test_get_search_settings_without_environment(monkeypatch):
    clear_env(monkeypatch)

    settings = get_search_settings(reload=True)

    assert settings == SearchSettings()


def test_environment_variable_override(monkeypatch):
    """Test that environment variables override defaults on reload."""
    clear_env(monkeypatch)
    monkeypatch.setenv("FRETES_API_BASE", "http://localhost:3000")
    monkeypatch.setenv("FRETES_AUTH_TOKEN", "secret")
    monkeypatch.setenv("IBGE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("PREFETCH_MAX_BATCH", "10")
    monkeypatch.setenv("HOME_COUNTRY", "Argentina")

    settings = get_search_settings(reload=True)

    assert settings.api.base_url == "http://localhost:3000"
    assert settings.api.auth_token == "secret"
    assert settings.registry.timeout_seconds == 2.5
    assert settings.rate_limiting.max_batch_size == 10
    assert settings.home_country == "Argentina"


def test_empty_token_means_no_token(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("FRETES_AUTH_TOKEN", "")

    assert get_search_settings(reload=True).api.auth_token is None


def test_search_settings_with_custom_values():
    """Test creating SearchSettings with custom values."""
    custom_rate_limit = RateLimitConfig(delay_seconds=1.0, max_batch_size=5)

    settings = SearchSettings(home_country="Brasil", rate_limiting=custom_rate_limit)

    assert settings.rate_limiting.delay_seconds == 1.0
    assert settings.rate_limiting.max_batch_size == 5
    assert isinstance(settings.api, ApiConfig)
