"""Search engine configuration settings."""

from dataclasses import dataclass
from typing import Optional
import os


@dataclass
class ApiConfig:
    """Listings API configuration."""
    base_url: str = "https://app.voucarregar.com.br"
    listings_path: str = "/api/fretes/todos"
    auth_token: Optional[str] = None
    timeout_seconds: float = 12


@dataclass
class RegistryConfig:
    """Geographic registry (IBGE) configuration."""
    base_url: str = "https://servicodados.ibge.gov.br/api/v1/localidades"
    timeout_seconds: float = 8


@dataclass
class GeocodingConfig:
    """Place lookup (Nominatim) configuration."""
    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "VouCarregarApp/1.0 (contato@voucarregar.com.br)"
    timeout_seconds: float = 10
    country: str = "Brasil"


@dataclass
class RateLimitConfig:
    """Prefetch throttling configuration."""
    delay_seconds: float = 0.35
    max_batch_size: int = 80


@dataclass
class SearchSettings:
    """Main search engine configuration settings."""
    home_country: str = "Brasil"
    api: ApiConfig = None
    registry: RegistryConfig = None
    geocoding: GeocodingConfig = None
    rate_limiting: RateLimitConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.api is None:
            self.api = ApiConfig()
        if self.registry is None:
            self.registry = RegistryConfig()
        if self.geocoding is None:
            self.geocoding = GeocodingConfig()
        if self.rate_limiting is None:
            self.rate_limiting = RateLimitConfig()


def _build_config() -> dict:
    return {
        "home_country": os.getenv("HOME_COUNTRY", "Brasil"),
        "api": {
            "base_url": os.getenv("FRETES_API_BASE", "https://app.voucarregar.com.br"),
            "listings_path": os.getenv("FRETES_LISTINGS_PATH", "/api/fretes/todos"),
            "auth_token": os.getenv("FRETES_AUTH_TOKEN") or None,
            "timeout_seconds": float(os.getenv("FRETES_TIMEOUT_SECONDS", "12")),
        },
        "registry": {
            "base_url": os.getenv("IBGE_BASE_URL", "https://servicodados.ibge.gov.br/api/v1/localidades"),
            "timeout_seconds": float(os.getenv("IBGE_TIMEOUT_SECONDS", "8")),
        },
        "geocoding": {
            "base_url": os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org/search"),
            "user_agent": os.getenv("NOMINATIM_USER_AGENT", "VouCarregarApp/1.0 (contato@voucarregar.com.br)"),
            "timeout_seconds": float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "10")),
            "country": os.getenv("GEOCODING_COUNTRY", "Brasil"),
        },
        "rate_limiting": {
            "delay_seconds": float(os.getenv("PREFETCH_DELAY_SECONDS", "0.35")),
            "max_batch_size": int(os.getenv("PREFETCH_MAX_BATCH", "80")),
        },
    }


# Default search configuration
SEARCH_CONFIG = _build_config()


def get_search_settings(reload: bool = False) -> SearchSettings:
    """Get search settings from configuration.

    Args:
        reload: Re-read the environment first (after ``load_dotenv``)
    """
    config = _build_config() if reload else SEARCH_CONFIG
    return SearchSettings(
        home_country=config["home_country"],
        api=ApiConfig(**config["api"]),
        registry=RegistryConfig(**config["registry"]),
        geocoding=GeocodingConfig(**config["geocoding"]),
        rate_limiting=RateLimitConfig(**config["rate_limiting"]),
    )
