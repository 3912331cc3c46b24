"""
Configuration management using Pydantic Settings.
Design: Single source of truth for environment variables; the Elasticsearch
client is built from these values at startup and injected, never global.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment. Validates at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Product Search API"
    debug: bool = False
    log_level: str = "INFO"

    # Elasticsearch connection (host/port pair, optional basic auth)
    elasticsearch_host: str = "localhost"
    elasticsearch_port: int = 9200
    elasticsearch_scheme: Literal["http", "https"] = "http"
    elasticsearch_username: str | None = None
    elasticsearch_password: str | None = None
    # Set to false when using self-signed certs (e.g. local ES 8)
    elasticsearch_verify_certs: bool = True
    elasticsearch_request_timeout: float = 30.0

    # Refresh policy on writes: "wait_for" makes saved products visible to search before returning
    elasticsearch_refresh: Literal["true", "false", "wait_for"] = "wait_for"

    # Products index
    products_index: str = "products"
    products_index_replicas: int = 0

    # Result sizes
    list_all_size: int = 10_000  # ES default max_result_window
    prefix_search_limit: int = 5
    category_bucket_size: int = 100

    @property
    def elasticsearch_url(self) -> str:
        return f"{self.elasticsearch_scheme}://{self.elasticsearch_host}:{self.elasticsearch_port}"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Avoids re-reading env on every request."""
    return Settings()
