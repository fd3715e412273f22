"""
Settings and environment management for the KPI proxy backend.

Configuration is loaded with pydantic-settings from environment variables and
an optional .env file.

Environment Variables:
- BIGQUERY_DATASET: GA4 export dataset to read from (required to serve reports)
- BIGQUERY_PROJECT: BigQuery project ID (defaults to the credentials' project)
- GOOGLE_APPLICATION_CREDENTIALS: Path to a service account JSON file
- USERS_TABLE_PREFIX / EVENTS_TABLE_PREFIX: Dated table prefixes
- CACHE_MAX_ENTRIES / CACHE_TTL_SECONDS: Result cache limits (unset = unbounded)
- SINGLE_FLIGHT: Share one warehouse call between concurrent identical misses
- STRICT_ERROR_STATUS: Report every failure as HTTP 500
- CORS_ALLOW_ORIGINS: JSON list of allowed origins (default: all)
- LOG_LEVEL: Root logging level (DEBUG, INFO, WARNING, ERROR or CRITICAL)

Usage:
    from kpi_backend.core.config import get_settings

    settings = get_settings()
    dataset = settings.bigquery_dataset
"""

import re
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Identifiers interpolated into query text must match these patterns
_DATASET_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_PROJECT_PATTERN = re.compile(r"^[a-z][a-z0-9\-]{4,28}[a-z0-9]$")
_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]+_$")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        bigquery_dataset: Dataset holding the dated export tables. Reports are
            unavailable until it is set.
        bigquery_project: Project owning the dataset.
        google_application_credentials: Service account JSON path.
        users_table_prefix: Prefix of the dated user snapshot tables.
        events_table_prefix: Prefix of the dated event tables.
        cache_max_entries: Maximum cached query results, oldest evicted first.
        cache_ttl_seconds: Lifetime of a cached query result.
        single_flight: De-duplicate concurrent identical warehouse queries.
        strict_error_status: Map every error kind to HTTP 500.
        cors_allow_origins: Origins allowed by the CORS middleware.
        log_level: Root logging level.
        host: Bind address for the uvicorn entry point.
        port: Bind port for the uvicorn entry point.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Warehouse
    # =========================================================================

    bigquery_dataset: Optional[str] = None
    bigquery_project: Optional[str] = None
    google_application_credentials: Optional[str] = None

    users_table_prefix: str = 'pseudonymous_users_'
    events_table_prefix: str = 'events_'

    # =========================================================================
    # Result cache
    # Unset limits keep entries for the lifetime of the process.
    # =========================================================================

    cache_max_entries: Optional[int] = None
    cache_ttl_seconds: Optional[float] = None
    single_flight: bool = False

    # =========================================================================
    # HTTP
    # =========================================================================

    strict_error_status: bool = False
    cors_allow_origins: List[str] = ['*']
    log_level: str = 'INFO'
    host: str = '0.0.0.0'
    port: int = 3001

    @field_validator('bigquery_dataset')
    @classmethod
    def _check_dataset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _DATASET_PATTERN.match(value):
            raise ValueError(f"Invalid BigQuery dataset name: {value!r}")
        return value

    @field_validator('bigquery_project')
    @classmethod
    def _check_project(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _PROJECT_PATTERN.match(value):
            raise ValueError(f"Invalid BigQuery project id: {value!r}")
        return value

    @field_validator('users_table_prefix', 'events_table_prefix')
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        if not _PREFIX_PATTERN.match(value):
            raise ValueError(f"Table prefix must be alphanumeric and end with '_': {value!r}")
        return value

    @field_validator('log_level')
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}: {value!r}")
        return level

    @field_validator('cache_max_entries')
    @classmethod
    def _check_max_entries(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("cache_max_entries must be at least 1")
        return value

    @field_validator('cache_ttl_seconds')
    @classmethod
    def _check_ttl(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The cached settings instance.

    Raises:
        pydantic.ValidationError: If any value fails validation.

    Note:
        Tests can refresh settings with ``get_settings.cache_clear()``.
    """
    return Settings()
