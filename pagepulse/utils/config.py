# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv. A host page can also hand over its own
settings object (camelCase keys) through TrackerSettings.from_host_config().

The tracker settings are resolved against the page hostname into a frozen
RuntimeConfig, which is what the client components actually consume.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagepulse.exceptions import ConfigurationError

# Load .env file before any settings are instantiated
load_dotenv()

# ==============================================================================
# Environment Defaults
# ==============================================================================

DEVELOPMENT_HOST_MARKERS = ("localhost", "127.0.0.1")

DEVELOPMENT_API_BASE_URL = "http://localhost:3000/api/v1"
PRODUCTION_API_BASE_URL = "https://analytics.jscloud.in/api/v1"

DEVELOPMENT_ACTIVITY_TIMEOUT_MS = 5 * 60 * 1000
PRODUCTION_ACTIVITY_TIMEOUT_MS = 15 * 60 * 1000

# Host settings object key -> TrackerSettings field
HOST_CONFIG_KEYS = {
    "apiBaseUrl": "api_base_url",
    "projectId": "project_id",
    "activityTrackingTimeout": "activity_tracking_timeout_ms",
    "eventBatchSize": "event_batch_size",
    "eventBatchInterval": "event_batch_interval_ms",
}


def is_development_host(hostname: str) -> bool:
    """Check whether a hostname points at a local development server."""
    host = (hostname or "").lower()
    return any(marker in host for marker in DEVELOPMENT_HOST_MARKERS)


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved configuration for one page context.

    Attributes:
        api_base_url: Collector base URL, without a trailing slash
        project_id: Project identifier sent with sessions and events
        activity_timeout_seconds: Inactivity period that ends a session
        batch_size: Queue length that forces an event flush
        batch_interval_seconds: Period of the background flush tick
        development: True when running on a development-like host
        request_timeout_seconds: Timeout for a single collector request
    """

    api_base_url: str
    project_id: str
    activity_timeout_seconds: float
    batch_size: int = 10
    batch_interval_seconds: float = 10.0
    development: bool = False
    request_timeout_seconds: float = 10.0


class TrackerSettings(BaseSettings):
    """Collector and batching settings."""

    model_config = SettingsConfigDict(env_prefix="PAGEPULSE_")

    api_base_url: Optional[str] = Field(
        default=None, description="Collector base URL (defaults by environment)"
    )
    project_id: Optional[str] = Field(default=None, description="Project identifier (required)")
    activity_tracking_timeout_ms: Optional[int] = Field(
        default=None,
        gt=0,
        description="Inactivity timeout in milliseconds (defaults by environment)",
    )
    event_batch_size: int = Field(default=10, ge=1, description="Events per forced flush")
    event_batch_interval_ms: int = Field(
        default=10_000, gt=0, description="Periodic flush interval in milliseconds"
    )
    request_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for a single collector request"
    )

    @classmethod
    def from_host_config(cls, config: Mapping[str, Any] | None) -> "TrackerSettings":
        """
        Build settings from a host page's settings object.

        Unknown keys and None values are ignored; anything not supplied
        falls back to environment variables and then to defaults.

        Args:
            config: Mapping using the host's camelCase key names

        Returns:
            TrackerSettings instance
        """
        overrides = {}
        for key, value in (config or {}).items():
            field_name = HOST_CONFIG_KEYS.get(key)
            if field_name and value is not None:
                overrides[field_name] = value
        return cls(**overrides)

    def resolve(self, hostname: str) -> RuntimeConfig:
        """
        Resolve settings for a page served from the given hostname.

        Args:
            hostname: Hostname of the page the client runs in

        Returns:
            Frozen RuntimeConfig

        Raises:
            ConfigurationError: If no project id is configured
        """
        development = is_development_host(hostname)

        if not self.project_id:
            raise ConfigurationError(
                "No project-id specified. Please specify Project id in the global config."
            )

        base_url = self.api_base_url or (
            DEVELOPMENT_API_BASE_URL if development else PRODUCTION_API_BASE_URL
        )
        timeout_ms = self.activity_tracking_timeout_ms or (
            DEVELOPMENT_ACTIVITY_TIMEOUT_MS if development else PRODUCTION_ACTIVITY_TIMEOUT_MS
        )

        return RuntimeConfig(
            api_base_url=base_url.rstrip("/"),
            project_id=self.project_id,
            activity_timeout_seconds=timeout_ms / 1000.0,
            batch_size=self.event_batch_size,
            batch_interval_seconds=self.event_batch_interval_ms / 1000.0,
            development=development,
            request_timeout_seconds=self.request_timeout_seconds,
        )


class StorageSettings(BaseSettings):
    """Durable storage settings for the visitor identifier."""

    model_config = SettingsConfigDict(env_prefix="PAGEPULSE_STORAGE_")

    backend: Literal["memory", "file", "valkey"] = Field(
        default="file", description="Storage backend (memory, file, valkey)"
    )
    path: Path = Field(
        default=Path(".pagepulse/storage.json"), description="JSON file used by the file backend"
    )
    key_prefix: str = Field(default="pagepulse:", description="Key prefix for the valkey backend")


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings for visitor storage."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
