"""
Centralized Configuration Module using Pydantic Settings

Type-safe, environment-based configuration for nscache.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nscache.core.config.constants import DEFAULT_REDIS_PORT, DEFAULT_TTL


def parse_server(entry: str) -> tuple[str, int]:
    """
    Parse a ``host:port`` entry into a ``(host, port)`` tuple.

    A bare host gets the default Redis port.
    """
    host, sep, port = entry.strip().rpartition(":")
    if not sep:
        return entry.strip(), DEFAULT_REDIS_PORT
    if not host:
        raise ValueError(f"Cache server entry {entry!r} has no host")
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"Cache server entry {entry!r} has a non-numeric port") from None


class CacheSettings(BaseSettings):
    """
    Cache facade configuration.

    STAGE-C.0: Namespace, servers and instrumentation
    """

    CACHE_NAMESPACE: str | None = Field(default=None, description="Key namespace for this application")
    CACHE_SERVERS: list[str] = Field(
        default=[f"localhost:{DEFAULT_REDIS_PORT}"],
        description="Cache servers as host:port entries",
    )
    CACHE_BENCHMARK_ENABLED: bool = Field(default=False, description="Accumulate backend round-trip time")
    CACHE_DEFAULT_TTL: int = Field(default=DEFAULT_TTL, ge=0, description="Default TTL in seconds (0 = never)")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class RedisSettings(BaseSettings):
    """
    Redis connection configuration for the shipped backend.

    Server addresses come from CACHE_SERVERS; these are per-connection options.
    """

    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connection timeout in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from nscache.core.config.settings import get_settings

        settings = get_settings()
        namespace = settings.cache.CACHE_NAMESPACE
        servers = settings.server_list
    """

    # Cache settings
    CACHE_NAMESPACE: str | None = Field(default=None, description="Key namespace for this application")
    CACHE_SERVERS: list[str] = Field(
        default=[f"localhost:{DEFAULT_REDIS_PORT}"],
        description="Cache servers as host:port entries",
    )
    CACHE_BENCHMARK_ENABLED: bool = Field(default=False, description="Accumulate backend round-trip time")
    CACHE_DEFAULT_TTL: int = Field(default=DEFAULT_TTL, ge=0, description="Default TTL in seconds (0 = never)")

    # Redis settings
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_SOCKET_TIMEOUT: float = Field(default=5.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=5.0, description="Connection timeout in seconds")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("CACHE_SERVERS")
    @classmethod
    def validate_servers(cls, v):
        """Reject empty or malformed server lists at startup."""
        if not v:
            raise ValueError("CACHE_SERVERS must list at least one host:port entry")
        for entry in v:
            parse_server(entry)
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @property
    def server_list(self) -> list[tuple[str, int]]:
        """CACHE_SERVERS parsed into (host, port) tuples."""
        return [parse_server(entry) for entry in self.CACHE_SERVERS]

    # Nested configuration views
    @property
    def cache(self) -> "CacheSettings":
        """Get cache settings."""
        return CacheSettings(
            CACHE_NAMESPACE=self.CACHE_NAMESPACE,
            CACHE_SERVERS=self.CACHE_SERVERS,
            CACHE_BENCHMARK_ENABLED=self.CACHE_BENCHMARK_ENABLED,
            CACHE_DEFAULT_TTL=self.CACHE_DEFAULT_TTL,
        )

    @property
    def redis(self) -> "RedisSettings":
        """Get Redis settings."""
        return RedisSettings(
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
        )

    @property
    def logging(self) -> "LoggingSettings":
        """Get logging settings."""
        return LoggingSettings(
            LOG_LEVEL=self.LOG_LEVEL,
            LOG_FORMAT=self.LOG_FORMAT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
