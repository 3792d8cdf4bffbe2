#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
caching layer. All configuration is centralized here so the Redis adapter,
the cache client, the warming/monitoring services and the admin API read
the same values.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with reload_settings()

Author: Platform Engineering
Date: 2026-10-18
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """
    Redis configuration for the shared cache store.

    STAGE-0.1: Redis connection configuration

    retry_on_timeout is intentionally absent: every cache command is attempted
    exactly once and a timeout counts as a failure.
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: float = Field(default=2.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=2.0, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Caching behaviour: default TTL, key schema version, warming and monitoring.

    STAGE-2: Cache configuration
    """

    CACHE_DEFAULT_TTL: int = Field(default=300, description="Default entry TTL in seconds (5 minutes)")
    CACHE_KEY_VERSION: str = Field(default="v1", description="Key schema version prefix")
    CACHE_WARM_ON_STARTUP: bool = Field(default=True, description="Warm hot keys during startup")
    CACHE_PERIODIC_WARMUP_ENABLED: bool = Field(default=True, description="Re-warm hot keys periodically")
    CACHE_WARMUP_INTERVAL_SECONDS: float = Field(
        default=30 * 60, description="Frequently accessed + featured products warmup interval"
    )
    CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS: float = Field(
        default=60 * 60, description="Analytics warmup interval"
    )
    CACHE_MONITORING_ENABLED: bool = Field(default=False, description="Log metrics periodically")
    CACHE_MONITORING_INTERVAL_SECONDS: float = Field(default=60, description="Monitoring tick interval")
    CACHE_CONFIGURE_LRU_ON_STARTUP: bool = Field(
        default=False, description="Issue CONFIG SET maxmemory-policy allkeys-lru at startup"
    )

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


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Commerce Cache Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from commerce_cache.core.config.settings import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        default_ttl = settings.cache.CACHE_DEFAULT_TTL
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=50, description="Maximum total connections")
    REDIS_SOCKET_TIMEOUT: float = Field(default=2.0, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: float = Field(default=2.0, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    # Cache settings
    CACHE_DEFAULT_TTL: int = Field(default=300, description="Default entry TTL in seconds (5 minutes)")
    CACHE_KEY_VERSION: str = Field(default="v1", description="Key schema version prefix")
    CACHE_WARM_ON_STARTUP: bool = Field(default=True, description="Warm hot keys during startup")
    CACHE_PERIODIC_WARMUP_ENABLED: bool = Field(default=True, description="Re-warm hot keys periodically")
    CACHE_WARMUP_INTERVAL_SECONDS: float = Field(default=30 * 60, description="Hot key warmup interval")
    CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS: float = Field(default=60 * 60, description="Analytics warmup interval")
    CACHE_MONITORING_ENABLED: bool = Field(default=False, description="Log metrics periodically")
    CACHE_MONITORING_INTERVAL_SECONDS: float = Field(default=60, description="Monitoring tick interval")
    CACHE_CONFIGURE_LRU_ON_STARTUP: bool = Field(default=False, description="Apply allkeys-lru at startup")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Commerce Cache Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # Nested configuration views
    @property
    def redis(self) -> RedisSettings:
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            REDIS_HEALTH_CHECK_INTERVAL=self.REDIS_HEALTH_CHECK_INTERVAL,
        )

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return CacheSettings(
            CACHE_DEFAULT_TTL=self.CACHE_DEFAULT_TTL,
            CACHE_KEY_VERSION=self.CACHE_KEY_VERSION,
            CACHE_WARM_ON_STARTUP=self.CACHE_WARM_ON_STARTUP,
            CACHE_PERIODIC_WARMUP_ENABLED=self.CACHE_PERIODIC_WARMUP_ENABLED,
            CACHE_WARMUP_INTERVAL_SECONDS=self.CACHE_WARMUP_INTERVAL_SECONDS,
            CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS=self.CACHE_ANALYTICS_WARMUP_INTERVAL_SECONDS,
            CACHE_MONITORING_ENABLED=self.CACHE_MONITORING_ENABLED,
            CACHE_MONITORING_INTERVAL_SECONDS=self.CACHE_MONITORING_INTERVAL_SECONDS,
            CACHE_CONFIGURE_LRU_ON_STARTUP=self.CACHE_CONFIGURE_LRU_ON_STARTUP,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

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
