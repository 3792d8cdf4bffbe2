"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions
inherit from. Specialized exceptions live in their themed modules.

Author: Platform Engineering
Date: 2026-10-18
"""

from typing import Any


class CacheLayerError(Exception):
    """
    Base exception for all caching-layer errors.

    Attributes:
        message: Error message
        details: Additional error details (dict)

    Example:
        raise CacheWriteError(
            "Redis SET failed",
            details={"key": "v1:admin:settings:all", "ttl": 3600}
        )
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = (details or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def with_context(self, **context) -> "CacheLayerError":
        """Add additional context to the error details (chainable)."""
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        return f"{self.__class__.__name__}(message='{self.message}'{details_str})"

    @classmethod
    def from_exception(cls, exc: Exception, message: str | None = None, **details) -> "CacheLayerError":
        """
        Create an error from another exception, keeping the original type and text.

        Example:
            >>> try:
            ...     await redis.set(key, value)
            ... except RedisError as e:
            ...     raise CacheWriteError.from_exception(e, key=key) from e
        """
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details,
        }
        return cls(message or str(exc), details=error_details)


class ConfigurationError(CacheLayerError):
    """Raised when configuration is invalid or missing."""
    pass
