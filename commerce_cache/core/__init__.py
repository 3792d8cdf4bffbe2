"""
Core Module

Foundational components: configuration, logging, exceptions and interfaces.
"""

from .exceptions import (
    CacheConnectionError,
    CacheError,
    CacheInvalidationError,
    CacheKeyError,
    CacheLayerError,
    CacheWriteError,
    ConfigurationError,
    OperationNotRegisteredError,
)
from .logging import (
    clear_request_id,
    get_logger,
    get_request_id,
    log_stage,
    set_request_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    "log_stage",
    "CacheLayerError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheKeyError",
    "CacheWriteError",
    "CacheInvalidationError",
    "OperationNotRegisteredError",
]
