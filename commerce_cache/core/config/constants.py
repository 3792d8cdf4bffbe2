"""
System Constants and Enumerations

Centralized TTL table, key prefixes, invalidation patterns and stage
identifiers used across the caching layer.

Author: Platform Engineering
Date: 2026-10-18
"""

from enum import Enum

# ============================================================================
# Key Schema
# ============================================================================

KEY_SEPARATOR = ":"
DEFAULT_KEY_VERSION = "v1"

# Sentinel used by CacheClient.is_available() for its round-trip check
HEALTH_CHECK_KEY = "cache:health:check"
HEALTH_CHECK_VALUE = "ok"
HEALTH_CHECK_TTL = 1

# Header carrying the request correlation ID
HEADER_REQUEST_ID = "X-Request-ID"


# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Cache operation stages for structured logging.

    Format: {PREFIX}.{SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    INITIALIZATION = "C.0_INITIALIZATION"
    CACHE_GET = "C.1_CACHE_GET"
    CACHE_SET = "C.2_CACHE_SET"
    CACHE_DELETE = "C.3_CACHE_DELETE"
    CACHE_PATTERN_DELETE = "C.4_CACHE_PATTERN_DELETE"
    CACHE_PROBE = "C.5_AVAILABILITY_PROBE"
    CACHE_CONFIG = "C.6_BACKEND_CONFIG"
    READ_THROUGH = "I.1_READ_THROUGH"
    INVALIDATION = "I.2_INVALIDATION"
    WARMUP = "W_CACHE_WARMUP"
    MONITORING = "M_CACHE_MONITORING"


# ============================================================================
# TTL Table (seconds)
# ============================================================================


class CACHE_TTL:
    """Per-resource TTL values in seconds."""

    DASHBOARD_METRICS = 5 * 60
    SALES_ANALYTICS = 10 * 60
    USER_LIST = 10 * 60
    USER_DETAILS = 15 * 60
    PRODUCT_LIST = 15 * 60
    PRODUCT_DETAILS = 30 * 60
    CATEGORY_TREE = 30 * 60
    ORDER_LIST = 5 * 60
    ORDER_ANALYTICS = 10 * 60
    SYSTEM_SETTINGS = 60 * 60
    NOTIFICATIONS = 5 * 60
    TRANSACTIONS = 10 * 60
    REPORTS = 15 * 60


# ============================================================================
# Key Prefixes
# ============================================================================


class CACHE_KEYS:
    """Namespace prefixes handed to the key generator (unversioned)."""

    DASHBOARD_METRICS = "admin:dashboard:metrics"
    SALES_ANALYTICS = "admin:sales:analytics"
    USER_LIST = "admin:users:list"
    USER_DETAILS = "admin:users:details"
    USER_ANALYTICS = "admin:users:analytics"
    PRODUCT_LIST = "admin:products:list"
    PRODUCT_DETAILS = "admin:products:details"
    PRODUCT_ANALYTICS = "admin:products:analytics"
    CATEGORY_LIST = "admin:categories:list"
    CATEGORY_TREE = "admin:categories:tree"
    CATEGORY_ANALYTICS = "admin:categories:analytics"
    ORDER_LIST = "admin:orders:list"
    ORDER_DETAILS = "admin:orders:details"
    ORDER_ANALYTICS = "admin:orders:analytics"
    TRANSACTION_LIST = "admin:transactions:list"
    TRANSACTION_DETAILS = "admin:transactions:details"
    PAYMENT_ANALYTICS = "admin:payments:analytics"
    SYSTEM_SETTINGS = "admin:settings"
    COUPON_LIST = "admin:coupons:list"
    COUPON_DETAILS = "admin:coupons:details"
    NOTIFICATIONS = "admin:notifications"
    REPORTS = "admin:reports"
    FILE_UPLOADS = "admin:files"


# ============================================================================
# Invalidation Patterns
# ============================================================================
# Keys carry the schema version as their first segment, so patterns do too.


class CACHE_PATTERNS:
    """Glob patterns (trailing wildcard) used by invalidation specs."""

    ALL = "*"
    ALL_ADMIN = f"{DEFAULT_KEY_VERSION}:admin:*"
    DASHBOARD = f"{DEFAULT_KEY_VERSION}:admin:dashboard:*"
    USERS = f"{DEFAULT_KEY_VERSION}:admin:users:*"
    PRODUCTS = f"{DEFAULT_KEY_VERSION}:admin:products:*"
    CATEGORIES = f"{DEFAULT_KEY_VERSION}:admin:categories:*"
    ORDERS = f"{DEFAULT_KEY_VERSION}:admin:orders:*"
    TRANSACTIONS = f"{DEFAULT_KEY_VERSION}:admin:transactions:*"
    PAYMENTS = f"{DEFAULT_KEY_VERSION}:admin:payments:*"
    SETTINGS = f"{DEFAULT_KEY_VERSION}:admin:settings:*"
    COUPONS = f"{DEFAULT_KEY_VERSION}:admin:coupons:*"
    NOTIFICATIONS = f"{DEFAULT_KEY_VERSION}:admin:notifications:*"
    REPORTS = f"{DEFAULT_KEY_VERSION}:admin:reports:*"
    FILES = f"{DEFAULT_KEY_VERSION}:admin:files:*"


# ============================================================================
# Monitoring Thresholds
# ============================================================================

LOW_HIT_RATE_PCT = 50.0
TARGET_HIT_RATE_PCT = 70.0
MAX_ERROR_RATIO = 0.05
SLOW_RESPONSE_MS = 50.0
VERY_SLOW_RESPONSE_MS = 100.0
