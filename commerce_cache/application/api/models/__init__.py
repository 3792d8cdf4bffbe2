"""
API Response Models
"""

from .cache import (
    CacheHealthModel,
    CacheMetricsModel,
    DataResponse,
    MessageResponse,
    PerformanceReportModel,
)

__all__ = [
    "CacheHealthModel",
    "CacheMetricsModel",
    "DataResponse",
    "MessageResponse",
    "PerformanceReportModel",
]
