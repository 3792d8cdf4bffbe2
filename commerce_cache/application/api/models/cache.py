"""
Cache Admin API Response Models
===============================

Every admin endpoint answers with the same envelope:

    {"success": true, "data": {...}}       read endpoints
    {"success": true, "message": "..."}    action endpoints

The data payloads are typed so the OpenAPI schema documents the metric and
health fields instead of an opaque object.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from commerce_cache.infrastructure.cache.metrics import CacheMetrics

T = TypeVar("T")


class CacheMetricsModel(BaseModel):
    """Serialized CacheMetrics snapshot."""

    model_config = ConfigDict(frozen=True)

    hits: int = Field(ge=0, description="Reads that found a value")
    misses: int = Field(ge=0, description="Reads that found nothing (or failed)")
    sets: int = Field(ge=0, description="Successful writes")
    deletes: int = Field(ge=0, description="Keys removed")
    errors: int = Field(ge=0, description="Failed backend operations")
    total_requests: int = Field(ge=0, description="Reads attempted")
    hit_rate: float = Field(ge=0, le=100, description="hits / total_requests in percent")
    average_response_time: float = Field(ge=0, description="Mean read latency in milliseconds")
    last_reset_time: datetime = Field(description="When the counters were last zeroed")

    @classmethod
    def from_metrics(cls, metrics: CacheMetrics) -> "CacheMetricsModel":
        return cls(**metrics.to_dict())


class CacheHealthModel(BaseModel):
    is_available: bool
    metrics: CacheMetricsModel
    memory_usage: dict[str, Any] | None = None
    recommendations: list[str]


class PerformanceReportModel(BaseModel):
    summary: str
    metrics: CacheMetricsModel
    health: CacheHealthModel
    recommendations: list[str]


class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str
