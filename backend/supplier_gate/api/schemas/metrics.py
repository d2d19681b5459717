"""Pydantic schemas for admin reporting endpoints."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RateLimitMetricsRequest(BaseModel):
    """Request body for POST /api/admin/rate-limits/metrics."""
    model_config = ConfigDict(populate_by_name=True)

    hours_back: Optional[Union[int, float]] = Field(
        None,
        alias="hoursBack",
        description="Trailing window in hours (default 24, max 168)",
        examples=[24],
    )


class RateLimitTotals(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    unique_users_limited: int = Field(..., alias="uniqueUsersLimited")
    total_hits: int = Field(..., alias="totalHits")
    active_rate_limits: int = Field(..., alias="activeRateLimits")


class ActionBreakdownItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str
    hit_count: int = Field(..., alias="hitCount")
    unique_users: int = Field(..., alias="uniqueUsers")
    configured_limit: int = Field(..., alias="configuredLimit")
    window_seconds: int = Field(..., alias="windowSeconds")


class TopOffenderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    total_hits: int = Field(..., alias="totalHits")
    actions: list[str]
    last_hit: str = Field(..., alias="lastHit")


class HourlyTrendItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hour: str
    hit_count: int = Field(..., alias="hitCount")


class ConfiguredLimitItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str
    limit: int
    window_seconds: int = Field(..., alias="windowSeconds")
    window_description: str = Field(..., alias="windowDescription")


class RateLimitMetricsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_at: str = Field(..., alias="generatedAt")
    hours_back: Union[int, float] = Field(..., alias="hoursBack")
    totals: RateLimitTotals
    action_breakdown: list[ActionBreakdownItem] = Field(..., alias="actionBreakdown")
    top_offenders: list[TopOffenderItem] = Field(..., alias="topOffenders")
    hourly_trend: list[HourlyTrendItem] = Field(..., alias="hourlyTrend")
    configured_limits: list[ConfiguredLimitItem] = Field(..., alias="configuredLimits")


class MigrationMetricsRequest(BaseModel):
    """Request body for POST /api/admin/suppliers/migration-metrics."""

    format: Optional[Literal["json", "csv"]] = Field(
        None,
        description="Response format (default json)",
    )
    limit: Optional[int] = Field(
        None,
        description="Scan at most this many suppliers (values <= 0 scan all)",
        examples=[100],
    )
