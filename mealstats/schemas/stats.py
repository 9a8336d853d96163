"""
schemas/stats.py
----------------
Dashboard metric shapes.

Outbound JSON uses camelCase field names (ordersToday, monthlyRevenue, ...).
Money fields are plain, unrounded numbers; formatting belongs to the UI.

Naming note: `MetricsBundle.pending_orders` counts orders whose status is
literally "pending", whereas `CompanyRollup.pending_count` is everything
not yet dispatched. The two are deliberately separate fields.
"""

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from mealstats.schemas.window import DateWindow

NO_DATA = "no data"

_camel = {"alias_generator": to_camel, "populate_by_name": True}


class TopMeal(BaseModel):
    name: str = NO_DATA
    count: int = 0

    model_config = _camel


class DishCount(BaseModel):
    lunch_option_id: str
    name: str
    count: int

    model_config = _camel


class TimelinePoint(BaseModel):
    date: datetime.date
    orders: int

    model_config = _camel


class StatusCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    prepared: int = 0
    delivered: int = 0

    model_config = _camel

    @property
    def total(self) -> int:
        return self.pending + self.approved + self.rejected + self.prepared + self.delivered


class CompanyRollup(BaseModel):
    company_id: str
    name: str
    order_count: int
    distinct_user_count: int
    dispatched_count: int
    pending_count: int  # orderCount - dispatchedCount, not the literal status

    model_config = _camel


class MetricsBundle(BaseModel):
    orders_today: int = 0
    total_meals_today: int = 0
    companies_with_orders_today: int = 0
    top_ordered_meal: TopMeal = Field(default_factory=TopMeal)
    pending_orders: int = 0
    monthly_orders: int = 0
    monthly_revenue: float = 0.0

    window: Optional[DateWindow] = None
    active_companies: Optional[int] = None
    company_rollups: Optional[list[CompanyRollup]] = None
    status_counts: StatusCounts = Field(default_factory=StatusCounts)
    top_dishes: list[DishCount] = Field(default_factory=list)
    orders_timeline: list[TimelinePoint] = Field(default_factory=list)

    model_config = _camel


class ProviderSummary(BaseModel):
    provider_id: str
    name: str
    company_count: int
    avg_subsidy: float
    total_fixed_amount: float

    model_config = _camel


class ErrorDescriptor(BaseModel):
    kind: Literal["unassigned_company", "invalid_window", "fetch_failed"]
    message: str
    retryable: bool

    model_config = _camel


class StatsResult(BaseModel):
    """Tagged result returned by every stats facade entry point."""

    ok: bool
    data: Optional[MetricsBundle] = None
    error: Optional[ErrorDescriptor] = None

    model_config = _camel


class ProviderSummaryResult(BaseModel):
    ok: bool
    data: Optional[list[ProviderSummary]] = None
    error: Optional[ErrorDescriptor] = None

    model_config = _camel
