"""
api/routes/stats.py
-------------------
Dashboard statistics endpoints.

GET /stats/dashboard : Month-to-date metrics for the caller's scope.
GET /stats/range     : Metrics + per-company rollups for a custom range.
GET /stats/companies : Per-company rollups for a named range.
GET /stats/providers : Admin-only: subsidy summary per provider.

Every endpoint returns the tagged result shape {ok, data, error}. Failed
results keep that body and switch the HTTP status:
  unassigned_company → 409
  invalid_window     → 422
  fetch_failed       → 503
"""

import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from mealstats.dependencies import get_current_identity, get_stats_service, require_admin
from mealstats.schemas.identity import TenantIdentity
from mealstats.schemas.stats import ProviderSummaryResult, StatsResult
from mealstats.schemas.window import WindowKind
from mealstats.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["Statistics"])

_ERROR_STATUS = {
    "unassigned_company": status.HTTP_409_CONFLICT,
    "invalid_window": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "fetch_failed": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _respond(result: StatsResult | ProviderSummaryResult):
    if result.ok:
        return result
    return JSONResponse(
        status_code=_ERROR_STATUS.get(result.error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=result.model_dump(mode="json", by_alias=True),
    )


@router.get(
    "/dashboard",
    response_model=StatsResult,
    summary="Month-to-date dashboard metrics for the current tenant",
)
async def dashboard(
    identity: Annotated[TenantIdentity, Depends(get_current_identity)],
    service: Annotated[StatsService, Depends(get_stats_service)],
):
    """
    Admins see every company, providers their own companies and supervisors
    their single company. A provider without companies gets all zeros.
    """
    return _respond(await service.for_identity(identity))


@router.get(
    "/range",
    response_model=StatsResult,
    summary="Metrics and per-company rollups for a custom date range",
)
async def date_range(
    identity: Annotated[TenantIdentity, Depends(get_current_identity)],
    service: Annotated[StatsService, Depends(get_stats_service)],
    start: datetime.date = Query(..., description="First day, YYYY-MM-DD"),
    end: Optional[datetime.date] = Query(
        default=None, description="Last day, YYYY-MM-DD (defaults to start)"
    ),
):
    """
    "today" cards still refer to the current day; monthly figures and
    rollups cover [start, end]. A start after the end collapses the range to
    the start day.
    """
    return _respond(await service.for_date_range(identity, start, end))


@router.get(
    "/companies",
    response_model=StatsResult,
    summary="Per-company order rollups",
)
async def companies(
    identity: Annotated[TenantIdentity, Depends(get_current_identity)],
    service: Annotated[StatsService, Depends(get_stats_service)],
    range_: WindowKind = Query(
        default=WindowKind.month_to_date,
        alias="range",
        description="today | this_week | month_to_date | full_month | custom",
    ),
    start: Optional[datetime.date] = Query(default=None),
    end: Optional[datetime.date] = Query(default=None),
):
    """range=custom needs a start; without one the result is an invalid_window error."""
    return _respond(await service.company_rollups(identity, range_, start, end))


@router.get(
    "/providers",
    response_model=ProviderSummaryResult,
    summary="Subsidy summary per provider (admin only)",
)
async def providers(
    admin: Annotated[TenantIdentity, Depends(require_admin)],
    service: Annotated[StatsService, Depends(get_stats_service)],
):
    return _respond(await service.provider_summaries())
