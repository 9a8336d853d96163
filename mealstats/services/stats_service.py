"""
services/stats_service.py
-------------------------
Role-aware entry points for the dashboards.

Each entry point runs the same pipeline:

  identity ─► scope ─► window(s) ─► fetch (concurrently) ─► aggregate

and returns a StatsResult. Known failures (UnassignedCompanyError,
InvalidWindowError, FetchError) are converted into a tagged error; nothing
in the StatsError family escapes this module. An empty scope is a
successful all-zero result.

Fetching always completes before aggregation starts, so a bundle is either
complete or absent. Every read runs under the fetch timeout; expiry (or a
failed sibling) cancels the in-flight queries and reports a FetchError.
"""

import asyncio
import datetime
from typing import Awaitable, Callable, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.config import settings
from mealstats.core.errors import FetchError, InvalidWindowError, StatsError
from mealstats.core.logging import get_logger
from mealstats.models.order import OrderStatus
from mealstats.schemas.identity import TenantIdentity, TenantRole
from mealstats.schemas.orders import OrderRow
from mealstats.schemas.scope import CompanyScope
from mealstats.schemas.stats import (
    ErrorDescriptor,
    MetricsBundle,
    ProviderSummaryResult,
    StatsResult,
)
from mealstats.schemas.window import DateWindow, WindowKind
from mealstats.services import aggregator
from mealstats.services.date_window import DateLike, build_window, trailing_days
from mealstats.services.order_fetcher import OrderFetcher
from mealstats.services.provider_service import ProviderService
from mealstats.services.scope_service import ScopeService

logger = get_logger(__name__)


def merge_rows(*batches: Sequence[OrderRow]) -> list[OrderRow]:
    """
    Concatenate fetch results, keeping the first copy of each order id.
    Overlapping queries (window rows vs. pending rows) must not count an
    order twice.
    """
    seen: set[str] = set()
    merged: list[OrderRow] = []
    for batch in batches:
        for row in batch:
            if row.id in seen:
                continue
            seen.add(row.id)
            merged.append(row)
    return merged


class StatsService:

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        today_provider: Callable[[], datetime.date] = datetime.date.today,
        fetch_timeout: Optional[float] = None,
        top_dishes_limit: Optional[int] = None,
        timeline_days: Optional[int] = None,
    ) -> None:
        self._session_factory = session_factory
        self._fetcher = OrderFetcher(session_factory)
        self._today = today_provider
        self._fetch_timeout = (
            settings.STATS_FETCH_TIMEOUT_SECONDS if fetch_timeout is None else fetch_timeout
        )
        self._top_dishes_limit = (
            settings.TOP_DISHES_LIMIT if top_dishes_limit is None else top_dishes_limit
        )
        self._timeline_days = settings.TIMELINE_DAYS if timeline_days is None else timeline_days

    # ── Dashboard entry points ───────────────────────────────────────────────

    async def for_admin(self) -> StatsResult:
        return await self.for_identity(TenantIdentity(role=TenantRole.admin))

    async def for_provider(self, provider_id: str) -> StatsResult:
        return await self.for_identity(
            TenantIdentity(role=TenantRole.provider, provider_id=provider_id)
        )

    async def for_supervisor(self, company_id: Optional[str]) -> StatsResult:
        return await self.for_identity(
            TenantIdentity(role=TenantRole.supervisor, company_id=company_id)
        )

    async def for_identity(self, identity: TenantIdentity) -> StatsResult:
        """Month-to-date dashboard for whoever is asking."""

        async def run() -> MetricsBundle:
            today = self._today()
            window = self._window(WindowKind.month_to_date, today)
            scope = await self._scope_for(identity)
            return await self._dashboard(scope, window, today, include_rollups=False)

        return await self._guard(run(), role=identity.role.value)

    async def for_date_range(
        self,
        who: Union[TenantIdentity, CompanyScope],
        start: Optional[DateLike],
        end: Optional[DateLike] = None,
    ) -> StatsResult:
        """
        Custom-range dashboard with per-company rollups. A start after the
        end collapses the range to the start day.
        """

        async def run() -> MetricsBundle:
            today = self._today()
            window = self._window(WindowKind.custom, today, start, end)
            scope = await self._scope_for(who)
            return await self._dashboard(scope, window, today, include_rollups=True)

        return await self._guard(run(), role=self._role_of(who))

    async def company_rollups(
        self,
        identity: TenantIdentity,
        kind: Union[WindowKind, str] = WindowKind.month_to_date,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> StatsResult:
        """
        Per-company order summaries. Issues one query per company and waits
        for all of them; the bundle carries only the rollups and the window.
        """

        async def run() -> MetricsBundle:
            window = self._window(kind, self._today(), start, end)
            scope = await self._scope_for(identity)
            if scope.is_empty:
                return MetricsBundle(window=window, active_companies=0, company_rollups=[])

            companies = await self._with_timeout(
                ScopeService.list_scope_companies(self._session_factory, scope)
            )
            batches = await self._gather(
                *(self._fetcher.fetch_company_orders(cid, window) for cid, _ in companies)
            )
            rows = merge_rows(*batches)
            return MetricsBundle(
                window=window,
                active_companies=len(companies),
                company_rollups=aggregator.company_rollups(rows, companies),
            )

        return await self._guard(run(), role=identity.role.value)

    async def provider_summaries(self) -> ProviderSummaryResult:
        """Subsidy overview per provider for the admin companies page."""
        try:
            providers, companies = await self._gather(
                ProviderService.list_providers(self._session_factory),
                ProviderService.list_companies(self._session_factory),
            )
        except StatsError as exc:
            return ProviderSummaryResult(ok=False, error=self._describe(exc))
        return ProviderSummaryResult(
            ok=True, data=aggregator.summarize_providers(providers, companies)
        )

    # ── Pipeline ─────────────────────────────────────────────────────────────

    async def _dashboard(
        self,
        scope: CompanyScope,
        window: DateWindow,
        today: datetime.date,
        include_rollups: bool,
    ) -> MetricsBundle:
        if scope.is_empty:
            bundle = aggregator.aggregate(
                [],
                window,
                today,
                include_rollups=include_rollups,
                top_dishes_limit=self._top_dishes_limit,
                timeline_days=self._timeline_days,
            )
            bundle.active_companies = 0
            return bundle

        # One query covers the window, today and the timeline; a second one
        # collects every pending order regardless of its date.
        fetch_window = window.span(today, *trailing_days(today, self._timeline_days))
        fetches = [
            self._fetcher.fetch_orders(scope, fetch_window),
            self._fetcher.fetch_orders(scope, status=OrderStatus.pending),
        ]
        if include_rollups:
            fetches.append(ScopeService.list_scope_companies(self._session_factory, scope))

        results = await self._gather(*fetches)
        rows = merge_rows(results[0], results[1])
        companies = results[2] if include_rollups else None

        bundle = aggregator.aggregate(
            rows,
            window,
            today,
            include_rollups=include_rollups,
            companies=companies,
            top_dishes_limit=self._top_dishes_limit,
            timeline_days=self._timeline_days,
        )
        if companies is not None:
            bundle.active_companies = len(companies)
        elif not scope.is_all:
            bundle.active_companies = len(scope.company_ids)

        logger.info(
            "Dashboard stats computed",
            scope=scope.kind.value,
            window_start=window.start.isoformat(),
            window_end=window.end.isoformat(),
            rows=len(rows),
        )
        return bundle

    async def _with_timeout(self, aw: Awaitable):
        """Bound one read (or a gathered group of reads) by the fetch timeout."""
        try:
            return await asyncio.wait_for(aw, timeout=self._fetch_timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Stats fetch timed out", timeout=self._fetch_timeout)
            raise FetchError("Timed out while loading dashboard data", cause=exc) from exc

    async def _gather(self, *aws: Awaitable) -> list:
        """Await independent fetches together under the fetch timeout."""
        return await self._with_timeout(self._all_or_nothing(aws))

    @staticmethod
    async def _all_or_nothing(aws: Sequence[Awaitable]) -> list:
        # gather leaves the other fetches running when one fails; cancel them
        # so they release their connections before the error propagates.
        tasks = [asyncio.ensure_future(aw) for aw in aws]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    @staticmethod
    def _window(
        kind: Union[WindowKind, str],
        today: datetime.date,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> DateWindow:
        try:
            return build_window(kind, today, start, end)
        except ValueError as exc:
            raise InvalidWindowError(str(exc)) from exc

    async def _scope_for(self, who: Union[TenantIdentity, CompanyScope]) -> CompanyScope:
        if isinstance(who, CompanyScope):
            return who
        return await self._with_timeout(
            ScopeService.resolve_company_scope(self._session_factory, who)
        )

    @staticmethod
    def _role_of(who: Union[TenantIdentity, CompanyScope]) -> str:
        if isinstance(who, TenantIdentity):
            return who.role.value
        return f"scope:{who.kind.value}"

    async def _guard(self, pending: Awaitable[MetricsBundle], role: str) -> StatsResult:
        try:
            bundle = await pending
        except StatsError as exc:
            logger.warning(
                "Stats request failed",
                role=role,
                kind=exc.kind,
                error=str(exc),
                cause=repr(getattr(exc, "cause", None)),
            )
            return StatsResult(ok=False, error=self._describe(exc))
        return StatsResult(ok=True, data=bundle)

    @staticmethod
    def _describe(exc: StatsError) -> ErrorDescriptor:
        return ErrorDescriptor(kind=exc.kind, message=str(exc), retryable=exc.retryable)
