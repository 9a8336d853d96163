"""
services/order_fetcher.py
-------------------------
Reads order rows for a company scope and date window.

Every row is joined (LEFT OUTER) with:
  - its lunch option → id / name / price
  - its company      → subsidy percentage / fixed amount
and mapped to an explicit OrderRow. Missing joins become None, never a
half-filled dict.

Each call opens its own session so independent fetches can be awaited
together with asyncio.gather. Data-source failures surface as FetchError;
retrying is left to the caller.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.errors import FetchError
from mealstats.core.logging import get_logger
from mealstats.models.company import Company
from mealstats.models.lunch_option import LunchOption
from mealstats.models.order import Order, OrderStatus
from mealstats.schemas.orders import LunchOptionRef, OrderRow, SubsidyConfig
from mealstats.schemas.scope import CompanyScope
from mealstats.schemas.window import DateWindow

logger = get_logger(__name__)


class OrderFetcher:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_orders(
        self,
        scope: CompanyScope,
        window: Optional[DateWindow] = None,
        status: Optional[OrderStatus] = None,
    ) -> list[OrderRow]:
        """
        Return the orders of `scope`, optionally restricted to an inclusive
        date window and/or a single status, in arrival order.
        """
        if scope.is_empty:
            return []

        stmt = (
            select(
                Order.id,
                Order.company_id,
                Order.user_id,
                Order.date,
                Order.status,
                LunchOption.id.label("option_id"),
                LunchOption.name.label("option_name"),
                LunchOption.price.label("option_price"),
                Company.id.label("joined_company_id"),
                Company.subsidy_percentage,
                Company.fixed_subsidy_amount,
            )
            .outerjoin(LunchOption, Order.lunch_option_id == LunchOption.id)
            .outerjoin(Company, Order.company_id == Company.id)
            .order_by(Order.date, Order.created_at, Order.id)
        )
        if not scope.is_all:
            stmt = stmt.where(Order.company_id.in_(scope.company_ids))
        if window is not None:
            stmt = stmt.where(Order.date.between(window.start, window.end))
        if status is not None:
            stmt = stmt.where(Order.status == OrderStatus(status).value)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                records = result.all()
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Order fetch failed",
                scope=scope.kind.value,
                window=window.model_dump(mode="json") if window else None,
                error=str(exc),
            )
            raise FetchError("Could not load orders", cause=exc) from exc

        rows = [self._to_row(record) for record in records]
        logger.debug(
            "Orders fetched",
            scope=scope.kind.value,
            companies=len(scope.company_ids),
            status=status,
            rows=len(rows),
        )
        return rows

    async def fetch_company_orders(
        self,
        company_id: str,
        window: Optional[DateWindow] = None,
    ) -> list[OrderRow]:
        """Single-company fetch used by the per-company rollup fan-out."""
        return await self.fetch_orders(CompanyScope.of([company_id]), window)

    @staticmethod
    def _to_row(record) -> OrderRow:
        lunch_option = None
        if record.option_id is not None:
            lunch_option = LunchOptionRef(
                id=record.option_id,
                name=record.option_name,
                price=record.option_price or 0,
            )
        subsidy = None
        if record.joined_company_id is not None:
            subsidy = SubsidyConfig(
                percentage=record.subsidy_percentage or 0,
                fixed_amount=record.fixed_subsidy_amount or 0,
            )
        return OrderRow(
            id=record.id,
            company_id=record.company_id,
            user_id=record.user_id,
            date=record.date,
            status=record.status,
            lunch_option=lunch_option,
            subsidy=subsidy,
        )
