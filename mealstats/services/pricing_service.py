"""
services/pricing_service.py
---------------------------
Subsidised price preview shown to employees before they order.

Reads the lunch option's current price and the company's subsidy settings,
then prices them with services/subsidy.compute_price, the same function the
aggregator uses for revenue. Preview and reported revenue therefore match
for as long as the option's price is unchanged.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.errors import FetchError
from mealstats.core.logging import get_logger
from mealstats.models.company import Company
from mealstats.models.lunch_option import LunchOption
from mealstats.schemas.orders import SubsidyConfig
from mealstats.schemas.pricing import PricePreview
from mealstats.services.subsidy import compute_price

logger = get_logger(__name__)


class PricingService:

    @staticmethod
    async def preview(
        session_factory: async_sessionmaker[AsyncSession],
        lunch_option_id: str,
        company_id: str,
    ) -> PricePreview:
        """
        Raises:
            LookupError: unknown lunch option or company.
            FetchError: the data source failed.
        """
        try:
            async with session_factory() as session:
                option = await session.scalar(
                    select(LunchOption).where(LunchOption.id == lunch_option_id)
                )
                company = await session.scalar(
                    select(Company).where(Company.id == company_id)
                )
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Price preview lookup failed",
                lunch_option_id=lunch_option_id,
                company_id=company_id,
                error=str(exc),
            )
            raise FetchError("Could not load price data", cause=exc) from exc

        if option is None:
            raise LookupError(f"Lunch option '{lunch_option_id}' not found")
        if company is None:
            raise LookupError(f"Company '{company_id}' not found")

        breakdown = compute_price(
            option.price,
            SubsidyConfig(
                percentage=company.subsidy_percentage or 0,
                fixed_amount=company.fixed_subsidy_amount or 0,
            ),
        )
        return PricePreview(
            lunch_option_id=option.id,
            company_id=company.id,
            name=option.name,
            base_price=option.price,
            payable=breakdown.payable,
            covered=breakdown.covered,
        )
