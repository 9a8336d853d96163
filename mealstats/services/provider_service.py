"""
services/provider_service.py
----------------------------
Read helpers for providers and companies.

Service layer is responsible for:
  - Constructing queries
  - Returning domain objects (ORM models) to the caller
  - Converting data-source failures into FetchError
  - Never returning HTTP responses (that's the route's job)
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.errors import FetchError
from mealstats.core.logging import get_logger
from mealstats.models.company import Company
from mealstats.models.provider import Provider

logger = get_logger(__name__)


class ProviderService:

    @staticmethod
    async def list_providers(
        session_factory: async_sessionmaker[AsyncSession],
    ) -> list[Provider]:
        try:
            async with session_factory() as session:
                result = await session.execute(
                    select(Provider).order_by(Provider.business_name, Provider.id)
                )
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Provider listing failed", error=str(exc))
            raise FetchError("Could not load providers", cause=exc) from exc

    @staticmethod
    async def list_companies(
        session_factory: async_sessionmaker[AsyncSession],
    ) -> list[Company]:
        try:
            async with session_factory() as session:
                result = await session.execute(
                    select(Company).order_by(Company.name, Company.id)
                )
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Company listing failed", error=str(exc))
            raise FetchError("Could not load companies", cause=exc) from exc
