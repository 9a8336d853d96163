"""
services/scope_service.py
-------------------------
Resolves which companies a tenant identity may aggregate over.

  admin       → ALL (no company filter, the table is never enumerated)
  provider    → every company whose provider_id matches; none → EMPTY
  supervisor  → exactly its own company; missing → UnassignedCompanyError
  anything else → EMPTY

The only I/O is the read that enumerates a provider's companies.
"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.errors import FetchError, UnassignedCompanyError
from mealstats.core.logging import get_logger
from mealstats.models.company import Company
from mealstats.schemas.identity import TenantIdentity, TenantRole
from mealstats.schemas.scope import CompanyScope

logger = get_logger(__name__)


class ScopeService:

    @staticmethod
    async def resolve_company_scope(
        session_factory: async_sessionmaker[AsyncSession],
        identity: TenantIdentity,
    ) -> CompanyScope:
        """
        Raises:
            UnassignedCompanyError: supervisor without a company.
            FetchError: the provider's companies could not be read.
        """
        if identity.role is TenantRole.admin:
            return CompanyScope.all()

        if identity.role is TenantRole.supervisor:
            if not identity.company_id:
                logger.warning("Supervisor without company", user_id=identity.user_id)
                raise UnassignedCompanyError()
            return CompanyScope.of([identity.company_id])

        if identity.role is TenantRole.provider:
            if not identity.provider_id:
                return CompanyScope.empty()
            company_ids = await ScopeService._provider_company_ids(
                session_factory, identity.provider_id
            )
            if not company_ids:
                logger.info("Provider has no companies", provider_id=identity.provider_id)
            return CompanyScope.of(company_ids)

        return CompanyScope.empty()

    @staticmethod
    async def list_scope_companies(
        session_factory: async_sessionmaker[AsyncSession],
        scope: CompanyScope,
    ) -> list[tuple[str, str]]:
        """
        Return (id, name) pairs for the companies in scope, in scope order
        (name order for ALL). Ids without a stored company are dropped.
        """
        if scope.is_empty:
            return []

        stmt = select(Company.id, Company.name)
        if scope.is_all:
            stmt = stmt.order_by(Company.name, Company.id)
        else:
            stmt = stmt.where(Company.id.in_(scope.company_ids))

        try:
            async with session_factory() as session:
                result = await session.execute(stmt)
                rows = [(row.id, row.name) for row in result]
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Company listing failed", error=str(exc))
            raise FetchError("Could not load companies", cause=exc) from exc

        if scope.is_all:
            return rows
        names = dict(rows)
        return [(cid, names[cid]) for cid in scope.company_ids if cid in names]

    @staticmethod
    async def _provider_company_ids(
        session_factory: async_sessionmaker[AsyncSession],
        provider_id: str,
    ) -> list[str]:
        stmt = (
            select(Company.id)
            .where(Company.provider_id == provider_id)
            .order_by(Company.name, Company.id)
        )
        try:
            async with session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Provider company lookup failed", provider_id=provider_id, error=str(exc))
            raise FetchError("Could not load provider companies", cause=exc) from exc
