"""
dependencies.py
---------------
FastAPI dependency injection functions for identity and services.

Flow:
  1. OAuth2PasswordBearer extracts the Bearer token from the Authorization header.
  2. decode_access_token validates and parses the JWT (no DB round-trip).
  3. get_current_identity turns the claims into a TenantIdentity. The role
     claim is parsed into the closed TenantRole tag here, once; an unknown
     role is rejected like a bad token.
  4. require_admin layers a role check on top of get_current_identity.

Authorisation beyond "who is asking" happens upstream; the identity only
decides which companies the statistics are scoped to.
"""

import datetime
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mealstats.core.logging import bind_tenant_context, get_logger
from mealstats.core.security import decode_access_token
from mealstats.db.session import get_session_factory
from mealstats.schemas.identity import TenantIdentity, TenantRole
from mealstats.services.stats_service import StatsService

logger = get_logger(__name__)

# Tokens are issued by the platform's auth service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login", auto_error=True)

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_identity(
    token: Annotated[str, Depends(oauth2_scheme)],
) -> TenantIdentity:
    """
    Decode the JWT and return the caller's tenant identity.
    Raises 401 if the token is invalid or carries an unknown role.
    """
    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        logger.warning("JWT decode failed", error=str(exc))
        raise _CREDENTIALS_EXCEPTION

    try:
        role = TenantRole(payload.get("role"))
    except ValueError:
        logger.warning("JWT carries unknown role", role=payload.get("role"))
        raise _CREDENTIALS_EXCEPTION

    identity = TenantIdentity(
        role=role,
        user_id=payload.get("sub"),
        provider_id=payload.get("provider_id"),
        company_id=payload.get("company_id"),
    )
    bind_tenant_context(role.value, identity.provider_id, identity.company_id)
    return identity


async def require_admin(
    identity: Annotated[TenantIdentity, Depends(get_current_identity)],
) -> TenantIdentity:
    """
    Extends get_current_identity with an admin role check.
    Raises 403 if the caller is not a platform admin.
    """
    if identity.role is not TenantRole.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return identity


def get_today_provider() -> Callable[[], datetime.date]:
    """Clock used for "today" and "this month"; overridden in tests."""
    return datetime.date.today


def get_stats_service(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    today_provider: Annotated[Callable[[], datetime.date], Depends(get_today_provider)],
) -> StatsService:
    return StatsService(session_factory, today_provider=today_provider)
