"""
core/security.py
----------------
JWT utilities for the tenant identity.

This service does not log anyone in. Tokens are minted by the platform's
auth service and carry everything the dashboards need to scope a query:
  - sub          → user id
  - role         → 'admin' | 'provider' | 'supervisor' | 'employee'
  - provider_id  → set for provider users
  - company_id   → set for supervisors and employees
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from mealstats.core.config import settings

DEFAULT_TOKEN_TTL = timedelta(minutes=60)


def create_access_token(
    subject: str,
    role: str,
    provider_id: Optional[str] = None,
    company_id: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a JWT carrying a tenant identity.

    Mirrors the claims produced by the auth service; used by internal
    tooling and the test-suite.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_TTL)
    payload: Dict[str, Any] = {
        "sub": subject,
        "role": role,
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }
    if provider_id:
        payload["provider_id"] = provider_id
    if company_id:
        payload["company_id"] = company_id
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        JWTError: If the token is invalid, expired, or tampered with.

    Returns:
        Raw payload dict.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
