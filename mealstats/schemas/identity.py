"""
schemas/identity.py
-------------------
The tenant identity consumed by the stats engine.

The role is a closed tag resolved once, at the HTTP boundary, from the token
claims. Code further down branches on `role` only and never infers a role
from which ids happen to be present.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TenantRole(str, Enum):
    admin = "admin"
    provider = "provider"
    supervisor = "supervisor"
    employee = "employee"


class TenantIdentity(BaseModel):
    role: TenantRole
    user_id: Optional[str] = None
    provider_id: Optional[str] = None   # set when role == provider
    company_id: Optional[str] = None    # set when role == supervisor (or employee)

    model_config = {"frozen": True}
