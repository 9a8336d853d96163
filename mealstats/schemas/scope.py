"""
schemas/scope.py
----------------
The set of companies a tenant identity may aggregate over.

  ALL       → platform admin; deliberately not enumerated
  EMPTY     → nothing to aggregate (all metrics are zero, not an error)
  COMPANIES → an explicit, ordered tuple of company ids
"""

from enum import Enum

from pydantic import BaseModel


class ScopeKind(str, Enum):
    all = "all"
    empty = "empty"
    companies = "companies"


class CompanyScope(BaseModel):
    kind: ScopeKind
    company_ids: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def all(cls) -> "CompanyScope":
        return cls(kind=ScopeKind.all)

    @classmethod
    def empty(cls) -> "CompanyScope":
        return cls(kind=ScopeKind.empty)

    @classmethod
    def of(cls, company_ids) -> "CompanyScope":
        ids = tuple(dict.fromkeys(company_ids))
        if not ids:
            return cls.empty()
        return cls(kind=ScopeKind.companies, company_ids=ids)

    @property
    def is_all(self) -> bool:
        return self.kind is ScopeKind.all

    @property
    def is_empty(self) -> bool:
        return self.kind is ScopeKind.empty
