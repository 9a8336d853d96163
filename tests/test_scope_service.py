import pytest

from mealstats.core.errors import UnassignedCompanyError
from mealstats.models import Company, Provider
from mealstats.schemas.identity import TenantIdentity, TenantRole
from mealstats.schemas.scope import ScopeKind
from mealstats.services.scope_service import ScopeService


@pytest.fixture
async def two_providers(seed):
    await seed(
        Provider(id="p1", business_name="Cocina Uno"),
        Provider(id="p2", business_name="Empty Kitchen"),
        Company(id="c-globex", name="Globex", provider_id="p1"),
        Company(id="c-acme", name="Acme", provider_id="p1"),
    )


async def test_admin_scope_is_all(session_factory):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.admin)
    )
    assert scope.kind is ScopeKind.all
    assert scope.company_ids == ()


async def test_provider_scope_lists_its_companies(session_factory, two_providers):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.provider, provider_id="p1")
    )
    assert scope.kind is ScopeKind.companies
    assert scope.company_ids == ("c-acme", "c-globex")


async def test_provider_without_companies_gets_empty_scope(session_factory, two_providers):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.provider, provider_id="p2")
    )
    assert scope.is_empty


async def test_supervisor_scope_is_its_company(session_factory):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.supervisor, company_id="c-acme")
    )
    assert scope.company_ids == ("c-acme",)


async def test_supervisor_without_company_is_a_configuration_error(session_factory):
    with pytest.raises(UnassignedCompanyError, match="^no company currently assigned$"):
        await ScopeService.resolve_company_scope(
            session_factory, TenantIdentity(role=TenantRole.supervisor)
        )


async def test_employee_scope_is_empty(session_factory):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.employee, company_id="c-acme")
    )
    assert scope.is_empty


async def test_list_scope_companies_keeps_scope_order(session_factory, two_providers):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.provider, provider_id="p1")
    )
    companies = await ScopeService.list_scope_companies(session_factory, scope)
    assert companies == [("c-acme", "Acme"), ("c-globex", "Globex")]


async def test_list_scope_companies_for_admin_enumerates_everything(session_factory, two_providers):
    scope = await ScopeService.resolve_company_scope(
        session_factory, TenantIdentity(role=TenantRole.admin)
    )
    companies = await ScopeService.list_scope_companies(session_factory, scope)
    assert [name for _, name in companies] == ["Acme", "Globex"]
