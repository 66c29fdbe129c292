"""Shared test fixtures."""

from __future__ import annotations

import pytest
from fakes import FakeBackend, make_tenant

from opsmgmt.auth.tokens import InMemoryTokenStore
from opsmgmt.cache.query_cache import QueryCache
from opsmgmt.client import OpsClient
from opsmgmt.config.settings import Settings
from opsmgmt.http.client import ApiClient
from opsmgmt.http.navigation import Navigator
from opsmgmt.tenancy.context import TenantContext
from opsmgmt.tenancy.selection import InMemoryTenantSelectionStore
from opsmgmt.utils.retry import RetryPolicy

BASE_URL = "http://testserver"


@pytest.fixture()
def backend() -> FakeBackend:
    """Fake REST backend with two organizations."""
    fake = FakeBackend()
    fake.tenants = [make_tenant("acme", "Acme Corp"), make_tenant("globex", "Globex")]
    return fake


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url=BASE_URL,
        state_dir=str(tmp_path),
        retry_max_attempts=3,
        retry_delay_ms=0,
    )


@pytest.fixture()
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore(access_token="test-token")


@pytest.fixture()
def tenant_context() -> TenantContext:
    return TenantContext()


@pytest.fixture()
def navigator() -> Navigator:
    return Navigator()


@pytest.fixture()
async def api(backend, tenant_context, token_store, navigator):
    """ApiClient wired to the fake backend, retrying without delay."""
    client = ApiClient(
        BASE_URL,
        tenant_context,
        token_store,
        navigator,
        retry_policy=RetryPolicy(max_attempts=3, delay_ms=0),
        transport=backend.transport(),
    )
    yield client
    await client.aclose()


@pytest.fixture()
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture()
async def ops(backend, settings, token_store, navigator):
    """Fully wired OpsClient against the fake backend."""
    client = OpsClient(
        settings,
        token_store=token_store,
        tenant_selection=InMemoryTenantSelectionStore(),
        navigator=navigator,
        transport=backend.transport(),
    )
    yield client
    await client.aclose()
