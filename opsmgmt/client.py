"""OpsClient: one object wiring settings, state, HTTP and every resource."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from opsmgmt.auth.tokens import FileTokenStore, StoredTokens, TokenStore
from opsmgmt.cache.query_cache import QueryCache
from opsmgmt.config.settings import Settings, get_settings
from opsmgmt.http.client import ApiClient
from opsmgmt.http.navigation import Navigator
from opsmgmt.resources.contracts import ContractsResource
from opsmgmt.resources.inventory import InventoryResource
from opsmgmt.resources.purchase_orders import PurchaseOrdersResource
from opsmgmt.resources.requisitions import RequisitionsResource
from opsmgmt.resources.rfx import RfxResource
from opsmgmt.resources.settings import SettingsResource
from opsmgmt.resources.suppliers import SuppliersResource
from opsmgmt.resources.users import UsersResource
from opsmgmt.resources.warehouses import WarehousesResource
from opsmgmt.tenancy.context import TenantContext
from opsmgmt.tenancy.selection import FileTenantSelectionStore, TenantSelectionStore
from opsmgmt.tenancy.store import TenantStore

if TYPE_CHECKING:
    import httpx

    from opsmgmt.tenancy.models import Tenant

logger = structlog.get_logger(__name__)


class OpsClient:
    """Entry point for callers.

    Usage::

        async with OpsClient() as ops:
            await ops.tenants.fetch_user_tenants()
            page = await ops.purchase_orders.list(status="pending")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        token_store: TokenStore | None = None,
        tenant_selection: TenantSelectionStore | None = None,
        navigator: Navigator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.token_store = token_store or FileTokenStore(self.settings.tokens_file)
        self.context = TenantContext()
        self.cache = QueryCache(stale_seconds=self.settings.query_stale_seconds)
        self.api = ApiClient.from_settings(
            self.settings, self.context, self.token_store, navigator, transport=transport
        )
        self.tenants = TenantStore(
            self.api,
            self.context,
            tenant_selection or FileTenantSelectionStore(self.settings.tenant_file),
        )
        self.tenants.on_switch(self._on_tenant_switch)

        self.requisitions = RequisitionsResource(self.api, self.cache)
        self.purchase_orders = PurchaseOrdersResource(self.api, self.cache)
        self.suppliers = SuppliersResource(self.api, self.cache)
        self.rfx = RfxResource(self.api, self.cache)
        self.contracts = ContractsResource(self.api, self.cache)
        self.users = UsersResource(self.api, self.cache)
        self.inventory = InventoryResource(self.api, self.cache)
        self.warehouses = WarehousesResource(self.api, self.cache)
        self.app_settings = SettingsResource(self.api, self.cache)

    @property
    def navigator(self) -> Navigator:
        return self.api.navigator

    def login(self, access_token: str, refresh_token: str | None = None) -> None:
        """Store tokens obtained from the identity provider."""
        self.token_store.save(StoredTokens(access_token=access_token, refresh_token=refresh_token))

    def logout(self) -> None:
        self.token_store.clear()
        self.cache.clear()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> OpsClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _on_tenant_switch(self, tenant: Tenant) -> None:
        # Cached results are not partitioned by tenant; start over
        self.cache.clear()
        logger.debug("query_cache_reset_for_tenant", tenant_id=tenant.id)
