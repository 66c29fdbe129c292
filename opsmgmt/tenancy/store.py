"""Tenant store: the caller's organizations and the active selection."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from opsmgmt.exceptions import ApiError, TenantError
from opsmgmt.http.client import ApiClient
from opsmgmt.tenancy.context import TenantContext
from opsmgmt.tenancy.models import Tenant, TenantCreate, TenantInvitation
from opsmgmt.tenancy.selection import InMemoryTenantSelectionStore, TenantSelectionStore

logger = structlog.get_logger(__name__)

TENANTS_PATH = "/api/tenants"

SwitchListener = Callable[[Tenant], None]


class TenantStore:
    """Loads, creates and switches tenants, keeping ``TenantContext`` current.

    Only the active tenant is persisted. Listeners registered with
    ``on_switch`` run whenever the active tenant id changes (first
    activation, switch or creation); the client facade uses this to drop
    every cached query, since cached results are not partitioned by tenant.
    """

    def __init__(
        self,
        client: ApiClient,
        context: TenantContext,
        selection: TenantSelectionStore | None = None,
    ) -> None:
        self._client = client
        self._context = context
        self._selection = selection or InMemoryTenantSelectionStore()
        self._listeners: list[SwitchListener] = []
        if self._context.current_tenant is None:
            self._context.current_tenant = self._selection.load()

    @property
    def context(self) -> TenantContext:
        return self._context

    @property
    def current_tenant(self) -> Tenant | None:
        return self._context.current_tenant

    @property
    def user_tenants(self) -> list[Tenant]:
        return self._context.user_tenants

    def on_switch(self, listener: SwitchListener) -> None:
        self._listeners.append(listener)

    def set_current_tenant(self, tenant: Tenant) -> None:
        """Activate ``tenant`` and persist it; listeners run when the id changes."""
        previous_id = self._context.tenant_id
        self._context.current_tenant = tenant
        self._selection.save(tenant)
        if tenant.id != previous_id:
            self._notify(tenant)

    async def fetch_user_tenants(self) -> list[Tenant]:
        """Load the caller's organizations; activate the first if none is active.

        Never raises on API failure: the error is recorded on the context and
        ``user_tenants`` becomes an empty list.
        """
        self._context.is_loading = True
        self._context.error = None
        try:
            payload = await self._client.get(f"{TENANTS_PATH}/user/tenants")
            tenants = [Tenant.model_validate(item) for item in payload or []]
        except (ApiError, PydanticValidationError, TypeError) as exc:
            logger.warning("tenant_fetch_failed", error=str(exc))
            self._context.error = str(exc) or "Failed to fetch tenants"
            self._context.user_tenants = []
            return []
        finally:
            self._context.is_loading = False

        self._context.user_tenants = tenants
        if self._context.current_tenant is None and tenants:
            self.set_current_tenant(tenants[0])
            logger.info("tenant_activated", tenant_id=tenants[0].id)
        logger.debug("tenants_loaded", count=len(tenants))
        return tenants

    async def switch_tenant(self, tenant_id: str) -> Tenant | None:
        """Activate a tenant from the already-loaded list.

        An id that is not in ``user_tenants`` leaves the current tenant as it
        is and returns None.
        """
        self._context.is_loading = True
        self._context.error = None
        try:
            tenant = self._context.find(tenant_id)
            if tenant is None:
                logger.warning("tenant_switch_unknown_id", tenant_id=tenant_id)
                return None
            self.set_current_tenant(tenant)
            logger.info("tenant_switched", tenant_id=tenant.id)
            return tenant
        except Exception as exc:
            self._context.error = str(exc) or "Failed to switch tenant"
            raise
        finally:
            self._context.is_loading = False

    async def create_tenant(self, data: TenantCreate | dict[str, Any]) -> Tenant:
        """Create a tenant on the server and make it the active one."""
        self._context.is_loading = True
        self._context.error = None
        try:
            body = self._validate_create(data)
            payload = await self._client.post(TENANTS_PATH, json=body.to_wire())
            tenant = Tenant.model_validate(payload)
            self._context.user_tenants = [*self._context.user_tenants, tenant]
            self.set_current_tenant(tenant)
        except Exception as exc:
            self._context.error = str(exc) or "Failed to create tenant"
            raise
        finally:
            self._context.is_loading = False
        logger.info("tenant_created", tenant_id=tenant.id, slug=tenant.slug)
        return tenant

    async def fetch_current_tenant(self) -> Tenant:
        """Ask the server which tenant it resolved for the current headers."""
        payload = await self._client.get(f"{TENANTS_PATH}/current")
        return Tenant.model_validate(payload)

    async def update_tenant(self, tenant_id: str, changes: dict[str, Any]) -> Tenant:
        payload = await self._client.put(f"{TENANTS_PATH}/{tenant_id}", json=changes)
        tenant = Tenant.model_validate(payload)
        self._context.user_tenants = [
            tenant if t.id == tenant.id else t for t in self._context.user_tenants
        ]
        if self._context.tenant_id == tenant.id:
            self.set_current_tenant(tenant)
        return tenant

    async def list_tenant_users(self, tenant_id: str) -> list[dict[str, Any]]:
        return await self._client.get(f"{TENANTS_PATH}/{tenant_id}/users") or []

    async def invite_user(
        self, tenant_id: str, invitation: TenantInvitation | dict[str, Any]
    ) -> dict[str, Any]:
        body = (
            invitation
            if isinstance(invitation, TenantInvitation)
            else TenantInvitation.model_validate(invitation)
        )
        return await self._client.post(f"{TENANTS_PATH}/{tenant_id}/invitations", json=body.to_wire())

    async def accept_invitation(self, token: str) -> dict[str, Any]:
        return await self._client.post(f"{TENANTS_PATH}/invitations/{token}/accept")

    def _notify(self, tenant: Tenant) -> None:
        for listener in self._listeners:
            listener(tenant)

    @staticmethod
    def _validate_create(data: TenantCreate | dict[str, Any]) -> TenantCreate:
        if isinstance(data, TenantCreate):
            return data
        try:
            return TenantCreate.model_validate(data)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid tenant data: {field}: {first['msg']}"
            raise TenantError(msg) from exc
