"""Explicit tenant context carried into every request-issuing call."""

from __future__ import annotations

from dataclasses import dataclass, field

from opsmgmt.tenancy.models import Tenant


@dataclass(slots=True)
class TenantContext:
    """Client-side tenant state.

    One instance is shared by the HTTP client (which reads ``current_tenant``
    for the ``X-Tenant-ID`` header) and the tenant store (which mutates it).
    """

    current_tenant: Tenant | None = None
    user_tenants: list[Tenant] = field(default_factory=list)
    is_loading: bool = False
    error: str | None = None

    @property
    def tenant_id(self) -> str | None:
        return self.current_tenant.id if self.current_tenant else None

    def find(self, tenant_id: str) -> Tenant | None:
        for tenant in self.user_tenants:
            if tenant.id == tenant_id:
                return tenant
        return None
