"""Supplier queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import Supplier
from opsmgmt.resources.base import CrudResource, wire_params


class SuppliersResource(CrudResource[Supplier]):
    base_path = "/api/suppliers"
    model = Supplier
    list_key = "suppliers"
    detail_key = "supplier"

    async def activate(self, supplier_id: str) -> Supplier:
        return await self._transition(supplier_id, "activate")

    async def deactivate(self, supplier_id: str, reason: str | None = None) -> Supplier:
        return await self._transition(supplier_id, "deactivate", wire_params({"reason": reason}))

    async def performance(self, supplier_id: str, **filters: Any) -> dict[str, Any]:
        params = wire_params(filters)
        return await self._query(
            query_key("supplier-performance", supplier_id, params=params),
            f"{self.base_path}/{supplier_id}/performance",
            params,
        )

    async def update_performance(self, supplier_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "PUT",
            f"{self.base_path}/{supplier_id}/performance",
            json=data,
            invalidates=[("supplier-performance", supplier_id), self._detail_key(supplier_id)],
        )

    async def risk_assessment(self, supplier_id: str) -> dict[str, Any]:
        return await self._query(
            query_key("risk-assessment", supplier_id),
            f"{self.base_path}/{supplier_id}/risk-assessment",
        )

    async def create_risk_assessment(self, supplier_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/{supplier_id}/risk-assessment",
            json=data,
            invalidates=[("risk-assessment", supplier_id), self._detail_key(supplier_id)],
        )

    async def analytics(self) -> dict[str, Any]:
        return await self._query(query_key("supplier-analytics"), f"{self.base_path}/analytics")

    async def bulk_update_status(self, ids: list[str], status: str) -> Any:
        return await self._bulk("update-status", ids, {"status": status})
