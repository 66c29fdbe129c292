"""Warehouse queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import Warehouse
from opsmgmt.resources.base import CrudResource


class WarehousesResource(CrudResource[Warehouse]):
    """Every warehouse key starts with ``warehouses``; one prefix covers list, detail and children."""

    base_path = "/api/warehouse/warehouses"
    model = Warehouse
    list_key = "warehouses"
    detail_key = "warehouses"

    async def analytics(self, warehouse_id: str) -> dict[str, Any]:
        return await self._query(
            query_key(self.list_key, warehouse_id, "analytics"),
            f"{self.base_path}/{warehouse_id}/analytics",
        )

    async def zones(self, warehouse_id: str) -> list[dict[str, Any]]:
        return await self._query(
            query_key(self.list_key, warehouse_id, "zones"),
            f"{self.base_path}/{warehouse_id}/zones",
        ) or []

    async def create_zone(self, warehouse_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/{warehouse_id}/zones",
            json=data,
            invalidates=[(self.list_key, warehouse_id)],
        )

    async def delete_zone(self, warehouse_id: str, zone_id: str) -> None:
        await self._mutate(
            "DELETE",
            f"{self.base_path}/{warehouse_id}/zones/{zone_id}",
            invalidates=[(self.list_key, warehouse_id)],
        )
