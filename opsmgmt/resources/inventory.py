"""Inventory: stock levels, movements, adjustments and reservations.

Movements and adjustments change stock levels, so writing either one also
invalidates the cached stock item lists.
"""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import Page, StockItem
from opsmgmt.resources.base import Resource, wire_params

STOCK_ITEMS = "stock-items"
STOCK_ITEM = "stock-item"
MOVEMENTS = "stock-movements"
ADJUSTMENTS = "stock-adjustments"
RESERVATIONS = "stock-reservations"


class InventoryResource(Resource):
    base_path = "/api/inventory"

    async def stock(self, **filters: Any) -> Page[StockItem]:
        params = wire_params(filters)
        payload = await self._query(
            query_key(STOCK_ITEMS, params=params), f"{self.base_path}/stock", params
        )
        return Page.from_payload(StockItem, payload)

    async def stock_item(self, item_id: str) -> StockItem:
        payload = await self._query(query_key(STOCK_ITEM, item_id), f"{self.base_path}/stock/{item_id}")
        return StockItem.model_validate(payload)

    async def update_stock_item(self, item_id: str, data: dict[str, Any]) -> StockItem:
        payload = await self._mutate(
            "PUT",
            f"{self.base_path}/stock/{item_id}",
            json=data,
            invalidates=[(STOCK_ITEMS,), (STOCK_ITEM, item_id)],
        )
        return StockItem.model_validate(payload)

    async def movements(self, **filters: Any) -> dict[str, Any]:
        return await self._collection(MOVEMENTS, "movements", filters)

    async def movement(self, movement_id: str) -> dict[str, Any]:
        return await self._query(
            query_key(MOVEMENTS, movement_id), f"{self.base_path}/movements/{movement_id}"
        )

    async def create_movement(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/movements",
            json=data,
            invalidates=[(MOVEMENTS,), (STOCK_ITEMS,), (STOCK_ITEM,)],
        )

    async def adjustments(self, **filters: Any) -> dict[str, Any]:
        return await self._collection(ADJUSTMENTS, "adjustments", filters)

    async def create_adjustment(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/adjustments",
            json=data,
            invalidates=[(ADJUSTMENTS,), (STOCK_ITEMS,), (STOCK_ITEM,)],
        )

    async def approve_adjustment(self, adjustment_id: str, approved_by: str) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/adjustments/{adjustment_id}/approve",
            json={"approvedBy": approved_by},
            invalidates=[(ADJUSTMENTS,), (STOCK_ITEMS,), (STOCK_ITEM,)],
        )

    async def reservations(self, **filters: Any) -> dict[str, Any]:
        return await self._collection(RESERVATIONS, "reservations", filters)

    async def create_reservation(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/reservations",
            json=data,
            invalidates=[(RESERVATIONS,), (STOCK_ITEMS,)],
        )

    async def fulfill_reservation(self, reservation_id: str) -> dict[str, Any]:
        return await self._reservation_action(reservation_id, "fulfill")

    async def cancel_reservation(self, reservation_id: str) -> dict[str, Any]:
        return await self._reservation_action(reservation_id, "cancel")

    async def _reservation_action(self, reservation_id: str, action: str) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/reservations/{reservation_id}/{action}",
            invalidates=[(RESERVATIONS,), (STOCK_ITEMS,), (STOCK_ITEM,)],
        )

    async def _collection(self, key: str, segment: str, filters: dict[str, Any]) -> dict[str, Any]:
        params = wire_params(filters)
        return await self._query(query_key(key, params=params), f"{self.base_path}/{segment}", params)
