"""Purchase order queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import PurchaseOrder
from opsmgmt.resources.base import CrudResource, wire_params
from opsmgmt.types import ExportFormat, SendMethod

ANALYTICS_STALE_SECONDS = 600.0


class PurchaseOrdersResource(CrudResource[PurchaseOrder]):
    base_path = "/api/procurement/purchase-orders"
    model = PurchaseOrder
    list_key = "purchase-orders"
    detail_key = "purchase-order"

    async def approve(
        self, po_id: str, approved_by: str, comments: str | None = None
    ) -> PurchaseOrder:
        return await self._transition(
            po_id, "approve", wire_params({"approved_by": approved_by, "comments": comments})
        )

    async def reject(self, po_id: str, rejected_by: str, reason: str) -> PurchaseOrder:
        return await self._transition(
            po_id, "reject", wire_params({"rejected_by": rejected_by, "reason": reason})
        )

    async def send_to_supplier(
        self,
        po_id: str,
        method: SendMethod | str = SendMethod.EMAIL,
        recipient_email: str | None = None,
    ) -> PurchaseOrder:
        return await self._transition(
            po_id,
            "send",
            wire_params({"method": str(method), "recipient_email": recipient_email}),
        )

    async def acknowledge(
        self,
        po_id: str,
        acknowledged_by: str,
        confirmed_delivery_date: str | None = None,
        price_confirmation: bool | None = None,
        quantity_confirmation: bool | None = None,
        notes: str | None = None,
    ) -> PurchaseOrder:
        return await self._transition(
            po_id,
            "acknowledge",
            wire_params(
                {
                    "acknowledged_by": acknowledged_by,
                    "confirmed_delivery_date": confirmed_delivery_date,
                    "price_confirmation": price_confirmation,
                    "quantity_confirmation": quantity_confirmation,
                    "notes": notes,
                }
            ),
        )

    async def receive(self, po_id: str, items: list[dict[str, Any]] | None = None) -> PurchaseOrder:
        return await self._transition(po_id, "receive", {"items": items or []})

    async def create_change_order(
        self, po_id: str, change_reason: str, changes: list[dict[str, Any]]
    ) -> PurchaseOrder:
        """Record field changes (``{"field", "oldValue", "newValue"}``) against an order."""
        result = await self._transition(
            po_id, "changes", {"changeReason": change_reason, "changes": changes}
        )
        self._cache.invalidate(("purchase-order-history", po_id))
        return result

    async def history(self, po_id: str) -> list[dict[str, Any]]:
        return await self._query(
            query_key("purchase-order-history", po_id), f"{self.base_path}/{po_id}/history"
        ) or []

    async def analytics(self, **filters: Any) -> dict[str, Any]:
        params = wire_params(filters)
        return await self._query(
            query_key("purchase-order-analytics", params=params),
            f"{self.base_path}/analytics",
            params,
            stale_seconds=ANALYTICS_STALE_SECONDS,
        )

    async def bulk_approve(
        self, ids: list[str], approved_by: str, comments: str | None = None
    ) -> list[PurchaseOrder]:
        payload = await self._bulk(
            "approve", ids, wire_params({"approved_by": approved_by, "comments": comments})
        )
        return [self._parse(item) for item in payload or []]

    async def bulk_send(
        self, ids: list[str], method: SendMethod | str = SendMethod.EMAIL
    ) -> list[PurchaseOrder]:
        payload = await self._bulk("send", ids, {"method": str(method)})
        return [self._parse(item) for item in payload or []]

    async def export(self, fmt: ExportFormat | str = ExportFormat.CSV, **filters: Any) -> bytes:
        params = wire_params({"format": str(fmt), **filters})
        return await self._client.request_bytes("GET", f"{self.base_path}/export", params=params)
