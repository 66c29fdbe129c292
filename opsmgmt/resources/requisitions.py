"""Requisition queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import PurchaseOrder, Requisition
from opsmgmt.resources.base import CrudResource, wire_params
from opsmgmt.resources.purchase_orders import PurchaseOrdersResource
from opsmgmt.types import ExportFormat


class RequisitionsResource(CrudResource[Requisition]):
    base_path = "/api/procurement/requisitions"
    model = Requisition
    list_key = "requisitions"
    detail_key = "requisition"

    async def submit(self, requisition_id: str) -> Requisition:
        return await self._transition(requisition_id, "submit")

    async def approve(
        self, requisition_id: str, approved_by: str, comments: str | None = None
    ) -> Requisition:
        return await self._transition(
            requisition_id,
            "approve",
            wire_params({"approved_by": approved_by, "comments": comments}),
        )

    async def reject(self, requisition_id: str, rejected_by: str, reason: str) -> Requisition:
        return await self._transition(
            requisition_id, "reject", wire_params({"rejected_by": rejected_by, "reason": reason})
        )

    async def convert_to_purchase_order(
        self, requisition_id: str, supplier_id: str, **details: Any
    ) -> PurchaseOrder:
        """Turn an approved requisition into a purchase order."""
        payload = await self._mutate(
            "POST",
            f"{self.base_path}/{requisition_id}/convert-to-po",
            json=wire_params({"supplier_id": supplier_id, **details}),
            invalidates=[
                *self._affected(requisition_id),
                (PurchaseOrdersResource.list_key,),
            ],
        )
        return PurchaseOrder.model_validate(payload)

    async def templates(self, **filters: Any) -> list[dict[str, Any]]:
        params = wire_params(filters)
        return await self._query(
            query_key("requisition-templates", params=params), f"{self.base_path}/templates", params
        ) or []

    async def create_template(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/templates",
            json=data,
            invalidates=[("requisition-templates",)],
        )

    async def apply_template(self, template_id: str, data: dict[str, Any]) -> Requisition:
        payload = await self._mutate(
            "POST",
            f"{self.base_path}/templates/{template_id}/apply",
            json=data,
            invalidates=[self._list_prefix()],
        )
        return self._parse(payload)

    async def bulk_approve(
        self, ids: list[str], approved_by: str, comments: str | None = None
    ) -> Any:
        return await self._bulk(
            "approve", ids, wire_params({"approved_by": approved_by, "comments": comments})
        )

    async def export(self, fmt: ExportFormat | str = ExportFormat.CSV, **filters: Any) -> bytes:
        params = wire_params({"format": str(fmt), **filters})
        return await self._client.request_bytes("GET", f"{self.base_path}/export", params=params)
