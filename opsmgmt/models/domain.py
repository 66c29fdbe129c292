"""Wire models for the backend's domain entities.

Field names are snake_case in Python and camelCase on the wire. Models keep
unknown fields so new backend attributes survive a round trip.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from opsmgmt.types import PurchaseOrderStatus, RequisitionStatus, RfxStatus

T = TypeVar("T", bound=BaseModel)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Serialize for a request body: camelCase keys, unset fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class AuditedEntity(WireModel):
    id: str
    tenant_id: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Requisition(AuditedEntity):
    requisition_number: str | None = None
    title: str | None = None
    department: str | None = None
    priority: str | None = None
    total_amount: float | None = None
    currency: str | None = None
    items: list[dict[str, Any]] = []
    status: RequisitionStatus | str = RequisitionStatus.DRAFT


class PurchaseOrderItem(WireModel):
    item_id: str
    item_name: str | None = None
    quantity: float
    unit_price: float
    total_price: float | None = None
    delivery_date: str | None = None
    received_quantity: float | None = None
    description: str | None = None


class PurchaseOrder(AuditedEntity):
    po_number: str | None = None
    supplier_id: str | None = None
    supplier_name: str | None = None
    requisition_id: str | None = None
    currency: str | None = None
    payment_terms: int | None = None
    delivery_terms: str | None = None
    shipping_method: str | None = None
    items: list[PurchaseOrderItem] = []
    total_amount: float | None = None
    status: PurchaseOrderStatus | str = PurchaseOrderStatus.DRAFT
    approved_at: str | None = None
    approved_by: str | None = None
    sent_at: str | None = None
    acknowledged_at: str | None = None
    expected_delivery_date: str | None = None
    notes: str | None = None


class Rfx(AuditedEntity):
    title: str | None = None
    type: str | None = None
    category: str | None = None
    deadline: str | None = None
    status: RfxStatus | str = RfxStatus.DRAFT


class Contract(AuditedEntity):
    contract_number: str | None = None
    title: str | None = None
    supplier_id: str | None = None
    value: float | None = None
    currency: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    status: str | None = None


class Supplier(AuditedEntity):
    name: str | None = None
    code: str | None = None
    email: str | None = None
    category: str | None = None
    status: str | None = None


class Warehouse(AuditedEntity):
    name: str | None = None
    code: str | None = None
    address: str | None = None
    capacity: float | None = None
    status: str | None = None


class User(AuditedEntity):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    roles: list[str] = []
    status: str | None = None


class StockItem(AuditedEntity):
    sku: str | None = None
    name: str | None = None
    warehouse_id: str | None = None
    quantity: float | None = None
    reserved_quantity: float | None = None


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint."""

    data: list[T]
    total: int = 0
    page: int = 1
    limit: int | None = None

    @classmethod
    def from_payload(cls, model: type[T], payload: Any) -> Page[T]:
        """Accept ``{data, total, page, limit}``, ``{items, total, page, pageSize}`` or a bare array."""
        if isinstance(payload, list):
            items = [model.model_validate(item) for item in payload]
            return Page[model](data=items, total=len(items), page=1, limit=None)
        if isinstance(payload, dict):
            raw = payload.get("data") or payload.get("items") or []
            items = [model.model_validate(item) for item in raw]
            total = payload.get("total")
            limit = payload.get("limit")
            return Page[model](
                data=items,
                total=len(items) if total is None else total,
                page=payload.get("page") or 1,
                limit=payload.get("pageSize") if limit is None else limit,
            )
        return Page[model](data=[])
