"""Enums and type aliases for the operations-management client."""

from enum import StrEnum


class PurchaseOrderStatus(StrEnum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    SENT = "sent"
    ACKNOWLEDGED = "acknowledged"
    RECEIVED = "received"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class RequisitionStatus(StrEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONVERTED = "converted"


class RfxStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"
    EVALUATED = "evaluated"
    AWARDED = "awarded"


class ForecastStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    DRAFT = "draft"
    ARCHIVED = "archived"


class TenantPlan(StrEnum):
    BASIC = "BASIC"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


class TenantRole(StrEnum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    USER = "USER"


class EntityType(StrEnum):
    PURCHASE_ORDER = "purchase_order"
    REQUISITION = "requisition"
    FORECAST = "forecast"


class Action(StrEnum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    SEND_TO_SUPPLIER = "send_to_supplier"
    ACKNOWLEDGE = "acknowledge"
    RECEIVE = "receive"
    CONVERT_TO_PO = "convert_to_po"
    DUPLICATE = "duplicate"
    EXPORT = "export"
    REFRESH = "refresh"
    RUN = "run"
    PAUSE = "pause"


class ExportFormat(StrEnum):
    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"


class SendMethod(StrEnum):
    EMAIL = "email"
    EDI = "edi"
    PORTAL = "portal"
