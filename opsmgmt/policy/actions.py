"""Which actions a UI surface should offer for an entity in a given status.

This is presentation logic only. The backend remains the authority on
status transitions and rejects anything it does not allow.
"""

from __future__ import annotations

from opsmgmt.types import (
    Action,
    EntityType,
    ForecastStatus,
    PurchaseOrderStatus,
    RequisitionStatus,
)

# Offered regardless of status
ALWAYS_ALLOWED: dict[EntityType, frozenset[Action]] = {
    EntityType.PURCHASE_ORDER: frozenset({Action.VIEW}),
    EntityType.REQUISITION: frozenset({Action.VIEW}),
    EntityType.FORECAST: frozenset(
        {
            Action.VIEW,
            Action.EDIT,
            Action.DUPLICATE,
            Action.EXPORT,
            Action.REFRESH,
            Action.DELETE,
        }
    ),
}

ACTION_POLICY: dict[EntityType, dict[str, frozenset[Action]]] = {
    EntityType.PURCHASE_ORDER: {
        PurchaseOrderStatus.DRAFT: frozenset({Action.EDIT, Action.DELETE}),
        PurchaseOrderStatus.PENDING: frozenset({Action.APPROVE, Action.REJECT}),
        PurchaseOrderStatus.APPROVED: frozenset({Action.SEND_TO_SUPPLIER}),
        PurchaseOrderStatus.SENT: frozenset({Action.ACKNOWLEDGE}),
        PurchaseOrderStatus.ACKNOWLEDGED: frozenset({Action.RECEIVE}),
    },
    EntityType.REQUISITION: {
        RequisitionStatus.DRAFT: frozenset({Action.EDIT, Action.SUBMIT, Action.DELETE}),
        RequisitionStatus.SUBMITTED: frozenset({Action.APPROVE, Action.REJECT}),
        RequisitionStatus.APPROVED: frozenset({Action.CONVERT_TO_PO}),
    },
    EntityType.FORECAST: {
        ForecastStatus.ACTIVE: frozenset({Action.PAUSE}),
    },
}

# Used when a status has no row of its own
FALLBACK_ACTIONS: dict[EntityType, frozenset[Action]] = {
    EntityType.PURCHASE_ORDER: frozenset(),
    EntityType.REQUISITION: frozenset(),
    EntityType.FORECAST: frozenset({Action.RUN}),
}


def _entity(entity: EntityType | str) -> EntityType:
    try:
        return EntityType(entity)
    except ValueError:
        msg = f"No action policy for entity type {entity!r}"
        raise ValueError(msg) from None


def known_actions(entity: EntityType | str) -> frozenset[Action]:
    """Every action that can ever be offered for ``entity``."""
    entity_type = _entity(entity)
    actions = set(ALWAYS_ALLOWED[entity_type]) | set(FALLBACK_ACTIONS[entity_type])
    for allowed in ACTION_POLICY[entity_type].values():
        actions |= allowed
    return frozenset(actions)


def allowed_actions(entity: EntityType | str, status: str | None) -> frozenset[Action]:
    entity_type = _entity(entity)
    by_status = ACTION_POLICY[entity_type]
    key = (status or "").strip().lower()
    specific = by_status.get(key, FALLBACK_ACTIONS[entity_type])
    return ALWAYS_ALLOWED[entity_type] | specific


def is_action_allowed(entity: EntityType | str, status: str | None, action: Action | str) -> bool:
    return Action(action) in allowed_actions(entity, status)


def action_flags(entity: EntityType | str, status: str | None) -> dict[str, bool]:
    """``{"can_edit": True, "can_approve": False, ...}`` over every known action."""
    allowed = allowed_actions(entity, status)
    return {f"can_{action.value}": action in allowed for action in sorted(known_actions(entity))}
