"""Tenant wire models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from opsmgmt.models.domain import WireModel
from opsmgmt.types import TenantPlan, TenantRole


class Tenant(WireModel):
    id: str
    name: str
    slug: str
    domain: str | None = None
    plan: str | None = None
    settings: dict[str, Any] | None = None
    user_role: str | None = None
    is_owner: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_membership_role(cls, data: Any) -> Any:
        # /user/tenants reports the caller's membership role as "role"
        if isinstance(data, dict) and "role" in data and not {"userRole", "user_role"} & data.keys():
            data = {**data, "userRole": data["role"]}
        return data


class TenantCreate(WireModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    domain: str | None = None
    plan: TenantPlan = TenantPlan.BASIC
    settings: dict[str, Any] | None = None


class TenantInvitation(WireModel):
    email: str
    role: TenantRole = TenantRole.USER
