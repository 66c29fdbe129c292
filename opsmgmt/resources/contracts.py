"""Contract queries and mutations, including amendments, obligations and milestones."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import Contract
from opsmgmt.resources.base import CrudResource, wire_params


class ContractsResource(CrudResource[Contract]):
    base_path = "/api/contracts"
    model = Contract
    list_key = "contracts"
    detail_key = "contract"

    async def approve(self, contract_id: str, comments: str | None = None) -> Contract:
        return await self._transition(contract_id, "approve", wire_params({"comments": comments}))

    async def reject(self, contract_id: str, reason: str) -> Contract:
        return await self._transition(contract_id, "reject", {"reason": reason})

    async def activate(self, contract_id: str) -> Contract:
        return await self._transition(contract_id, "activate")

    async def terminate(
        self, contract_id: str, reason: str, termination_date: str | None = None
    ) -> Contract:
        return await self._transition(
            contract_id,
            "terminate",
            wire_params({"reason": reason, "termination_date": termination_date}),
        )

    async def renew(self, contract_id: str, new_end_date: str, **terms: Any) -> Contract:
        return await self._transition(
            contract_id, "renew", wire_params({"new_end_date": new_end_date, **terms})
        )

    async def amendments(self, contract_id: str) -> list[dict[str, Any]]:
        return await self._child_list(contract_id, "amendments")

    async def create_amendment(self, contract_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._child_create(contract_id, "amendments", data)

    async def obligations(self, contract_id: str) -> list[dict[str, Any]]:
        return await self._child_list(contract_id, "obligations")

    async def create_obligation(self, contract_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._child_create(contract_id, "obligations", data)

    async def milestones(self, contract_id: str) -> list[dict[str, Any]]:
        return await self._child_list(contract_id, "milestones")

    async def create_milestone(self, contract_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._child_create(contract_id, "milestones", data)

    async def complete_milestone(
        self, contract_id: str, milestone_id: str, notes: str | None = None
    ) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/{contract_id}/milestones/{milestone_id}/complete",
            json=wire_params({"notes": notes}),
            invalidates=[("contract", contract_id)],
        )

    async def _child_list(self, contract_id: str, child: str) -> list[dict[str, Any]]:
        # Child collections live under the detail key so contract writes refresh them
        payload = await self._query(
            query_key(self.detail_key, contract_id, child),
            f"{self.base_path}/{contract_id}/{child}",
        )
        if isinstance(payload, dict):
            return payload.get("data", [])
        return payload or []

    async def _child_create(
        self, contract_id: str, child: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/{contract_id}/{child}",
            json=data,
            invalidates=[("contract", contract_id), self._list_prefix()],
        )
