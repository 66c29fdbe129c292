"""RFx (RFI/RFP/RFQ) queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import Rfx
from opsmgmt.resources.base import CrudResource, wire_params


class RfxResource(CrudResource[Rfx]):
    """List and detail share the ``rfx`` key, so every write refreshes both."""

    base_path = "/api/procurement/rfx"
    model = Rfx
    list_key = "rfx"
    detail_key = "rfx"

    async def publish(
        self,
        rfx_id: str,
        publication_date: str,
        deadline: str,
        qa_period: dict[str, str] | None = None,
    ) -> Rfx:
        return await self._transition(
            rfx_id,
            "publish",
            wire_params(
                {"publication_date": publication_date, "deadline": deadline, "qa_period": qa_period}
            ),
        )

    async def close(self, rfx_id: str) -> Rfx:
        return await self._transition(rfx_id, "close")

    async def award(self, rfx_id: str, response_id: str, notes: str | None = None) -> Rfx:
        return await self._transition(
            rfx_id, "award", wire_params({"response_id": response_id, "notes": notes})
        )

    async def responses(self, rfx_id: str, **filters: Any) -> dict[str, Any]:
        params = wire_params(filters)
        return await self._query(
            query_key("rfx", rfx_id, "responses", params=params),
            f"{self.base_path}/{rfx_id}/responses",
            params,
        )

    async def submit_response(self, rfx_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "POST",
            f"{self.base_path}/{rfx_id}/responses",
            json=data,
            invalidates=[("rfx", rfx_id)],
        )
