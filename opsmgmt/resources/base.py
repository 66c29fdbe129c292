"""Shared plumbing for per-domain resources.

Reads go through the query cache; writes go straight to the API and, on
success, invalidate the cache prefixes they affect. Errors are the
normalized ``ApiError`` raised by the HTTP client and always propagate.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from opsmgmt.cache.query_cache import QueryCache, QueryKey, query_key
from opsmgmt.exceptions import ApiError
from opsmgmt.http.client import ApiClient
from opsmgmt.models.domain import Page, WireModel

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def wire_params(filters: dict[str, Any]) -> dict[str, Any]:
    """snake_case keyword filters -> camelCase query parameters, None dropped."""
    return {to_camel(key): value for key, value in filters.items() if value is not None}


def wire_body(data: Any) -> Any:
    if isinstance(data, WireModel):
        return data.to_wire()
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_none=True, mode="json")
    return data


class Resource:
    """Base for resources that talk to one area of the API."""

    base_path: ClassVar[str] = ""

    def __init__(self, client: ApiClient, cache: QueryCache) -> None:
        self._client = client
        self._cache = cache

    async def _query(
        self,
        key: QueryKey,
        path: str,
        params: dict[str, Any] | None = None,
        stale_seconds: float | None = None,
    ) -> Any:
        async def load() -> Any:
            return await self._client.get(path, params=params)

        return await self._cache.fetch(key, load, stale_seconds=stale_seconds)

    async def _mutate(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        invalidates: Iterable[QueryKey] = (),
    ) -> Any:
        try:
            result = await self._client.request(method, path, json=wire_body(json), params=params)
        except ApiError as exc:
            logger.info("mutation_failed", method=method, path=path, status=exc.status)
            raise
        for prefix in invalidates:
            self._cache.invalidate(prefix)
        return result


class CrudResource(Resource, Generic[M]):
    """List/get/create/update/delete plus ``POST {id}/{action}`` transitions.

    Subclasses set ``base_path``, ``model``, ``list_key`` and ``detail_key``.
    """

    model: ClassVar[type[BaseModel]]
    list_key: ClassVar[str]
    detail_key: ClassVar[str]

    def _list_prefix(self) -> QueryKey:
        return (self.list_key,)

    def _detail_key(self, entity_id: str) -> QueryKey:
        return query_key(self.detail_key, entity_id)

    def _affected(self, entity_id: str | None = None) -> list[QueryKey]:
        keys = [self._list_prefix()]
        if entity_id is not None:
            keys.append(self._detail_key(entity_id))
        return keys

    def _parse(self, payload: Any) -> M:
        return self.model.model_validate(payload)  # type: ignore[return-value]

    async def list(self, **filters: Any) -> Page[M]:
        params = wire_params(filters)
        payload = await self._query(query_key(self.list_key, params=params), self.base_path, params)
        return Page.from_payload(self.model, payload)  # type: ignore[arg-type]

    async def get(self, entity_id: str) -> M:
        payload = await self._query(self._detail_key(entity_id), f"{self.base_path}/{entity_id}")
        return self._parse(payload)

    async def create(self, data: Any) -> M:
        payload = await self._mutate("POST", self.base_path, json=data, invalidates=self._affected())
        return self._parse(payload)

    async def update(self, entity_id: str, data: Any) -> M:
        payload = await self._mutate(
            "PUT",
            f"{self.base_path}/{entity_id}",
            json=data,
            invalidates=self._affected(entity_id),
        )
        return self._parse(payload)

    async def delete(self, entity_id: str) -> None:
        await self._mutate(
            "DELETE", f"{self.base_path}/{entity_id}", invalidates=self._affected(entity_id)
        )

    async def _transition(
        self,
        entity_id: str,
        action: str,
        data: Any = None,
        also_invalidates: Iterable[QueryKey] = (),
    ) -> M:
        payload = await self._mutate(
            "POST",
            f"{self.base_path}/{entity_id}/{action}",
            json=data,
            invalidates=[*self._affected(entity_id), *also_invalidates],
        )
        return self._parse(payload)

    async def _bulk(self, action: str, ids: list[str], data: dict[str, Any] | None = None) -> Any:
        return await self._mutate(
            "POST",
            f"{self.base_path}/bulk/{action}",
            json={"ids": ids, **(data or {})},
            invalidates=[self._list_prefix(), *(self._detail_key(i) for i in ids)],
        )
