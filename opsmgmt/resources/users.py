"""User administration queries and mutations."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.models.domain import User
from opsmgmt.resources.base import CrudResource


class UsersResource(CrudResource[User]):
    base_path = "/api/users"
    model = User
    list_key = "users"
    detail_key = "user"

    async def me(self) -> User:
        payload = await self._query(query_key("user", "me"), f"{self.base_path}/me")
        return self._parse(payload)

    async def update_me(self, data: dict[str, Any]) -> User:
        payload = await self._mutate(
            "PUT", f"{self.base_path}/me", json=data, invalidates=[("user", "me")]
        )
        return self._parse(payload)

    async def activate(self, user_id: str) -> User:
        return await self._transition(user_id, "activate")

    async def deactivate(self, user_id: str) -> User:
        return await self._transition(user_id, "deactivate")

    async def assign_roles(self, user_id: str, role_ids: list[str]) -> User:
        return await self._transition(user_id, "roles", {"roleIds": role_ids})

    async def permissions(self, user_id: str) -> list[str]:
        return await self._query(
            query_key("user", user_id, "permissions"), f"{self.base_path}/{user_id}/permissions"
        ) or []

    async def bulk_activate(self, ids: list[str]) -> Any:
        return await self._bulk("activate", ids)

    async def bulk_deactivate(self, ids: list[str]) -> Any:
        return await self._bulk("deactivate", ids)
