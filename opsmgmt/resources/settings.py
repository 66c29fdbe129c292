"""Tenant-level application settings."""

from __future__ import annotations

from typing import Any

from opsmgmt.cache.query_cache import query_key
from opsmgmt.resources.base import Resource

SETTINGS_KEY = "settings"


class SettingsResource(Resource):
    base_path = "/api/settings"

    async def get(self) -> dict[str, Any]:
        return await self._query(query_key(SETTINGS_KEY), self.base_path) or {}

    async def section(self, name: str) -> dict[str, Any]:
        """One top-level section (``general``, ``notifications``, ``security``, ...)."""
        settings = await self.get()
        return settings.get(name) or {}

    async def update(self, changes: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "PUT", self.base_path, json=changes, invalidates=[(SETTINGS_KEY,)]
        )

    async def update_section(self, name: str, values: dict[str, Any]) -> dict[str, Any]:
        return await self._mutate(
            "PUT",
            f"{self.base_path}/{name}",
            json=values,
            invalidates=[(SETTINGS_KEY,)],
        )
