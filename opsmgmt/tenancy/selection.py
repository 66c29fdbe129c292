"""Persistence for the active tenant selection.

The active tenant is the only piece of tenant state that survives a restart;
the membership list is always refetched.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from opsmgmt.exceptions import StorageError
from opsmgmt.tenancy.models import Tenant

logger = structlog.get_logger(__name__)


class TenantSelectionStore(ABC):
    @abstractmethod
    def load(self) -> Tenant | None:
        """Return the persisted active tenant, if any."""

    @abstractmethod
    def save(self, tenant: Tenant | None) -> None:
        """Persist the active tenant; ``None`` clears the selection."""


class InMemoryTenantSelectionStore(TenantSelectionStore):
    def __init__(self, tenant: Tenant | None = None) -> None:
        self._tenant = tenant

    def load(self) -> Tenant | None:
        return self._tenant

    def save(self, tenant: Tenant | None) -> None:
        self._tenant = tenant


class FileTenantSelectionStore(TenantSelectionStore):
    """Stores ``{"current_tenant": {...}}`` in a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> Tenant | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            raw = data.get("current_tenant") if isinstance(data, dict) else None
            return Tenant.model_validate(raw) if raw else None
        except (OSError, ValueError, PydanticValidationError) as exc:
            logger.warning("tenant_selection_unreadable", path=str(self._path), error=str(exc))
            return None

    def save(self, tenant: Tenant | None) -> None:
        payload = {"current_tenant": tenant.model_dump(by_alias=True, mode="json") if tenant else None}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot persist tenant selection to {self._path}: {exc}"
            raise StorageError(msg) from exc
