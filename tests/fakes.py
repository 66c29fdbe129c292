"""In-memory fake of the operations-management REST backend.

Mounted on ``httpx.MockTransport`` so the real ``ApiClient`` code path runs
end to end without a network. Every request is recorded for assertions.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Callable
from typing import Any

import httpx

COLLECTIONS = (
    "/api/procurement/purchase-orders",
    "/api/procurement/requisitions",
    "/api/procurement/rfx",
    "/api/suppliers",
    "/api/contracts",
    "/api/users",
    "/api/warehouse/warehouses",
    "/api/inventory/stock",
    "/api/inventory/movements",
    "/api/inventory/adjustments",
    "/api/inventory/reservations",
)

TRANSITIONS = {
    "submit": "submitted",
    "approve": "approved",
    "reject": "rejected",
    "send": "sent",
    "acknowledge": "acknowledged",
    "receive": "received",
    "activate": "active",
    "deactivate": "inactive",
    "publish": "published",
    "close": "closed",
    "award": "awarded",
    "terminate": "terminated",
    "fulfill": "fulfilled",
    "cancel": "cancelled",
}

Handler = Callable[[httpx.Request], httpx.Response]


def make_tenant(tenant_id: str, name: str | None = None, **extra: Any) -> dict[str, Any]:
    return {
        "id": tenant_id,
        "name": name or tenant_id.replace("-", " ").title(),
        "slug": tenant_id,
        "plan": "BASIC",
        "userRole": "ADMIN",
        "isOwner": True,
        **extra,
    }


class FakeBackend:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.records: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.tenants: list[dict[str, Any]] = []
        self.settings: dict[str, Any] = {"general": {"currency": "USD"}}
        self.members: dict[str, list[dict[str, Any]]] = {}
        self.invitations: dict[str, dict[str, Any]] = {}
        self.accepted_tokens: set[str] | None = None
        self._queued: dict[tuple[str, str], list[Handler]] = defaultdict(list)
        self._counter = 0

    # -- test helpers -------------------------------------------------------

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def seed(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        self.records[collection][record["id"]] = dict(record)
        return self.records[collection][record["id"]]

    def queue(self, method: str, path: str, handler: Handler) -> None:
        """Serve ``handler`` for the next matching request instead of the default route."""
        self._queued[(method.upper(), path)].append(handler)

    def fail(self, method: str, path: str, status: int, body: Any = None, times: int = 1) -> None:
        for _ in range(times):
            self.queue(method, path, lambda _r, s=status, b=body: httpx.Response(s, json=b))

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    # -- routing ------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method, path = request.method, request.url.path

        queued = self._queued.get((method, path))
        if queued:
            return queued.pop(0)(request)

        if self.accepted_tokens is not None:
            auth = request.headers.get("Authorization", "")
            if auth.removeprefix("Bearer ") not in self.accepted_tokens:
                return httpx.Response(401, json={"message": "Invalid or expired token"})

        if path.startswith("/api/tenants"):
            return self._tenants(request, path.removeprefix("/api/tenants"))
        if path == "/api/settings":
            return self._settings(request)
        for collection in COLLECTIONS:
            if path == collection or path.startswith(collection + "/"):
                return self._collection(request, collection, path.removeprefix(collection))
        return httpx.Response(404, json={"message": f"No route for {method} {path}"})

    def _body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def _tenants(self, request: httpx.Request, rest: str) -> httpx.Response:
        if request.method == "GET" and rest == "/user/tenants":
            return httpx.Response(200, json=self.tenants)
        if request.method == "GET" and rest == "/current":
            tenant_id = request.headers.get("X-Tenant-ID")
            for tenant in self.tenants:
                if tenant["id"] == tenant_id:
                    return httpx.Response(200, json=tenant)
            return httpx.Response(404, json={"message": "No tenant selected"})
        if request.method == "POST" and rest in ("", "/"):
            body = self._body(request) or {}
            if any(t["slug"] == body.get("slug") for t in self.tenants):
                return httpx.Response(409, json={"message": "Tenant slug already exists"})
            tenant = {**make_tenant(self._next_id("tenant")), **body}
            self.tenants.append(tenant)
            return httpx.Response(201, json=tenant)
        return self._tenant_item(request, [p for p in rest.split("/") if p])

    def _tenant_item(self, request: httpx.Request, parts: list[str]) -> httpx.Response:
        if request.method == "POST" and len(parts) == 3 and parts[::2] == ["invitations", "accept"]:
            invitation = self.invitations.pop(parts[1], None)
            if invitation is None:
                return httpx.Response(404, json={"message": "Invitation not found or expired"})
            return httpx.Response(
                200, json={"tenantId": invitation["tenantId"], "role": invitation["role"]}
            )

        tenant = next((t for t in self.tenants if parts and t["id"] == parts[0]), None)
        if tenant is None:
            return httpx.Response(404, json={"message": "Tenant not found"})
        if request.method == "PUT" and len(parts) == 1:
            tenant.update(self._body(request) or {})
            return httpx.Response(200, json=tenant)
        if request.method == "GET" and parts[1:] == ["users"]:
            return httpx.Response(200, json=self.members.get(tenant["id"], []))
        if request.method == "POST" and parts[1:] == ["invitations"]:
            token = self._next_id("invite")
            invitation = {"token": token, "tenantId": tenant["id"], **(self._body(request) or {})}
            self.invitations[token] = invitation
            return httpx.Response(201, json=invitation)
        return httpx.Response(404, json={"message": "Tenant route not found"})

    def _settings(self, request: httpx.Request) -> httpx.Response:
        if request.method == "PUT":
            self.settings.update(self._body(request) or {})
        return httpx.Response(200, json=self.settings)

    def _collection(self, request: httpx.Request, collection: str, rest: str) -> httpx.Response:
        store = self.records[collection]
        tenant_id = request.headers.get("X-Tenant-ID")
        parts = [p for p in rest.split("/") if p]

        if not parts:
            if request.method == "GET":
                return self._list(request, store, tenant_id)
            if request.method == "POST":
                body = self._body(request) or {}
                code = body.get("code")
                if code and any(r.get("code") == code for r in store.values()):
                    return httpx.Response(
                        409, json={"message": f"Duplicate code {code}", "errors": {"code": "taken"}}
                    )
                record = {"status": "draft", **body, "id": self._next_id("rec"), "tenantId": tenant_id}
                store[record["id"]] = record
                return httpx.Response(201, json=record)
            return httpx.Response(405)

        record = store.get(parts[0])
        if record is None:
            return httpx.Response(404, json={"message": "Not found"})

        if len(parts) == 1:
            if request.method == "GET":
                return httpx.Response(200, json=record)
            if request.method == "PUT":
                record.update(self._body(request) or {})
                return httpx.Response(200, json=record)
            if request.method == "DELETE":
                del store[parts[0]]
                return httpx.Response(204)
            return httpx.Response(405)

        action = parts[1]
        if request.method == "POST" and action == "convert-to-po":
            record["status"] = "converted"
            order = {
                "id": self._next_id("po"),
                "status": "draft",
                "requisitionId": record["id"],
                "tenantId": tenant_id,
                **(self._body(request) or {}),
            }
            self.records["/api/procurement/purchase-orders"][order["id"]] = order
            return httpx.Response(201, json=order)
        if request.method == "POST" and action in TRANSITIONS and len(parts) == 2:
            record["status"] = TRANSITIONS[action]
            return httpx.Response(200, json=record)
        if request.method == "GET":
            return httpx.Response(200, json=record.get(action, []))
        if request.method == "POST":
            child = {"id": self._next_id(action), **(self._body(request) or {})}
            record.setdefault(action, []).append(child)
            return httpx.Response(201, json=child)
        return httpx.Response(405)

    def _list(
        self, request: httpx.Request, store: dict[str, dict[str, Any]], tenant_id: str | None
    ) -> httpx.Response:
        params = dict(request.url.params)
        page = int(params.pop("page", 1))
        limit = int(params.pop("limit", 50))
        rows = [
            r
            for r in store.values()
            if (r.get("tenantId") in (None, tenant_id))
            and all(str(r.get(k)) == v for k, v in params.items())
        ]
        start = (page - 1) * limit
        return httpx.Response(
            200,
            json={"data": rows[start : start + limit], "total": len(rows), "page": page, "limit": limit},
        )
