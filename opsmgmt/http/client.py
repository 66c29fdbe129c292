"""HTTP client wrapper: tenant and auth headers, error normalization, GET retry."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from opsmgmt.auth.tokens import TokenStore
from opsmgmt.config.settings import DEFAULT_LOGIN_ROUTE, Settings
from opsmgmt.exceptions import (
    ApiError,
    NetworkError,
    ServerError,
    StorageError,
    normalize_error,
)
from opsmgmt.http.navigation import Navigator
from opsmgmt.tenancy.context import TenantContext
from opsmgmt.utils.retry import RetryPolicy, call_with_retry

logger = structlog.get_logger(__name__)

TENANT_HEADER = "X-Tenant-ID"
RETRYABLE_STATUSES = frozenset({502, 503, 504})


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, NetworkError):
        return True
    return isinstance(exc, ServerError) and exc.status in RETRYABLE_STATUSES


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}


def _decode_body(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Async JSON client for the operations-management REST API.

    Every request carries ``X-Tenant-ID`` from the tenant context and
    ``Authorization: Bearer <token>`` from the token store, each only when
    present. A 401 clears stored tokens and navigates to the login route.
    """

    def __init__(
        self,
        base_url: str,
        tenant_context: TenantContext,
        token_store: TokenStore,
        navigator: Navigator | None = None,
        *,
        timeout: float = 30.0,
        retry_policy: RetryPolicy | None = None,
        login_route: str = DEFAULT_LOGIN_ROUTE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._tenant_context = tenant_context
        self._token_store = token_store
        self._navigator = navigator or Navigator()
        self._retry_policy = retry_policy or RetryPolicy()
        self._login_route = login_route
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        tenant_context: TenantContext,
        token_store: TokenStore,
        navigator: Navigator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ApiClient:
        return cls(
            settings.api_base_url,
            tenant_context,
            token_store,
            navigator,
            timeout=settings.request_timeout_seconds,
            retry_policy=RetryPolicy(
                max_attempts=settings.retry_max_attempts,
                delay_ms=settings.retry_delay_ms,
                backoff_factor=settings.retry_backoff_factor,
            ),
            login_route=settings.login_route,
            transport=transport,
        )

    @property
    def tenant_context(self) -> TenantContext:
        return self._tenant_context

    @property
    def navigator(self) -> Navigator:
        return self._navigator

    def build_headers(self) -> dict[str, str]:
        """Per-request headers derived from the current tenant and token state."""
        headers: dict[str, str] = {}
        tenant_id = self._tenant_context.tenant_id
        if tenant_id:
            headers[TENANT_HEADER] = tenant_id
        token = self._token_store.bearer_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        response = await self._send_with_policy(method, path, params=params, json=json)
        return _decode_body(response)

    async def request_bytes(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> bytes:
        """Send a request and return the raw body, for file exports."""
        response = await self._send_with_policy(method, path, params=params, json=json)
        return response.content

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str, json: Any = None) -> Any:
        return await self.request("DELETE", path, json=json)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _send_with_policy(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None,
        json: Any,
    ) -> httpx.Response:
        method = method.upper()
        params = _clean_params(params)

        async def attempt() -> httpx.Response:
            return await self._send(method, path, params=params, json=json)

        if method != "GET":
            return await attempt()
        return await call_with_retry(
            attempt, self._retry_policy, _is_retryable, label=f"{method} {path}"
        )

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None,
        json: Any,
    ) -> httpx.Response:
        headers = self.build_headers()
        logger.debug(
            "api_request",
            method=method,
            path=path,
            tenant_id=headers.get(TENANT_HEADER),
            authenticated="Authorization" in headers,
        )
        try:
            response = await self._http.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TransportError as exc:
            logger.warning("api_network_error", method=method, path=path, error=str(exc))
            message = str(exc) or type(exc).__name__
            raise NetworkError(f"Network error: {message}", status=None) from exc

        if response.is_success:
            return response
        raise self._handle_error_response(method, path, response)

    def _handle_error_response(self, method: str, path: str, response: httpx.Response) -> ApiError:
        body = _decode_body(response)
        error = normalize_error(response.status_code, body)

        if response.status_code == 401:
            try:
                self._token_store.clear()
            except StorageError as exc:
                logger.error("token_clear_failed", error=str(exc))
            logger.warning("unauthorized_redirect", method=method, path=path)
            self._navigator.navigate(self._login_route)
        elif response.status_code == 403 and "tenant" in error.message.lower():
            logger.error(
                "tenant_access_denied",
                tenant_id=self._tenant_context.tenant_id,
                message=error.message,
            )
        else:
            logger.info(
                "api_error",
                method=method,
                path=path,
                status=response.status_code,
                message=error.message,
            )
        return error
