"""
Shared async HTTP client for the hosted backend gateway.

Each tenant project exposes its storage and identity APIs behind one base
URL and authenticates every call with an API key. This module provides a
pooled client that injects those credentials plus the request correlation
header, and turns error answers into BackendError.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from .context import RunContext
from .errors import BackendError, ErrorCode, ServiceError

_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    429: ErrorCode.RATE_LIMITED,
}


def _backend_message(response: httpx.Response) -> str | None:
    """Pull the human-readable message out of a backend error body."""
    try:
        body = response.json()
    except ValueError:
        text = response.text
        return text[:200] if text else None

    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class ServiceHttpClient:
    """HTTP client for one backend project.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Automatic credential headers (apikey, Authorization) and X-Request-Id
    - Timeout handling
    - Structured error conversion (no automatic retry)

    Example:
        client = ServiceHttpClient("https://abc.supabase.co", api_key="...")
        response = await client.post("/storage/v1/object/list/NSG-LMS", json={...})
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        max_connections: int = 50,
        max_keepalive: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Project base URL for all requests.
            api_key: Credential sent as both apikey and bearer token.
            timeout: Default timeout in seconds.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport

        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self._limits,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_url(self, path: str) -> str:
        """Build full URL from path (with or without leading slash)."""
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    def _auth_headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    async def request(
        self,
        method: str,
        path: str,
        context: RunContext | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request with credential and correlation headers.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path relative to the project base URL.
            context: Optional RunContext for correlation.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            The HTTP response (2xx/3xx only).

        Raises:
            BackendError: For error statuses and transport failures.
            ServiceError: For unexpected client-side failures.
        """
        client = await self._get_client()
        url = self._build_url(path)

        headers = self._auth_headers()
        if context is not None:
            headers.update(context.get_headers())
        headers.update(kwargs.pop("headers", None) or {})

        request_id = context.request_id if context else "-"

        try:
            response = await client.request(method=method, url=url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise BackendError(
                code=ErrorCode.TIMEOUT,
                message_safe=f"Backend request timed out after {self.timeout}s",
                cause=e,
            )
        except httpx.TransportError as e:
            raise BackendError(
                code=ErrorCode.CONNECTION_ERROR,
                message_safe="Failed to connect to backend",
                message_debug=str(e),
                cause=e,
            )
        except Exception as e:
            logger.error(f"[{request_id}] Unexpected error calling {method} {path}: {e}")
            raise ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message_safe="Unexpected error during backend request",
                message_debug=str(e),
                cause=e,
            )

        if response.status_code >= 400:
            message = _backend_message(response)
            if response.status_code >= 500:
                code = ErrorCode.SERVICE_UNAVAILABLE
            else:
                code = _STATUS_CODES.get(response.status_code, ErrorCode.INVALID_INPUT)
            logger.debug(f"[{request_id}] {method} {path} -> {response.status_code}: {message}")
            raise BackendError(
                code=code,
                message_safe=message or f"Backend returned {response.status_code}",
                status_code=response.status_code,
                message_debug=response.text[:500] if response.text else None,
            )

        return response

    async def get(self, path: str, context: RunContext | None = None, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, context, **kwargs)

    async def post(self, path: str, context: RunContext | None = None, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, context, **kwargs)

    async def put(self, path: str, context: RunContext | None = None, **kwargs: Any) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, context, **kwargs)

    async def delete(self, path: str, context: RunContext | None = None, **kwargs: Any) -> httpx.Response:
        """Make a DELETE request.

        httpx's ``delete`` helper refuses a body, so bulk removal goes
        through ``request`` with ``json=``.
        """
        return await self.request("DELETE", path, context, **kwargs)
