"""
Transport protocol for relay JSON-RPC calls.

Defines the seam where the HTTP implementation plugs in. The client
depends on this protocol, not on httpx directly, so tests can swap in a
fake transport without touching routing or confirmation logic.

Concrete implementations:
    - HttpxTransport (default, pooled httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)

Failure mapping (HttpxTransport):
    httpx.TimeoutException  -> TransportError("TIMEOUT")
    httpx.ConnectError      -> TransportError("CONNECTION_FAILED")
    other httpx.HTTPError   -> TransportError("HTTP_ERROR")
    status >= 400           -> TransportError("HTTP_ERROR"), unless the
                               body is a JSON-RPC error envelope
    body not a JSON object  -> TransportError("INVALID_JSON")

A JSON-RPC error object is NOT a transport failure, whatever the HTTP
status. The body is returned as-is and the client decodes it.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

import httpx

from jito_relay.config import DEFAULT_REQUEST_TIMEOUT_S
from jito_relay.errors import TransportError


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Async transport for JSON-RPC POST requests."""

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a JSON-RPC request and return the parsed response body.

        Args:
            url: Full endpoint URL including any query string.
            payload: The JSON-RPC request envelope.

        Returns:
            Parsed JSON response object.

        Raises:
            TransportError: On network-level failures.
        """
        ...


class HttpxTransport:
    """Default transport backed by one pooled httpx.AsyncClient.

    The client is created on first use and shared by every call made
    through this transport, including concurrent confirmations. Close it
    with ``aclose()`` or by using the transport as an async context
    manager.

    Args:
        timeout: Per-request timeout in seconds.
        headers: Extra headers sent with every request.
        client: Pre-built AsyncClient to use instead of creating one.
            The transport does not close a client it did not create.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_S,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = headers or {}
        self._client = client
        self._owns_client = client is None

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a JSON-RPC request via httpx."""
        client = self._get_client()
        try:
            response = await client.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    **self._headers,
                },
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Relay request timed out after {self._timeout}s",
                error_code="TIMEOUT",
                details={"url": url, "timeout_s": self._timeout},
            ) from e
        except httpx.ConnectError as e:
            raise TransportError(
                f"Could not reach relay at {url}",
                error_code="CONNECTION_FAILED",
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Relay request failed: {e}",
                error_code="HTTP_ERROR",
                details={"url": url, "error": str(e)},
            ) from e

        if response.status_code >= 400:
            body = _rpc_error_body(response)
            if body is not None:
                return body
            raise TransportError(
                f"Relay returned HTTP {response.status_code}: {response.reason_phrase}",
                error_code="HTTP_ERROR",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "reason": response.reason_phrase,
                    "body_preview": response.text[:200] if response.text else "",
                },
            )

        try:
            result = response.json()
        except json.JSONDecodeError as e:
            raise TransportError(
                "Relay response was not valid JSON",
                error_code="INVALID_JSON",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "body_preview": response.text[:200] if response.text else "",
                },
            ) from e

        if not isinstance(result, dict):
            raise TransportError(
                "Relay response JSON was not an object",
                error_code="INVALID_JSON",
                details={"url": url, "type": type(result).__name__},
            )

        return result

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _rpc_error_body(response: httpx.Response) -> dict[str, Any] | None:
    """Return the body if it is a JSON-RPC error envelope, else None."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error") is not None:
        return body
    return None
