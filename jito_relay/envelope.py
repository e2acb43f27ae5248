"""
JSON-RPC 2.0 envelopes.

Outbound:
    {"jsonrpc": "2.0", "id": 1, "method": "...", "params": [...]}

Inbound, exactly one of:
    {"result": ...}
    {"error": {"code": int, "message": str, "data"?: any}}

Requests are never pipelined, so every envelope uses the same id.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from jito_relay.errors import ProtocolError, TransportError

JSONRPC_VERSION = "2.0"
REQUEST_ID = 1


def build_request(method: str, params: Sequence[Any] | None = None) -> dict[str, Any]:
    """Build a fresh request envelope. ``params`` defaults to []."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": REQUEST_ID,
        "method": method,
        "params": list(params) if params is not None else [],
    }


def decode_response(response: dict[str, Any]) -> Any:
    """Return the ``result`` of a decoded envelope.

    Raises:
        ProtocolError: The envelope carries an ``error`` object.
        TransportError: The envelope carries neither field.
    """
    if "error" in response and response["error"] is not None:
        error = response["error"]
        if not isinstance(error, dict):
            raise ProtocolError(code=-32603, rpc_message=str(error))
        code = error.get("code", -32603)
        raise ProtocolError(
            code=code if isinstance(code, int) else -32603,
            rpc_message=str(error.get("message") or "unknown error"),
            data=error.get("data"),
        )

    if "result" not in response:
        raise TransportError(
            "Response envelope has neither result nor error",
            error_code="INVALID_JSON",
            details={"keys": sorted(response)},
        )
    return response["result"]

