"""
Error taxonomy for the relay client.

Every error raised by this package derives from RelayError and carries
a machine-readable ``error_code`` plus a ``details`` dict for diagnostics.

    - TransportError: the request never produced a usable JSON-RPC
      envelope (connection refused, timeout, HTTP status >= 400,
      non-JSON body).
    - ProtocolError: the relay answered with a JSON-RPC error object.
    - InvalidParamsError: parameters rejected before any I/O.
    - NoTipAccountsError: the relay returned no tip accounts.

A confirmation that runs out of time is NOT an error. It is reported
as a ConfirmationTimeout value (see models.py).
"""

from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base class for relay client failures."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "UNKNOWN",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details: dict[str, Any] = details or {}


class TransportError(RelayError):
    """Network-level failure. The original exception is chained as __cause__."""


class ProtocolError(RelayError):
    """The relay returned a JSON-RPC error object.

    Attributes:
        code: JSON-RPC error code (e.g. -32602 for invalid params).
        rpc_message: The ``message`` field of the error object.
        data: The optional ``data`` field, passed through as-is.
    """

    def __init__(self, code: int, rpc_message: str, data: Any = None) -> None:
        super().__init__(
            f"JSON-RPC error {code}: {rpc_message}",
            error_code="RPC_ERROR",
            details={"code": code, "message": rpc_message, "data": data},
        )
        self.code = code
        self.rpc_message = rpc_message
        self.data = data


class InvalidParamsError(RelayError, ValueError):
    """Request parameters failed local validation."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, error_code="INVALID_PARAMS", details=details)


class NoTipAccountsError(RelayError):
    """The relay returned an empty or malformed tip-account list."""

    def __init__(self, message: str = "No tip accounts available", **details: Any) -> None:
        super().__init__(message, error_code="NO_TIP_ACCOUNTS", details=details)
