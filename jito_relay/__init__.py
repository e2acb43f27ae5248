"""
jito-relay: JSON-RPC client for a bundle relay (Jito block engine).

Public API:

    Client:
        - ``JitoJsonRpcClient``: routes each operation to its endpoint.
        - ``create_client()``: build a client from keyword config.
        - ``RelayConfig``: base URL, uuid, per-request timeout.

    Confirmation:
        - ``confirm_inflight_bundle()``: poll until Landed/Failed/Timeout.

    Tip accounts:
        - ``TipAccountSelector``: random tip account per call.

    Parameters (one per method):
        - ``TipAccountsParams``, ``SendBundleParams``,
          ``SendTransactionParams``, ``InflightBundleStatusesParams``,
          ``BundleStatusesParams``.

    Records:
        - ``BundleStatus``, ``InflightBundleStatus``, ``BundleStatusDetail``,
          ``ConfirmationTimeout``, ``StatusPage``.

    Transport:
        - ``JsonRpcTransport``: injectable transport protocol.
        - ``HttpxTransport``: default httpx-based transport.

    Diagnostics:
        - ``DiagnosticsSink``, ``NullDiagnostics``, ``LoguruDiagnostics``.

    Errors:
        - ``RelayError``, ``TransportError``, ``ProtocolError``,
          ``InvalidParamsError``, ``NoTipAccountsError``.
"""

from jito_relay.client import JitoJsonRpcClient, create_client
from jito_relay.config import BLOCK_ENGINE_HOSTS, RelayConfig
from jito_relay.confirm import (
    DEFAULT_TIMEOUT_MS,
    POLL_INTERVAL_MS,
    confirm_inflight_bundle,
)
from jito_relay.diagnostics import DiagnosticsSink, LoguruDiagnostics, NullDiagnostics
from jito_relay.errors import (
    InvalidParamsError,
    NoTipAccountsError,
    ProtocolError,
    RelayError,
    TransportError,
)
from jito_relay.models import (
    BundleStatus,
    BundleStatusDetail,
    ConfirmationResult,
    ConfirmationTimeout,
    InflightBundleStatus,
    StatusPage,
)
from jito_relay.params import (
    BundleStatusesParams,
    Encoding,
    InflightBundleStatusesParams,
    RpcParams,
    SendBundleParams,
    SendTransactionParams,
    TipAccountsParams,
)
from jito_relay.tips import TipAccountSelector
from jito_relay.transport import HttpxTransport, JsonRpcTransport

__version__ = "0.1.0"

__all__ = [
    "BLOCK_ENGINE_HOSTS",
    "DEFAULT_TIMEOUT_MS",
    "POLL_INTERVAL_MS",
    "BundleStatus",
    "BundleStatusDetail",
    "BundleStatusesParams",
    "ConfirmationResult",
    "ConfirmationTimeout",
    "DiagnosticsSink",
    "Encoding",
    "HttpxTransport",
    "InflightBundleStatus",
    "InflightBundleStatusesParams",
    "InvalidParamsError",
    "JitoJsonRpcClient",
    "JsonRpcTransport",
    "LoguruDiagnostics",
    "NoTipAccountsError",
    "NullDiagnostics",
    "ProtocolError",
    "RelayConfig",
    "RelayError",
    "RpcParams",
    "SendBundleParams",
    "SendTransactionParams",
    "StatusPage",
    "TipAccountSelector",
    "TipAccountsParams",
    "TransportError",
    "confirm_inflight_bundle",
    "create_client",
]
