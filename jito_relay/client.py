"""
Relay JSON-RPC client: routes each operation to its endpoint.

Every operation is one JSON-RPC POST. The method name selects the
operation; the endpoint path and query string select the relay service:

    getTipAccounts              /bundles       ?uuid=
    sendBundle                  /bundles       ?uuid=
    sendTransaction             /transactions  ?bundleOnly=true&uuid=
    getInflightBundleStatuses   /bundles       ?uuid=
    getBundleStatuses           /bundles       ?uuid=

Query parameters are appended only when present. Errors from direct
calls propagate unchanged (TransportError, ProtocolError). The
confirmation loop is the one place that absorbs them; see confirm.py.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from jito_relay.config import DEFAULT_REQUEST_TIMEOUT_S, RelayConfig
from jito_relay.confirm import DEFAULT_TIMEOUT_MS, confirm_inflight_bundle
from jito_relay.diagnostics import DiagnosticsSink, LoguruDiagnostics, NullDiagnostics, resolve
from jito_relay.envelope import build_request, decode_response
from jito_relay.errors import InvalidParamsError, RelayError, TransportError
from jito_relay.models import (
    BundleStatusDetail,
    ConfirmationResult,
    InflightBundleStatus,
    StatusPage,
    parse_status_page,
)
from jito_relay.params import (
    BundleStatusesParams,
    InflightBundleStatusesParams,
    RpcParams,
    SendBundleParams,
    SendTransactionParams,
    TipAccountsParams,
)
from jito_relay.tips import TipAccountSelector
from jito_relay.transport import HttpxTransport, JsonRpcTransport

BUNDLES_PATH = "/bundles"
TRANSACTIONS_PATH = "/transactions"

_ROUTES: dict[str, str] = {
    TipAccountsParams.METHOD: BUNDLES_PATH,
    SendBundleParams.METHOD: BUNDLES_PATH,
    SendTransactionParams.METHOD: TRANSACTIONS_PATH,
    InflightBundleStatusesParams.METHOD: BUNDLES_PATH,
    BundleStatusesParams.METHOD: BUNDLES_PATH,
}


class JitoJsonRpcClient:
    """Client for a bundle relay's JSON-RPC API.

    Args:
        base_url: Relay base URL, e.g. "https://mainnet.block-engine.jito.wtf/api/v1".
        uuid: Optional client identifier sent as ``?uuid=``. Empty omits it.
        transport: Injectable transport. Defaults to an HttpxTransport with
            ``request_timeout_s``. Pass a fake for testing.
        diagnostics: Optional diagnostics sink. Silent when omitted.
        request_timeout_s: Per-request timeout for the default transport.
    """

    def __init__(
        self,
        base_url: str,
        uuid: str = "",
        *,
        transport: JsonRpcTransport | None = None,
        diagnostics: DiagnosticsSink | None = None,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._uuid = uuid
        self._transport = transport or HttpxTransport(timeout=request_timeout_s)
        self._diagnostics = resolve(diagnostics)

    @classmethod
    def from_config(
        cls,
        config: RelayConfig,
        *,
        transport: JsonRpcTransport | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> JitoJsonRpcClient:
        if diagnostics is None and config.diagnostics:
            diagnostics = LoguruDiagnostics()
        return cls(
            config.base_url,
            config.uuid,
            transport=transport,
            diagnostics=diagnostics,
            request_timeout_s=config.request_timeout_s,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def diagnostics(self) -> DiagnosticsSink:
        return self._diagnostics

    def enable_console_log(self, level: str = "DEBUG") -> None:
        """Attach a loguru diagnostics sink."""
        self._diagnostics = LoguruDiagnostics(level=level)

    # -----------------------------------------------------------------
    # Routing
    # -----------------------------------------------------------------

    def endpoint(self, path: str, *, bundle_only: bool = False) -> str:
        """Build an endpoint path with its query string."""
        query: list[str] = []
        if bundle_only:
            query.append("bundleOnly=true")
        if self._uuid:
            query.append(f"uuid={self._uuid}")
        if query:
            return f"{path}?{'&'.join(query)}"
        return path

    async def call(self, params: RpcParams, *, bundle_only: bool = False) -> Any:
        """Dispatch a typed request to its endpoint and return the result.

        Raises:
            InvalidParamsError: ``bundle_only`` on a method other than
                sendTransaction.
            TransportError: Network-level failure.
            ProtocolError: The relay returned a JSON-RPC error.
        """
        if bundle_only and not isinstance(params, SendTransactionParams):
            raise InvalidParamsError(
                f"bundle_only applies only to sendTransaction, not {params.METHOD}"
            )
        endpoint = self.endpoint(_ROUTES[params.METHOD], bundle_only=bundle_only)
        return await self._send(endpoint, params.METHOD, params.to_params())

    async def _send(self, endpoint: str, method: str, params: Sequence[Any] | None = None) -> Any:
        url = f"{self._base_url}{endpoint}"
        payload = build_request(method, params)

        verbose = not isinstance(self._diagnostics, NullDiagnostics)
        if verbose:
            self._diagnostics.debug(f"Sending request to: {url}", url=url, method=method)
            self._diagnostics.debug(f"Request body: {json.dumps(payload, indent=2)}", method=method)

        try:
            response = await self._transport.post_json(url, payload)
        except RelayError as exc:
            self._diagnostics.error(f"HTTP error: {exc}", url=url, error_code=exc.error_code)
            raise
        except Exception as exc:
            self._diagnostics.error(f"Unexpected error: {exc!r}", url=url)
            raise TransportError(
                "An unexpected error occurred",
                error_code="UNEXPECTED",
                details={"url": url, "error": repr(exc)},
            ) from exc

        if verbose:
            self._diagnostics.debug(f"Response body: {json.dumps(response, indent=2)}", method=method)
        return decode_response(response)

    # -----------------------------------------------------------------
    # Operations
    # -----------------------------------------------------------------

    async def get_tip_accounts(self) -> Any:
        """Fetch the relay's tip accounts.

        Returns the decoded result unmodified, normally a list of
        base58 account addresses.
        """
        return await self.call(TipAccountsParams())

    async def get_random_tip_account(self) -> str:
        """Pick one tip account uniformly at random. See tips.py."""
        return await TipAccountSelector(self).pick()

    async def send_bundle(self, params: SendBundleParams | Sequence[str]) -> str:
        """Submit a bundle and return its bundle id."""
        if not isinstance(params, SendBundleParams):
            params = SendBundleParams(transactions=tuple(params))
        return _expect_str(await self.call(params), SendBundleParams.METHOD)

    async def send_transaction(
        self,
        params: SendTransactionParams | str,
        bundle_only: bool = False,
    ) -> str:
        """Submit a single transaction and return its signature.

        With ``bundle_only`` the relay only forwards it as part of a
        bundle (revert protection).
        """
        if not isinstance(params, SendTransactionParams):
            params = SendTransactionParams(transaction=params)
        return _expect_str(
            await self.call(params, bundle_only=bundle_only), SendTransactionParams.METHOD
        )

    async def get_inflight_bundle_statuses(
        self, params: InflightBundleStatusesParams | Sequence[str]
    ) -> StatusPage[InflightBundleStatus]:
        """Query the fast-path status of up to five bundles."""
        if not isinstance(params, InflightBundleStatusesParams):
            params = InflightBundleStatusesParams(bundle_ids=tuple(params))
        result = await self.call(params)
        return parse_status_page(result, InflightBundleStatus.from_dict)

    async def get_bundle_statuses(
        self, params: BundleStatusesParams | Sequence[str]
    ) -> StatusPage[BundleStatusDetail]:
        """Query the detailed status of up to five landed bundles."""
        if not isinstance(params, BundleStatusesParams):
            params = BundleStatusesParams(bundle_ids=tuple(params))
        result = await self.call(params)
        return parse_status_page(result, BundleStatusDetail.from_dict)

    async def confirm_inflight_bundle(
        self,
        bundle_id: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> ConfirmationResult:
        """Poll until the bundle lands, fails, or ``timeout_ms`` passes."""
        return await confirm_inflight_bundle(
            self, bundle_id, timeout_ms, diagnostics=self._diagnostics
        )

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    async def aclose(self) -> None:
        """Release the transport's connections, if it holds any."""
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> JitoJsonRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _expect_str(result: Any, method: str) -> str:
    if not isinstance(result, str):
        raise TransportError(
            f"{method} result was not a string",
            error_code="INVALID_JSON",
            details={"method": method, "type": type(result).__name__},
        )
    return result


def create_client(
    *,
    base_url: str | None = None,
    region: str | None = None,
    uuid: str = "",
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    diagnostics: bool = False,
    transport: JsonRpcTransport | None = None,
) -> JitoJsonRpcClient:
    """Create a client from keyword configuration.

    Exactly one of ``base_url`` and ``region`` must be given.

    Example:
        >>> client = create_client(region="frankfurt", uuid="my-uuid")
    """
    if (base_url is None) == (region is None):
        raise ValueError("pass exactly one of base_url or region")
    if base_url is not None:
        config = RelayConfig(
            base_url=base_url,
            uuid=uuid,
            request_timeout_s=request_timeout_s,
            diagnostics=diagnostics,
        )
    else:
        config = RelayConfig.for_region(
            region,  # type: ignore[arg-type]
            uuid=uuid,
            request_timeout_s=request_timeout_s,
            diagnostics=diagnostics,
        )
    return JitoJsonRpcClient.from_config(config, transport=transport)
