"""
Tests for JitoJsonRpcClient: routing and decoding, no network.

Uses a FakeTransport that records (url, payload) and returns canned
envelopes.

Test plan:
- Routing: each operation hits the right path with the right method,
  uuid appended only when configured, bundleOnly before uuid
- Envelope: jsonrpc 2.0, id 1, params rendered from typed params,
  sendBundle echo round-trip preserves method and params
- Results: bundle id / signature returned, status pages parsed,
  null entries kept as None
- Errors: JSON-RPC error -> ProtocolError, transport exceptions
  propagate, unexpected exceptions wrapped in TransportError,
  bundle_only on the wrong method rejected before I/O
- Config: from_config / create_client wire base_url, uuid, diagnostics
"""

from typing import Any

import pytest

from jito_relay.client import JitoJsonRpcClient, create_client
from jito_relay.config import RelayConfig
from jito_relay.diagnostics import LoguruDiagnostics, NullDiagnostics
from jito_relay.errors import InvalidParamsError, ProtocolError, TransportError
from jito_relay.models import BundleStatus
from jito_relay.params import Encoding, SendBundleParams, SendTransactionParams

BASE_URL = "https://relay.example.com/api/v1"
BUNDLE_ID = "892b79ed49138bfb3aa5441f0df6e06ef34f9ee8f3976c15b323605bae0cf51d"
SIGNATURE = "2id3YC2jK9G5Wo2phDx4gJVAew8DcY5NAojnVuao8rkxwPYPe8cSwE5GzhEgJA2y8fVjDEo6iR6ykBvDxrTQrtpb"

# ---------------------------------------------------------------------------
# Fake transports
# ---------------------------------------------------------------------------


class FakeTransport:
    """Returns a canned envelope and records every call."""

    def __init__(self, response: dict[str, Any]) -> None:
        self._response = response
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((url, payload))
        return self._response


class EchoTransport:
    """Echoes the request's method and params back as the result."""

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": payload["id"],
            "result": {"method": payload["method"], "params": payload["params"]},
        }


class ErrorTransport:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        raise self._exc


def _ok(result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "result": result}


INFLIGHT_LANDED = _ok(
    {
        "context": {"slot": 280999028},
        "value": [{"bundle_id": BUNDLE_ID, "status": "Landed", "landed_slot": 280999027}],
    }
)

DETAILED = _ok(
    {
        "context": {"slot": 242806119},
        "value": [
            {
                "bundle_id": BUNDLE_ID,
                "transactions": [SIGNATURE],
                "slot": 242804011,
                "confirmation_status": "finalized",
                "err": {"Ok": None},
            }
        ],
    }
)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


class TestRouting:
    @pytest.mark.asyncio
    async def test_tip_accounts_without_uuid(self) -> None:
        transport = FakeTransport(_ok(["acct1"]))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.get_tip_accounts()
        url, payload = transport.calls[0]
        assert url == f"{BASE_URL}/bundles"
        assert payload["method"] == "getTipAccounts"
        assert payload["params"] == []

    @pytest.mark.asyncio
    async def test_tip_accounts_with_uuid(self) -> None:
        transport = FakeTransport(_ok(["acct1"]))
        client = JitoJsonRpcClient(BASE_URL, "my-uuid", transport=transport)
        await client.get_tip_accounts()
        url, _ = transport.calls[0]
        assert url == f"{BASE_URL}/bundles?uuid=my-uuid"

    @pytest.mark.asyncio
    async def test_send_bundle_path_and_method(self) -> None:
        transport = FakeTransport(_ok(BUNDLE_ID))
        client = JitoJsonRpcClient(BASE_URL, "u1", transport=transport)
        await client.send_bundle(["tx1", "tx2"])
        url, payload = transport.calls[0]
        assert url == f"{BASE_URL}/bundles?uuid=u1"
        assert payload["method"] == "sendBundle"
        assert payload["params"] == [["tx1", "tx2"], {"encoding": "base64"}]

    @pytest.mark.asyncio
    async def test_send_transaction_plain(self) -> None:
        transport = FakeTransport(_ok(SIGNATURE))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.send_transaction("tx1")
        url, payload = transport.calls[0]
        assert url == f"{BASE_URL}/transactions"
        assert payload["method"] == "sendTransaction"

    @pytest.mark.asyncio
    async def test_send_transaction_bundle_only(self) -> None:
        transport = FakeTransport(_ok(SIGNATURE))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.send_transaction("tx1", bundle_only=True)
        url, _ = transport.calls[0]
        assert url == f"{BASE_URL}/transactions?bundleOnly=true"

    @pytest.mark.asyncio
    async def test_send_transaction_bundle_only_then_uuid(self) -> None:
        transport = FakeTransport(_ok(SIGNATURE))
        client = JitoJsonRpcClient(BASE_URL, "u1", transport=transport)
        await client.send_transaction("tx1", bundle_only=True)
        url, _ = transport.calls[0]
        assert url == f"{BASE_URL}/transactions?bundleOnly=true&uuid=u1"

    @pytest.mark.asyncio
    async def test_send_transaction_uuid_only(self) -> None:
        transport = FakeTransport(_ok(SIGNATURE))
        client = JitoJsonRpcClient(BASE_URL, "u1", transport=transport)
        await client.send_transaction("tx1")
        url, _ = transport.calls[0]
        assert url == f"{BASE_URL}/transactions?uuid=u1"

    @pytest.mark.asyncio
    async def test_inflight_statuses_route(self) -> None:
        transport = FakeTransport(INFLIGHT_LANDED)
        client = JitoJsonRpcClient(BASE_URL, "u1", transport=transport)
        await client.get_inflight_bundle_statuses([BUNDLE_ID])
        url, payload = transport.calls[0]
        assert url == f"{BASE_URL}/bundles?uuid=u1"
        assert payload["method"] == "getInflightBundleStatuses"
        assert payload["params"] == [[BUNDLE_ID]]

    @pytest.mark.asyncio
    async def test_detailed_statuses_route(self) -> None:
        transport = FakeTransport(DETAILED)
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.get_bundle_statuses([BUNDLE_ID])
        url, payload = transport.calls[0]
        assert url == f"{BASE_URL}/bundles"
        assert payload["method"] == "getBundleStatuses"
        assert payload["params"] == [[BUNDLE_ID]]

    def test_trailing_slash_stripped(self) -> None:
        client = JitoJsonRpcClient(BASE_URL + "/", transport=FakeTransport(_ok(None)))
        assert client.base_url == BASE_URL

    def test_endpoint_without_query(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(None)))
        assert client.endpoint("/bundles") == "/bundles"


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class TestEnvelope:
    @pytest.mark.asyncio
    async def test_envelope_fields(self) -> None:
        transport = FakeTransport(_ok(BUNDLE_ID))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.send_bundle(["tx1"])
        _, payload = transport.calls[0]
        assert payload["jsonrpc"] == "2.0"
        assert payload["id"] == 1

    @pytest.mark.asyncio
    async def test_send_bundle_echo_round_trip(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=EchoTransport())
        params = SendBundleParams(transactions=("tx1", "tx2"), encoding=Encoding.BASE58)
        echoed = await client.call(params)
        assert echoed["method"] == "sendBundle"
        assert echoed["params"] == params.to_params()

    @pytest.mark.asyncio
    async def test_typed_params_passed_through(self) -> None:
        transport = FakeTransport(_ok(SIGNATURE))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        await client.send_transaction(SendTransactionParams("tx1", encoding=None))
        _, payload = transport.calls[0]
        assert payload["params"] == ["tx1"]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestResults:
    @pytest.mark.asyncio
    async def test_send_bundle_returns_bundle_id(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(BUNDLE_ID)))
        assert await client.send_bundle(["tx1"]) == BUNDLE_ID

    @pytest.mark.asyncio
    async def test_send_transaction_returns_signature(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(SIGNATURE)))
        assert await client.send_transaction("tx1") == SIGNATURE

    @pytest.mark.asyncio
    async def test_non_string_bundle_id_rejected(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(42)))
        with pytest.raises(TransportError) as exc:
            await client.send_bundle(["tx1"])
        assert exc.value.error_code == "INVALID_JSON"

    @pytest.mark.asyncio
    async def test_tip_accounts_returned_unmodified(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(["a", "b"])))
        assert await client.get_tip_accounts() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_silent_client_does_not_format_bodies(self) -> None:
        # A set is not JSON-serializable, so formatting the body would raise.
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok({"a"})))
        assert await client.get_tip_accounts() == {"a"}

    @pytest.mark.asyncio
    async def test_inflight_page_parsed(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(INFLIGHT_LANDED))
        page = await client.get_inflight_bundle_statuses([BUNDLE_ID])
        assert page.context_slot == 280999028
        record = page.first()
        assert record is not None
        assert record.status == BundleStatus.LANDED
        assert record.landed_slot == 280999027

    @pytest.mark.asyncio
    async def test_detailed_page_parsed(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(DETAILED))
        page = await client.get_bundle_statuses([BUNDLE_ID])
        record = page.first()
        assert record is not None
        assert record.slot == 242804011
        assert record.transactions == (SIGNATURE,)
        assert record.confirmation_status == "finalized"

    @pytest.mark.asyncio
    async def test_null_entries_kept(self) -> None:
        response = _ok({"context": {"slot": 1}, "value": [None]})
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(response))
        page = await client.get_inflight_bundle_statuses([BUNDLE_ID])
        assert page.value == [None]
        assert page.first() is None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_rpc_error_raises_protocol_error(self) -> None:
        response = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32602, "message": "bundle contains an expired blockhash"},
        }
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(response))
        with pytest.raises(ProtocolError) as exc:
            await client.send_bundle(["tx1"])
        assert exc.value.code == -32602
        assert "expired blockhash" in exc.value.rpc_message

    @pytest.mark.asyncio
    async def test_transport_error_propagates_unchanged(self) -> None:
        original = TransportError("refused", error_code="CONNECTION_FAILED")
        client = JitoJsonRpcClient(BASE_URL, transport=ErrorTransport(original))
        with pytest.raises(TransportError) as exc:
            await client.get_tip_accounts()
        assert exc.value is original

    @pytest.mark.asyncio
    async def test_unexpected_exception_wrapped(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=ErrorTransport(ConnectionError("reset")))
        with pytest.raises(TransportError) as exc:
            await client.get_tip_accounts()
        assert exc.value.error_code == "UNEXPECTED"
        assert isinstance(exc.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_bundle_only_rejected_for_send_bundle(self) -> None:
        transport = FakeTransport(_ok(BUNDLE_ID))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        with pytest.raises(InvalidParamsError):
            await client.call(SendBundleParams(transactions=("tx1",)), bundle_only=True)
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_invalid_params_fail_before_io(self) -> None:
        transport = FakeTransport(_ok(BUNDLE_ID))
        client = JitoJsonRpcClient(BASE_URL, transport=transport)
        with pytest.raises(InvalidParamsError):
            await client.send_bundle([])
        assert transport.calls == []


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_diagnostics_silent_by_default(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(None)))
        assert isinstance(client.diagnostics, NullDiagnostics)

    def test_enable_console_log(self) -> None:
        client = JitoJsonRpcClient(BASE_URL, transport=FakeTransport(_ok(None)))
        client.enable_console_log()
        assert isinstance(client.diagnostics, LoguruDiagnostics)

    def test_from_config(self) -> None:
        config = RelayConfig(base_url=BASE_URL, uuid="u1", diagnostics=True)
        client = JitoJsonRpcClient.from_config(config, transport=FakeTransport(_ok(None)))
        assert client.base_url == BASE_URL
        assert client.uuid == "u1"
        assert isinstance(client.diagnostics, LoguruDiagnostics)

    def test_create_client_by_region(self) -> None:
        client = create_client(region="tokyo", transport=FakeTransport(_ok(None)))
        assert client.base_url == "https://tokyo.mainnet.block-engine.jito.wtf/api/v1"

    def test_create_client_requires_one_target(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            create_client()
        with pytest.raises(ValueError, match="exactly one"):
            create_client(base_url=BASE_URL, region="ny")
