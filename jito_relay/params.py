"""
Per-method parameter shapes.

Each relay method has its own frozen dataclass. The set of them forms a
tagged union (RpcParams): the class identifies the method, ``METHOD``
is the name sent on the wire, and ``to_params()`` renders the positional
JSON-RPC params list.

Validation happens in ``__post_init__`` so a malformed request fails
with InvalidParamsError before any I/O.

Wire shapes:
    getTipAccounts              []
    sendBundle                  [[tx, ...], {"encoding": "base64"}]
    sendTransaction             [tx, {"encoding": "base64"}]
    getInflightBundleStatuses   [[bundle_id, ...]]
    getBundleStatuses           [[bundle_id, ...]]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Union

from jito_relay.errors import InvalidParamsError

# Relay-side limits.
MAX_BUNDLE_TRANSACTIONS = 5
MAX_STATUS_QUERY_IDS = 5


class Encoding(StrEnum):
    """Serialized transaction encodings accepted by the relay."""

    BASE64 = "base64"
    BASE58 = "base58"


def _require_strings(field_name: str, values: Sequence[Any], limit: int) -> tuple[str, ...]:
    if isinstance(values, (str, bytes)):
        raise InvalidParamsError(f"{field_name} must be a sequence of strings, not a string")
    items = tuple(values)
    if not items:
        raise InvalidParamsError(f"{field_name} must not be empty")
    if len(items) > limit:
        raise InvalidParamsError(
            f"{field_name} accepts at most {limit} entries, got {len(items)}",
            limit=limit,
            count=len(items),
        )
    for index, item in enumerate(items):
        if not isinstance(item, str) or not item:
            raise InvalidParamsError(
                f"{field_name}[{index}] must be a non-empty string",
                index=index,
            )
    return items


def _encoding_options(encoding: Encoding | None) -> list[dict[str, str]]:
    return [{"encoding": str(encoding)}] if encoding is not None else []


@dataclass(frozen=True)
class TipAccountsParams:
    METHOD: ClassVar[str] = "getTipAccounts"

    def to_params(self) -> list[Any]:
        return []


@dataclass(frozen=True)
class SendBundleParams:
    """A bundle of serialized, signed transactions.

    Attributes:
        transactions: 1 to 5 serialized transactions, executed in order.
        encoding: Encoding of the serialized transactions. None omits the
            options object and lets the relay apply its default (base58).
    """

    METHOD: ClassVar[str] = "sendBundle"

    transactions: tuple[str, ...]
    encoding: Encoding | None = Encoding.BASE64

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "transactions",
            _require_strings("transactions", self.transactions, MAX_BUNDLE_TRANSACTIONS),
        )

    def to_params(self) -> list[Any]:
        return [list(self.transactions), *_encoding_options(self.encoding)]


@dataclass(frozen=True)
class SendTransactionParams:
    METHOD: ClassVar[str] = "sendTransaction"

    transaction: str
    encoding: Encoding | None = Encoding.BASE64

    def __post_init__(self) -> None:
        if not isinstance(self.transaction, str) or not self.transaction:
            raise InvalidParamsError("transaction must be a non-empty string")

    def to_params(self) -> list[Any]:
        return [self.transaction, *_encoding_options(self.encoding)]


@dataclass(frozen=True)
class InflightBundleStatusesParams:
    """Batch of bundle ids for the inflight (fast-path) status query."""

    METHOD: ClassVar[str] = "getInflightBundleStatuses"

    bundle_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "bundle_ids",
            _require_strings("bundle_ids", self.bundle_ids, MAX_STATUS_QUERY_IDS),
        )

    def to_params(self) -> list[Any]:
        return [list(self.bundle_ids)]


@dataclass(frozen=True)
class BundleStatusesParams:
    """Batch of bundle ids for the detailed status query."""

    METHOD: ClassVar[str] = "getBundleStatuses"

    bundle_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "bundle_ids",
            _require_strings("bundle_ids", self.bundle_ids, MAX_STATUS_QUERY_IDS),
        )

    def to_params(self) -> list[Any]:
        return [list(self.bundle_ids)]


RpcParams = Union[
    TipAccountsParams,
    SendBundleParams,
    SendTransactionParams,
    InflightBundleStatusesParams,
    BundleStatusesParams,
]
