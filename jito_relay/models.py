"""
Bundle status records.

Two relay endpoints report on a bundle:

    getInflightBundleStatuses  fast path, recent bundles only
        {"bundle_id": "...", "status": "Pending", "landed_slot": null}

    getBundleStatuses          detailed, only for landed bundles
        {"bundle_id": "...", "transactions": [...], "slot": 500,
         "confirmation_status": "finalized", "err": {"Ok": null}}

Both wrap their records in a page: {"context": {"slot": N}, "value": [...]}
where an entry may be null for an id the relay does not know.

Every record keeps the dict it was parsed from in ``raw`` so callers can
get at fields this module does not model.

ConfirmationTimeout is the synthetic terminal value a confirmation
returns when its deadline passes without a terminal status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Generic, TypeVar, Union

from jito_relay.errors import TransportError

T = TypeVar("T")


class BundleStatus(StrEnum):
    """Bundle lifecycle states reported by the relay, plus Timeout."""

    INVALID = "Invalid"
    PENDING = "Pending"
    FAILED = "Failed"
    LANDED = "Landed"
    TIMEOUT = "Timeout"


def _parse_status(value: Any) -> BundleStatus | str:
    try:
        return BundleStatus(value)
    except ValueError:
        return str(value)


def _optional_int(value: Any) -> int | None:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


@dataclass(frozen=True)
class InflightBundleStatus:
    """A record from the inflight status query.

    Attributes:
        bundle_id: The bundle this record describes.
        status: A BundleStatus, or the raw string for statuses this
            client does not know (treated as non-terminal).
        landed_slot: Slot the bundle landed in. None unless Landed.
        raw: The record exactly as received.
    """

    bundle_id: str
    status: BundleStatus | str
    landed_slot: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InflightBundleStatus:
        return cls(
            bundle_id=str(data.get("bundle_id", "")),
            status=_parse_status(data.get("status")),
            landed_slot=_optional_int(data.get("landed_slot")),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


@dataclass(frozen=True)
class BundleStatusDetail:
    """A record from the detailed status query.

    Only landed bundles have detailed records, so ``status`` is always
    Landed.

    Attributes:
        bundle_id: The bundle this record describes.
        transactions: Signatures of the bundle's transactions.
        slot: Slot the bundle landed in.
        confirmation_status: Commitment level reached ("processed",
            "confirmed", "finalized").
        err: Execution error object as reported, e.g. {"Ok": None}.
        raw: The record exactly as received.
    """

    bundle_id: str
    transactions: tuple[str, ...] = ()
    slot: int | None = None
    confirmation_status: str | None = None
    err: Any = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def status(self) -> BundleStatus:
        return BundleStatus.LANDED

    @property
    def landed_slot(self) -> int | None:
        return self.slot

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleStatusDetail:
        transactions = data.get("transactions") or []
        confirmation_status = data.get("confirmation_status")
        return cls(
            bundle_id=str(data.get("bundle_id", "")),
            transactions=tuple(str(tx) for tx in transactions),
            slot=_optional_int(data.get("slot")),
            confirmation_status=(
                str(confirmation_status) if confirmation_status is not None else None
            ),
            err=data.get("err"),
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


@dataclass(frozen=True)
class ConfirmationTimeout:
    """No terminal status was observed before the deadline."""

    status: BundleStatus = BundleStatus.TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        return {"status": str(self.status)}


ConfirmationResult = Union[InflightBundleStatus, BundleStatusDetail, ConfirmationTimeout]


@dataclass(frozen=True)
class StatusPage(Generic[T]):
    """A page of status records.

    Attributes:
        context_slot: Slot at which the relay evaluated the query, if given.
        value: One entry per queried id, in query order. None marks an id
            the relay has no record for.
    """

    context_slot: int | None
    value: list[T | None]

    def first(self) -> T | None:
        """The first entry, or None when the page is empty."""
        return self.value[0] if self.value else None


def parse_status_page(result: Any, parse: Callable[[dict[str, Any]], T]) -> StatusPage[T]:
    """Parse a ``{"context": ..., "value": [...]}`` result.

    A null result or a missing ``value`` gives an empty page.

    Raises:
        TransportError: The result is present but not shaped like a page.
    """
    if result is None:
        return StatusPage(context_slot=None, value=[])
    if not isinstance(result, dict):
        raise TransportError(
            "Status result was not an object",
            error_code="INVALID_JSON",
            details={"type": type(result).__name__},
        )

    context = result.get("context")
    context_slot = _optional_int(context.get("slot")) if isinstance(context, dict) else None

    entries = result.get("value") or []
    if not isinstance(entries, list):
        raise TransportError(
            "Status result value was not a list",
            error_code="INVALID_JSON",
            details={"type": type(entries).__name__},
        )

    value: list[T | None] = [
        parse(entry) if isinstance(entry, dict) else None for entry in entries
    ]
    return StatusPage(context_slot=context_slot, value=value)
