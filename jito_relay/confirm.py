"""
Bundle confirmation: poll until a bundle reaches a terminal status.

State machine, one instance per call:

    POLLING ──Failed──────────────────────────────▶ return inflight record
       │
       ├──Landed──▶ LANDED_PENDING_DETAIL ──detail──▶ return detailed record
       │                        └──no detail────────▶ return inflight record
       │
       ├──Pending / Invalid / unknown / no entry / query error ──▶ sleep, POLLING
       │
       └──deadline passed──────────────────────────▶ return ConfirmationTimeout()

The detailed status endpoint is consulted only once the inflight view
reports Landed, so the heavier query runs at most once per landing
signal.

Errors raised by a poll cycle are logged and treated as "no new
information". They never end the loop. Cancellation (CancelledError) is
not an Exception and always propagates, so callers can bound a
confirmation with ``asyncio.timeout`` or ``task.cancel()``.

Each cycle is bounded by the time left before the deadline, and the
final sleep is clipped to the remaining budget, so a slow or hung query
cannot push the timeout result past the deadline. The clock and the
sleep are injectable so tests can run the loop on simulated time.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Sequence
from enum import StrEnum
from typing import Callable, Protocol

from jito_relay.diagnostics import DiagnosticsSink, resolve
from jito_relay.models import (
    BundleStatus,
    BundleStatusDetail,
    ConfirmationResult,
    ConfirmationTimeout,
    InflightBundleStatus,
    StatusPage,
)

DEFAULT_TIMEOUT_MS = 60_000
POLL_INTERVAL_MS = 2_000

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class BundleStatusSource(Protocol):
    """The two status queries the confirmation loop depends on."""

    async def get_inflight_bundle_statuses(
        self, params: Sequence[str]
    ) -> StatusPage[InflightBundleStatus]:
        ...

    async def get_bundle_statuses(self, params: Sequence[str]) -> StatusPage[BundleStatusDetail]:
        ...


class ConfirmationState(StrEnum):
    POLLING = "POLLING"
    LANDED_PENDING_DETAIL = "LANDED_PENDING_DETAIL"
    FAILED = "FAILED"
    LANDED = "LANDED"
    TIMEOUT = "TIMEOUT"


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


async def confirm_inflight_bundle(
    source: BundleStatusSource,
    bundle_id: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    clock: Clock | None = None,
    sleep: Sleep | None = None,
    diagnostics: DiagnosticsSink | None = None,
) -> ConfirmationResult:
    """Poll a bundle's status until it is terminal or ``timeout_ms`` passes.

    Args:
        source: Provides the inflight and detailed status queries
            (normally a JitoJsonRpcClient).
        bundle_id: Id returned by sendBundle.
        timeout_ms: Overall deadline in milliseconds.
        clock: Returns the current time in milliseconds. Default:
            monotonic clock.
        sleep: Awaitable sleep taking seconds. Default: asyncio.sleep.
        diagnostics: Sink for progress and error events.

    Returns:
        The inflight record if the bundle Failed; the detailed record if
        it Landed and detail was available, otherwise the inflight Landed
        record; ConfirmationTimeout() if the deadline passed first.
    """
    now = clock or monotonic_ms
    wait = sleep or asyncio.sleep
    diag = resolve(diagnostics)

    start = now()
    attempt = 0
    while now() - start < timeout_ms:
        attempt += 1
        remaining = timeout_ms - (now() - start)
        try:
            async with asyncio.timeout(remaining / 1000.0):
                result = await _poll_once(source, bundle_id, diag)
        except TimeoutError:
            diag.error(
                f"Status query for bundle {bundle_id} did not finish before the deadline",
                bundle_id=bundle_id,
                attempt=attempt,
                error_code="TIMEOUT",
            )
        except Exception as exc:
            diag.error(
                f"Error checking bundle status: {exc}",
                bundle_id=bundle_id,
                attempt=attempt,
                error_code=getattr(exc, "error_code", type(exc).__name__),
            )
        else:
            if result is not None:
                return result

        remaining = timeout_ms - (now() - start)
        if remaining <= 0:
            break
        await wait(min(POLL_INTERVAL_MS, remaining) / 1000.0)

    diag.debug(
        f"Bundle {bundle_id} has not reached a final state within {timeout_ms}ms",
        bundle_id=bundle_id,
        state=ConfirmationState.TIMEOUT,
        attempts=attempt,
    )
    return ConfirmationTimeout()


async def _poll_once(
    source: BundleStatusSource,
    bundle_id: str,
    diag: DiagnosticsSink,
) -> ConfirmationResult | None:
    """Run one POLLING cycle. Returns a terminal result or None."""
    page = await source.get_inflight_bundle_statuses([bundle_id])
    inflight = page.first()

    if inflight is None:
        diag.debug(
            "No status returned for the bundle. It may be invalid or very old.",
            bundle_id=bundle_id,
            state=ConfirmationState.POLLING,
        )
        return None

    diag.debug(
        f"Bundle status: {inflight.status}, Landed slot: {inflight.landed_slot}",
        bundle_id=bundle_id,
        status=str(inflight.status),
    )

    if inflight.status == BundleStatus.FAILED:
        diag.debug(f"Bundle {bundle_id} failed", bundle_id=bundle_id, state=ConfirmationState.FAILED)
        return inflight
    if inflight.status != BundleStatus.LANDED:
        return None

    # LANDED_PENDING_DETAIL
    detail = (await source.get_bundle_statuses([bundle_id])).first()
    if detail is not None:
        diag.debug(
            f"Bundle {bundle_id} landed in slot {detail.slot}",
            bundle_id=bundle_id,
            state=ConfirmationState.LANDED,
        )
        return detail

    diag.debug(
        "No detailed status returned for landed bundle.",
        bundle_id=bundle_id,
        state=ConfirmationState.LANDED_PENDING_DETAIL,
    )
    return inflight
