"""
Client configuration.

RelayConfig is a frozen value validated on construction. It can be
built directly, from a block-engine region name, or from environment
variables:

    JITO_BASE_URL           Full base URL (takes precedence).
    JITO_REGION             Region key from BLOCK_ENGINE_HOSTS.
    JITO_UUID               Client identifier appended as ?uuid=...
    JITO_REQUEST_TIMEOUT_S  Per-request HTTP timeout in seconds.
    JITO_DIAGNOSTICS        "1"/"true"/"yes" to log through loguru.

The per-request timeout is a hardening addition: without it a single
hung request could consume an entire confirmation budget silently.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_REQUEST_TIMEOUT_S = 10.0
API_PATH = "/api/v1"

BLOCK_ENGINE_HOSTS: dict[str, str] = {
    "mainnet": "mainnet.block-engine.jito.wtf",
    "amsterdam": "amsterdam.mainnet.block-engine.jito.wtf",
    "frankfurt": "frankfurt.mainnet.block-engine.jito.wtf",
    "london": "london.mainnet.block-engine.jito.wtf",
    "ny": "ny.mainnet.block-engine.jito.wtf",
    "slc": "slc.mainnet.block-engine.jito.wtf",
    "singapore": "singapore.mainnet.block-engine.jito.wtf",
    "tokyo": "tokyo.mainnet.block-engine.jito.wtf",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RelayConfig:
    """Connection settings for a relay client.

    Attributes:
        base_url: Relay base URL, e.g. "https://mainnet.block-engine.jito.wtf/api/v1".
            Endpoint paths ("/bundles", "/transactions") are appended to it.
        uuid: Optional client identifier. Empty string means "omit".
        request_timeout_s: Timeout applied to every HTTP request.
        diagnostics: Attach a loguru diagnostics sink on client creation.
    """

    base_url: str
    uuid: str = ""
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    diagnostics: bool = False

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got: {self.base_url!r}")
        if self.request_timeout_s <= 0:
            raise ValueError(
                f"request_timeout_s must be positive, got: {self.request_timeout_s}"
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def for_region(cls, region: str, uuid: str = "", **kwargs: object) -> RelayConfig:
        """Build a config pointing at a known block-engine region."""
        try:
            host = BLOCK_ENGINE_HOSTS[region]
        except KeyError:
            known = ", ".join(sorted(BLOCK_ENGINE_HOSTS))
            raise ValueError(f"unknown region {region!r} (known: {known})") from None
        return cls(base_url=f"https://{host}{API_PATH}", uuid=uuid, **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayConfig:
        """Build a config from JITO_* environment variables.

        Falls back to the mainnet region when neither JITO_BASE_URL nor
        JITO_REGION is set.
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get("JITO_REQUEST_TIMEOUT_S")
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_REQUEST_TIMEOUT_S
        diagnostics = env.get("JITO_DIAGNOSTICS", "").strip().lower() in _TRUTHY
        uuid = env.get("JITO_UUID", "")

        base_url = env.get("JITO_BASE_URL")
        if base_url:
            return cls(
                base_url=base_url,
                uuid=uuid,
                request_timeout_s=timeout,
                diagnostics=diagnostics,
            )
        return cls.for_region(
            env.get("JITO_REGION", "mainnet"),
            uuid=uuid,
            request_timeout_s=timeout,
            diagnostics=diagnostics,
        )
