"""
Diagnostics port.

The client and the confirmation engine report what they are doing
through a DiagnosticsSink. The default sink is NullDiagnostics, so a
client produces no log output unless a sink is attached.

LoguruDiagnostics forwards to loguru. Structured fields are bound onto
the record (``logger.bind``) rather than formatted into the message,
so JSON bodies containing braces are logged verbatim.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from loguru import logger

COMPONENT = "jito_relay"


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Receives diagnostic events from the client and the engine."""

    def debug(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...


class NullDiagnostics:
    """Discards every event."""

    def debug(self, message: str, **fields: Any) -> None:
        return None

    def error(self, message: str, **fields: Any) -> None:
        return None


class LoguruDiagnostics:
    """Writes events through loguru.

    Args:
        level: Level used for ``debug`` events. Defaults to "DEBUG";
            pass "INFO" to see request traffic under a default loguru
            configuration that filters debug records.
    """

    def __init__(self, level: str = "DEBUG") -> None:
        self._level = level
        self._logger = logger.bind(component=COMPONENT)

    def debug(self, message: str, **fields: Any) -> None:
        self._logger.bind(**fields).log(self._level, message)

    def error(self, message: str, **fields: Any) -> None:
        self._logger.bind(**fields).error(message)


def resolve(sink: DiagnosticsSink | None) -> DiagnosticsSink:
    """Return ``sink`` or the silent default."""
    return sink if sink is not None else NullDiagnostics()
