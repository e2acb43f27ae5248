"""Tip account selection."""

from __future__ import annotations

import random
from typing import Any, Protocol

from jito_relay.errors import NoTipAccountsError


class TipAccountSource(Protocol):
    async def get_tip_accounts(self) -> Any:
        ...


class TipAccountSelector:
    """Picks one of the relay's tip accounts uniformly at random.

    The list is fetched on every ``pick()``; nothing is cached.

    Args:
        source: Provides ``get_tip_accounts()`` (normally the client).
        rng: Random source. Inject a seeded ``random.Random`` for tests.
    """

    def __init__(self, source: TipAccountSource, rng: random.Random | None = None) -> None:
        self._source = source
        self._rng = rng or random.Random()

    async def pick(self) -> str:
        """Return a random tip account.

        Raises:
            NoTipAccountsError: The relay returned an empty or non-list result.
        """
        accounts = await self._source.get_tip_accounts()
        if not isinstance(accounts, list) or not accounts:
            raise NoTipAccountsError(result_type=type(accounts).__name__)
        return self._rng.choice(accounts)
