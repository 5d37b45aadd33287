"""Default-account tracking with cancellable change subscriptions.

The signer account can change at any time (a wallet switching accounts).
Consumers read :attr:`AccountChannel.current` when they start work and
keep that value for the rest of the call; subscribers are told about
changes so they can update what they use for *future* calls.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

AccountCallback = Callable[[str], None]


@dataclass(eq=False)
class Subscription:
    """Handle returned by :meth:`AccountChannel.subscribe`."""

    _channel: AccountChannel
    _callback: AccountCallback
    active: bool = True

    def cancel(self) -> None:
        """Stop receiving updates. Safe to call more than once."""
        if self.active:
            self._channel._remove(self)
            self.active = False


class AccountChannel:
    """Holds the current default account and fans out switch events."""

    def __init__(self, initial: str | None = None) -> None:
        self._current = initial or None
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> str | None:
        with self._lock:
            return self._current

    def subscribe(self, callback: AccountCallback) -> Subscription:
        sub = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def switch(self, selected_address: str) -> None:
        """Make *selected_address* the default and notify subscribers.

        A failing subscriber is logged and skipped; the rest still run.
        """
        with self._lock:
            self._current = selected_address
            subscribers = list(self._subscriptions)
        for sub in subscribers:
            try:
                sub._callback(selected_address)
            except Exception:
                logger.warning("Account subscriber failed", exc_info=True)

    def close(self) -> None:
        with self._lock:
            subs = list(self._subscriptions)
        for sub in subs:
            sub.cancel()

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)
