"""Cooperative cancellation for multi-step operations."""

from __future__ import annotations

import threading

from metamint.domain.errors import PublishCancelledError


class CancelToken:
    """Thread-safe flag checked before each external step.

    A step already in flight runs to completion (or its deadline); the
    next step is never started once :meth:`cancel` has been called.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, step: str) -> None:
        if self._event.is_set():
            raise PublishCancelledError(step)
