"""BaseService — abstract foundation for metamint services.

Every service receives an :class:`IssuerSession` at construction time.
The session owns the registry, cache, content store, minter, and plugins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from metamint.infrastructure.session import IssuerSession

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes."""

    def __init__(self, session: IssuerSession) -> None:
        self._session = session

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Fire a plugin hook synchronously.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        hook_fn = getattr(self._session.plugin_manager.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
