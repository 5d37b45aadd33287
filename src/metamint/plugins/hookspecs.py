"""Pluggy hook specifications for metamint publication events.

Hooks run synchronously after the pipeline has decided an outcome; they
observe, they never change it.
"""

from __future__ import annotations

from typing import Any

import pluggy

PROJECT_NAME = "metamint"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class MetamintHookSpec:
    """Hook specifications for the metamint plugin system."""

    @hookspec
    def post_save(self, descriptor: dict[str, Any]) -> None:
        """Called after a draft save was cached."""

    @hookspec
    def post_publish(
        self,
        descriptor: dict[str, Any],
        content_address: str,
        receipt: dict[str, Any],
        account: str,
    ) -> None:
        """Called after content was stored, the token minted, and the snapshot cached."""

    @hookspec
    def publish_failed(
        self,
        code: str,
        message: str,
        detail: dict[str, Any],
    ) -> None:
        """Called when a publish attempt returns a failure result."""

    @hookspec
    def account_changed(self, selected_address: str) -> None:
        """Called when the default signer account switches."""
