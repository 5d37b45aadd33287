"""PublicationService: merge field values, publish on demand, cache the result.

Pipeline: APPLY → DECIDE → (STORE → MINT) → CACHE → RESPOND

A submission whose ``status`` is ``Published`` is a publish event: the
descriptor is written to the content store, a token referencing the
resulting content address is minted, and only then is the snapshot
cached. Any other submission is a draft save that only touches the cache.

Failure policy:

- Nothing is retried here; the caller re-submits.
- A failed publish never changes the cached snapshot.
- Until the mint is confirmed, any failure restores the in-memory
  descriptor to what it was before the call (values, status and content
  address). The content object written before a failed mint is left in
  the store and reported as ``detail["content_address"]``.
- Once the mint is confirmed the ledger references the new content, so a
  cache failure after that point keeps the in-memory descriptor and
  reports the address and transaction hash alongside ``CACHE_ERROR``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from metamint.domain.errors import (
    AccountUnavailableError,
    MetamintError,
    PublishInProgressError,
)
from metamint.domain.schema import SchemaDescriptor, canonical_bytes
from metamint.domain.status import PublicationState, is_publish_event, state_for_status
from metamint.infrastructure.ledger import MintReceipt, TokenMinter
from metamint.services.base import BaseService
from metamint.services.cancel import CancelToken
from metamint.services.result import ServiceError, ServiceResult
from metamint.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)


class PublicationService(BaseService):
    """Runs the publication pipeline against the session's single record."""

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> PublicationState:
        """Pipeline state implied by the descriptor's status.

        ``PUBLISHING`` while a publish is in flight. A fresh session over the
        same cache derives the same state the writing session ended with.
        """
        if self._session.publication_state is not None:
            return self._session.publication_state
        return state_for_status(self._session.registry.descriptor.status)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def publish(
        self,
        values: Mapping[str, str],
        *,
        cancel: CancelToken | None = None,
        wait: bool = False,
    ) -> ServiceResult:
        """Apply *values* and publish when ``status`` is ``Published``.

        At most one publish runs per record. With ``wait=False`` a
        concurrent call fails fast with ``PUBLISH_IN_PROGRESS``; with
        ``wait=True`` it blocks until the lock is free.
        """
        op = "publish"
        key = self._session.record_key
        lock = self._session.lock_for(key)
        if not lock.acquire(blocking=wait):
            return ServiceResult.failure(op, PublishInProgressError(key))
        try:
            return self._run(op, dict(values), cancel or CancelToken())
        finally:
            lock.release()

    def save(
        self,
        values: Mapping[str, str],
        *,
        cancel: CancelToken | None = None,
        wait: bool = False,
    ) -> ServiceResult:
        """Alias for :meth:`publish`; a draft save is the non-publish branch."""
        return self.publish(values, cancel=cancel, wait=wait)

    @traced
    def get(self) -> ServiceResult:
        """Return the cached snapshot (``descriptor`` is None when empty)."""
        op = "get"
        try:
            cached = self._session.cache.get(self._session.record_key)
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"descriptor": cached.to_json_dict() if cached is not None else None},
        )

    def current(self) -> ServiceResult:
        """Return the in-memory descriptor and pipeline state."""
        op = "current"
        try:
            descriptor = self._session.registry.descriptor
            state = self.state
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={"descriptor": descriptor.to_json_dict(), "state": str(state)},
        )

    def set_schema(
        self,
        schema: SchemaDescriptor | Mapping[str, Any],
        *,
        wait: bool = False,
    ) -> ServiceResult:
        """Replace the in-memory schema wholesale (cached on the next save).

        Takes the same per-record lock as :meth:`publish`, so a schema can
        never be swapped under an in-flight publish.
        """
        op = "set_schema"
        key = self._session.record_key
        lock = self._session.lock_for(key)
        if not lock.acquire(blocking=wait):
            return ServiceResult.failure(op, PublishInProgressError(key))
        try:
            descriptor = self._session.registry.set_schema(schema)
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)
        finally:
            lock.release()
        return ServiceResult(
            ok=True,
            op=op,
            data={"descriptor": descriptor.to_json_dict(), "fields": list(descriptor.properties)},
        )

    def fields(self) -> ServiceResult:
        """List field names with their types, descriptions, and options."""
        op = "schema_fields"
        try:
            properties = self._session.registry.descriptor.properties
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)
        items = [
            {
                "name": name,
                "type": spec.type,
                "fieldType": spec.field_type,
                "description": spec.description,
                **({"options": spec.options} if spec.options else {}),
            }
            for name, spec in properties.items()
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def token_info(self) -> ServiceResult:
        """Return the token snapshot read when the contracts were bound."""
        op = "token_info"
        try:
            minter = self._session.minter()
            account = self._session.accounts.current
            if account is None:
                raise AccountUnavailableError("No signer account is bound")
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)
        info = minter.token_info
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "account": account,
                "token": info.model_dump(by_alias=True) if info is not None else None,
            },
        )

    def account(self) -> ServiceResult:
        """Return the current default signer account (may be None)."""
        account = self._session.accounts.current
        return ServiceResult(ok=True, op="account", data={"account": account})

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, op: str, values: dict[str, str], cancel: CancelToken) -> ServiceResult:
        session = self._session
        warnings: list[str] = []
        # The account is fixed for the whole call; later switches apply to the next call.
        account = session.accounts.current

        # ── APPLY ────────────────────────────────────────────
        try:
            registry = session.registry
            before = registry.snapshot()
            descriptor = registry.apply(values)
        except MetamintError as exc:
            return ServiceResult.failure(op, exc)

        publishing = is_publish_event(values.get("status"))
        written: str | None = None
        receipt: MintReceipt | None = None

        try:
            # ── STORE → MINT ─────────────────────────────────
            if publishing:
                session.publication_state = PublicationState.PUBLISHING
                minter, account = self._bind_ledger(account)
                log.debug("publish.start", record=session.record_key, account=account)

                cancel.raise_if_cancelled("content_store.write")
                with trace_span("content_store.write") as span:
                    written = session.content_store.write(
                        canonical_bytes(descriptor),
                        timeout=session.settings.timeouts.content_store,
                    )
                    if span is not None:
                        span.annotate("content_address", written)
                registry.set_content_address(written)
                log.debug("content.written", content_address=written)

                cancel.raise_if_cancelled("mint")
                with trace_span("mint") as span:
                    receipt = minter.mint(
                        account,
                        session.settings.ledger.mint_supply,
                        written,
                        session.settings.ledger.base_uri,
                        tx_options={"from": account},
                        timeout=session.settings.timeouts.mint,
                    )
                    if span is not None:
                        span.annotate("transaction_hash", receipt.transaction_hash)
                log.debug("mint.confirmed", transaction_hash=receipt.transaction_hash)

            # ── CACHE ────────────────────────────────────────
            cancel.raise_if_cancelled("cache.write")
            with trace_span("cache.write"):
                session.cache.set(session.record_key, descriptor)
        except MetamintError as exc:
            return self._fail(op, exc, before, written, receipt, warnings)
        finally:
            session.publication_state = None

        # ── RESPOND ──────────────────────────────────────────
        payload = descriptor.to_json_dict()
        if publishing:
            assert written is not None and receipt is not None
            receipt_data = receipt.model_dump(by_alias=True)
            self._dispatch_event(
                "post_publish",
                {
                    "descriptor": payload,
                    "content_address": written,
                    "receipt": receipt_data,
                    "account": account,
                },
                warnings,
            )
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "descriptor": payload,
                    "published": True,
                    "content_address": written,
                    "receipt": receipt_data,
                    "account": account,
                },
                warnings=warnings,
                meta={"state": str(PublicationState.PUBLISHED)},
            )

        self._dispatch_event("post_save", {"descriptor": payload}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"descriptor": payload, "published": False},
            warnings=warnings,
            meta={"state": str(state_for_status(descriptor.status))},
        )

    def _bind_ledger(self, account: str | None) -> tuple[TokenMinter, str]:
        """Resolve the minter and signer before anything is written."""
        minter = self._session.minter(account)
        if account is None:
            # Binding may have adopted the node's first account.
            account = self._session.accounts.current
        if account is None:
            raise AccountUnavailableError("No signer account is bound")
        return minter, account

    def _fail(
        self,
        op: str,
        exc: MetamintError,
        before: SchemaDescriptor,
        written: str | None,
        receipt: MintReceipt | None,
        warnings: list[str],
    ) -> ServiceResult:
        session = self._session
        extra: dict[str, Any] = {}
        if written is not None:
            extra["content_address"] = written
        if receipt is None:
            session.registry.restore(before)
        else:
            extra["transaction_hash"] = receipt.transaction_hash

        error = ServiceError.from_exception(exc, **extra)
        log.warning("publish.failed", code=error.code, error=error.message, **extra)
        self._dispatch_event(
            "publish_failed",
            {"code": error.code, "message": error.message, "detail": error.detail},
            warnings,
        )
        return ServiceResult(
            ok=False,
            op=op,
            error=error,
            warnings=warnings,
            meta={"state": str(PublicationState.FAILED)},
        )
