"""IssuerSession: owner of every collaborator the pipeline talks to.

One session lives for one CLI invocation (or one long-running caller). It
owns the schema registry, the local cache, the content store, the token
minter, the default-account channel and the plugin manager, and tears
them down together in :meth:`close`.

Collaborators are created lazily from settings on first use, so
``--help`` never opens a database or dials a node. Tests inject their
own instances through the constructor.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from metamint.domain.errors import AccountUnavailableError, ContractUnavailableError
from metamint.domain.schema import SchemaRegistry
from metamint.domain.status import PublicationState
from metamint.infrastructure.accounts import AccountChannel
from metamint.infrastructure.cache import LocalCache
from metamint.infrastructure.content_store import (
    ContentStore,
    IpfsContentStore,
    LocalContentStore,
)
from metamint.infrastructure.ledger import TokenMinter, Web3TokenMinter
from metamint.plugins.manager import PluginManager

if TYPE_CHECKING:
    from metamint.config.settings import MetamintSettings

logger = logging.getLogger(__name__)


class IssuerSession:
    """Session-scoped container for the pipeline's collaborators."""

    def __init__(
        self,
        settings: MetamintSettings,
        *,
        cache: LocalCache | None = None,
        content_store: ContentStore | None = None,
        minter: TokenMinter | None = None,
        plugin_manager: PluginManager | None = None,
        accounts: AccountChannel | None = None,
        registry: SchemaRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._content_store = content_store
        self._minter = minter
        self._plugin_manager = plugin_manager
        self._registry = registry
        self.accounts = accounts if accounts is not None else AccountChannel(
            settings.default_account
        )
        self.publication_state: PublicationState | None = None
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._account_sub = self.accounts.subscribe(self._on_account_changed)

    def __enter__(self) -> IssuerSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def settings(self) -> MetamintSettings:
        return self._settings

    @property
    def record_key(self) -> str:
        """Identity of the single record this session publishes."""
        return self._settings.cache.key

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def cache(self) -> LocalCache:
        if self._cache is None:
            path = self._settings.resolve_path(self._settings.cache.path)
            self._cache = LocalCache.open(path, timeout=self._settings.timeouts.cache)
        return self._cache

    @property
    def registry(self) -> SchemaRegistry:
        """Schema registry seeded from the cached snapshot, if any."""
        if self._registry is None:
            self._registry = SchemaRegistry(self.cache.get(self.record_key))
        return self._registry

    @property
    def content_store(self) -> ContentStore:
        if self._content_store is None:
            cfg = self._settings.store
            if cfg.backend == "local":
                self._content_store = LocalContentStore(self._settings.resolve_path(cfg.local_dir))
            else:
                self._content_store = IpfsContentStore(
                    cfg.ipfs_api_url, pin=cfg.pin, cid_version=cfg.cid_version
                )
        return self._content_store

    @property
    def plugin_manager(self) -> PluginManager:
        if self._plugin_manager is None:
            self._plugin_manager = PluginManager()
            self._plugin_manager.discover_and_load()
        return self._plugin_manager

    def minter(self, account: str | None = None) -> TokenMinter:
        """The bound token minter.

        Raises:
            ContractUnavailableError: ledger disabled, artifacts missing, or
                the contracts cannot be bound.
            AccountUnavailableError: no account to bind the token snapshot to.
        """
        if self._minter is not None:
            return self._minter

        cfg = self._settings.ledger
        if not cfg.enabled:
            raise ContractUnavailableError("Ledger is disabled ([ledger] enabled = false)")

        client = Web3TokenMinter.connect(
            cfg.rpc_url,
            token_artifact_path=self._settings.resolve_path(cfg.token_artifact),
            manager_artifact_path=self._settings.resolve_path(cfg.manager_artifact),
            network_id=cfg.network_id,
            request_timeout=self._settings.timeouts.mint,
        )
        bound_account = account or self.current_account(client)
        if bound_account is None:
            raise AccountUnavailableError("No signer account available; set [ledger] account")
        client.bind(bound_account)
        self._minter = client
        return client

    def current_account(self, client: Web3TokenMinter | None = None) -> str | None:
        """Current default account, falling back to the node's first account."""
        account = self.accounts.current
        if account is None and client is not None:
            node_accounts = client.accounts()
            if node_accounts:
                account = node_accounts[0]
                logger.debug("Using node account %s", account)
                self.accounts.switch(account)
        return account

    def lock_for(self, key: str) -> threading.Lock:
        """Per-record publish lock."""
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def close(self) -> None:
        """Release every collaborator the session created or was given."""
        self._account_sub.cancel()
        self.accounts.close()
        if self._content_store is not None:
            self._content_store.close()
        if self._minter is not None:
            self._minter.close()
        if self._cache is not None:
            self._cache.close()

    def _on_account_changed(self, selected_address: str) -> None:
        logger.debug("Default account switched to %s", selected_address)
        if self._plugin_manager is not None:
            self._plugin_manager.hook.account_changed(selected_address=selected_address)
