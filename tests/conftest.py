"""Shared pytest fixtures and test doubles for metamint tests."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from metamint.config.settings import MetamintSettings
from metamint.domain.errors import ContentStoreError
from metamint.infrastructure.cache import LocalCache
from metamint.infrastructure.content_store import ContentStore
from metamint.infrastructure.ledger import MintReceipt, TokenInfo, TokenMinter
from metamint.infrastructure.session import IssuerSession
from metamint.plugins.manager import PluginManager
from metamint.services.telemetry import disable_telemetry

ACCOUNT = "0x1111111111111111111111111111111111111111"
OTHER_ACCOUNT = "0x2222222222222222222222222222222222222222"


class FakeContentStore(ContentStore):
    """In-memory content store addressed by SHA-256."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.writes: list[bytes] = []
        self.fail_with: Exception | None = None
        self.on_write: Any = None

    def write(self, data: bytes, *, timeout: float | None = None) -> str:
        if self.on_write is not None:
            self.on_write()
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append(data)
        address = "Qm" + hashlib.sha256(data).hexdigest()[:44]
        self.blobs[address] = data
        return address

    def read(self, address: str, *, timeout: float | None = None) -> bytes:
        try:
            return self.blobs[address]
        except KeyError as exc:
            raise ContentStoreError(f"missing {address}", cause=exc) from exc


class FakeMinter(TokenMinter):
    """Records mint calls; fails on demand."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None
        self.on_mint: Any = None
        self._info = TokenInfo(
            contract_address="0x00000000000000000000000000000000000000aa",
            token_manager_address="0x00000000000000000000000000000000000000bb",
            name="Policy Token",
            symbol="PLCY",
            balance=3,
        )

    @property
    def token_info(self) -> TokenInfo | None:
        return self._info

    def mint(
        self,
        recipient: str,
        supply: int,
        content_address: str,
        base_uri: str,
        *,
        tx_options: Mapping[str, Any],
        timeout: float | None = None,
    ) -> MintReceipt:
        if self.on_mint is not None:
            self.on_mint()
        self.calls.append(
            {
                "recipient": recipient,
                "supply": supply,
                "content_address": content_address,
                "base_uri": base_uri,
                "tx_options": dict(tx_options),
                "timeout": timeout,
            }
        )
        if self.fail_with is not None:
            raise self.fail_with
        return MintReceipt(
            transaction_hash="0x" + f"{len(self.calls):064x}",
            block_number=len(self.calls),
        )


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    """Undo logging and telemetry setup done by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app_level = logging.getLogger("metamint").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("metamint").setLevel(app_level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> MetamintSettings:
    return MetamintSettings.from_cli(project_root=tmp_path, account=ACCOUNT)


@pytest.fixture
def cache(tmp_path: Path) -> Iterator[LocalCache]:
    c = LocalCache.open(tmp_path / ".metamint" / "cache.db")
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def content_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def minter() -> FakeMinter:
    return FakeMinter()


@pytest.fixture
def plugin_manager() -> PluginManager:
    return PluginManager()


@pytest.fixture
def session(
    settings: MetamintSettings,
    cache: LocalCache,
    content_store: FakeContentStore,
    minter: FakeMinter,
    plugin_manager: PluginManager,
) -> Iterator[IssuerSession]:
    """Session wired to a real SQLite cache and fake ledger/content store."""
    s = IssuerSession(
        settings,
        cache=cache,
        content_store=content_store,
        minter=minter,
        plugin_manager=plugin_manager,
    )
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Offline project: local blob store, ledger disabled, CWD at the project root."""
    (tmp_path / "metamint.toml").write_text(
        '[store]\nbackend = "local"\n\n[ledger]\nenabled = false\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("METAMINT_CONFIG", raising=False)
    return tmp_path
