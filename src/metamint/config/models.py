"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, metamint.toml only contains
overrides. An offline setup needs nothing but ``[store] backend = "local"``
and ``[ledger] enabled = false``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

# --- metamint.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["ipfs", "local"] = "ipfs"
    ipfs_api_url: str = "http://localhost:5001"
    pin: bool = True
    cid_version: int = 0
    local_dir: str = ".metamint/blobs"


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    rpc_url: str = "http://localhost:8545"
    network_id: str | int | None = None
    token_artifact: str = "build/contracts/ERC721MetadataMintable.json"
    manager_artifact: str = "build/contracts/TokenManager.json"
    account: str | None = None
    mint_supply: int = 1000
    base_uri: str = "https://ipfs.io/ipfs/"


class CacheConfig(BaseModel):
    """[cache] section."""

    model_config = {"frozen": True}

    path: str = ".metamint/cache.db"
    key: str = "metadata"


class TimeoutsConfig(BaseModel):
    """[timeouts] section: per-step deadlines in seconds."""

    model_config = {"frozen": True}

    content_store: float = 30.0
    mint: float = 120.0
    cache: float = 5.0
