"""Ledger-side token minting.

:class:`TokenMinter` is what the publication pipeline consumes: one
``mint`` call that binds a content address to a freshly minted token, plus
the :class:`TokenInfo` snapshot read when the contracts were bound.

:class:`Web3TokenMinter` talks to an Ethereum JSON-RPC node through web3.py
and resolves the ERC-721 token and TokenManager contracts from their
Truffle artifacts.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from metamint.domain.errors import ContractUnavailableError, MintError
from metamint.infrastructure.artifacts import ContractArtifact, load_artifact

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_RECEIPT_TIMEOUT = 120.0


class TokenInfo(BaseModel):
    """Read-only token snapshot taken at contract-binding time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_address: str = Field(alias="contractAddress")
    token_manager_address: str = Field(alias="tokenManagerAddress")
    name: str
    symbol: str
    balance: int


class MintReceipt(BaseModel):
    """Outcome of a confirmed mint transaction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    transaction_hash: str = Field(alias="transactionHash")
    block_number: int | None = Field(default=None, alias="blockNumber")
    status: int = 1


class TokenMinter(ABC):
    """Mints tokens that reference a content address."""

    @property
    @abstractmethod
    def token_info(self) -> TokenInfo | None:
        """Snapshot read at binding time, or None before binding."""

    @abstractmethod
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
        """Send the mint transaction and wait for its receipt.

        Raises:
            MintError: the transaction could not be sent, timed out, or reverted.
            ContractUnavailableError: the token manager is not bound.
        """

    def close(self) -> None:
        """Release held resources (no-op by default)."""


class Web3TokenMinter(TokenMinter):
    """TokenMinter backed by web3.py and Truffle-deployed contracts."""

    def __init__(
        self,
        w3: Web3,
        *,
        token_artifact: ContractArtifact,
        manager_artifact: ContractArtifact,
        network_id: str | int | None = None,
    ) -> None:
        self._w3 = w3
        self._token_artifact = token_artifact
        self._manager_artifact = manager_artifact
        self._network_id = network_id
        self._token: Any = None
        self._manager: Any = None
        self._token_info: TokenInfo | None = None

    @classmethod
    def connect(
        cls,
        rpc_url: str,
        *,
        token_artifact_path: Path,
        manager_artifact_path: Path,
        network_id: str | int | None = None,
        request_timeout: float | None = None,
    ) -> Web3TokenMinter:
        """Build a minter for the node at *rpc_url* (nothing is bound yet)."""
        request_kwargs = {"timeout": request_timeout} if request_timeout else None
        w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs=request_kwargs))
        return cls(
            w3,
            token_artifact=load_artifact(token_artifact_path),
            manager_artifact=load_artifact(manager_artifact_path),
            network_id=network_id,
        )

    @property
    def token_info(self) -> TokenInfo | None:
        return self._token_info

    @property
    def is_bound(self) -> bool:
        return self._manager is not None

    def accounts(self) -> list[str]:
        """Accounts the node can sign for (empty on failure)."""
        try:
            return list(self._w3.eth.accounts)
        except (Web3Exception, ValueError, OSError):
            logger.debug("Could not list node accounts", exc_info=True)
            return []

    def bind(self, account: str) -> TokenInfo:
        """Resolve both contracts and read the token snapshot for *account*.

        Raises:
            ContractUnavailableError: node unreachable, contract not deployed
                on this network, or a read call failed.
        """
        try:
            network_id = self._network_id
            if network_id is None:
                network_id = self._w3.net.version
            token_address = self._token_artifact.address_for(network_id)
            manager_address = self._manager_artifact.address_for(network_id)

            token = self._w3.eth.contract(
                address=Web3.to_checksum_address(token_address),
                abi=self._token_artifact.abi,
            )
            manager = self._w3.eth.contract(
                address=Web3.to_checksum_address(manager_address),
                abi=self._manager_artifact.abi,
            )
            name = token.functions.name().call()
            symbol = token.functions.symbol().call()
            balance = token.functions.balanceOf(Web3.to_checksum_address(account)).call()
        except ContractUnavailableError:
            raise
        except (Web3Exception, ValueError, OSError) as exc:
            msg = f"Cannot bind token contracts: {exc}"
            raise ContractUnavailableError(msg, cause=exc) from exc

        self._token = token
        self._manager = manager
        self._token_info = TokenInfo(
            contract_address=token_address,
            token_manager_address=manager_address,
            name=str(name),
            symbol=str(symbol),
            balance=int(balance),
        )
        logger.debug(
            "Bound %s (%s) at %s", self._token_info.name, self._token_info.symbol, token_address
        )
        return self._token_info

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
        if self._manager is None:
            raise ContractUnavailableError("TokenManager contract is not bound")

        options = dict(tx_options)
        if "from" in options:
            options["from"] = Web3.to_checksum_address(options["from"])
        wait = timeout if timeout is not None else DEFAULT_RECEIPT_TIMEOUT

        try:
            call = self._manager.functions.mint(
                Web3.to_checksum_address(recipient), supply, content_address, base_uri
            )
            tx_hash = call.transact(options)
            receipt = self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=wait)
        except TimeExhausted as exc:
            raise MintError(
                f"Mint receipt not received within {wait}s", cause=exc, timeout=True
            ) from exc
        except (Web3Exception, ValueError, OSError) as exc:
            raise MintError(f"Mint transaction failed: {exc}", cause=exc) from exc

        tx_hex = Web3.to_hex(tx_hash)
        if receipt["status"] == 0:
            raise MintError(f"Mint transaction {tx_hex} reverted")
        return MintReceipt(
            transaction_hash=tx_hex,
            block_number=receipt.get("blockNumber"),
            status=int(receipt["status"]),
        )
