"""Truffle build-artifact loading.

A Truffle artifact is the JSON file ``truffle compile``/``migrate`` writes
per contract: the ABI plus one deployed address per network id. Binding a
contract means picking the address recorded for the connected network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from metamint.domain.errors import ContractUnavailableError


class NetworkDeployment(BaseModel):
    """One entry of an artifact's ``networks`` map."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    address: str
    transaction_hash: str | None = Field(default=None, alias="transactionHash")


class ContractArtifact(BaseModel):
    """ABI and per-network deployments of one compiled contract."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    contract_name: str = Field(alias="contractName")
    abi: list[dict[str, Any]]
    networks: dict[str, NetworkDeployment] = Field(default_factory=dict)

    def address_for(self, network_id: str | int) -> str:
        """Deployed address on *network_id*.

        Raises:
            ContractUnavailableError: if the contract was never migrated there.
        """
        deployment = self.networks.get(str(network_id))
        if deployment is None:
            msg = f"{self.contract_name} is not deployed on network {network_id}"
            raise ContractUnavailableError(msg)
        return deployment.address


def load_artifact(path: Path) -> ContractArtifact:
    """Read and validate the artifact at *path*."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return ContractArtifact.model_validate(raw)
    except (OSError, ValueError, ValidationError) as exc:
        msg = f"Cannot load contract artifact {path}"
        raise ContractUnavailableError(msg, cause=exc) from exc
