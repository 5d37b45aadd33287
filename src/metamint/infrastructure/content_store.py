"""Content-addressable storage backends.

A content store turns bytes into an address derived from those bytes:
writing identical input twice yields the same address, and a reader never
observes a partially written object.

Two backends:

- :class:`IpfsContentStore`: an IPFS node's HTTP RPC API (``/api/v0/add``).
- :class:`LocalContentStore`: a directory of SHA-256-named blobs, for
  offline use and tests.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import httpx

from metamint.domain.errors import ContentStoreError

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "sha256-"


class ContentStore(ABC):
    """Write/read primitive used by the publication pipeline."""

    @abstractmethod
    def write(self, data: bytes, *, timeout: float | None = None) -> str:
        """Store *data* and return its content address.

        Raises:
            ContentStoreError: on transport or storage failure.
        """

    @abstractmethod
    def read(self, address: str, *, timeout: float | None = None) -> bytes:
        """Return the bytes stored under *address*."""

    def close(self) -> None:
        """Release held resources (no-op by default)."""


class IpfsContentStore(ContentStore):
    """Content store backed by an IPFS node's HTTP RPC API.

    The httpx client is owned by this store unless one is injected.
    """

    def __init__(
        self,
        api_url: str = "http://localhost:5001",
        *,
        pin: bool = True,
        cid_version: int = 0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._pin = pin
        self._cid_version = cid_version
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(trust_env=False)

    @property
    def api_url(self) -> str:
        return self._api_url

    def write(self, data: bytes, *, timeout: float | None = None) -> str:
        params = {
            "pin": "true" if self._pin else "false",
            "cid-version": str(self._cid_version),
        }
        response = self._post(
            "add",
            params=params,
            files={"file": ("metadata.json", data, "application/json")},
            timeout=timeout,
        )
        try:
            address = response.json()["Hash"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ContentStoreError("IPFS add returned no hash", cause=exc) from exc
        logger.debug("IPFS add -> %s (%d bytes)", address, len(data))
        return str(address)

    def read(self, address: str, *, timeout: float | None = None) -> bytes:
        response = self._post("cat", params={"arg": address}, timeout=timeout)
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _post(
        self,
        command: str,
        *,
        params: dict[str, str],
        files: dict[str, tuple[str, bytes, str]] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        url = f"{self._api_url}/api/v0/{command}"
        try:
            response = self._client.post(url, params=params, files=files, timeout=timeout)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ContentStoreError(
                f"IPFS {command} timed out after {timeout}s", cause=exc, timeout=True
            ) from exc
        except httpx.HTTPError as exc:
            raise ContentStoreError(f"IPFS {command} failed: {exc}", cause=exc) from exc
        return response


class LocalContentStore(ContentStore):
    """Directory of immutable blobs named ``sha256-<hex digest>``.

    Writes go to a temporary file in the same directory and are moved into
    place atomically, so a blob either exists in full or not at all.
    *timeout* is accepted for interface parity and ignored.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    @staticmethod
    def address_for(data: bytes) -> str:
        return LOCAL_PREFIX + hashlib.sha256(data).hexdigest()

    def path_for(self, address: str) -> Path:
        if not address.startswith(LOCAL_PREFIX) or "/" in address or "\\" in address:
            msg = f"Not a local content address: {address!r}"
            raise ContentStoreError(msg)
        return self._root / address

    def write(self, data: bytes, *, timeout: float | None = None) -> str:
        address = self.address_for(data)
        target = self.path_for(address)
        if target.is_file():
            return address
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ContentStoreError(f"Failed to write blob {address}", cause=exc) from exc
        logger.debug("Stored blob %s (%d bytes)", address, len(data))
        return address

    def read(self, address: str, *, timeout: float | None = None) -> bytes:
        try:
            return self.path_for(address).read_bytes()
        except OSError as exc:
            raise ContentStoreError(f"Failed to read blob {address}", cause=exc) from exc
