"""Error kinds for the publication pipeline.

Every error carries a stable ``code`` that the service layer copies into
:class:`~metamint.services.result.ServiceError`. Adapters raise these;
services never let them escape as exceptions.
"""

from __future__ import annotations

from typing import Any


class MetamintError(Exception):
    """Base class for all expected failures."""

    code = "ERROR"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def detail(self) -> dict[str, Any]:
        """Structured detail copied into the service error payload."""
        if self.cause is None:
            return {}
        return {"cause": f"{type(self.cause).__name__}: {self.cause}"}


class UnknownFieldError(MetamintError):
    """A submitted field name is not part of the schema."""

    code = "UNKNOWN_FIELD"

    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown field: {field!r}")
        self.field = field

    @property
    def detail(self) -> dict[str, Any]:
        return {"field": self.field}


class SchemaShapeError(MetamintError):
    """A replacement schema does not have the descriptor shape."""

    code = "INVALID_SCHEMA"


class AccountUnavailableError(MetamintError):
    """No signer account is bound."""

    code = "ACCOUNT_UNAVAILABLE"


class ContractUnavailableError(MetamintError):
    """The token manager contract is not reachable or not bound."""

    code = "CONTRACT_UNAVAILABLE"


class _StepError(MetamintError):
    """Failure of an external step; records whether a deadline expired."""

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        timeout: bool = False,
    ) -> None:
        super().__init__(message, cause=cause)
        self.timeout = timeout

    @property
    def detail(self) -> dict[str, Any]:
        detail = super().detail
        if self.timeout:
            detail["timeout"] = True
        return detail


class ContentStoreError(_StepError):
    """Writing to (or reading from) the content store failed."""

    code = "CONTENT_STORE_ERROR"


class MintError(_StepError):
    """The mint transaction failed or was reverted."""

    code = "MINT_ERROR"


class CacheError(_StepError):
    """The local snapshot could not be read or written."""

    code = "CACHE_ERROR"


class PublishCancelledError(MetamintError):
    """The caller cancelled a publish before the named step ran."""

    code = "CANCELLED"

    def __init__(self, step: str) -> None:
        super().__init__(f"Publish cancelled before {step}")
        self.step = step

    @property
    def detail(self) -> dict[str, Any]:
        return {"step": self.step}


class PublishInProgressError(MetamintError):
    """Another publish holds the record's lock."""

    code = "PUBLISH_IN_PROGRESS"

    def __init__(self, key: str) -> None:
        super().__init__(f"A publish for {key!r} is already in flight")
        self.key = key
