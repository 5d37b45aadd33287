"""ServiceResult and ServiceError, the tagged result every operation returns.

INVARIANT: Service-layer methods return ServiceResult; expected failures
are ``ok=False`` results, never exceptions. The CLI and any other
front-end consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from metamint.domain.errors import MetamintError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: MetamintError, **extra: Any) -> ServiceError:
        """Build an error payload from a domain exception plus *extra* detail."""
        return cls(code=exc.code, message=exc.message, detail={**exc.detail, **extra})


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"publish"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, state, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        exc: MetamintError,
        *,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
        **extra: Any,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError.from_exception(exc, **extra),
            warnings=warnings or [],
            meta=meta,
        )
