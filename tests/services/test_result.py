"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from metamint.domain.errors import ContentStoreError, UnknownFieldError
from metamint.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="publish", data={"published": False})
        assert result.ok is True
        assert result.op == "publish"
        assert result.data == {"published": False}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True, op="get", data={"descriptor": None}, meta={"state": "draft"}
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"] == {"descriptor": None}
        assert parsed["meta"]["state"] == "draft"

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="get")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_failure_from_exception(self) -> None:
        result = ServiceResult.failure("publish", UnknownFieldError("color"))
        assert result.ok is False
        assert result.error == ServiceError(
            code="UNKNOWN_FIELD", message="Unknown field: 'color'", detail={"field": "color"}
        )
        assert result.warnings == []

    def test_failure_extra_detail_merged(self) -> None:
        exc = ContentStoreError("slow", timeout=True)
        result = ServiceResult.failure("publish", exc, meta={"state": "failed"}, step="write")
        assert result.error is not None
        assert result.error.detail == {"timeout": True, "step": "write"}
        assert result.meta == {"state": "failed"}


class TestServiceError:
    def test_cause_rendered(self) -> None:
        exc = ContentStoreError("write failed", cause=OSError("disk full"))
        error = ServiceError.from_exception(exc)
        assert error.code == "CONTENT_STORE_ERROR"
        assert error.detail == {"cause": "OSError: disk full"}

    def test_default_detail(self) -> None:
        assert ServiceError(code="X", message="m").detail == {}
