"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from metamint.services.result import ServiceResult
from metamint.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_annotate(self) -> None:
        span = Span(name="mint")
        span.annotate("transaction_hash", "0xabc")
        span.end()
        assert span.to_dict()["annotations"] == {"transaction_hash": "0xabc"}


class TestTraceSpan:
    def test_yields_none_when_disabled(self) -> None:
        with trace_span("content_store.write") as span:
            assert span is None

    def test_yields_none_without_parent(self) -> None:
        enable_telemetry()
        with trace_span("content_store.write") as span:
            assert span is None


class _Service:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("content_store.write") as span:
            if span is not None:
                span.annotate("content_address", "QmX")
        with trace_span("mint"):
            pass
        return ServiceResult(ok=True, op="publish", meta={"state": "published"})


class TestTraced:
    def test_disabled_leaves_meta_alone(self) -> None:
        result = _Service().run()
        assert result.meta == {"state": "published"}

    def test_enabled_merges_span_tree(self) -> None:
        enable_telemetry()
        result = _Service().run()
        assert result.meta is not None
        assert result.meta["state"] == "published"
        telemetry = result.meta["telemetry"]
        assert telemetry["name"] == "_Service.run"
        names = [child["name"] for child in telemetry["children"]]
        assert names == ["content_store.write", "mint"]
        assert telemetry["children"][0]["annotations"] == {"content_address": "QmX"}

    def test_non_result_return_untouched(self) -> None:
        enable_telemetry()

        @traced
        def plain() -> int:
            return 7

        assert plain() == 7

    def test_span_reset_after_call(self) -> None:
        enable_telemetry()
        _Service().run()
        assert _current_span.get() is None
