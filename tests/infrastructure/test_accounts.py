"""Tests for AccountChannel subscriptions."""

from __future__ import annotations

import logging

import pytest

from metamint.infrastructure.accounts import AccountChannel

A = "0x1111111111111111111111111111111111111111"
B = "0x2222222222222222222222222222222222222222"


class TestAccountChannel:
    def test_initial_value(self) -> None:
        assert AccountChannel(A).current == A

    def test_empty_initial_is_none(self) -> None:
        assert AccountChannel("").current is None
        assert AccountChannel().current is None

    def test_switch_updates_current(self) -> None:
        channel = AccountChannel(A)
        channel.switch(B)
        assert channel.current == B

    def test_subscribers_notified(self) -> None:
        channel = AccountChannel(A)
        seen: list[str] = []
        channel.subscribe(seen.append)
        channel.switch(B)
        channel.switch(A)
        assert seen == [B, A]

    def test_cancel_stops_updates(self) -> None:
        channel = AccountChannel(A)
        seen: list[str] = []
        sub = channel.subscribe(seen.append)
        sub.cancel()
        sub.cancel()
        channel.switch(B)
        assert seen == []
        assert not sub.active

    def test_cancel_leaves_other_subscribers(self) -> None:
        channel = AccountChannel(A)
        first: list[str] = []
        second: list[str] = []
        sub = channel.subscribe(first.append)
        channel.subscribe(second.append)
        sub.cancel()
        channel.switch(B)
        assert first == []
        assert second == [B]

    def test_failing_subscriber_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        channel = AccountChannel(A)
        seen: list[str] = []

        def boom(_: str) -> None:
            raise RuntimeError("subscriber broke")

        channel.subscribe(boom)
        channel.subscribe(seen.append)
        with caplog.at_level(logging.WARNING, logger="metamint.infrastructure.accounts"):
            channel.switch(B)
        assert seen == [B]
        assert channel.current == B
        assert "Account subscriber failed" in caplog.text

    def test_close_cancels_everything(self) -> None:
        channel = AccountChannel(A)
        seen: list[str] = []
        sub = channel.subscribe(seen.append)
        channel.close()
        channel.switch(B)
        assert seen == []
        assert not sub.active
