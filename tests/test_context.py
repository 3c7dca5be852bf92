"""Tests for alidrive.context."""

from unittest.mock import patch

import pytest

from alidrive import config
from alidrive.context import Context, background
from alidrive.errors import CancelledError


class TestContext:
    def test_background(self):
        ctx = background()
        ctx.check()
        assert ctx.remaining() is None
        assert ctx.timeout() == (config.CONNECT_TIMEOUT, config.READ_TIMEOUT)

    def test_cancel(self):
        ctx = Context()
        ctx.cancel()
        assert ctx.cancelled
        with pytest.raises(CancelledError, match="cancelled"):
            ctx.check()

    def test_deadline_caps_timeout(self):
        with patch("alidrive.context.time.monotonic", return_value=100.0):
            ctx = Context(timeout=1.5)
            assert ctx.timeout() == (1.5, 1.5)

    def test_deadline_exceeded(self):
        with patch("alidrive.context.time.monotonic", return_value=100.0):
            ctx = Context(timeout=5)
        with patch("alidrive.context.time.monotonic", return_value=105.0):
            with pytest.raises(CancelledError, match="deadline"):
                ctx.timeout()

    def test_long_deadline_keeps_defaults(self):
        with patch("alidrive.context.time.monotonic", return_value=0.0):
            ctx = Context(timeout=3600)
            assert ctx.timeout() == (config.CONNECT_TIMEOUT, config.READ_TIMEOUT)


class TestCancelCallbacks:
    def test_runs_once_on_cancel(self):
        ctx = Context()
        calls = []
        ctx.on_cancel(lambda: calls.append("a"))
        ctx.cancel()
        ctx.cancel()
        assert calls == ["a"]

    def test_unregister(self):
        ctx = Context()
        calls = []
        unregister = ctx.on_cancel(lambda: calls.append("a"))
        unregister()
        ctx.cancel()
        assert calls == []

    def test_already_cancelled_runs_immediately(self):
        ctx = Context()
        ctx.cancel()
        calls = []
        ctx.on_cancel(lambda: calls.append("a"))
        assert calls == ["a"]

    def test_failing_callback_does_not_block_others(self):
        ctx = Context()
        calls = []

        def broken():
            raise RuntimeError("boom")

        ctx.on_cancel(broken)
        ctx.on_cancel(lambda: calls.append("b"))
        ctx.cancel()
        assert calls == ["b"]
        assert ctx.cancelled
