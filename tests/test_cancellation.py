"""Tests for cancellation module."""

from __future__ import annotations

import threading

import pytest

from tool_updater.cancellation import CancellationToken, UpdateCancelledError


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_starts_uncancelled(self) -> None:
        """Test a new token is not cancelled."""
        token = CancellationToken.none()
        assert token.is_cancelled is False
        token.raise_if_cancelled()

    def test_cancel_sets_flag(self) -> None:
        """Test cancel() marks the token."""
        token = CancellationToken()
        token.cancel()
        assert token.is_cancelled is True

    def test_raise_if_cancelled(self) -> None:
        """Test raise_if_cancelled() raises once cancelled."""
        token = CancellationToken()
        token.cancel()
        with pytest.raises(UpdateCancelledError, match="cancelled"):
            token.raise_if_cancelled()

    def test_callback_runs_once(self) -> None:
        """Test callbacks run on the first cancel only."""
        token = CancellationToken()
        calls: list[str] = []
        token.register(lambda: calls.append("x"))

        token.cancel()
        token.cancel()

        assert calls == ["x"]

    def test_register_after_cancel_runs_immediately(self) -> None:
        """Test registering on a cancelled token runs the callback right away."""
        token = CancellationToken()
        token.cancel()
        calls: list[str] = []

        token.register(lambda: calls.append("x"))

        assert calls == ["x"]

    def test_unregister_prevents_callback(self) -> None:
        """Test an unregistered callback is not run."""
        token = CancellationToken()
        calls: list[str] = []
        registration = token.register(lambda: calls.append("x"))

        registration.unregister()
        registration.unregister()
        token.cancel()

        assert calls == []

    def test_registration_context_manager(self) -> None:
        """Test leaving the with-block unregisters the callback."""
        token = CancellationToken()
        calls: list[str] = []
        with token.register(lambda: calls.append("x")):
            pass

        token.cancel()

        assert calls == []

    def test_callback_errors_are_swallowed(self) -> None:
        """Test a failing callback doesn't stop the others or raise."""
        token = CancellationToken()
        calls: list[str] = []

        def boom() -> None:
            raise RuntimeError("boom")

        token.register(boom)
        token.register(lambda: calls.append("after"))
        token.cancel()

        assert calls == ["after"]

    def test_wait_returns_when_cancelled(self) -> None:
        """Test wait() wakes up on cancel from another thread."""
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()
        try:
            assert token.wait(5) is True
        finally:
            timer.cancel()

    def test_wait_times_out(self) -> None:
        """Test wait() returns False on timeout."""
        assert CancellationToken().wait(0.01) is False
