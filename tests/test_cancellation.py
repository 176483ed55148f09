# tests/test_cancellation.py
"""Tests for CancellationToken and run_cancellable."""

import asyncio
import threading

import pytest

from bookdigest.core.cancellation import CancellationToken, run_cancellable
from bookdigest.core.exceptions import Cancelled

pytestmark = pytest.mark.tier1


class TestCancellationToken:
    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel_is_terminal(self):
        token = CancellationToken()
        assert token.cancel() is True
        assert token.cancelled
        with pytest.raises(Cancelled):
            token.raise_if_cancelled()

    def test_second_cancel_returns_false(self):
        token = CancellationToken()
        token.cancel()
        assert token.cancel() is False

    def test_callbacks_fire_once(self):
        token = CancellationToken()
        calls = []
        token.add_callback(lambda: calls.append("a"))

        token.cancel()
        token.cancel()

        assert calls == ["a"]

    def test_callback_added_after_cancel_runs_immediately(self):
        token = CancellationToken()
        token.cancel()
        calls = []

        token.add_callback(lambda: calls.append("late"))

        assert calls == ["late"]

    def test_removed_callback_not_called(self):
        token = CancellationToken()
        calls = []
        remove = token.add_callback(lambda: calls.append("x"))

        remove()
        token.cancel()

        assert calls == []

    def test_failing_callback_does_not_block_others(self):
        token = CancellationToken()
        calls = []

        def boom():
            raise RuntimeError("boom")

        token.add_callback(boom)
        token.add_callback(lambda: calls.append("ok"))

        token.cancel()

        assert calls == ["ok"]

    def test_wait_returns_when_cancelled(self):
        async def scenario():
            token = CancellationToken()
            asyncio.get_running_loop().call_later(0.01, token.cancel)
            await asyncio.wait_for(token.wait(), timeout=1.0)
            return token.cancelled

        assert asyncio.run(scenario()) is True

    def test_wait_wakes_on_cancel_from_other_thread(self):
        async def scenario():
            token = CancellationToken()
            timer = threading.Timer(0.02, token.cancel)
            timer.start()
            try:
                await asyncio.wait_for(token.wait(), timeout=1.0)
            finally:
                timer.join()

        asyncio.run(scenario())


class TestRunCancellable:
    def test_without_token_just_awaits(self):
        async def work():
            return 42

        assert asyncio.run(run_cancellable(work())) == 42

    def test_returns_result_when_not_cancelled(self):
        async def work():
            await asyncio.sleep(0)
            return "done"

        assert asyncio.run(run_cancellable(work(), CancellationToken())) == "done"

    def test_already_cancelled_never_starts_work(self):
        started = []

        async def work():
            started.append(True)

        async def scenario():
            token = CancellationToken()
            token.cancel()
            await run_cancellable(work(), token)

        with pytest.raises(Cancelled):
            asyncio.run(scenario())
        assert started == []

    def test_cancel_aborts_in_flight_work(self):
        aborted = []

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                aborted.append(True)
                raise

        async def scenario():
            token = CancellationToken()
            asyncio.get_running_loop().call_later(0.01, token.cancel)
            await asyncio.wait_for(run_cancellable(work(), token), timeout=1.0)

        with pytest.raises(Cancelled):
            asyncio.run(scenario())
        assert aborted == [True]

    def test_work_errors_propagate(self):
        async def work():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            asyncio.run(run_cancellable(work(), CancellationToken()))
