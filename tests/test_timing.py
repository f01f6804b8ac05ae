"""Tests for microbench.timing — invoke-and-wait and call timing."""

from __future__ import annotations

import asyncio
import unittest
from unittest import mock

from bench_test_helpers import FakeClock

from microbench.timing import NS_PER_MS, invoke, time_call


class TestInvoke(unittest.IsolatedAsyncioTestCase):
    """Tests for invoke()."""

    async def test_sync_function_called_once(self) -> None:
        calls: list[int] = []
        await invoke(lambda: calls.append(1))
        self.assertEqual(calls, [1])

    async def test_coroutine_function_awaited(self) -> None:
        done: list[str] = []

        async def work() -> str:
            await asyncio.sleep(0)
            done.append("finished")
            return "value"

        await invoke(work)
        self.assertEqual(done, ["finished"])

    async def test_sync_function_returning_future_awaited(self) -> None:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[int] = loop.create_future()
        loop.call_soon(fut.set_result, 5)
        await invoke(lambda: fut)
        self.assertTrue(fut.done())

    async def test_sync_exception_propagates_unchanged(self) -> None:
        err = RuntimeError("boom")

        def fail() -> None:
            raise err

        with self.assertRaises(RuntimeError) as ctx:
            await invoke(fail)
        self.assertIs(ctx.exception, err)

    async def test_async_exception_propagates_unchanged(self) -> None:
        err = KeyError("missing")

        async def fail() -> None:
            raise err

        with self.assertRaises(KeyError) as ctx:
            await invoke(fail)
        self.assertIs(ctx.exception, err)


class TestTimeCall(unittest.IsolatedAsyncioTestCase):
    """Tests for time_call()."""

    async def test_elapsed_in_milliseconds(self) -> None:
        clock = FakeClock()
        elapsed = await time_call(lambda: clock.advance_ms(2.5), clock)
        self.assertEqual(elapsed, 2.5)
        self.assertEqual(clock.calls, 2)

    async def test_includes_async_completion(self) -> None:
        clock = FakeClock()

        async def work() -> None:
            await asyncio.sleep(0)
            clock.advance_ms(7)

        self.assertEqual(await time_call(work, clock), 7.0)

    async def test_sync_call_reads_clock_around_call_only(self) -> None:
        clock = FakeClock()
        calls: list[int] = []
        with mock.patch("microbench.timing.invoke") as invoke_mock:
            elapsed = await time_call(lambda: calls.append(clock.calls), clock)
        invoke_mock.assert_not_called()
        self.assertEqual(calls, [1])
        self.assertEqual(clock.calls, 2)
        self.assertEqual(elapsed, 0.0)

    async def test_real_clock_measures_sleep(self) -> None:
        elapsed = await time_call(lambda: asyncio.sleep(0.01))
        self.assertGreaterEqual(elapsed, 5.0)
        self.assertLess(elapsed, 1000.0)

    def test_ns_per_ms(self) -> None:
        self.assertEqual(NS_PER_MS, 1_000_000)


if __name__ == "__main__":
    unittest.main()
