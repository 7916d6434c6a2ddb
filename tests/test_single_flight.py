"""
Tests for the single-flight load gate.
"""
import asyncio

import pytest

from covidtrack.core import FlightState, SingleFlight


class _Work:
    """Counts invocations and returns a scripted sequence of results."""

    def __init__(self, *results, delay=0.01):
        self.results = list(results)
        self.delay = delay
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        result = self.results[min(self.calls, len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


def test_concurrent_callers_share_one_run():
    async def _run():
        gate = SingleFlight("test")
        work = _Work(True)
        results = await asyncio.gather(*(gate.run(work) for _ in range(20)))
        return gate, work, results

    gate, work, results = asyncio.run(_run())

    assert work.calls == 1
    assert gate.runs == 1
    assert results == [True] * 20
    assert gate.state is FlightState.DONE


def test_completed_gate_returns_cached_result():
    async def _run():
        gate = SingleFlight("test")
        work = _Work("loaded")
        first = await gate.run(work)
        second = await gate.run(work)
        return work, first, second

    work, first, second = asyncio.run(_run())

    assert work.calls == 1
    assert first == second == "loaded"


def test_failure_is_retried_when_allowed():
    async def _run():
        gate = SingleFlight("test", retry_on_failure=True)
        work = _Work(False, True)
        concurrent = await asyncio.gather(*(gate.run(work) for _ in range(5)))
        state_after_failure = gate.state
        retried = await gate.run(work)
        return gate, work, concurrent, state_after_failure, retried

    gate, work, concurrent, state_after_failure, retried = asyncio.run(_run())

    assert concurrent == [False] * 5
    assert state_after_failure is FlightState.NOT_STARTED
    assert retried is True
    assert work.calls == 2
    assert gate.state is FlightState.DONE


def test_failure_is_latched_when_retry_disabled():
    async def _run():
        gate = SingleFlight("test", retry_on_failure=False)
        work = _Work(False, True)
        first = await gate.run(work)
        second = await gate.run(work)
        return gate, work, first, second

    gate, work, first, second = asyncio.run(_run())

    assert first is False and second is False
    assert work.calls == 1
    assert gate.state is FlightState.DONE


def test_exception_becomes_failed_result():
    async def _run():
        gate = SingleFlight("test", is_success=lambda r: r == "ok")
        work = _Work(RuntimeError("boom"), "ok")
        results = await asyncio.gather(
            *(gate.run(work, on_error=lambda e: f"failed: {e}") for _ in range(3))
        )
        again = await gate.run(work)
        return work, results, again

    work, results, again = asyncio.run(_run())

    assert results == ["failed: boom"] * 3
    assert again == "ok"
    assert work.calls == 2


def test_cancellation_resets_gate():
    async def _run():
        gate = SingleFlight("test")
        work = _Work(True, delay=10)
        task = asyncio.create_task(gate.run(work))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return gate

    gate = asyncio.run(_run())

    assert gate.state is FlightState.NOT_STARTED


def test_reset():
    async def _run():
        gate = SingleFlight("test")
        work = _Work(1, 2)
        first = await gate.run(work)
        assert gate.reset()
        second = await gate.run(work)
        return first, second

    assert asyncio.run(_run()) == (1, 2)
