"""Tests for the suspending (asyncio) retry executor"""

from __future__ import annotations

import asyncio

import pytest
from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt

from svckit.domain.models.result import Err, Ok
from svckit.infrastructure.retry import RetryPolicy, retrying, run_with_retry, run_with_retry_async


def _scripted(outcomes):
    calls = {"n": 0}

    async def operation():
        outcome = outcomes[calls["n"]]
        calls["n"] += 1
        await asyncio.sleep(0)
        return outcome

    return operation, calls


class _RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_immediate_success():
    operation, calls = _scripted([Ok(42)])
    sleep = _RecordingSleep()

    result = await run_with_retry_async(operation, RetryPolicy(max_attempts=3, delay=1), sleep=sleep)

    assert result == Ok(42)
    assert calls["n"] == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_eventual_success():
    operation, calls = _scripted([Err("fail"), Err("fail"), Ok("success")])
    sleep = _RecordingSleep()

    result = await run_with_retry_async(operation, RetryPolicy.from_millis(3, 10), sleep=sleep)

    assert result == Ok("success")
    assert calls["n"] == 3
    assert sleep.delays == pytest.approx([0.01, 0.01])


@pytest.mark.asyncio
async def test_exhaustion_returns_last_error():
    operation, calls = _scripted([Err("always fails"), Err("always fails")])
    sleep = _RecordingSleep()

    result = await run_with_retry_async(operation, RetryPolicy(max_attempts=2, delay=0), sleep=sleep)

    assert result == Err("always fails")
    assert calls["n"] == 2
    assert len(sleep.delays) == 1


@pytest.mark.asyncio
async def test_matches_blocking_executor():
    """Same schedule, same result and call count as the blocking executor"""
    schedule = [Err("a"), Err("b"), Err("c"), Ok("d")]
    policy = RetryPolicy(max_attempts=4, delay=0)

    async_op, async_calls = _scripted(schedule)
    async_result = await run_with_retry_async(async_op, policy, sleep=_RecordingSleep())

    sync_calls = {"n": 0}

    def sync_op():
        outcome = schedule[sync_calls["n"]]
        sync_calls["n"] += 1
        return outcome

    sync_result = run_with_retry(sync_op, policy, sleep=lambda _: None)

    assert async_result == sync_result == Ok("d")
    assert async_calls["n"] == sync_calls["n"] == 4


@pytest.mark.asyncio
async def test_wait_does_not_block_other_tasks():
    """Other tasks make progress while the session waits"""
    ticks = []

    async def ticker():
        for i in range(3):
            ticks.append(i)
            await asyncio.sleep(0.005)

    seen_at_attempt = []

    async def operation():
        seen_at_attempt.append(len(ticks))
        if len(seen_at_attempt) == 1:
            return Err("fail")
        return Ok("success")

    ticker_task = asyncio.create_task(ticker())
    result = await run_with_retry_async(operation, RetryPolicy(max_attempts=2, delay=0.1))
    await ticker_task

    assert result == Ok("success")
    # the ticker ran to completion while the session was waiting
    assert seen_at_attempt[1] == 3


@pytest.mark.asyncio
async def test_cancel_during_wait_propagates():
    calls = {"n": 0}

    async def operation():
        calls["n"] += 1
        return Err("fail")

    task = asyncio.create_task(run_with_retry_async(operation, RetryPolicy(max_attempts=5, delay=10)))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_cancel_during_operation_propagates():
    started = asyncio.Event()
    calls = {"n": 0}

    async def operation():
        calls["n"] += 1
        started.set()
        await asyncio.sleep(10)
        return Ok("never")

    task = asyncio.create_task(run_with_retry_async(operation, RetryPolicy(max_attempts=3, delay=0)))
    await started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_independent_concurrent_sessions():
    op_a, calls_a = _scripted([Err("x"), Ok("a")])
    op_b, calls_b = _scripted([Err("y"), Err("z")])
    policy = RetryPolicy(max_attempts=2, delay=0.01)

    result_a, result_b = await asyncio.gather(
        run_with_retry_async(op_a, policy),
        run_with_retry_async(op_b, policy),
    )

    assert result_a == Ok("a")
    assert result_b == Err("z")
    assert calls_a["n"] == 2
    assert calls_b["n"] == 2


@pytest.mark.asyncio
async def test_retrying_decorator_on_coroutine():
    calls = {"n": 0}

    @retrying(RetryPolicy(max_attempts=3, delay=0))
    async def flaky():
        calls["n"] += 1
        if calls["n"] < 2:
            raise ConnectionError("transient")
        return "ok"

    assert await flaky() == "ok"
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_retrying_decorator_awaits_injected_sleep():
    policy = RetryPolicy(max_attempts=3, delay=0.5)
    sleep = _RecordingSleep()

    @retrying(policy, sleep=sleep)
    async def broken():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        await broken()
    assert sleep.delays == [policy.delay] * (policy.max_attempts - 1)


@pytest.mark.asyncio
async def test_retry_error_from_operation_propagates():
    calls = {"n": 0}
    inner = Retrying(stop=stop_after_attempt(1), retry=retry_if_result(lambda value: True))

    async def operation():
        calls["n"] += 1
        return inner(lambda: Ok("never accepted"))

    with pytest.raises(RetryError):
        await run_with_retry_async(operation, RetryPolicy(max_attempts=3, delay=0), sleep=_RecordingSleep())
    assert calls["n"] == 1
