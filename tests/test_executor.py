import pytest

from conftest import FakeStrategy, failing
from multi_compress.compression.config import Constraints
from multi_compress.compression.executor import execute_all, run_attempt


@pytest.mark.asyncio
async def test_failure_becomes_attempt_with_original_blob(fake_blob):
    attempt = await run_attempt(failing("broken"), fake_blob, Constraints())

    assert attempt.success is False
    assert attempt.blob is fake_blob
    assert attempt.size == fake_blob.size
    assert attempt.error == "broken broke"
    assert attempt.duration_ms >= 0


@pytest.mark.asyncio
async def test_unexpected_exception_is_captured(fake_blob):
    strategy = FakeStrategy("boom", error=RuntimeError())
    attempt = await run_attempt(strategy, fake_blob, Constraints())

    assert attempt.success is False
    assert attempt.error == "RuntimeError"


@pytest.mark.asyncio
async def test_one_attempt_per_strategy_in_candidate_order(fake_blob):
    strategies = [
        FakeStrategy("slow", size=10, delay=0.05),
        failing("broken"),
        FakeStrategy("fast", size=20),
    ]
    attempts = await execute_all(strategies, fake_blob, Constraints())

    assert [attempt.tool for attempt in attempts] == ["slow", "broken", "fast"]
    assert [attempt.success for attempt in attempts] == [True, False, True]
    assert [attempt.size for attempt in attempts] == [10, fake_blob.size, 20]


@pytest.mark.asyncio
async def test_failure_does_not_cancel_siblings(fake_blob):
    slow = FakeStrategy("slow", size=10, delay=0.05)
    attempts = await execute_all([failing("broken"), slow], fake_blob, Constraints())

    assert slow.calls == 1
    assert attempts[1].success is True


@pytest.mark.asyncio
async def test_all_failures_still_produce_attempts(fake_blob):
    strategies = [failing("a"), failing("b"), failing("c")]
    attempts = await execute_all(strategies, fake_blob, Constraints())

    assert len(attempts) == 3
    assert not any(attempt.success for attempt in attempts)
