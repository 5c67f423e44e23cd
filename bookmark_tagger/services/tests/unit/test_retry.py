"""Unit tests for the async retry decorator."""

import pytest

from bookmark_tagger.lib.retry import retry_on_failure_async


@pytest.mark.unit
@pytest.mark.asyncio
async def test_returns_first_success():
    calls = []

    @retry_on_failure_async(max_retries=3, base_delay=0)
    async def succeed():
        calls.append(1)
        return "ok"

    assert await succeed() == "ok"
    assert len(calls) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_retries_until_success():
    attempts = {"count": 0}

    @retry_on_failure_async(max_retries=3, base_delay=0)
    async def flaky():
        attempts["count"] += 1
        if attempts["count"] < 3:
            raise ConnectionError("reset")
        return "ok"

    assert await flaky() == "ok"
    assert attempts["count"] == 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    attempts = {"count": 0}

    @retry_on_failure_async(max_retries=2, base_delay=0)
    async def always_fails():
        attempts["count"] += 1
        raise TimeoutError("slow")

    with pytest.raises(TimeoutError):
        await always_fails()

    assert attempts["count"] == 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_zero_retries_single_attempt():
    attempts = {"count": 0}

    @retry_on_failure_async(max_retries=0, base_delay=0)
    async def always_fails():
        attempts["count"] += 1
        raise ConnectionError("reset")

    with pytest.raises(ConnectionError):
        await always_fails()

    assert attempts["count"] == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_other_exceptions_propagate_immediately():
    attempts = {"count": 0}

    @retry_on_failure_async(max_retries=3, base_delay=0)
    async def bad_input():
        attempts["count"] += 1
        raise KeyError("missing")

    with pytest.raises(KeyError):
        await bad_input()

    assert attempts["count"] == 1


@pytest.mark.unit
def test_preserves_function_name():
    @retry_on_failure_async()
    async def named():
        return None

    assert named.__name__ == "named"
