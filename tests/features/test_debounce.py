import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from tickerlens.features.search.debounce import Debouncer, invoke


@pytest.mark.asyncio
async def test_runs_once_with_latest_arguments():
    callback = MagicMock()
    debouncer = Debouncer(0.05, callback)

    for value in ("a", "ab", "abc"):
        debouncer(value)
        await asyncio.sleep(0.01)

    await asyncio.sleep(0.1)
    callback.assert_called_once_with("abc")
    assert debouncer.pending is False


@pytest.mark.asyncio
async def test_cancel_drops_pending_call():
    callback = MagicMock()
    debouncer = Debouncer(0.02, callback)

    debouncer("x")
    assert debouncer.pending
    debouncer.cancel()
    await asyncio.sleep(0.05)

    callback.assert_not_called()


@pytest.mark.asyncio
async def test_async_callback_is_awaited_by_drain():
    callback = AsyncMock()
    debouncer = Debouncer(0.01, callback)

    debouncer("go")
    await asyncio.sleep(0.03)
    await debouncer.drain()

    callback.assert_awaited_once_with("go")


@pytest.mark.asyncio
async def test_invoke_sync_and_async():
    sync_cb = MagicMock(return_value=1)
    assert invoke(sync_cb, "a") is None
    sync_cb.assert_called_once_with("a")

    async_cb = AsyncMock(return_value=2)
    task = invoke(async_cb, "b")
    assert await task == 2
