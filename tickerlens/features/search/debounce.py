# tickerlens/features/search/debounce.py

import asyncio
import inspect
from typing import Any, Callable, Optional, Set


def invoke(callback: Callable[..., Any], *args: Any) -> Optional[asyncio.Task]:
    """
    Call a sync or async callback from loop context.

    Coroutine results are scheduled as tasks on the running loop and the task
    is returned; plain callables are called directly.
    """
    result = callback(*args)
    if inspect.isawaitable(result):
        return asyncio.ensure_future(result)
    return None


class Debouncer:
    """
    Trailing-edge debounce on the running asyncio loop.

    Every call cancels the pending timer and restarts it, so the callback
    runs once, with the latest arguments, after `delay` seconds without a
    new call.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        task = invoke(self.callback, *args)
        if task is not None:
            # Keep a reference until the task finishes.
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for callbacks that already fired and are still running."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
