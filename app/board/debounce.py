# app/board/debounce.py
import asyncio
from typing import Awaitable, Callable, Hashable


class KeyedDebouncer:
    """Per-key deferred actions that restart on every new schedule.

    A scheduled action waits ``delay`` seconds; scheduling the same key again
    while it waits cancels it. Once the wait is over the action runs to
    completion and can no longer be cancelled.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._waiting: dict[Hashable, asyncio.Task] = {}
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, key: Hashable, action: Callable[[], Awaitable[None]]) -> None:
        self.cancel(key)
        task = asyncio.get_running_loop().create_task(self._run(key, action))
        self._waiting[key] = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, key: Hashable, action: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        if self._waiting.get(key) is asyncio.current_task():
            del self._waiting[key]
        await action()

    def cancel(self, key: Hashable) -> bool:
        task = self._waiting.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def is_pending(self, key: Hashable) -> bool:
        return key in self._waiting

    async def drain(self) -> None:
        """Wait for every scheduled action, including ones still waiting."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
