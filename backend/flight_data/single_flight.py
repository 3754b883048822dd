import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger("SingleFlight")


class SingleFlight:
    """
    Coalesces concurrent calls for the same key onto one in-flight task.

    Only callers that overlap share a result; once the task finishes the
    key is forgotten and the next call starts a fresh one.
    """

    def __init__(self):
        self._inflight: Dict[str, asyncio.Task] = {}

    async def run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.info(f"Joining in-flight resolution for {key}")
        # shield: one cancelled waiter must not cancel the shared task
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def __len__(self) -> int:
        return len(self._inflight)
