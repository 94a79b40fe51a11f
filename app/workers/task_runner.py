"""
Fire-and-forget execution of per-document background work.

Each scheduled document id becomes its own asyncio task on the running loop.
There is no queue and no concurrency limit: a burst of uploads means a burst
of concurrent OCR runs. Whoever schedules gets nothing back; the outcome of a
task is only visible through the document's status and the logs.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol, Set

logger = logging.getLogger(__name__)


class TaskScheduler(Protocol):
    """What the ingestion side needs: hand off a document id and move on."""

    def schedule(self, document_id: int) -> None: ...


class BackgroundTaskRunner:
    """
    Runs handler(document_id) as a detached asyncio task per call.
    Keeps references to in-flight tasks so they are not garbage collected
    mid-run, and logs anything a task raises since no caller is waiting.
    """

    def __init__(self, handler: Callable[[int], Awaitable[Any]]) -> None:
        self._handler = handler
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, document_id: int) -> None:
        task = asyncio.get_running_loop().create_task(
            self._run(document_id),
            name=f"process-document-{document_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Scheduled processing for document %s", document_id)

    async def _run(self, document_id: int) -> None:
        try:
            await self._handler(document_id)
        except Exception:
            logger.exception("Background processing crashed for document %s", document_id)

    async def drain(self) -> None:
        """Wait for every in-flight task, including ones scheduled while waiting."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, grace_seconds: float) -> None:
        """Give running tasks grace_seconds to finish, then cancel the rest."""
        if not self._tasks:
            return
        logger.info("Waiting up to %.1fs for %d background task(s)", grace_seconds, len(self._tasks))
        _, still_running = await asyncio.wait(list(self._tasks), timeout=grace_seconds)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(
                "Cancelled %d background task(s); their documents stay in processing",
                len(still_running),
            )
            await asyncio.gather(*still_running, return_exceptions=True)
