import asyncio
import logging

import pytest

from app.workers.task_runner import BackgroundTaskRunner


class TestSchedule:
    async def test_schedule_returns_before_handler_runs(self) -> None:
        seen = []

        async def handler(document_id: int) -> None:
            seen.append(document_id)

        runner = BackgroundTaskRunner(handler)
        result = runner.schedule(1)

        assert result is None
        assert seen == []
        await runner.drain()
        assert seen == [1]

    async def test_tasks_run_concurrently(self) -> None:
        gate = asyncio.Event()
        started = []

        async def handler(document_id: int) -> None:
            started.append(document_id)
            await gate.wait()

        runner = BackgroundTaskRunner(handler)
        for document_id in (1, 2, 3):
            runner.schedule(document_id)
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert sorted(started) == [1, 2, 3]
        assert runner.pending == 3
        gate.set()
        await runner.drain()
        assert runner.pending == 0

    async def test_handler_errors_are_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        async def handler(document_id: int) -> None:
            raise RuntimeError("kaboom")

        runner = BackgroundTaskRunner(handler)
        with caplog.at_level(logging.ERROR, logger="app.workers.task_runner"):
            runner.schedule(9)
            await runner.drain()

        assert "document 9" in caplog.text
        assert "kaboom" in caplog.text


class TestShutdown:
    async def test_finished_tasks_complete_within_grace(self) -> None:
        done = []

        async def handler(document_id: int) -> None:
            await asyncio.sleep(0.01)
            done.append(document_id)

        runner = BackgroundTaskRunner(handler)
        runner.schedule(1)
        await runner.shutdown(grace_seconds=1.0)

        assert done == [1]
        assert runner.pending == 0

    async def test_stuck_tasks_are_cancelled(self) -> None:
        cancelled = []

        async def handler(document_id: int) -> None:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(document_id)
                raise

        runner = BackgroundTaskRunner(handler)
        runner.schedule(5)
        await asyncio.sleep(0)
        await runner.shutdown(grace_seconds=0.01)

        assert cancelled == [5]
        assert runner.pending == 0

    async def test_shutdown_with_nothing_running(self) -> None:
        async def handler(document_id: int) -> None:
            return None

        await BackgroundTaskRunner(handler).shutdown(grace_seconds=0.01)
