"""
Render Worker Pool
==================
Admission control for render jobs.

A bounded queue feeds a fixed number of workers. When the queue is full,
``submit`` either fails fast with PoolSaturatedError or waits for space.
"""

import asyncio
from typing import Any, Dict, List, Optional
from uuid import uuid4

from loguru import logger

from config import settings

from .errors import PoolSaturatedError
from .models import RenderResult
from .pipeline import ReactVideoPipeline


class RenderWorkerPool:
    """
    Runs pipeline renders on a bounded set of workers.

    Usage:
        pool = RenderWorkerPool(pipeline, max_workers=2, max_queue=8)
        await pool.start()
        result = await pool.submit(arguments)
        await pool.stop()
    """

    def __init__(
        self,
        pipeline: ReactVideoPipeline,
        max_workers: int = settings.MAX_CONCURRENT_RENDERS,
        max_queue: int = settings.MAX_QUEUED_RENDERS,
        pool_id: Optional[str] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if max_queue < 1:
            raise ValueError("max_queue must be at least 1")

        self.pipeline = pipeline
        self.max_workers = max_workers
        self.max_queue = max_queue
        self.pool_id = pool_id or f"RenderWorkerPool-{uuid4().hex[:8]}"

        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._active = 0
        self._jobs_processed = 0
        self._jobs_failed = 0
        self._jobs_rejected = 0
        self.is_running = False

    async def start(self) -> None:
        """Start the worker tasks on the running event loop."""
        if self.is_running:
            return

        self._queue = asyncio.Queue(maxsize=self.max_queue)
        self._workers = [
            asyncio.create_task(self._worker_loop(i)) for i in range(self.max_workers)
        ]
        self.is_running = True
        logger.info(
            f"[{self.pool_id}] Started {self.max_workers} workers (queue size {self.max_queue})"
        )

    async def stop(self) -> None:
        """Cancel workers. Jobs still queued fail with CancelledError."""
        if not self.is_running:
            return

        self.is_running = False
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

        while self._queue is not None and not self._queue.empty():
            _, future = self._queue.get_nowait()
            if not future.done():
                future.cancel()

        logger.info(f"[{self.pool_id}] Stopped")

    async def submit(self, payload: Any, wait: bool = False) -> RenderResult:
        """
        Queue a render and wait for its result.

        Args:
            payload: Raw tool arguments
            wait: Block for queue space instead of failing when full

        Raises:
            PoolSaturatedError: Queue full and ``wait`` is False
            Any pipeline error, unchanged
        """
        if not self.is_running:
            await self.start()

        future = asyncio.get_running_loop().create_future()
        job = (payload, future)

        if wait:
            await self._queue.put(job)
        else:
            try:
                self._queue.put_nowait(job)
            except asyncio.QueueFull:
                self._jobs_rejected += 1
                logger.warning(f"[{self.pool_id}] Queue full ({self.max_queue}), rejecting job")
                raise PoolSaturatedError(
                    f"Render queue is full ({self.max_queue} waiting); try again later"
                )

        return await future

    async def _worker_loop(self, index: int) -> None:
        while True:
            payload, future = await self._queue.get()
            try:
                if future.cancelled():
                    continue

                self._active += 1
                try:
                    result = await self.pipeline.render(payload)
                except asyncio.CancelledError:
                    if not future.done():
                        future.cancel()
                    raise
                except Exception as e:
                    self._jobs_failed += 1
                    logger.error(f"[{self.pool_id}:{index}] Job failed: {e}")
                    if not future.done():
                        future.set_exception(e)
                else:
                    self._jobs_processed += 1
                    if not future.done():
                        future.set_result(result)
                finally:
                    self._active -= 1
            finally:
                self._queue.task_done()

    def stats(self) -> Dict[str, Any]:
        """Counters and current load."""
        return {
            "pool_id": self.pool_id,
            "is_running": self.is_running,
            "max_workers": self.max_workers,
            "max_queue": self.max_queue,
            "active": self._active,
            "queued": self._queue.qsize() if self._queue is not None else 0,
            "jobs_processed": self._jobs_processed,
            "jobs_failed": self._jobs_failed,
            "jobs_rejected": self._jobs_rejected,
        }
