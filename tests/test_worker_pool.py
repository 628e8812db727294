"""
Tests for the bounded render worker pool.
"""
import asyncio

import pytest

from conftest import StubBundlingEngine
from services.react_video import BundleError, PoolSaturatedError, RenderWorkerPool


class BlockingBundlingEngine(StubBundlingEngine):
    """Bundler that waits for the test to release it."""

    def __init__(self):
        super().__init__()
        self.started = None
        self.release = None

    async def bundle(self, entry_path):
        self.started.set()
        await self.release.wait()
        return await super().bundle(entry_path)


def test_rejects_bad_sizes(pipeline):
    with pytest.raises(ValueError):
        RenderWorkerPool(pipeline, max_workers=0)
    with pytest.raises(ValueError):
        RenderWorkerPool(pipeline, max_queue=0)


def test_submit_returns_result(pipeline, valid_args):
    async def scenario():
        pool = RenderWorkerPool(pipeline, max_workers=2, max_queue=2)
        result = await pool.submit(valid_args)
        stats = pool.stats()
        await pool.stop()
        return result, stats

    result, stats = asyncio.run(scenario())
    assert result.video_path.endswith(".mp4")
    assert stats["jobs_processed"] == 1
    assert stats["is_running"] is True


def test_errors_reach_submitter_unchanged(make_pipeline, valid_args):
    error = BundleError("bad jsx")
    pipeline = make_pipeline(bundling_engine=StubBundlingEngine(error=error))

    async def scenario():
        pool = RenderWorkerPool(pipeline, max_workers=1, max_queue=1)
        await pool.start()
        try:
            with pytest.raises(BundleError) as exc_info:
                await pool.submit(valid_args)
            return exc_info.value, pool.stats()
        finally:
            await pool.stop()

    raised, stats = asyncio.run(scenario())
    assert raised is error
    assert stats["jobs_failed"] == 1


def test_full_queue_rejects_without_wait(make_pipeline, valid_args):
    engine = BlockingBundlingEngine()
    pipeline = make_pipeline(bundling_engine=engine)

    async def scenario():
        engine.started = asyncio.Event()
        engine.release = asyncio.Event()
        pool = RenderWorkerPool(pipeline, max_workers=1, max_queue=1)
        await pool.start()

        running = asyncio.create_task(pool.submit(dict(valid_args)))
        await engine.started.wait()
        queued = asyncio.create_task(pool.submit(dict(valid_args)))
        await asyncio.sleep(0)

        with pytest.raises(PoolSaturatedError):
            await pool.submit(dict(valid_args))
        stats = pool.stats()

        engine.release.set()
        results = await asyncio.gather(running, queued)
        await pool.stop()
        return stats, results

    stats, results = asyncio.run(scenario())
    assert stats["active"] == 1
    assert stats["queued"] == 1
    assert stats["jobs_rejected"] == 1
    assert results[0].video_path != results[1].video_path


def test_full_queue_waits_when_asked(make_pipeline, valid_args):
    engine = BlockingBundlingEngine()
    pipeline = make_pipeline(bundling_engine=engine)

    async def scenario():
        engine.started = asyncio.Event()
        engine.release = asyncio.Event()
        pool = RenderWorkerPool(pipeline, max_workers=1, max_queue=1)
        await pool.start()

        running = asyncio.create_task(pool.submit(dict(valid_args)))
        await engine.started.wait()
        queued = asyncio.create_task(pool.submit(dict(valid_args)))
        await asyncio.sleep(0)
        waiting = asyncio.create_task(pool.submit(dict(valid_args), wait=True))
        await asyncio.sleep(0)
        assert not waiting.done()

        engine.release.set()
        results = await asyncio.gather(running, queued, waiting)
        stats = pool.stats()
        await pool.stop()
        return results, stats

    results, stats = asyncio.run(scenario())
    assert len({r.video_path for r in results}) == 3
    assert stats["jobs_processed"] == 3
    assert stats["jobs_rejected"] == 0


def test_stop_cancels_queued_jobs(make_pipeline, valid_args):
    engine = BlockingBundlingEngine()
    pipeline = make_pipeline(bundling_engine=engine)

    async def scenario():
        engine.started = asyncio.Event()
        engine.release = asyncio.Event()
        pool = RenderWorkerPool(pipeline, max_workers=1, max_queue=2)
        await pool.start()

        running = asyncio.create_task(pool.submit(dict(valid_args)))
        await engine.started.wait()
        queued = asyncio.create_task(pool.submit(dict(valid_args)))
        await asyncio.sleep(0)

        await pool.stop()
        outcomes = await asyncio.gather(running, queued, return_exceptions=True)
        return outcomes, pool.stats()

    outcomes, stats = asyncio.run(scenario())
    assert all(isinstance(o, asyncio.CancelledError) for o in outcomes)
    assert stats["is_running"] is False
