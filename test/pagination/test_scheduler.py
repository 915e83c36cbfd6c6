"""Tests for debounced, last-writer-wins repagination scheduling."""

import asyncio

import pytest

from md2pdf.pagination import RepaginationScheduler


class RecordingRun:
    """Run function that records calls; per-settings delays simulate slow layouts."""

    def __init__(self, delays=None):
        self.delays = delays or {}
        self.calls = []

    async def __call__(self, settings, sequence):
        self.calls.append((settings, sequence))
        await asyncio.sleep(self.delays.get(settings, 0))
        return f"{settings}#{sequence}"


@pytest.mark.asyncio
async def test_burst_of_triggers_runs_only_last(logger):
    run = RecordingRun()
    scheduler = RepaginationScheduler(run, logger, delay=0.05)

    futures = [scheduler.trigger(width) for width in (800, 900, 1000)]
    results = await asyncio.gather(*futures)

    assert run.calls == [(1000, 3)]
    assert results == ["1000#3"] * 3
    assert scheduler.latest == "1000#3"
    assert scheduler.committed_sequence == 3


@pytest.mark.asyncio
async def test_triggers_outside_window_each_run(logger):
    run = RecordingRun()
    scheduler = RepaginationScheduler(run, logger, delay=0.01)

    first = await scheduler.trigger("a")
    second = await scheduler.trigger("b")

    assert [call[0] for call in run.calls] == ["a", "b"]
    assert (first, second) == ("a#1", "b#2")


@pytest.mark.asyncio
async def test_stale_run_never_overwrites_newer_result(logger):
    # "slow" starts first but the newer "fast" request must win.
    run = RecordingRun(delays={"slow": 0.05})
    scheduler = RepaginationScheduler(run, logger, delay=0.0)

    slow = scheduler.run_now("slow")
    await asyncio.sleep(0.01)
    fast = scheduler.run_now("fast")

    slow_result, fast_result = await asyncio.gather(slow, fast)

    assert fast_result == "fast#2"
    assert scheduler.latest == "fast#2"
    assert slow_result in ("slow#1", "fast#2")


@pytest.mark.asyncio
async def test_runs_never_interleave(logger):
    active = 0
    peak = 0

    async def run(settings, sequence):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return sequence

    scheduler = RepaginationScheduler(run, logger, delay=0.0)
    futures = []
    for i in range(4):
        futures.append(scheduler.run_now(i))
        # Let the run start so the next request cannot supersede it.
        await asyncio.sleep(0)
    results = await asyncio.gather(*futures)

    assert peak == 1
    assert results[-1] == 4


@pytest.mark.asyncio
async def test_failed_run_propagates_to_its_waiters(logger):
    async def run(settings, sequence):
        raise RuntimeError("layout engine went away")

    scheduler = RepaginationScheduler(run, logger, delay=0.0)

    with pytest.raises(RuntimeError):
        await scheduler.run_now("x")
    assert scheduler.latest is None
