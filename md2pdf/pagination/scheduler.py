"""Debounced, last-writer-wins scheduling of pagination runs."""

import asyncio
from typing import Awaitable, Callable, Generic, List, Optional, Tuple, TypeVar

from md2pdf.config import Config
from md2pdf.logger import Logger

S = TypeVar("S")
R = TypeVar("R")


class RepaginationScheduler(Generic[S, R]):
    """Schedules pagination runs triggered by layout-affecting changes.

    * ``trigger`` debounces: a trigger cancels any earlier run that is still
      waiting out its quiescence delay.
    * ``run_now`` skips the delay but is otherwise sequenced the same way.
    * Runs never interleave; they execute one at a time under a lock.
    * A result is committed only if it comes from a more recent trigger than
      the committed one, so a stale run finishing late never wins.

    Every caller gets a future that resolves with the newest committed
    result once a run at least as recent as its own trigger has finished.
    """

    def __init__(
        self,
        run: Callable[[S, int], Awaitable[R]],
        logger: Logger,
        delay: Optional[float] = None,
    ):
        """
        Args:
            run: Coroutine function performing one run for (settings, sequence)
            logger: Logger instance
            delay: Quiescence delay in seconds (default from config)
        """
        self._run = run
        self.logger = logger
        self.delay = Config.get_repaginate_delay() if delay is None else delay

        self._sequence = 0
        self._committed_sequence = 0
        self._latest: Optional[R] = None
        self._waiting: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self._waiters: List[Tuple[int, asyncio.Future]] = []

    @property
    def latest(self) -> Optional[R]:
        """Most recently committed result."""
        return self._latest

    @property
    def committed_sequence(self) -> int:
        return self._committed_sequence

    def trigger(self, settings: S) -> "asyncio.Future[R]":
        """Schedule a debounced run."""
        return self._schedule(settings, self.delay)

    def run_now(self, settings: S) -> "asyncio.Future[R]":
        """Schedule a run without the quiescence delay."""
        return self._schedule(settings, 0.0)

    def _schedule(self, settings: S, delay: float) -> "asyncio.Future[R]":
        loop = asyncio.get_running_loop()
        self._sequence += 1
        sequence = self._sequence

        if self._waiting is not None and not self._waiting.done():
            self._waiting.cancel()
            self.logger.debug("Superseded pending pagination run", sequence=sequence - 1)

        future: asyncio.Future = loop.create_future()
        self._waiters.append((sequence, future))
        task = loop.create_task(self._fire(sequence, settings, delay))
        self._waiting = task
        return future

    async def _fire(self, sequence: int, settings: S, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        # Past the quiescence window: this run can no longer be cancelled.
        if self._waiting is asyncio.current_task():
            self._waiting = None

        async with self._lock:
            try:
                result = await self._run(settings, sequence)
            except Exception as e:
                self.logger.error("Pagination run failed", sequence=sequence, error=str(e))
                self._fail(sequence, e)
                return

        self._commit(sequence, result)

    def _commit(self, sequence: int, result: R) -> None:
        if sequence > self._committed_sequence:
            self._committed_sequence = sequence
            self._latest = result
        else:
            self.logger.debug(
                "Discarded stale pagination result",
                sequence=sequence,
                committed=self._committed_sequence,
            )

        remaining = []
        for waiter_sequence, future in self._waiters:
            if waiter_sequence <= sequence:
                if not future.done():
                    future.set_result(self._latest)
            else:
                remaining.append((waiter_sequence, future))
        self._waiters = remaining

    def _fail(self, sequence: int, error: Exception) -> None:
        remaining = []
        for waiter_sequence, future in self._waiters:
            if waiter_sequence <= sequence:
                if not future.done():
                    future.set_exception(error)
            else:
                remaining.append((waiter_sequence, future))
        self._waiters = remaining
