"""
Runs a search on a worker thread and streams its solutions to the event loop.

The solver pushes each solution onto an asyncio queue, in order, followed by
exactly one terminal marker: RunStatus.FINISHED when the search ended on its
own and RunStatus.CANCELLED when it was cancelled.
"""

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, Sequence, Union

from .aggregator import RunStatus, SolutionAggregator
from .solution import Solution
from .solver import NumbersSolver

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[SolutionAggregator], Optional[Awaitable[None]]]


class SearchRun:
    """One background search for one puzzle."""

    def __init__(self, sources: Sequence[int], target: int,
                 report_threshold: Optional[int] = None):
        self.sources = list(sources)
        self.target = target
        self.solver = NumbersSolver(self.sources, target, report_threshold=report_threshold)
        self.queue: "asyncio.Queue[Union[Solution, RunStatus]]" = asyncio.Queue()
        self._future: Optional[asyncio.Future] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def running(self) -> bool:
        return self._future is not None and not self._future.done()

    def start(self) -> 'SearchRun':
        """Start the search on the loop's default executor. Call from the loop."""
        if self._future is not None:
            raise RuntimeError("Search already started")
        self._loop = asyncio.get_running_loop()
        logger.info("Starting search: %s -> %d", self.sources, self.target)
        self._future = self._loop.run_in_executor(None, self._produce)
        return self

    def cancel(self) -> None:
        """Request cancellation; the worker stops at its next safe point."""
        if not self.solver.cancelled:
            logger.info("Cancelling search for %d", self.target)
        self.solver.cancel()

    def _send(self, item: Union[Solution, RunStatus]) -> None:
        self._loop.call_soon_threadsafe(self.queue.put_nowait, item)

    def _produce(self) -> bool:
        # worker thread
        completed = False
        try:
            completed = self.solver.search(self._forward)
            return completed
        finally:
            # a cancel that lands after the search exhausted the space changes nothing
            if not completed and self.solver.cancelled:
                status = RunStatus.CANCELLED
            else:
                status = RunStatus.FINISHED
            self._send(status)
            logger.info("Search for %d %s after %d solutions", self.target,
                        status.value, self.solver.reported)

    def _forward(self, solution: Solution) -> bool:
        if self.solver.cancelled:
            return False
        self._send(solution)
        return True

    async def solutions(self) -> AsyncIterator[Solution]:
        """
        Yield solutions in emission order until the terminal marker.

        Closing the generator early cancels the search.
        """
        if self._future is None:
            self.start()
        finished = False
        try:
            while True:
                item = await self.queue.get()
                if isinstance(item, RunStatus):
                    finished = True
                    await self.wait()
                    return
                yield item
        finally:
            if not finished:
                self.cancel()

    async def stream_into(self, aggregator: SolutionAggregator,
                          on_update: Optional[UpdateCallback] = None) -> RunStatus:
        """
        Drain the run into an aggregator.

        Args:
            aggregator: Receives every solution and the terminal marker.
            on_update: Called after each item the aggregator retains and once
                more after the terminal marker. May be a coroutine function.

        Returns:
            The final status of the aggregator.
        """
        if self._future is None:
            self.start()
        while True:
            item = await self.queue.get()
            retained = aggregator.feed(item)
            terminal = isinstance(item, RunStatus)
            if (retained or terminal) and on_update is not None:
                pending = on_update(aggregator)
                if pending is not None:
                    await pending
            if terminal:
                await self.wait()
                return aggregator.status

    async def wait(self) -> bool:
        """
        Wait for the worker to exit and re-raise anything it raised.

        Returns:
            True if the search space was exhausted.
        """
        if self._future is None:
            raise RuntimeError("Search not started")
        return await self._future
