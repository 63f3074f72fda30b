"""
Bounded best-of collection fed by a solver's solution stream.
"""

import bisect
import logging
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from .solution import Solution

logger = logging.getLogger(__name__)

DEFAULT_MAX_SOLUTIONS = 50


class RunStatus(Enum):
    """Status of the run feeding an aggregator."""
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class SolutionAggregator:
    """
    Keeps the best solutions seen so far, sorted by
    (distance, number of steps, tiebreak) and never more than max_solutions.

    With prune_dominated set, a solution strictly closer than everything
    retained clears the collection first. That is only valid for the stream
    of a single run, whose distances never increase.
    """

    def __init__(self, max_solutions: int = DEFAULT_MAX_SOLUTIONS,
                 prune_dominated: bool = True):
        if max_solutions < 1:
            raise ValueError("max_solutions must be at least 1")
        self.max_solutions = max_solutions
        self.prune_dominated = prune_dominated
        self._solutions: List[Solution] = []
        self._keys: List[Tuple[int, int, int]] = []
        self.received = 0
        self.status = RunStatus.RUNNING

    def add(self, solution: Solution) -> bool:
        """
        Merge one solution into the collection.

        Returns:
            True if the solution is retained.
        """
        if self.status is not RunStatus.RUNNING:
            raise RuntimeError(f"Run already {self.status.value}, no more solutions accepted")
        self.received += 1

        if self.prune_dominated and self._keys and solution.distance < self._keys[0][0]:
            self._solutions.clear()
            self._keys.clear()

        key = solution.sort_key
        # bisect_right keeps arrival order among equal keys
        position = bisect.bisect_right(self._keys, key)
        if position >= self.max_solutions:
            return False

        self._keys.insert(position, key)
        self._solutions.insert(position, solution)
        if len(self._solutions) > self.max_solutions:
            del self._solutions[self.max_solutions:]
            del self._keys[self.max_solutions:]
        return True

    def feed(self, item: Union[Solution, RunStatus]) -> bool:
        """Accept one item from a run's channel: a solution or a terminal marker."""
        if item is RunStatus.FINISHED:
            self.finish()
            return False
        if item is RunStatus.CANCELLED:
            self.cancel()
            return False
        return self.add(item)

    def finish(self) -> None:
        """Mark the end of the run: no more solutions will arrive."""
        if self.status is RunStatus.RUNNING:
            self.status = RunStatus.FINISHED
            logger.debug("Run finished with %d of %d solutions retained",
                         len(self._solutions), self.received)

    def cancel(self) -> None:
        if self.status is RunStatus.RUNNING:
            self.status = RunStatus.CANCELLED

    def reset(self) -> None:
        """Forget everything and get ready for a new run."""
        self._solutions.clear()
        self._keys.clear()
        self.received = 0
        self.status = RunStatus.RUNNING

    @property
    def done(self) -> bool:
        return self.status is not RunStatus.RUNNING

    @property
    def solutions(self) -> List[Solution]:
        return list(self._solutions)

    @property
    def best(self) -> Optional[Solution]:
        return self._solutions[0] if self._solutions else None

    @property
    def best_distance(self) -> Optional[int]:
        return self._keys[0][0] if self._keys else None

    def __len__(self) -> int:
        return len(self._solutions)

    def __iter__(self) -> Iterator[Solution]:
        return iter(list(self._solutions))
