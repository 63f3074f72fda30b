"""
Backtracking search engine for the Numbers Game.

The engine walks every way of combining the available values two at a time,
reporting each partial derivation that is at least as close to the target as
the best one reported so far. It keeps a single mutable search state and
undoes every change on the way back out of the recursion.
"""

import logging
import sys
import threading
from typing import Callable, List, Optional, Sequence

from .operators import OPERATORS, Operator
from .solution import Solution
from .values import Step, Value

logger = logging.getLogger(__name__)

# Called with each reported solution; returning False stops the search.
Visitor = Callable[[Solution], Optional[bool]]

NO_DISTANCE = sys.maxsize


class SearchStopped(Exception):
    """Raised internally to unwind the recursion when a search must end."""


class NumbersSolver:
    """
    Solver for one Numbers Game puzzle.

    A solver owns its search state outright and can only run once; build a
    new one for every puzzle.
    """

    def __init__(self, sources: Sequence[int], target: int,
                 report_threshold: Optional[int] = None,
                 operators: Sequence[Operator] = OPERATORS):
        """
        Args:
            sources: The source numbers, in input order. They get labels 0..N-1.
            target: The number to reach.
            report_threshold: If set, solutions further than this from the
                target are never reported.
            operators: The operators to try, in order.
        """
        if any(n <= 0 for n in sources):
            raise ValueError("Source numbers must be positive integers")
        if target < 0:
            raise ValueError("Target must not be negative")
        if report_threshold is not None and report_threshold < 0:
            raise ValueError("report_threshold must not be negative")

        self.target = target
        self.operators = tuple(operators)
        self.sources = [Value(n, label) for label, n in enumerate(sources)]

        # Search state
        self.slots: List[Value] = list(self.sources)
        self.available: List[bool] = [True] * len(self.slots)
        self.next_label = len(self.slots)
        self.steps: List[Step] = []
        self.best_distance = NO_DISTANCE if report_threshold is None else report_threshold

        self.reported = 0
        self.stopped = False
        self._cancel_event = threading.Event()
        self._started = False
        self._visitor: Optional[Visitor] = None

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Ask a running search to stop before its next step. Thread-safe."""
        self._cancel_event.set()

    def search(self, visitor: Visitor) -> bool:
        """
        Run the full search, handing every reported solution to visitor.

        Returns:
            True if the search space was exhausted, False if the visitor
            stopped it or it was cancelled.
        """
        if self._started:
            raise RuntimeError("This solver has already run; create a new one")
        self._started = True
        self._visitor = visitor

        logger.debug("Searching %s for %d", [v.magnitude for v in self.sources], self.target)
        try:
            self._descend(len(self.slots))
        except SearchStopped:
            self.stopped = True
        finally:
            self._visitor = None

        logger.debug("Search for %d ended after %d reports (best distance %s)",
                     self.target, self.reported, self.best_distance_or_none)
        return not self.stopped

    def solve(self) -> List[Solution]:
        """Run the search and return every reported solution in order."""
        reported: List[Solution] = []
        self.search(reported.append)
        return reported

    @property
    def best_distance_or_none(self) -> Optional[int]:
        return None if self.reported == 0 else self.best_distance

    def _report(self) -> None:
        distance = abs(self.steps[-1].result.magnitude - self.target)
        if distance > self.best_distance:
            return

        solution = Solution.from_steps(self.steps, self.target)
        if distance < self.best_distance:
            self.best_distance = distance
            logger.debug("New best distance %d for %d", distance, self.target)
        self.reported += 1
        if self._visitor(solution) is False:
            raise SearchStopped()

    def _descend(self, remaining: int) -> None:
        if self._cancel_event.is_set():
            raise SearchStopped()

        # partial derivations count too, not every source has to be used
        if self.steps:
            self._report()

        if remaining < 2:
            return

        available = self.available
        size = len(self.slots)

        for i in range(size):
            if not available[i]:
                continue
            for j in range(size):
                if j == i or not available[j]:
                    continue
                # slot j is consumed, slot i takes the result
                available[j] = False
                label = self.next_label
                self.next_label += 1
                try:
                    self._combine(i, j, label, remaining)
                finally:
                    self.next_label -= 1
                    available[j] = True

    def _combine(self, i: int, j: int, label: int, remaining: int) -> None:
        v1 = self.slots[i]
        v2 = self.slots[j]
        for op in self.operators:
            result = op.apply(v1, v2, label)
            if result is None:
                continue
            self.steps.append(Step(op, v1, v2, result))
            self.slots[i] = result
            try:
                self._descend(remaining - 1)
            finally:
                self.slots[i] = v1
                self.steps.pop()


def solve(sources: Sequence[int], target: int,
          report_threshold: Optional[int] = None) -> List[Solution]:
    """Convenience wrapper: every solution reported for one puzzle, in order."""
    return NumbersSolver(sources, target, report_threshold=report_threshold).solve()
