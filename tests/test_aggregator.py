import random

import pytest

from numbers_game.aggregator import RunStatus, SolutionAggregator
from numbers_game.operators import ADD
from numbers_game.solution import Solution
from numbers_game.solver import solve
from numbers_game.values import Step, Value


def make_solution(distance: int, num_steps: int = 1, tiebreak: int = 0) -> Solution:
    step = Step(ADD, Value(2, 0), Value(1, 1), Value(3, 2))
    return Solution(steps=(step,) * num_steps, result_value=3,
                    distance=distance, tiebreak=tiebreak)


def test_bounded_and_sorted() -> None:
    rng = random.Random(7)
    aggregator = SolutionAggregator(max_solutions=8, prune_dominated=False)
    for _ in range(200):
        aggregator.add(make_solution(rng.randint(0, 20), rng.randint(1, 5), rng.randint(0, 50)))
        keys = [s.sort_key for s in aggregator.solutions]
        assert len(keys) <= 8
        assert keys == sorted(keys)
    assert aggregator.received == 200


def test_worse_than_a_full_collection_is_rejected() -> None:
    aggregator = SolutionAggregator(max_solutions=2, prune_dominated=False)
    assert aggregator.add(make_solution(3))
    assert aggregator.add(make_solution(1))
    assert not aggregator.add(make_solution(5))
    assert aggregator.add(make_solution(2))
    assert [s.distance for s in aggregator] == [1, 2]


def test_ties_keep_arrival_order() -> None:
    aggregator = SolutionAggregator(max_solutions=3, prune_dominated=False)
    first, second, third = (make_solution(4, 2, 10) for _ in range(3))
    for solution in (first, second, third):
        aggregator.add(solution)
    assert [id(s) for s in aggregator.solutions] == [id(first), id(second), id(third)]
    assert not aggregator.add(make_solution(4, 2, 10))


def test_closer_solution_clears_dominated_ones() -> None:
    aggregator = SolutionAggregator(max_solutions=10)
    aggregator.add(make_solution(5, 1))
    aggregator.add(make_solution(5, 3))
    assert len(aggregator) == 2
    aggregator.add(make_solution(2, 4))
    assert [s.distance for s in aggregator] == [2]
    assert aggregator.best_distance == 2


def test_matches_sorting_the_whole_stream() -> None:
    stream = solve([25, 4, 7, 3, 2], 573)
    assert len(stream) > 5

    plain = SolutionAggregator(max_solutions=5, prune_dominated=False)
    pruned = SolutionAggregator(max_solutions=5)
    for solution in stream:
        plain.add(solution)
        pruned.add(solution)

    ranked = sorted(stream, key=lambda s: s.sort_key)
    assert [s.sort_key for s in plain] == [s.sort_key for s in ranked[:5]]
    best = ranked[0].distance
    closest = [s for s in ranked if s.distance == best]
    assert [s.sort_key for s in pruned] == [s.sort_key for s in closest[:5]]


def test_end_of_run_and_cancel_markers() -> None:
    aggregator = SolutionAggregator()
    assert aggregator.feed(make_solution(1))
    assert aggregator.status is RunStatus.RUNNING
    assert not aggregator.feed(RunStatus.FINISHED)
    assert aggregator.status is RunStatus.FINISHED
    assert aggregator.done
    with pytest.raises(RuntimeError):
        aggregator.add(make_solution(0))
    # a later cancel does not rewrite a finished run
    aggregator.cancel()
    assert aggregator.status is RunStatus.FINISHED
    assert len(aggregator) == 1

    aggregator.reset()
    assert aggregator.status is RunStatus.RUNNING
    assert len(aggregator) == 0
    assert aggregator.best is None
    aggregator.feed(RunStatus.CANCELLED)
    assert aggregator.status is RunStatus.CANCELLED


def test_invalid_bound() -> None:
    with pytest.raises(ValueError):
        SolutionAggregator(max_solutions=0)
