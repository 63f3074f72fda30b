from numbers_game.aggregator import RunStatus, SolutionAggregator
from numbers_game.operators import ADD, MUL
from numbers_game.puzzle import Puzzle
from numbers_game.solution import Solution
from numbers_game.values import Step, Value
from utils.helpers import (
    format_solution,
    format_step,
    label_name,
    render_results,
    split_message,
)

STEPS = [
    Step(MUL, Value(8, 4), Value(3, 5), Value(24, 6)),
    Step(ADD, Value(24, 6), Value(1, 0), Value(25, 7)),
]


def test_label_names() -> None:
    assert [label_name(i) for i in range(3)] == ["A", "B", "C"]
    assert label_name(25) == "Z"
    assert label_name(26) == "AA"
    assert label_name(27) == "AB"


def test_format_step() -> None:
    assert format_step(STEPS[0]) == "8 × 3 = 24"
    assert format_step(STEPS[0], show_labels=True) == "8[E] × 3[F] = 24[G]"


def test_format_solution() -> None:
    assert format_solution(Solution.from_steps(STEPS, 25)) == "8 × 3 = 24; 24 + 1 = 25 (exact)"
    assert format_solution(Solution.from_steps(STEPS[:1], 25)) == "8 × 3 = 24 (1 away)"


def test_render_results() -> None:
    puzzle = Puzzle([1, 3, 7, 6, 8, 3], 25)
    aggregator = SolutionAggregator()
    text = render_results(puzzle, aggregator)
    assert "Searching" in text
    assert "No solutions yet." in text

    aggregator.add(Solution.from_steps(STEPS[:1], 25))
    assert "Closest: **24** (1 away)" in render_results(puzzle, aggregator)

    aggregator.add(Solution.from_steps(STEPS, 25))
    aggregator.feed(RunStatus.FINISHED)
    text = render_results(puzzle, aggregator, limit=1)
    assert "Search complete." in text
    assert "**Solved!**" in text
    assert "1. 8 × 3 = 24; 24 + 1 = 25 (exact)" in text


def test_render_cancelled_without_solutions() -> None:
    aggregator = SolutionAggregator()
    aggregator.cancel()
    text = render_results(Puzzle([2, 3], 500), aggregator)
    assert "cancelled" in text
    assert "No solutions found." in text


def test_split_message() -> None:
    assert split_message("short") == ["short"]
    lines = ["x" * 30] * 10
    chunks = split_message("\n".join(lines), max_length=100)
    assert all(len(c) <= 100 for c in chunks)
    assert "".join(chunks).split() == lines
    long_line = split_message("y" * 250, max_length=100)
    assert [len(c) for c in long_line] == [100, 100, 50 + 1]
