import random

import pytest

from numbers_game.puzzle import InvalidPuzzleError, Puzzle


def test_valid_puzzle() -> None:
    puzzle = Puzzle([1, 3, 7, 6, 8, 3], 250)
    assert puzzle.validate() is puzzle
    Puzzle([100, 75, 50, 25, 10, 10], 999).validate()


@pytest.mark.parametrize("sources, target, message", [
    ([1, 3, 7, 6, 8], 250, "Exactly 6"),
    ([1, 3, 7, 6, 8, 11], 250, "not a valid card"),
    ([2, 2, 2, 6, 8, 3], 250, "2 times"),
    ([100, 100, 7, 6, 8, 3], 250, "once"),
    ([1, 3, 7, 6, 8, 3], 99, "between 100 and 999"),
    ([1, 3, 7, 6, 8, 3], 1000, "between 100 and 999"),
    ([100, 3, 7, 6, 8, 3], 100, "can't be one of the numbers"),
    ([1, 3, 0, 6, 8, 3], 250, "positive"),
    ([5], 250, "Exactly 6"),
])
def test_rule_violations(sources, target, message) -> None:
    with pytest.raises(InvalidPuzzleError, match=message):
        Puzzle(sources, target).validate()


def test_relaxed_rules() -> None:
    # any positive numbers, any target from 100 up
    Puzzle([11, 13, 200, 7, 7, 7], 1234).validate(strict=False)
    Puzzle([1, 2, 3, 4, 5, 6], 100).validate(strict=False)


@pytest.mark.parametrize("sources, target, message", [
    (list(range(1, 13)), 5000, "Exactly 6"),
    ([11, 13], 1234, "Exactly 6"),
    ([11, 13, 200, 7, 7, 0], 1234, "positive"),
    ([11, 13, 200, 7, 7, 7], 99, "at least 100"),
    ([11, 13, 200, 7, 7, 7], 200, "can't be one of the numbers"),
])
def test_relaxed_rules_still_checked(sources, target, message) -> None:
    with pytest.raises(InvalidPuzzleError, match=message):
        Puzzle(sources, target).validate(strict=False)


def test_invalid_puzzle_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        Puzzle([1], 250).validate()


def test_parse() -> None:
    assert Puzzle.parse("1 3 7 6 8 3 250") == Puzzle([1, 3, 7, 6, 8, 3], 250)
    assert Puzzle.parse("1, 3, 7, 6, 8, 3 -> 250") == Puzzle([1, 3, 7, 6, 8, 3], 250)
    with pytest.raises(InvalidPuzzleError):
        Puzzle.parse("250")
    with pytest.raises(InvalidPuzzleError):
        Puzzle.parse("1 -3 7 6 8 3 250")


def test_random_puzzles_follow_the_rules() -> None:
    rng = random.Random(1234)
    for _ in range(50):
        Puzzle.random(rng=rng).validate()
    for num_large in range(5):
        puzzle = Puzzle.random(num_large, rng=rng).validate()
        assert len([n for n in puzzle.sources if n in Puzzle.LARGE_NUMBERS]) == num_large


def test_random_rejects_too_many_large() -> None:
    with pytest.raises(InvalidPuzzleError):
        Puzzle.random(5)


def test_str() -> None:
    assert str(Puzzle([1, 2], 3)) == "1 2 -> 3"
