"""
Numbers Game puzzles - rule checking and random generation.

The classic TV rules: six numbers drawn from the small numbers 1-10 (two
cards of each) and the large numbers 25, 50, 75 and 100 (one card of each),
and a three digit target.
"""

import random
import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional


class InvalidPuzzleError(ValueError):
    """Raised when a puzzle breaks the game rules."""


@dataclass
class Puzzle:
    """The source numbers and target of one round."""
    sources: List[int]
    target: int

    # Game configuration
    LARGE_NUMBERS = [25, 50, 75, 100]
    SMALL_NUMBERS = list(range(1, 11))  # 1-10
    SMALL_COPIES = 2
    NUM_SOURCES = 6
    TARGET_MIN = 100
    TARGET_MAX = 999

    @classmethod
    def allowed_counts(cls) -> Counter:
        """How many times each number may appear among the sources."""
        counts = Counter({n: cls.SMALL_COPIES for n in cls.SMALL_NUMBERS})
        counts.update(cls.LARGE_NUMBERS)
        return counts

    def validate(self, strict: bool = True) -> 'Puzzle':
        """
        Check the puzzle against the game rules.

        Args:
            strict: Enforce the full TV rules. When False any positive numbers
                may be used and the target has no upper bound, but there must
                still be six numbers, a target of at least 100 and a target
                that is not one of the numbers.

        Returns:
            self, so calls can be chained

        Raises:
            InvalidPuzzleError: If a rule is broken
        """
        if len(self.sources) != self.NUM_SOURCES:
            raise InvalidPuzzleError(
                f"Exactly {self.NUM_SOURCES} numbers are needed, got {len(self.sources)}")
        if any(n <= 0 for n in self.sources):
            raise InvalidPuzzleError("Numbers must be positive")

        if strict:
            allowed = self.allowed_counts()
            for num, count in sorted(Counter(self.sources).items()):
                if num not in allowed:
                    raise InvalidPuzzleError(f"Number **{num}** is not a valid card")
                if count > allowed[num]:
                    limit = "once" if allowed[num] == 1 else f"{allowed[num]} times"
                    raise InvalidPuzzleError(f"Number **{num}** can only be used {limit}")
            if not self.TARGET_MIN <= self.target <= self.TARGET_MAX:
                raise InvalidPuzzleError(
                    f"The target must be between {self.TARGET_MIN} and {self.TARGET_MAX}")
        elif self.target < self.TARGET_MIN:
            raise InvalidPuzzleError(f"The target must be at least {self.TARGET_MIN}")

        if self.target in self.sources:
            raise InvalidPuzzleError("The target can't be one of the numbers")
        return self

    @classmethod
    def parse(cls, text: str) -> 'Puzzle':
        """
        Read a puzzle from text such as "1 3 7 6 8 3 250".

        The last integer is the target; everything before it is a source.
        Commas, arrows and other punctuation between the numbers are ignored.
        """
        if re.search(r'-\s*\d', text.replace('->', ' ')):
            raise InvalidPuzzleError("Numbers must be positive")
        numbers = [int(n) for n in re.findall(r'\d+', text)]
        if len(numbers) < 3:
            raise InvalidPuzzleError("Give the numbers followed by the target, e.g. `1 3 7 6 8 3 250`")
        *sources, target = numbers
        return cls(sources=sources, target=target)

    @classmethod
    def random(cls, num_large: Optional[int] = None,
               rng: Optional[random.Random] = None) -> 'Puzzle':
        """
        Deal a random puzzle.

        Args:
            num_large: How many large numbers to use (0-4); random if None.
            rng: Random source, mostly for tests.
        """
        rng = rng or random.Random()
        if num_large is None:
            num_large = rng.randint(0, len(cls.LARGE_NUMBERS))
        if not 0 <= num_large <= len(cls.LARGE_NUMBERS):
            raise InvalidPuzzleError(
                f"Choose between 0 and {len(cls.LARGE_NUMBERS)} large numbers")

        large = rng.sample(cls.LARGE_NUMBERS, num_large)
        small_deck = cls.SMALL_NUMBERS * cls.SMALL_COPIES
        small = rng.sample(small_deck, cls.NUM_SOURCES - num_large)
        sources = large + small
        while True:
            target = rng.randint(cls.TARGET_MIN, cls.TARGET_MAX)
            if target not in sources:
                return cls(sources=sources, target=target)

    def __str__(self) -> str:
        return f"{' '.join(str(n) for n in self.sources)} -> {self.target}"
