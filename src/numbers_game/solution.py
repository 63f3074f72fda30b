"""
Solutions reported by the search engine.

A Solution is a frozen snapshot of the step stack at the moment it was
reported, so later backtracking cannot change it.
"""

import json
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any, Dict, Iterable, Tuple

from .values import Step


@total_ordering
@dataclass(frozen=True, eq=False)
class Solution:
    """A derivation and its ranking metrics against a target."""
    steps: Tuple[Step, ...]
    result_value: int
    distance: int
    tiebreak: int = field(default=0)

    @classmethod
    def from_steps(cls, steps: Iterable[Step], target: int) -> 'Solution':
        """
        Snapshot a step sequence.

        Args:
            steps: The current steps, last step last. Copied, never kept.
            target: The puzzle target, used for the distance.
        """
        snapshot = tuple(steps)
        if not snapshot:
            raise ValueError("A solution needs at least one step")
        result_value = snapshot[-1].result.magnitude
        # prefer derivations that route through smaller numbers
        tiebreak = sum(step.operand1.magnitude for step in snapshot)
        return cls(
            steps=snapshot,
            result_value=result_value,
            distance=abs(result_value - target),
            tiebreak=tiebreak,
        )

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (self.distance, len(self.steps), self.tiebreak)

    @property
    def exact(self) -> bool:
        return self.distance == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.sort_key == other.sort_key and self.steps == other.steps

    def __lt__(self, other: 'Solution') -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __hash__(self) -> int:
        return hash((self.sort_key, self.steps))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'resultValue': self.result_value,
            'distance': self.distance,
            'steps': [step.to_dict() for step in self.steps],
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Solution':
        steps = tuple(Step.from_dict(s) for s in data['steps'])
        solution = cls(
            steps=steps,
            result_value=int(data['resultValue']),
            distance=int(data['distance']),
            tiebreak=sum(step.operand1.magnitude for step in steps),
        )
        if steps and steps[-1].result.magnitude != solution.result_value:
            raise ValueError("resultValue does not match the last step")
        return solution

    @classmethod
    def from_json(cls, data: str) -> 'Solution':
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(data))

    def __str__(self) -> str:
        return f"{'; '.join(str(step) for step in self.steps)} ({self.distance} away)"
