"""
Values and steps for the Numbers Game solver.

Every number on the board, source or intermediate, is a Value carrying a
label so a derivation can show where each number came from.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from .operators import Operator


@dataclass(frozen=True)
class Value:
    """An integer on the board together with its creation label."""
    magnitude: int
    label: int

    def to_dict(self) -> Dict[str, int]:
        return {'value': self.magnitude, 'label': self.label}

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> 'Value':
        return cls(magnitude=int(data['value']), label=int(data['label']))

    def __str__(self) -> str:
        return f"{self.magnitude}[{self.label}]"


@dataclass(frozen=True)
class Step:
    """One applied operation: operand1 <operator> operand2 = result."""
    operator: 'Operator'
    operand1: Value
    operand2: Value
    result: Value

    def to_dict(self) -> dict:
        return {
            'operator': self.operator.symbol,
            'operand1': self.operand1.to_dict(),
            'operand2': self.operand2.to_dict(),
            'result': self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Step':
        # Imported here to keep values free of a module-level cycle
        from .operators import operator_for

        return cls(
            operator=operator_for(data['operator']),
            operand1=Value.from_dict(data['operand1']),
            operand2=Value.from_dict(data['operand2']),
            result=Value.from_dict(data['result']),
        )

    def __str__(self) -> str:
        return f"{self.operand1}{self.operator.symbol}{self.operand2}={self.result}"
