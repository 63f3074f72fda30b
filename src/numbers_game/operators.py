"""
The four arithmetic operators of the Numbers Game.

Each operator decides for itself whether it applies to an ordered pair of
values. The rules both enforce the game (no negatives, exact division) and
prune branches that can never help: commutative operators only accept the
larger operand first, and operations that hand back one of their operands
(x - y = y, x * 1, x / 1) are refused.
"""

import operator
from typing import Callable, Dict, Optional, Tuple

from .values import Value


class Operator:
    """Base class for a binary operator on board values."""

    symbol: str = '?'
    name: str = 'operator'
    func: Callable[[int, int], int]

    def applicable(self, v1: Value, v2: Value) -> bool:
        raise NotImplementedError

    def apply(self, v1: Value, v2: Value, new_label: int) -> Optional[Value]:
        """
        Combine two values into a new one.

        Returns:
            A new Value carrying new_label, or None if the operator does not
            apply to this ordered pair.
        """
        if not self.applicable(v1, v2):
            return None
        return Value(self.func(v1.magnitude, v2.magnitude), new_label)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.symbol}>"

    def __str__(self) -> str:
        return self.symbol

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Operator) and self.symbol == other.symbol

    def __hash__(self) -> int:
        return hash(self.symbol)


class Add(Operator):
    symbol = '+'
    name = 'add'
    func = staticmethod(operator.add)

    def applicable(self, v1: Value, v2: Value) -> bool:
        # commutative, so only the larger-first ordering is tried
        return v1.magnitude >= v2.magnitude


class Sub(Operator):
    symbol = '-'
    name = 'sub'
    func = staticmethod(operator.sub)

    def applicable(self, v1: Value, v2: Value) -> bool:
        if v1.magnitude <= v2.magnitude:
            return False
        # x - y == y just reproduces an operand
        return v1.magnitude - v2.magnitude != v2.magnitude


class Mul(Operator):
    symbol = '×'
    name = 'mul'
    func = staticmethod(operator.mul)

    def applicable(self, v1: Value, v2: Value) -> bool:
        return v1.magnitude > 1 and v2.magnitude > 1 and v1.magnitude >= v2.magnitude


class Div(Operator):
    symbol = '÷'
    name = 'div'
    func = staticmethod(operator.floordiv)

    def applicable(self, v1: Value, v2: Value) -> bool:
        return v2.magnitude > 1 and v1.magnitude % v2.magnitude == 0


ADD = Add()
SUB = Sub()
MUL = Mul()
DIV = Div()

OPERATORS: Tuple[Operator, ...] = (ADD, SUB, MUL, DIV)

_BY_SYMBOL: Dict[str, Operator] = {op.symbol: op for op in OPERATORS}
_BY_SYMBOL.update({'*': MUL, 'x': MUL, '/': DIV})


def operator_for(symbol: str) -> Operator:
    """Look up an operator by its symbol (ASCII aliases accepted)."""
    try:
        return _BY_SYMBOL[symbol.strip()]
    except KeyError:
        raise ValueError(f"Operator not allowed: {symbol!r}") from None


def apply(op: Operator, v1: Value, v2: Value, new_label: int) -> Optional[Value]:
    """Apply op to (v1, v2); None means the branch is filtered out."""
    return op.apply(v1, v2, new_label)
