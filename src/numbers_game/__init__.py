# Numbers Game solver package
from .values import Value, Step
from .operators import Operator, OPERATORS, operator_for
from .solution import Solution
from .solver import NumbersSolver, solve
from .aggregator import RunStatus, SolutionAggregator
from .runner import SearchRun
from .puzzle import InvalidPuzzleError, Puzzle

__all__ = [
    'Value',
    'Step',
    'Operator',
    'OPERATORS',
    'operator_for',
    'Solution',
    'NumbersSolver',
    'solve',
    'RunStatus',
    'SolutionAggregator',
    'SearchRun',
    'InvalidPuzzleError',
    'Puzzle',
]
