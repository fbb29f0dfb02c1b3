# Optimization Results and Solutions
# Author: Shengning Wang

from dataclasses import dataclass, field
from functools import total_ordering

import numpy as np
from scipy.optimize import OptimizeResult


def _frozen_copy(values) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Result:
    """
    Outcome of one optimization run.

    Attributes:
        parameters (np.ndarray): Best position found, a read-only copy. Shape: (n_dim,).
        fitness (float): Fitness of ``parameters``.
        iterations (int): Fitness evaluations used by the run.
        optimizer (str): Name of the optimizer that produced the result.
    """

    parameters: np.ndarray
    fitness: float
    iterations: int
    optimizer: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _frozen_copy(self.parameters))
        object.__setattr__(self, "fitness", float(self.fitness))
        object.__setattr__(self, "iterations", int(self.iterations))

    def to_optimize_result(self, success: bool = True, message: str = "Run condition reached.") -> OptimizeResult:
        """
        Converts to a ``scipy.optimize.OptimizeResult``.

        Returns:
            OptimizeResult: With fields ``x``, ``fun``, ``nit``, ``nfev``,
            ``success``, ``message`` and ``optimizer``.
        """
        result = OptimizeResult()
        result.x = np.array(self.parameters)
        result.fun = self.fitness
        result.nit = self.iterations
        result.nfev = self.iterations
        result.success = bool(success)
        result.message = message
        result.optimizer = self.optimizer
        return result


@total_ordering
@dataclass(frozen=True, eq=False)
class Solution:
    """A position with its fitness; solutions order by fitness."""

    parameters: np.ndarray = field(repr=False)
    fitness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _frozen_copy(self.parameters))
        object.__setattr__(self, "fitness", float(self.fitness))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.fitness == other.fitness

    def __lt__(self, other) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.fitness < other.fitness
