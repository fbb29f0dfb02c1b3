"""Optimization problem contract.

Every optimizer consumes a ``Problem``: box bounds for the search space, an
initialization sub-box, theoretical fitness limits and a fitness function
that is minimized. ``fitness(x, limit)`` may stop early once it is certain
that ``x`` cannot beat ``limit`` (preemptive fitness evaluation); computing
the full value is always a valid implementation.

``FunctionProblem`` adapts a plain callable and SciPy-style bounds, and the
``ProblemWrapper`` decorators add solution logging and printing around any
problem.
"""

from __future__ import annotations

import math
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike
from scipy.optimize import Bounds

from swarmops.core.result import Solution
from swarmops.utils.hue_logger import hue, logger


# ---------------------------------------------------------------------------
# Private helper functions
# ---------------------------------------------------------------------------


def _as_vector(name: str, values: ArrayLike) -> np.ndarray:
    vec = np.array(values, dtype=float).reshape(-1)
    if vec.size == 0:
        raise ValueError(f"{name} must not be empty")
    if np.any(~np.isfinite(vec)):
        raise ValueError(f"{name} must be finite, got {vec}")
    return vec


def _parse_bounds(
    bounds: Union[Bounds, Sequence[Tuple[float, float]]],
) -> Tuple[np.ndarray, np.ndarray]:
    """Parse a SciPy ``Bounds`` object or a sequence of (lb, ub) pairs.

    Args:
        bounds: Box constraints, either a ``scipy.optimize.Bounds`` instance or
            an array-like of shape (n_dim, 2) where each row is
            ``[lower_i, upper_i]``.

    Returns:
        Tuple of two 1-D arrays ``(lower, upper)`` of shape (n_dim,).

    Raises:
        ValueError: If ``bounds`` has the wrong shape.
    """
    if isinstance(bounds, Bounds):
        return np.atleast_1d(np.asarray(bounds.lb, dtype=float)), np.atleast_1d(np.asarray(bounds.ub, dtype=float))

    arr = np.asarray(bounds, dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"bounds must have shape (n_dim, 2), got {arr.shape}")
    return arr[:, 0].copy(), arr[:, 1].copy()


# ---------------------------------------------------------------------------
# Problem contract
# ---------------------------------------------------------------------------


class Problem:
    """Base class of all optimization problems (minimization).

    Attributes:
        lower_bound, upper_bound: Search-space box, shape (n_dim,). Optimizers
            clamp every candidate into it.
        lower_init, upper_init: Box for initial positions, shape (n_dim,).
            Defaults to the search-space box.
        parameter_names: One name per dimension.
        max_fitness: Worst possible fitness, the starting value of every best
            fitness tracker.
        min_fitness: Best theoretically attainable fitness.
        acceptable_fitness: Fitness regarded as a solved problem.
    """

    name: str = "Problem"
    max_fitness: float = math.inf
    min_fitness: float = -math.inf
    has_gradient: bool = False

    def __init__(
        self,
        lower_bound: ArrayLike,
        upper_bound: ArrayLike,
        lower_init: Optional[ArrayLike] = None,
        upper_init: Optional[ArrayLike] = None,
        parameter_names: Optional[Sequence[str]] = None,
    ) -> None:
        self.lower_bound = _as_vector("lower_bound", lower_bound)
        self.upper_bound = _as_vector("upper_bound", upper_bound)
        self.lower_init = self.lower_bound.copy() if lower_init is None else _as_vector("lower_init", lower_init)
        self.upper_init = self.upper_bound.copy() if upper_init is None else _as_vector("upper_init", upper_init)

        n = self.lower_bound.size
        for label, vec in (("upper_bound", self.upper_bound), ("lower_init", self.lower_init),
                           ("upper_init", self.upper_init)):
            if vec.size != n:
                raise ValueError(f"{label} must have {n} elements, got {vec.size}")
        if np.any(self.upper_bound < self.lower_bound):
            raise ValueError("each upper bound must be >= the corresponding lower bound")
        if np.any(self.upper_init < self.lower_init):
            raise ValueError("each upper init bound must be >= the corresponding lower init bound")

        if parameter_names is None:
            parameter_names = [f"x{i}" for i in range(n)]
        if len(parameter_names) != n:
            raise ValueError(f"parameter_names must have {n} entries, got {len(parameter_names)}")
        self.parameter_names: List[str] = list(parameter_names)

    @property
    def dimensionality(self) -> int:
        return self.lower_bound.size

    @property
    def acceptable_fitness(self) -> float:
        return self.min_fitness

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        """Compute the fitness of ``x``.

        Args:
            x: Candidate position, shape (n_dim,). Must not be modified.
            limit: Fitness to beat. Implementations may return any value
                >= ``limit`` as soon as they know ``x`` cannot beat it.

        Returns:
            The fitness value (lower is better).
        """
        raise NotImplementedError

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        """Compute the gradient at ``x``.

        Returns:
            ``(gradient, cost)`` where ``cost`` is the number of extra fitness
            evaluations the computation is worth.

        Raises:
            NotImplementedError: When the problem has no gradient.
        """
        raise NotImplementedError(f"{self.name} does not provide a gradient")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, dimensionality={self.dimensionality})"


class FunctionProblem(Problem):
    """Wrap a plain objective ``func(x, *args) -> float`` as a ``Problem``.

    Args:
        func: Objective function to minimize.
        bounds: ``scipy.optimize.Bounds`` or a sequence of (lb, ub) pairs.
        args: Extra positional arguments passed to ``func``.
        init_bounds: Optional initialization box in the same format.
        gradient: Optional ``grad(x, *args) -> ndarray``.
        name: Display name, defaults to the function name.
    """

    def __init__(
        self,
        func: Callable[..., float],
        bounds: Union[Bounds, Sequence[Tuple[float, float]]],
        args: Tuple[Any, ...] = (),
        init_bounds: Optional[Union[Bounds, Sequence[Tuple[float, float]]]] = None,
        gradient: Optional[Callable[..., ArrayLike]] = None,
        name: Optional[str] = None,
    ) -> None:
        lower, upper = _parse_bounds(bounds)
        lower_init, upper_init = (None, None) if init_bounds is None else _parse_bounds(init_bounds)
        super().__init__(lower, upper, lower_init, upper_init)

        self.func = func
        self.args = tuple(args)
        self._gradient = gradient
        self.has_gradient = gradient is not None
        self.name = name or getattr(func, "__name__", "FunctionProblem")
        self.nfev = 0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        self.nfev += 1
        return float(self.func(x, *self.args))

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        if self._gradient is None:
            return super().gradient(x)
        return np.asarray(self._gradient(x, *self.args), dtype=float), 0


# ---------------------------------------------------------------------------
# Problem decorators
# ---------------------------------------------------------------------------


class ProblemWrapper(Problem):
    """Forward everything to a wrapped problem; subclasses intercept ``fitness``."""

    def __init__(self, problem: Problem) -> None:
        # bounds are shared by reference with the wrapped problem
        self.problem = problem
        self.name = problem.name
        self.lower_bound = problem.lower_bound
        self.upper_bound = problem.upper_bound
        self.lower_init = problem.lower_init
        self.upper_init = problem.upper_init
        self.parameter_names = problem.parameter_names
        self.max_fitness = problem.max_fitness
        self.min_fitness = problem.min_fitness
        self.has_gradient = problem.has_gradient

    @property
    def acceptable_fitness(self) -> float:
        return self.problem.acceptable_fitness

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        return self.problem.fitness(x, limit)

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        return self.problem.gradient(x)


class LogSolutions(ProblemWrapper):
    """Keep the ``capacity`` best solutions that beat the fitness limit they were evaluated against."""

    def __init__(self, problem: Problem, capacity: int) -> None:
        super().__init__(problem)
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.name = f"LogSolutions ({problem.name})"
        self.log: List[Solution] = []

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        value = self.problem.fitness(x, limit)
        if value < limit:
            self.log.append(Solution(x, value))
            self.log.sort()
            del self.log[self.capacity:]
        return value

    def clear(self) -> None:
        self.log.clear()


class FitnessPrint(ProblemWrapper):
    """Log every evaluated position and its fitness; improvements are highlighted."""

    def __init__(self, problem: Problem) -> None:
        super().__init__(problem)
        self.name = f"FitnessPrint ({problem.name})"

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        value = self.problem.fitness(x, limit)
        params = np.array2string(np.asarray(x), precision=4, separator=", ")
        marker = f" {hue.g}***{hue.q}" if value < limit else ""
        logger.info(f"{params} fitness={hue.m}{value:.6e}{hue.q}{marker}")
        return value
