"""Optimizer contract and the generic population driver.

Every optimizer exposes the same entry point, ``optimize(parameters)``, where
``parameters`` is a fixed-length vector of control parameters with declared
names, bounds, defaults and named presets. One fitness evaluation is one
iteration of the run condition's budget.

Population methods share a single driver:

    init:      for each agent slot    -> init_agent, evaluate, trace
    iterate:   while run condition    -> begin_sweep
                   for each slot      -> select_agent, update_agent, trace
               ...                    -> on_iteration_end
    terminal:  Result of the best personal best

The global best is kept as an index into the personal-best storage of the
``Population`` and only moves on strict improvement.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from swarmops.core.problem import Problem
from swarmops.core.result import Result
from swarmops.core.run_condition import RunCondition, RunConditionIterations
from swarmops.core.tools import init_range, init_uniform
from swarmops.prng.base import Engine
from swarmops.prng.sampler import Sampler
from swarmops.sampling.doe import DESIGNS, make_design
from swarmops.utils.hue_logger import hue, logger


TraceSink = Callable[[int, float], None]
ParameterSpec = Union[None, str, Sequence[float], np.ndarray]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


# ---------------------------------------------------------------------------
# Optimizer contract
# ---------------------------------------------------------------------------


class Optimizer:
    """Base class of all optimizers.

    Subclasses declare their control parameters as class attributes and
    implement ``_run``.

    Attributes:
        name: Display name.
        parameter_names: Names of the control parameters, in vector order.
        default_parameters: Parameters used when ``optimize()`` gets none.
        lower_bound, upper_bound: Admissible ranges of the control parameters
            (used when the parameters are themselves tuned).
        presets: Named alternative parameter vectors.
    """

    name: str = "Optimizer"
    parameter_names: Tuple[str, ...] = ()
    default_parameters: Tuple[float, ...] = ()
    lower_bound: Tuple[float, ...] = ()
    upper_bound: Tuple[float, ...] = ()
    presets: Dict[str, Tuple[float, ...]] = {}

    def __init__(
        self,
        problem: Problem,
        rng: Union[Engine, Sampler],
        run_condition: Optional[RunCondition] = None,
        trace: Optional[TraceSink] = None,
    ) -> None:
        """
        Args:
            problem: The problem to minimize.
            rng: Engine (or sampler over one) supplying every random draw of a run.
            run_condition: Stopping rule. Defaults to 1000 evaluations per dimension.
            trace: Optional sink receiving ``(iteration, best_fitness)``.
        """
        if isinstance(rng, Engine):
            rng = Sampler(rng)
        if not isinstance(rng, Sampler):
            raise ValueError(f"rng must be an Engine or a Sampler, got {type(rng).__name__}")

        self.problem = problem
        self.rng = rng
        self.run_condition = run_condition or RunConditionIterations(1000 * problem.dimensionality)
        self.trace = trace
        self._fitness_limit: Optional[float] = None

    @property
    def dimensionality(self) -> int:
        """Number of control parameters."""
        return len(self.parameter_names)

    # ------------------------------------------------------------------

    def resolve_parameters(self, parameters: ParameterSpec = None) -> np.ndarray:
        """Turn ``None``, a preset name or a vector into a checked parameter vector.

        Raises:
            ValueError: On an unknown preset or a vector of the wrong length.
        """
        if parameters is None:
            vec = np.array(self.default_parameters, dtype=float)
        elif isinstance(parameters, str):
            if parameters not in self.presets:
                raise ValueError(f"unknown preset: '{parameters}'. available: {list(self.presets.keys())}")
            vec = np.array(self.presets[parameters], dtype=float)
        else:
            vec = np.array(parameters, dtype=float).reshape(-1)

        if vec.size != self.dimensionality:
            raise ValueError(
                f"{self.name} expects {self.dimensionality} control parameters "
                f"{list(self.parameter_names)}, got {vec.size}"
            )
        return vec

    def optimize(self, parameters: ParameterSpec = None, fitness_limit: Optional[float] = None) -> Result:
        """Run the optimizer once.

        Args:
            parameters: Control parameter vector, preset name, or ``None`` for
                the defaults.
            fitness_limit: If given, the run also stops as soon as the best
                fitness drops below this value.

        Returns:
            The best solution found, with its fitness and the number of
            fitness evaluations used.

        Raises:
            ValueError: If the parameters are malformed or degenerate for this
                algorithm. Nothing has been evaluated in that case.
        """
        params = self.resolve_parameters(parameters)
        self._fitness_limit = fitness_limit
        self.run_condition.reset()

        logger.debug(
            f"{hue.b}{self.name}{hue.q} on {hue.c}{self.problem.name}{hue.q} "
            f"with {dict(zip(self.parameter_names, np.round(params, 6).tolist()))}"
        )
        result = self._run(params)
        logger.debug(
            f"{hue.b}{self.name}{hue.q} finished: fitness={hue.m}{result.fitness:.6e}{hue.q} "
            f"iterations={hue.m}{result.iterations}{hue.q}"
        )
        return result

    def _run(self, params: np.ndarray) -> Result:
        raise NotImplementedError

    # ------------------------------------------------------------------

    def _continue(self, iterations: int, fitness: float) -> bool:
        if self._fitness_limit is not None and fitness < self._fitness_limit:
            return False
        return self.run_condition.should_continue(iterations, fitness)

    def _trace(self, iteration: int, fitness: float) -> None:
        if self.trace is not None:
            self.trace(iteration, fitness)

    def _result(self, position: np.ndarray, fitness: float, iterations: int) -> Result:
        return Result(position, fitness, iterations, optimizer=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(problem={self.problem.name!r}, rng={self.rng.name!r})"


# ---------------------------------------------------------------------------
# Population storage
# ---------------------------------------------------------------------------


class Population:
    """Row-wise agent storage for one run.

    Rows ``0 .. size-1`` are live; ``capacity`` rows are allocated so that
    variable-size swarms can grow without reallocating. Optimizers attach
    their run-scoped control values (``omega``, ``cr``, ...) as attributes.

    Attributes:
        x: Positions, shape (capacity, n_dim).
        v: Velocities, shape (capacity, n_dim), or ``None``.
        p: Personal best positions, shape (capacity, n_dim).
        p_fitness: Personal best fitness, shape (capacity,).
        best_index: Row of the global best in ``p``; -1 before the first evaluation.
        iterations: Fitness evaluations used so far in the run.
        design: Initial positions, shape (size, n_dim), or ``None`` for per-agent
            uniform draws.
    """

    def __init__(self, size: int, n_dim: int, velocity: bool = True, capacity: Optional[int] = None) -> None:
        capacity = size if capacity is None else capacity
        if size < 1:
            raise ValueError(f"population size must be >= 1, got {size}")
        if capacity < size:
            raise ValueError(f"capacity must be >= size ({size}), got {capacity}")

        self.size = size
        self.capacity = capacity
        self.n_dim = n_dim
        self.x = np.zeros((capacity, n_dim))
        self.v = np.zeros((capacity, n_dim)) if velocity else None
        self.p = np.zeros((capacity, n_dim))
        self.p_fitness = np.full(capacity, math.inf)
        self.best_index = -1
        self.iterations = 0
        self.design: Optional[np.ndarray] = None

    @property
    def best_fitness(self) -> float:
        return math.inf if self.best_index < 0 else float(self.p_fitness[self.best_index])

    @property
    def best_position(self) -> np.ndarray:
        """View of the global best's personal-best row. Read-only by convention."""
        return self.p[self.best_index]

    def initialize(self, j: int, fitness: float) -> None:
        """Make the current position of agent ``j`` its personal best."""
        self.p[j] = self.x[j]
        self.p_fitness[j] = fitness
        if self.best_index < 0 or fitness < self.best_fitness:
            self.best_index = j

    def improve(self, j: int, fitness: float) -> bool:
        """Record a new evaluation of agent ``j``; strict improvements update the bests.

        Returns:
            True if the personal best of ``j`` improved.
        """
        if fitness < self.p_fitness[j]:
            self.p[j] = self.x[j]
            self.p_fitness[j] = fitness
            if fitness < self.best_fitness:
                self.best_index = j
            return True
        return False

    def swap_remove(self, j: int) -> int:
        """Drop agent ``j`` by moving the last live agent into its row.

        Returns:
            The row the moved agent came from (``size`` after the call).

        Raises:
            ValueError: When ``j`` is the global best or the last agent.
        """
        if self.size < 2:
            raise ValueError("cannot remove the last agent of a population")
        if j == self.best_index:
            raise ValueError("the global best cannot be removed")

        last = self.size - 1
        if j != last:
            self.x[j] = self.x[last]
            self.p[j] = self.p[last]
            self.p_fitness[j] = self.p_fitness[last]
            if self.v is not None:
                self.v[j] = self.v[last]
            if self.best_index == last:
                self.best_index = j
        self.p_fitness[last] = math.inf
        self.size = last
        return last


# ---------------------------------------------------------------------------
# Generic population driver
# ---------------------------------------------------------------------------


class PopulationOptimizer(Optimizer):
    """Template for population methods: subclasses supply the strategy hooks.

    Args:
        init: Initial position design, one of ``"uniform"`` (per-agent draws),
            ``"soa"``, ``"lhs"`` or ``"quasi"``.
    """

    default_init: str = "uniform"
    uses_velocity: bool = True

    def __init__(
        self,
        problem: Problem,
        rng: Union[Engine, Sampler],
        run_condition: Optional[RunCondition] = None,
        trace: Optional[TraceSink] = None,
        init: Optional[str] = None,
    ) -> None:
        super().__init__(problem, rng, run_condition, trace)
        init = init or self.default_init
        if init not in DESIGNS:
            raise ValueError(f"unknown init: '{init}'. available: {list(DESIGNS.keys())}")
        self.init = init

    # --- strategy hooks ---------------------------------------------------

    def setup(self, params: np.ndarray) -> Population:
        """Validate ``params`` and allocate the population of one run."""
        size = round_half_away(params[0])
        if size < 1:
            raise ValueError(f"{self.parameter_names[0]} must round to >= 1, got {params[0]}")
        return self._allocate(size)

    def init_agent(self, pop: Population, j: int) -> None:
        """Place agent ``j`` (position and velocity) before its first evaluation."""
        prob = self.problem
        if pop.design is None:
            pop.x[j] = init_uniform(self.rng, prob.lower_init, prob.upper_init)
        else:
            pop.x[j] = pop.design[j]
        if pop.v is not None:
            pop.v[j] = init_range(self.rng, prob.lower_bound, prob.upper_bound)

    def begin_sweep(self, pop: Population) -> None:
        """Called before every sweep over the population."""

    def select_agent(self, pop: Population, k: int) -> int:
        """Agent updated at slot ``k`` of the sweep. Sequential by default."""
        return k

    def update_agent(self, pop: Population, j: int) -> None:
        """Move agent ``j`` and evaluate it exactly once."""
        raise NotImplementedError

    def on_iteration_end(self, pop: Population) -> None:
        """Called after every sweep; may spend evaluations via ``pop.iterations``."""

    def best(self, pop: Population) -> Tuple[np.ndarray, float]:
        return pop.best_position, pop.best_fitness

    # --- driver -------------------------------------------------------------

    def _allocate(self, size: int, capacity: Optional[int] = None) -> Population:
        pop = Population(size, self.problem.dimensionality, velocity=self.uses_velocity, capacity=capacity)
        if self.init != "uniform":
            pop.design = make_design(self.init, self.rng, size, self.problem.lower_init, self.problem.upper_init)
        return pop

    def _run(self, params: np.ndarray) -> Result:
        pop = self.setup(params)

        # 1. Initialisation, each evaluation counts as an iteration
        initialized = 0
        for j in range(pop.size):
            if not self._continue(pop.iterations, pop.best_fitness):
                break
            self.init_agent(pop, j)
            pop.initialize(j, self.problem.fitness(pop.x[j]))
            initialized += 1
            self._trace(pop.iterations, pop.best_fitness)
            pop.iterations += 1

        # 2. Main loop
        if initialized == pop.size:
            while self._continue(pop.iterations, pop.best_fitness):
                self.begin_sweep(pop)
                for k in range(pop.size):
                    if not self._continue(pop.iterations, pop.best_fitness):
                        break
                    j = self.select_agent(pop, k)
                    self.update_agent(pop, j)
                    self._trace(pop.iterations, pop.best_fitness)
                    pop.iterations += 1
                self.on_iteration_end(pop)

        # 3. Terminal
        position, fitness = self.best(pop)
        return self._result(position, fitness, pop.iterations)
