# Functional interface in the style of scipy.optimize
# Author: Shengning Wang

from typing import Any, Callable, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.optimize import Bounds, OptimizeResult

from swarmops.core.problem import FunctionProblem
from swarmops.core.run_condition import RunCondition, RunConditionIterations
from swarmops.core.trace import FitnessTraceLogger
from swarmops.optimizers import make_optimizer
from swarmops.utils.hue_logger import hue, logger
from swarmops.utils.seeder import make_engine


class _CallbackCondition(RunCondition):
    """
    Run condition that also stops once ``callback(best_x, best_fitness)`` returns True.

    The callback is consulted whenever the best fitness improves; the best
    position is read from the problem wrapper that records it.
    """

    def __init__(self, condition: RunCondition, callback: Callable[[np.ndarray, float], Any],
                 problem: "_BestTracker") -> None:
        self.condition = condition
        self.callback = callback
        self.problem = problem
        self.stopped = False
        self._fitness = np.inf

    def reset(self) -> None:
        self.condition.reset()
        self.stopped = False
        self._fitness = np.inf

    def should_continue(self, iterations: int, fitness: float) -> bool:
        if fitness < self._fitness:
            self._fitness = fitness
            if self.callback(np.array(self.problem.best_x), fitness):
                self.stopped = True
        if self.stopped:
            return False
        return self.condition.should_continue(iterations, fitness)


class _BestTracker(FunctionProblem):
    """``FunctionProblem`` that remembers the best position it has evaluated."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.best_x = np.full(self.dimensionality, np.nan)
        self.best_fun = np.inf

    def fitness(self, x: np.ndarray, limit: float = np.inf) -> float:
        value = super().fitness(x, limit)
        if value < self.best_fun:
            self.best_fun = value
            self.best_x = np.array(x, dtype=float)
        return value


def minimize(
    func: Callable[..., float],
    bounds: Union[Bounds, Sequence[Tuple[float, float]]],
    method: str = "pso",
    parameters: Union[None, str, Sequence[float]] = None,
    args: Tuple[Any, ...] = (),
    maxiter: Optional[int] = None,
    seed: Optional[int] = None,
    engine: str = "mt19937",
    disp: bool = False,
    callback: Optional[Callable[[np.ndarray, float], Any]] = None,
    **options: Any,
) -> OptimizeResult:
    """
    Minimizes a scalar function over a box with one of the registered optimizers.

    Args:
        func (Callable): Objective ``func(x, *args) -> float``.
        bounds (Bounds | Sequence[Tuple[float, float]]): Search-space box.
        method (str): Key of ``swarmops.optimizers.OPTIMIZERS``.
        parameters (None | str | Sequence[float]): Control parameters, a preset
            name, or ``None`` for the optimizer's defaults.
        args (tuple): Extra arguments passed to ``func``.
        maxiter (Optional[int]): Budget of fitness evaluations. Defaults to
            1000 per dimension.
        seed (Optional[int]): Engine seed. ``None`` seeds from system entropy.
        engine (str): Key of ``swarmops.prng.ENGINES``.
        disp (bool): Log the best fitness while the run progresses.
        callback (Optional[Callable]): Called as ``callback(best_x, best_fitness)``
            on every improvement; returning True stops the run.
        **options: Forwarded to the optimizer, e.g. ``init`` or ``crossover``.

    Returns:
        OptimizeResult: Fields ``x``, ``fun``, ``nit``, ``nfev``, ``success``,
        ``message`` and ``optimizer``.
    """
    problem = _BestTracker(func, bounds, args=args)
    if maxiter is None:
        maxiter = 1000 * problem.dimensionality

    condition: RunCondition = RunConditionIterations(maxiter)
    stopper = None
    if callback is not None:
        stopper = condition = _CallbackCondition(condition, callback, problem)

    trace = FitnessTraceLogger(every=max(maxiter // 10, 1), label=method) if disp else None
    optimizer = make_optimizer(method, problem, make_engine(engine, seed),
                               run_condition=condition, trace=trace, **options)

    result = optimizer.optimize(parameters)

    message = "Maximum number of iterations reached."
    if stopper is not None and stopper.stopped:
        message = "Stopped by callback."
    if disp:
        logger.info(f"{hue.b}{optimizer.name}{hue.q}: {message} "
                    f"fun={hue.m}{result.fitness:.6e}{hue.q} nfev={hue.m}{problem.nfev}{hue.q}")

    res = result.to_optimize_result(success=np.isfinite(result.fitness), message=message)
    res.nfev = problem.nfev
    return res
