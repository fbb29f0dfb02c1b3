# Run Conditions: when to stop an optimization run
# Author: Shengning Wang

import time
from typing import Optional


class RunCondition:
    """
    Stateful predicate deciding whether an optimization loop continues.

    Optimizers call ``reset()`` once at the start of each run, then
    ``should_continue(iterations, fitness)`` before every fitness evaluation,
    where ``iterations`` counts the evaluations used so far and ``fitness`` is
    the best fitness found so far. Returning False is the only way a run is
    cancelled.
    """

    def reset(self) -> None:
        pass

    def should_continue(self, iterations: int, fitness: float) -> bool:
        raise NotImplementedError


class RunConditionIterations(RunCondition):
    """Continue while fewer than ``max_iterations`` evaluations have been used."""

    def __init__(self, max_iterations: int) -> None:
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
        self.max_iterations = int(max_iterations)

    def should_continue(self, iterations: int, fitness: float) -> bool:
        return iterations < self.max_iterations

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_iterations={self.max_iterations})"


class RunConditionFitness(RunConditionIterations):
    """Continue while the fitness is above ``fitness_below`` and the iteration budget lasts."""

    def __init__(self, max_iterations: int, fitness_below: float) -> None:
        super().__init__(max_iterations)
        self.fitness_below = float(fitness_below)

    def should_continue(self, iterations: int, fitness: float) -> bool:
        return fitness > self.fitness_below and super().should_continue(iterations, fitness)


class RunConditionStagnation(RunConditionFitness):
    """
    Additionally stop when the fitness has not improved for ``max_stagnant`` iterations.

    The iteration of the last improvement is tracked on every call, so this
    condition must see every fitness the loop produces. With ``max_stagnant=5``
    and a last improvement at iteration 3 the run stops at iteration 8.
    """

    def __init__(self, max_iterations: int, fitness_below: float, max_stagnant: int) -> None:
        super().__init__(max_iterations, fitness_below)
        if max_stagnant < 1:
            raise ValueError(f"max_stagnant must be >= 1, got {max_stagnant}")
        self.max_stagnant = int(max_stagnant)
        self.reset()

    def reset(self) -> None:
        self._last_improved = -1
        self._fitness = float("inf")

    def should_continue(self, iterations: int, fitness: float) -> bool:
        if self._last_improved < 0 or fitness < self._fitness:
            self._last_improved = iterations
            self._fitness = fitness

        stagnant = iterations - self._last_improved
        return stagnant < self.max_stagnant and super().should_continue(iterations, fitness)


class RunConditionDeadline(RunCondition):
    """
    Stop once ``seconds`` of wall-clock time have passed since ``reset()``.

    An optional inner condition must also hold for the run to continue.
    """

    def __init__(self, seconds: float, condition: Optional[RunCondition] = None) -> None:
        if seconds < 0:
            raise ValueError(f"seconds must be >= 0, got {seconds}")
        self.seconds = float(seconds)
        self.condition = condition
        self.reset()

    def reset(self) -> None:
        self._start = time.monotonic()
        if self.condition is not None:
            self.condition.reset()

    def should_continue(self, iterations: int, fitness: float) -> bool:
        if self.condition is not None and not self.condition.should_continue(iterations, fitness):
            return False
        return time.monotonic() - self._start < self.seconds
