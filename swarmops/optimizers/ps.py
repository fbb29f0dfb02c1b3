# Pattern Search
# Author: Shengning Wang

import math

import numpy as np

from swarmops.core.result import Result
from swarmops.core.tools import init_uniform
from swarmops.optimizers.base import Optimizer


class PS(Optimizer):
    """
    Pattern Search along one random coordinate per step.

    Each step adds the coordinate's step ``d[R]`` to ``x[R]``; a strict
    improvement is kept, otherwise the move is undone and the step is halved
    and reversed. Steps start at the width of the search space.

    Takes no control parameters.
    """

    name = "PS"

    def _run(self, params: np.ndarray) -> Result:
        prob = self.problem
        lower, upper = prob.lower_bound, prob.upper_bound
        n = prob.dimensionality

        x = init_uniform(self.rng, lower, upper)
        if not self._continue(0, math.inf):
            # no budget: the start point is returned unevaluated
            return self._result(x, math.inf, 0)
        d = upper - lower
        fitness = prob.fitness(x)
        self._trace(0, fitness)

        i = 1
        while self._continue(i, fitness):
            R = self.rng.index(n)
            previous = x[R]
            x[R] = min(max(x[R] + d[R], lower[R]), upper[R])

            new_fitness = prob.fitness(x, fitness)
            if new_fitness < fitness:
                fitness = new_fitness
            else:
                x[R] = previous
                d[R] *= -0.5
            self._trace(i, fitness)
            i += 1

        return self._result(x, fitness, i)
