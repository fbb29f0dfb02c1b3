# Random Sampling
# Author: Shengning Wang

import math

import numpy as np

from swarmops.core.result import Result
from swarmops.core.tools import init_uniform
from swarmops.optimizers.base import Optimizer


class RND(Optimizer):
    """Uniform random sampling of the search space, keeping the best sample."""

    name = "RND"

    def _run(self, params: np.ndarray) -> Result:
        prob = self.problem
        best, fitness = None, math.inf

        i = 0
        while self._continue(i, fitness):
            x = init_uniform(self.rng, prob.lower_bound, prob.upper_bound)
            new_fitness = prob.fitness(x, fitness)
            if best is None or new_fitness < fitness:
                best, fitness = x, new_fitness
            self._trace(i, fitness)
            i += 1

        if best is None:
            raise ValueError("the run condition allowed no evaluation")
        return self._result(best, fitness, i)
