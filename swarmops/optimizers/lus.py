# Local Unimodal Sampling
# Author: Shengning Wang

import math
from typing import Dict, Tuple

import numpy as np

from swarmops.core.result import Result
from swarmops.core.tools import init_uniform, sample_bounded
from swarmops.optimizers.base import Optimizer


class LUS(Optimizer):
    """
    Local Unimodal Sampling: a single agent samples around its position in a
    box that shrinks on every failure.

    The box half-width is ``r * (upper - lower)`` with ``r`` starting at 1 and
    multiplied by ``q = 2 ** (-1 / (n * gamma))`` whenever the new sample is not
    strictly better. A better sample becomes the new position.

    The initial evaluation always happens and counts as iteration 0.

    Control parameters: ``(gamma,)``.
    """

    name = "LUS"
    parameter_names = ("gamma",)
    default_parameters = (3.0,)
    lower_bound = (0.5,)
    upper_bound = (100.0,)
    presets: Dict[str, Tuple[float, ...]] = {}

    def _run(self, params: np.ndarray) -> Result:
        gamma = float(params[0])
        if gamma <= 0.0:
            raise ValueError(f"gamma must be > 0, got {gamma}")

        prob = self.problem
        lower, upper = prob.lower_bound, prob.upper_bound
        n = prob.dimensionality
        q = 2.0 ** (-1.0 / (n * gamma))
        d = upper - lower
        r = 1.0

        x = init_uniform(self.rng, lower, upper)
        if not self._continue(0, math.inf):
            # no budget: the start point is returned unevaluated
            return self._result(x, math.inf, 0)
        fitness = prob.fitness(x)
        self._trace(0, fitness)

        i = 1
        while self._continue(i, fitness):
            y = sample_bounded(x, r * d, lower, upper, self.rng)
            new_fitness = prob.fitness(y, fitness)
            if new_fitness < fitness:
                x, fitness = y, new_fitness
            else:
                r *= q
            self._trace(i, fitness)
            i += 1

        return self._result(x, fitness, i)
