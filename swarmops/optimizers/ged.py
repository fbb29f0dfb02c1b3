# Gradient Emancipated Descent
# Author: Shengning Wang

import math
from typing import Dict, Tuple

import numpy as np

from swarmops.core.result import Result
from swarmops.core.tools import bound, init_uniform
from swarmops.optimizers.base import Optimizer


class GED(Optimizer):
    """
    Gradient descent with a fixed, normalized step length.

    Every step moves ``x`` by ``stepsize`` against the gradient direction
    and clamps it to the bounds. The fitness of the new position is only
    evaluated with probability ``p``, so the best reported position is the
    best one that was actually evaluated. Each gradient costs as many
    iterations as the problem declares, plus the step itself.

    Control parameters: ``(stepsize, p)``.

    Raises:
        ValueError: If the problem has no gradient.
    """

    name = "GED"
    parameter_names = ("stepsize", "p")
    default_parameters = (0.05, 0.05)
    lower_bound = (0.0, 0.0)
    upper_bound = (2.0, 1.0)
    presets: Dict[str, Tuple[float, ...]] = {}

    def _run(self, params: np.ndarray) -> Result:
        stepsize, p = float(params[0]), float(params[1])
        prob = self.problem
        if not prob.has_gradient:
            raise ValueError(f"{self.name} requires a gradient, {prob.name} provides none")
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"p must be in [0, 1], got {p}")

        x = init_uniform(self.rng, prob.lower_init, prob.upper_init)
        if not self._continue(0, math.inf):
            # no budget: the start point is returned unevaluated
            return self._result(x, math.inf, 0)
        fitness = prob.fitness(x)
        best = x.copy()
        self._trace(0, fitness)

        i = 1
        while self._continue(i, fitness):
            gradient, cost = prob.gradient(x)
            i += cost
            norm = float(np.linalg.norm(gradient))
            if norm > 0.0:
                x -= (stepsize / norm) * gradient
                bound(x, prob.lower_bound, prob.upper_bound)

            if self.rng.boolean(p):
                new_fitness = prob.fitness(x, fitness)
                if new_fitness < fitness:
                    best[:] = x
                    fitness = new_fitness
            self._trace(i, fitness)
            i += 1

        return self._result(best, fitness, i)
