# Mesh (grid) search
# Author: Shengning Wang

import itertools
import math
from typing import Dict, Tuple

import numpy as np

from swarmops.core.result import Result
from swarmops.optimizers.base import Optimizer, round_half_away


class MESH(Optimizer):
    """
    Exhaustive search over a regular grid with ``k`` points per dimension,
    spanning the search space from the lower to the upper bound.

    The whole grid of ``k ** n`` points is always evaluated, the last
    dimension varying fastest; the run condition is not consulted. With
    ``k == 1`` only the lower corner is evaluated.

    Control parameters: ``(iterations_per_dim,)``.
    """

    name = "MESH"
    parameter_names = ("iterations_per_dim",)
    default_parameters = (8.0,)
    lower_bound = (1.0,)
    upper_bound = (1000.0,)
    presets: Dict[str, Tuple[float, ...]] = {}

    def _run(self, params: np.ndarray) -> Result:
        k = round_half_away(params[0])
        if k < 1:
            raise ValueError(f"iterations_per_dim must round to >= 1, got {params[0]}")

        prob = self.problem
        lower, upper = prob.lower_bound, prob.upper_bound
        delta = (upper - lower) / (k - 1) if k > 1 else np.zeros_like(lower)

        best, fitness = lower.copy(), math.inf
        x = np.empty_like(lower)
        i = 0
        for steps in itertools.product(range(k), repeat=prob.dimensionality):
            np.clip(lower + delta * np.asarray(steps), lower, upper, out=x)
            new_fitness = prob.fitness(x)
            if i == 0 or new_fitness < fitness:
                best[:] = x
                fitness = new_fitness
            self._trace(i, fitness)
            i += 1

        return self._result(best, fitness, i)
