# Differential Evolution: steady-state DE/best/1/bin
# Author: Shengning Wang

from typing import Dict, Tuple

import numpy as np

from swarmops.core.tools import bound
from swarmops.optimizers.base import Population, PopulationOptimizer, round_half_away


class DE(PopulationOptimizer):
    """
    Steady-state Differential Evolution.

    Every step picks a random agent ``x`` and two distinct random agents
    ``a, b``, then builds a trial vector from the swarm's best ``g``:

        y[k] = g[k] + F * (a[k] - b[k])    for k == R or U < CR
        y[k] = x[k]                        otherwise

    where ``R`` is a random dimension, so at least one component changes.
    The trial replaces ``x`` only if its fitness is strictly better.

    Agents live in the personal-best rows of the population; the position
    rows hold the trial vector of the current step.

    Control parameters: ``(NP, CR, F)``.
    """

    name = "DE"
    uses_velocity = False
    parameter_names = ("NP", "CR", "F")
    default_parameters = (37.0, 0.496, 0.5313)
    lower_bound = (3.0, 0.0, 0.0)
    upper_bound = (200.0, 1.0, 2.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "hand_tuned": (50.0, 0.9, 0.6),
        "all_benchmarks_6000": (136.0, 0.9813, 0.279),
        "all_benchmarks_60000": (186.0, 0.8493, 0.4818),
        "four_benchmarks_600000": (120.0, 0.4852, 0.6413),
        "sphere_rosenbrock_60000": (126.0, 0.9211, 0.4027),
        "rastrigin_60000": (42.0, 0.0082, 0.9417),
        "ackley_60000": (19.0, 0.013, 1.2935),
    }

    def setup(self, params: np.ndarray) -> Population:
        size = round_half_away(params[0])
        if size < 2:
            raise ValueError(f"NP must round to >= 2 so that two distinct agents exist, got {params[0]}")
        pop = self._allocate(size)
        _, pop.cr, pop.f = params
        return pop

    def select_agent(self, pop: Population, k: int) -> int:
        return self.rng.index(pop.size)

    def update_agent(self, pop: Population, j: int) -> None:
        n = self.problem.dimensionality
        g = pop.best_position
        R = self.rng.index(n)
        r1, r2 = self.rng.index2(pop.size)
        a, b = pop.p[r1], pop.p[r2]

        y = pop.x[j]
        y[:] = pop.p[j]
        for k in range(n):
            if k == R or self.rng.uniform() < pop.cr:
                y[k] = g[k] + pop.f * (a[k] - b[k])

        bound(y, self.problem.lower_bound, self.problem.upper_bound)
        pop.improve(j, self.problem.fitness(y, pop.p_fitness[j]))
