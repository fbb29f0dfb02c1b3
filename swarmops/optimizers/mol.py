# Many Optimizing Liaisons: PSO without personal bests
# Author: Shengning Wang

from typing import Dict, Tuple

import numpy as np

from swarmops.optimizers.base import Population
from swarmops.optimizers.pso import PSO


class MOL(PSO):
    """
    Many Optimizing Liaisons, a simplified PSO.

    Agents only know the swarm's best position ``g``. Each step moves one
    randomly chosen agent:

        v = omega * v + phi * r * (g - x)

    with a single ``r`` per step. ``g`` is a copy, updated whenever any agent
    finds a strictly better position, and kept in the personal-best row of
    the best initial agent; the other personal-best rows are not used after
    initialisation.

    Control parameters: ``(S, omega, phi)``.
    """

    name = "MOL"
    parameter_names = ("S", "omega", "phi")
    default_parameters = (198.0, -0.2723, 3.8283)
    lower_bound = (1.0, -2.0, -4.0)
    upper_bound = (300.0, 2.0, 6.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "all_benchmarks_60000": (198.0, -0.2723, 3.8283),
        "all_benchmarks_600000": (134.0, -0.43, 3.0469),
        "rastrigin_60000": (114.0, -0.3606, 3.822),
        "sphere_rosenbrock_60000": (42.0, -0.4055, 3.1722),
        "quartic_noise_sphere_step_60000": (83.0, -0.3461, 3.2535),
    }

    def setup(self, params: np.ndarray) -> Population:
        pop = super(PSO, self).setup(params)
        _, pop.omega, pop.phi = params
        self._velocity_limits(pop)
        return pop

    def select_agent(self, pop: Population, k: int) -> int:
        return self.rng.index(pop.size)

    def update_agent(self, pop: Population, j: int) -> None:
        x, v = pop.x[j], pop.v[j]
        g = pop.best_position

        r = self.rng.uniform()
        v *= pop.omega
        v += pop.phi * r * (g - x)

        self._move(pop, j)

    def _move(self, pop: Population, j: int) -> bool:
        x, v = pop.x[j], pop.v[j]
        self._step(pop, x, v)

        fitness = self.problem.fitness(x, pop.best_fitness)
        if fitness < pop.best_fitness:
            pop.p[pop.best_index] = x
            pop.p_fitness[pop.best_index] = fitness
            return True
        return False
