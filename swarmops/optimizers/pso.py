# Particle Swarm Optimization: global-best swarm
# Author: Shengning Wang

from typing import Dict, Tuple

import numpy as np

from swarmops.core.tools import bound, denormalize
from swarmops.optimizers.base import Population, PopulationOptimizer


class PSO(PopulationOptimizer):
    """
    Particle Swarm Optimization with one swarm-wide best position.

    Each agent keeps a velocity that is pulled towards its own best position
    and towards the swarm's best position:

        v = omega * v + phi_p * r_p * (p - x) + phi_g * r_g * (g - x)

    with one ``r_p`` and one ``r_g`` drawn per agent update. Velocities are
    limited to the width of the search space and positions are clamped to
    the bounds before every evaluation.

    Control parameters: ``(S, omega, phi_p, phi_g)``. The presets named after
    benchmarks were tuned on 30-dimensional problems for the stated budget.
    """

    name = "PSO"
    parameter_names = ("S", "omega", "phi_p", "phi_g")
    default_parameters = (134.0, -0.1618, 1.8903, 2.1225)
    lower_bound = (1.0, -2.0, -4.0, -4.0)
    upper_bound = (200.0, 2.0, 4.0, 4.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "hand_tuned": (50.0, 0.729, 1.49445, 1.49445),
        "all_benchmarks_60000": (134.0, -0.1618, 1.8903, 2.1225),
        "all_benchmarks_600000": (95.0, -0.6031, -0.6485, 2.6475),
        "ackley_60000": (24.0, -0.6421, -3.9845, 0.2583),
        "rastrigin_60000": (53.0, -1.3131, -0.709, -0.5648),
        "rosenbrock_60000": (2.0, 0.7622, 1.3619, 3.4249),
        "schwefel12_60000": (119.0, -0.3718, -0.2031, 3.2785),
        "quartic_noise_sphere_step_60000": (50.0, -0.3610, 0.7590, 2.2897),
    }

    def setup(self, params: np.ndarray) -> Population:
        pop = super().setup(params)
        _, pop.omega, pop.phi_p, pop.phi_g = params
        self._velocity_limits(pop)
        return pop

    def update_agent(self, pop: Population, j: int) -> None:
        x, v, p, g = pop.x[j], pop.v[j], pop.p[j], pop.best_position

        r_p, r_g = self.rng.uniforms(2)
        v *= pop.omega
        v += pop.phi_p * r_p * (p - x) + pop.phi_g * r_g * (g - x)

        self._move(pop, j)

    # ------------------------------------------------------------------

    def _velocity_limits(self, pop: Population) -> None:
        span = np.abs(self.problem.upper_bound - self.problem.lower_bound)
        pop.v_lower, pop.v_upper = -span, span

    def _step(self, pop: Population, x: np.ndarray, v: np.ndarray) -> None:
        """Limit the velocity, move and clamp the position, all in place."""
        denormalize(v)
        bound(v, pop.v_lower, pop.v_upper)
        x += v
        bound(x, self.problem.lower_bound, self.problem.upper_bound)

    def _move(self, pop: Population, j: int) -> bool:
        """Step agent ``j``, evaluate it against its personal best and record."""
        x = pop.x[j]
        self._step(pop, x, pop.v[j])
        return pop.improve(j, self.problem.fitness(x, pop.p_fitness[j]))
