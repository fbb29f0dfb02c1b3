# PSO with a swarm-centroid attractor
# Author: Shengning Wang

from typing import Dict, Tuple

import numpy as np

from swarmops.optimizers.base import Population
from swarmops.optimizers.pso import PSO


class PSOM(PSO):
    """
    PSO with a third attractor: the midpoint of the swarm's position centroid
    ``xc`` and personal-best centroid ``pc``, both computed at the start of
    every sweep.

        v = omega * v + phi_p * r1 * (p - x) + phi_g * r2 * (g - x)
                      + phi_c * r3 * (0.5 * xc + 0.5 * pc - x)

    ``r1, r2, r3`` are drawn per dimension.

    Control parameters: ``(S, omega, phi_p, phi_g, phi_c)``.
    """

    name = "PSOM"
    parameter_names = ("S", "omega", "phi_p", "phi_g", "phi_c")
    default_parameters = (50.0, 0.729, 1.49445, 1.49445, 0.5)
    lower_bound = (1.0, -2.0, -4.0, -4.0, -4.0)
    upper_bound = (200.0, 2.0, 4.0, 4.0, 4.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "default": default_parameters,
    }

    def setup(self, params: np.ndarray) -> Population:
        pop = super().setup(params[:4])
        pop.phi_c = params[4]
        pop.centroid = np.zeros(self.problem.dimensionality)
        return pop

    def begin_sweep(self, pop: Population) -> None:
        live = slice(0, pop.size)
        pop.centroid = 0.5 * pop.x[live].mean(axis=0) + 0.5 * pop.p[live].mean(axis=0)

    def update_agent(self, pop: Population, j: int) -> None:
        x, v, p, g = pop.x[j], pop.v[j], pop.p[j], pop.best_position
        n = x.size

        r = self.rng.uniforms(3 * n).reshape(n, 3)
        v *= pop.omega
        v += (pop.phi_p * r[:, 0] * (p - x)
              + pop.phi_g * r[:, 1] * (g - x)
              + pop.phi_c * r[:, 2] * (pop.centroid - x))

        self._move(pop, j)
