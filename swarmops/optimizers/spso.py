# Standard PSO 2007: random informant topology
# Author: Shengning Wang

import math
from typing import Dict, Optional, Tuple, Union

import numpy as np

from swarmops.core.problem import Problem
from swarmops.core.run_condition import RunCondition
from swarmops.core.tools import clamp
from swarmops.optimizers.base import Population, PopulationOptimizer, TraceSink
from swarmops.prng.base import Engine
from swarmops.prng.sampler import Sampler


def calculate_parameters(dimensions: int, informed: int = 3) -> Tuple[float, ...]:
    """
    Standard PSO 2007 parameters for a problem of the given dimensionality.

    Args:
        dimensions (int): Dimensionality of the search space.
        informed (int): K, the number of agents each agent informs.

    Returns:
        Tuple[float, ...]: ``(S, K, p, w, c)`` with ``S = int(10 + 2 sqrt(dim))``,
        ``p = 1 - (1 - 1/S)^K``, ``w = 1 / (2 ln 2)`` and ``c = 0.5 + ln 2``.
    """
    if dimensions < 1:
        raise ValueError(f"dimensions must be >= 1, got {dimensions}")
    size = int(10 + 2 * math.sqrt(dimensions))
    p = 1.0 - (1.0 - 1.0 / size) ** informed
    w = 1.0 / (2.0 * math.log(2.0))
    c = 0.5 + math.log(2.0)
    return (float(size), float(informed), p, w, c)


class SPSO2007(PopulationOptimizer):
    """
    Standard PSO 2007.

    Every agent ``m`` informs agent ``s`` with probability ``p``
    (``links[m, s]``, self-links always present). The links are drawn anew at
    the start of a sweep whenever the previous sweep did not improve the
    global best. Velocities are updated per dimension:

        v = w * v + U(0, c) * (p - x) + U(0, c) * (g_i - x)

    where ``g_i`` is the best personal best among the agent's informants; the
    social term is dropped when that informant is the agent itself. Positions
    leaving the box are clamped and their velocity component is zeroed.

    The default parameters are ``calculate_parameters(dimensionality)`` of the
    problem being optimized.

    Control parameters: ``(S, K, p, w, c)``; ``K`` only documents how ``p``
    was derived.
    """

    name = "SPSO2007"
    parameter_names = ("S", "K", "p", "w", "c")
    default_parameters = calculate_parameters(30)
    lower_bound = (1.0, 0.0, 0.0, -2.0, -4.0)
    upper_bound = (200.0, 200.0, 1.0, 2.0, 4.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "hand_tuned": (50.0, 3.0, 1.0, 0.72984, 1.193),
    }

    def __init__(
        self,
        problem: Problem,
        rng: Union[Engine, Sampler],
        run_condition: Optional[RunCondition] = None,
        trace: Optional[TraceSink] = None,
        init: Optional[str] = None,
    ) -> None:
        super().__init__(problem, rng, run_condition, trace, init)
        self.default_parameters = calculate_parameters(problem.dimensionality)

    def setup(self, params: np.ndarray) -> Population:
        pop = super().setup(params)
        _, _, pop.link_probability, pop.w, pop.c = params
        if not 0.0 <= pop.link_probability <= 1.0:
            raise ValueError(f"p must be in [0, 1], got {pop.link_probability}")

        pop.links = np.zeros((pop.size, pop.size), dtype=bool)
        pop.relink = True
        pop.sweep_start_fitness = np.inf
        return pop

    def init_agent(self, pop: Population, j: int) -> None:
        prob = self.problem
        if pop.design is None:
            pop.x[j] = self.rng.uniforms(prob.dimensionality, prob.lower_init, prob.upper_init)
        else:
            pop.x[j] = pop.design[j]
        target = self.rng.uniforms(prob.dimensionality, prob.lower_bound, prob.upper_bound)
        pop.v[j] = (target - pop.x[j]) / 2.0

    def begin_sweep(self, pop: Population) -> None:
        if pop.relink:
            self.draw_links(pop)
        pop.sweep_start_fitness = pop.best_fitness

    def draw_links(self, pop: Population) -> None:
        """Random topology: ``links[m, s]`` is set with probability ``p``."""
        size = pop.size
        draws = self.rng.uniforms(size * size).reshape(size, size)
        pop.links = (draws < pop.link_probability).T
        np.fill_diagonal(pop.links, True)

    def best_informant(self, pop: Population, s: int) -> int:
        informants = np.flatnonzero(pop.links[:, s])
        return int(informants[np.argmin(pop.p_fitness[informants])])

    def update_agent(self, pop: Population, j: int) -> None:
        x, v = pop.x[j], pop.v[j]
        n = x.size
        g = self.best_informant(pop, j)

        v *= pop.w
        if g != j:
            weights = self.rng.uniforms(2 * n, 0.0, pop.c).reshape(n, 2)
            v += weights[:, 0] * (pop.p[j] - x) + weights[:, 1] * (pop.p[g] - x)
        else:
            v += self.rng.uniforms(n, 0.0, pop.c) * (pop.p[j] - x)
        x += v

        clamp(x, v, self.problem.lower_bound, self.problem.upper_bound)
        pop.improve(j, self.problem.fitness(x, pop.p_fitness[j]))

    def on_iteration_end(self, pop: Population) -> None:
        pop.relink = not pop.best_fitness < pop.sweep_start_fitness
