# Local-best Particle Swarm Optimization on a ring topology
# Author: Shengning Wang

from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from swarmops.core.problem import Problem
from swarmops.core.run_condition import RunCondition
from swarmops.core.tools import init_range, init_uniform
from swarmops.optimizers.base import Population, TraceSink, round_half_away
from swarmops.optimizers.pso import PSO
from swarmops.prng.base import Engine
from swarmops.prng.composite import spawn_engines
from swarmops.prng.sampler import Sampler


class LPSO(PSO):
    """
    PSO where the social attractor of agent ``j`` is the best personal best in
    the ring window ``(j + l) mod S`` for ``l`` in ``[0, N)``.

    Initial positions come from a Sampling-On-Axis design. With
    ``agent_engine`` set, each agent draws its random weights from its own
    engine, spawned from the master engine at the start of every run.

    Control parameters: ``(S, N, omega, phi_p, phi_g)``.
    """

    name = "LPSO"
    default_init = "soa"
    parameter_names = ("S", "N", "omega", "phi_p", "phi_g")
    default_parameters = (50.0, 5.0, 0.729843788, 1.49445, 1.49445)
    lower_bound = (1.0, 0.0, -2.0, -4.0, -4.0)
    upper_bound = (200.0, 200.0, 2.0, 4.0, 4.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "hand_tuned": (50.0, 5.0, 0.72984378812835756, 1.49445, 1.49445),
    }

    def __init__(
        self,
        problem: Problem,
        rng: Union[Engine, Sampler],
        run_condition: Optional[RunCondition] = None,
        trace: Optional[TraceSink] = None,
        init: Optional[str] = None,
        agent_engine: Optional[Callable[[], Engine]] = None,
    ) -> None:
        """
        Args:
            agent_engine: Factory of unseeded engines (e.g. an engine class).
                When given, every agent gets its own engine seeded from ``rng``.
        """
        super().__init__(problem, rng, run_condition, trace, init)
        self.agent_engine = agent_engine

    def setup(self, params: np.ndarray) -> Population:
        size = round_half_away(params[0])
        if size < 1:
            raise ValueError(f"S must round to >= 1, got {params[0]}")

        pop = self._allocate(size)
        pop.neighbors = min(max(round_half_away(params[1]), 1), size)
        _, _, pop.omega, pop.phi_p, pop.phi_g = params
        self._velocity_limits(pop)

        if self.agent_engine is None:
            pop.agent_rng = [self.rng] * size
        else:
            engines = spawn_engines(self.agent_engine, self.rng.engine, size)
            pop.agent_rng = [Sampler(engine) for engine in engines]
        return pop

    def init_agent(self, pop: Population, j: int) -> None:
        prob, rng = self.problem, pop.agent_rng[j]
        if pop.design is None:
            pop.x[j] = init_uniform(rng, prob.lower_init, prob.upper_init)
        else:
            pop.x[j] = pop.design[j]
        pop.v[j] = init_range(rng, prob.lower_bound, prob.upper_bound)

    def update_agent(self, pop: Population, j: int) -> None:
        x, v, p = pop.x[j], pop.v[j], pop.p[j]
        local_best = pop.p[self.neighborhood_best(pop, j)]

        r_p, r_g = pop.agent_rng[j].uniforms(2)
        v *= pop.omega
        v += pop.phi_p * r_p * (p - x) + pop.phi_g * r_g * (local_best - x)

        self._move(pop, j)

    @staticmethod
    def neighborhood_best(pop: Population, j: int) -> int:
        """Index of the best personal best in the ring window starting at ``j``."""
        window = (j + np.arange(pop.neighbors)) % pop.size
        return int(window[np.argmin(pop.p_fitness[window])])
