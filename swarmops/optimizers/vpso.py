# Variable-population PSO: the swarm grows on stagnation and shrinks on success
# Author: Shengning Wang

import math
from typing import Dict, Tuple

import numpy as np

from swarmops.core.tools import clamp
from swarmops.optimizers.base import Population, PopulationOptimizer, round_half_away
from swarmops.optimizers.spso import calculate_parameters


def spread_iterations(size: int, probability: float = 0.9) -> int:
    """
    Sweeps needed for information to spread over a ring of ``size`` agents
    with the given probability.

    Returns:
        int: ``int(0.5 + ln(1 - probability) / ln(1 - 3 / size))``, at least 1.
    """
    if size <= 3:
        return 1
    return max(1, int(0.5 + math.log(1.0 - probability) / math.log(1.0 - 3.0 / size)))


class PositionMemory:
    """
    Cyclic store of visited positions, used to place new agents away from
    everything searched so far.

    Args:
        capacity (int): Number of positions kept; the oldest is overwritten.
        n_dim (int): Dimensionality of the positions.
    """

    def __init__(self, capacity: int, n_dim: int) -> None:
        if capacity < 2:
            raise ValueError(f"capacity must be >= 2, got {capacity}")
        self.positions = np.zeros((capacity, n_dim))
        self.capacity = capacity
        self.size = 0
        self._rank = 0

    def save(self, x: np.ndarray) -> None:
        self.positions[self._rank] = x
        self._rank = (self._rank + 1) % self.capacity
        self.size = min(self.size + 1, self.capacity)

    def far(self, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
        """
        Per dimension, the midpoint of the widest gap between consecutive
        remembered coordinates (the later gap wins ties), clamped to the box.

        Raises:
            ValueError: With fewer than two remembered positions.
        """
        if self.size < 2:
            raise ValueError("at least two remembered positions are needed")

        coords = np.sort(self.positions[:self.size], axis=0)
        gaps = np.diff(coords, axis=0)
        # argmax over the reversed gaps picks the last widest gap
        widest = gaps.shape[0] - 1 - np.argmax(gaps[::-1], axis=0)
        columns = np.arange(coords.shape[1])
        mid = 0.5 * (coords[widest, columns] + coords[widest + 1, columns])
        return np.clip(mid, lower, upper)


class VPSO(PopulationOptimizer):
    """
    Variable-population PSO.

    Agents move with the Standard PSO 2007 rule over a bidirectional ring of
    informants built from a shuffled order; each sweep visits the agents in a
    fresh random order. After every sweep three rules adapt the swarm:

    1. every ``spread`` sweeps, the ring is rebuilt if the global best did not
       improve during the last sweep;
    2. after ``spread`` sweeps without global improvement an agent is added in
       the least explored region (one evaluation) and the ring is rebuilt;
    3. when more than half the agents improved in the sweep and the swarm is
       larger than ``dim + 1``, the worst agent (never the global best) is
       removed.

    Control parameters: ``(S, w, c)``.
    """

    name = "VPSO"
    uses_velocity = True
    max_agents: int = 200
    memory_size: int = 500

    parameter_names = ("S", "w", "c")
    default_parameters = (calculate_parameters(30)[0],) + calculate_parameters(30)[3:]
    lower_bound = (1.0, -2.0, -4.0)
    upper_bound = (200.0, 2.0, 4.0)
    presets: Dict[str, Tuple[float, ...]] = {
        "default": default_parameters,
    }

    def setup(self, params: np.ndarray) -> Population:
        size = round_half_away(params[0])
        if size < 1:
            raise ValueError(f"S must round to >= 1, got {params[0]}")
        capacity = max(size, self.max_agents)
        pop = self._allocate(size, capacity=capacity)
        _, pop.w, pop.c = params

        pop.memory = PositionMemory(self.memory_size, self.problem.dimensionality)
        pop.links = np.zeros((capacity, capacity), dtype=bool)
        pop.order = list(range(pop.size))
        pop.relink = True
        pop.links_age = 0
        pop.spread = spread_iterations(pop.size)
        pop.stagnation = 0
        pop.improvements = 0
        pop.sweep_start_fitness = math.inf
        return pop

    def init_agent(self, pop: Population, j: int) -> None:
        prob = self.problem
        if pop.design is None:
            pop.x[j] = self.rng.uniforms(prob.dimensionality, prob.lower_init, prob.upper_init)
        else:
            pop.x[j] = pop.design[j]
        self._init_velocity(pop, j)
        pop.memory.save(pop.x[j])

    # --- sweep ----------------------------------------------------------

    def begin_sweep(self, pop: Population) -> None:
        pop.order = list(range(pop.size))
        self.rng.shuffle(pop.order)
        if pop.relink:
            self.build_ring(pop)
            pop.relink = False
            pop.links_age = 0
        pop.improvements = 0
        pop.sweep_start_fitness = pop.best_fitness

    def build_ring(self, pop: Population) -> None:
        """Bidirectional ring over ``pop.order`` plus self-links."""
        size, order = pop.size, pop.order
        pop.links[:] = False
        for k in range(size):
            a, b = order[k], order[(k + 1) % size]
            pop.links[a, b] = pop.links[b, a] = True
        live = np.arange(size)
        pop.links[live, live] = True

    def select_agent(self, pop: Population, k: int) -> int:
        return pop.order[k]

    def best_informant(self, pop: Population, s: int) -> int:
        informants = np.flatnonzero(pop.links[:pop.size, s])
        g = int(informants[np.argmin(pop.p_fitness[informants])])
        return g if pop.p_fitness[g] < pop.p_fitness[s] else s

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
        if pop.improve(j, self.problem.fitness(x, pop.p_fitness[j])):
            pop.memory.save(x)
            pop.improvements += 1

    # --- adaptation -----------------------------------------------------

    def on_iteration_end(self, pop: Population) -> None:
        improved = pop.best_fitness < pop.sweep_start_fitness
        worst = self.worst_agent(pop)

        # rule 1: periodic re-wiring
        pop.links_age += 1
        if pop.links_age >= pop.spread:
            pop.links_age = 0
            pop.spread = spread_iterations(pop.size)
            pop.relink = not improved

        # rule 2: grow on stagnation
        pop.stagnation = 0 if improved else pop.stagnation + 1
        if pop.stagnation >= pop.spread and pop.size < pop.capacity:
            if self._continue(pop.iterations, pop.best_fitness):
                self.add_agent(pop)
                pop.relink = True
                pop.stagnation = 0

        # rule 3: shrink on widespread success
        if pop.size > self.problem.dimensionality + 1 and pop.improvements > 0.5 * pop.size:
            if worst != pop.best_index:
                self.remove_agent(pop, worst)

    def worst_agent(self, pop: Population) -> int:
        return int(np.argmax(pop.p_fitness[:pop.size]))

    def add_agent(self, pop: Population) -> None:
        """Append an agent in the least explored region; costs one evaluation."""
        prob = self.problem
        j = pop.size
        if pop.memory.size >= 2:
            pop.x[j] = pop.memory.far(prob.lower_bound, prob.upper_bound)
        else:
            pop.x[j] = self.rng.uniforms(prob.dimensionality, prob.lower_bound, prob.upper_bound)

        fitness = prob.fitness(pop.x[j])
        self._init_velocity(pop, j)
        pop.size += 1
        pop.initialize(j, fitness)
        self._trace(pop.iterations, pop.best_fitness)
        pop.iterations += 1

    def remove_agent(self, pop: Population, j: int) -> None:
        """Remove agent ``j``; the last agent and its links take its place."""
        last = pop.swap_remove(j)
        if j != last:
            pop.links[j, :] = pop.links[last, :]
            pop.links[:, j] = pop.links[:, last]
            pop.links[j, j] = True
        pop.links[last, :] = False
        pop.links[:, last] = False

    def _init_velocity(self, pop: Population, j: int) -> None:
        prob = self.problem
        target = self.rng.uniforms(prob.dimensionality, prob.lower_bound, prob.upper_bound)
        pop.v[j] = (target - pop.x[j]) / 2.0
