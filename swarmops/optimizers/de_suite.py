# Differential Evolution suite: crossover strategies and dither variants
# Author: Shengning Wang

from typing import Dict, Optional, Tuple, Type, Union

import numpy as np

from swarmops.core.problem import Problem
from swarmops.core.run_condition import RunCondition
from swarmops.core.tools import bound
from swarmops.optimizers.base import Population, PopulationOptimizer, TraceSink, round_half_away
from swarmops.prng.base import Engine
from swarmops.prng.sampler import RandomSet, Sampler


# ======================================================================
# 1. Crossover strategies
# ======================================================================

class Crossover:
    """
    Builds a trial vector in place from the target ``y`` (a copy of the
    agent), the swarm's best ``g`` and donor agents drawn from a random set.

    Attributes:
        name (str): Name used in the optimizer's display name.
        donors (int): Number of distinct donors drawn per trial.
    """

    name: str = ""
    donors: int = 0

    def __call__(self, rng: Sampler, cr: float, w: np.ndarray, y: np.ndarray, g: np.ndarray,
                 agents: np.ndarray, donor_set: RandomSet) -> None:
        raise NotImplementedError

    @staticmethod
    def binomial(rng: Sampler, cr: float, n: int) -> np.ndarray:
        """Mask of crossed dimensions: a random one always, the others with probability ``cr``."""
        R = rng.index(n)
        mask = np.zeros(n, dtype=bool)
        for k in range(n):
            mask[k] = k == R or rng.uniform() < cr
        return mask


class Best1Bin(Crossover):
    """``y = g + w * (a - b)`` on a binomial mask."""

    name = "Best1Bin"
    donors = 2

    def __call__(self, rng, cr, w, y, g, agents, donor_set):
        a, b = agents[donor_set.draw()], agents[donor_set.draw()]
        mask = self.binomial(rng, cr, y.size)
        y[mask] = (g + w * (a - b))[mask]


class Rand1Bin(Crossover):
    """
    The canonical rule, also used by ``DE``: ``y = g + w * (a - b)``
    on a binomial mask, with the swarm's best as the base vector.
    """

    name = "Rand1Bin"
    donors = 2

    def __call__(self, rng, cr, w, y, g, agents, donor_set):
        a, b = agents[donor_set.draw()], agents[donor_set.draw()]
        mask = self.binomial(rng, cr, y.size)
        y[mask] = (g + w * (a - b))[mask]


class Donor1Bin(Crossover):
    """Textbook rand/1: ``y = a + w * (b - c)`` on a binomial mask, ``g`` is not read."""

    name = "Donor1Bin"
    donors = 3

    def __call__(self, rng, cr, w, y, g, agents, donor_set):
        a, b, c = (agents[donor_set.draw()] for _ in range(3))
        mask = self.binomial(rng, cr, y.size)
        y[mask] = (a + w * (b - c))[mask]


class RandToBest1Bin(Crossover):
    """``y = y + w * (g - y) + w * (a - b)`` on a binomial mask."""

    name = "RandToBest1Bin"
    donors = 2

    def __call__(self, rng, cr, w, y, g, agents, donor_set):
        a, b = agents[donor_set.draw()], agents[donor_set.draw()]
        mask = self.binomial(rng, cr, y.size)
        y[mask] = (y + w * (g - y) + w * (a - b))[mask]


class Best1Exp(Crossover):
    """
    ``y = g + w * (a - b)`` on a run of consecutive dimensions (wrapping),
    starting at a random one and continuing while ``U < CR``.
    """

    name = "Best1Exp"
    donors = 2

    def __call__(self, rng, cr, w, y, g, agents, donor_set):
        a, b = agents[donor_set.draw()], agents[donor_set.draw()]
        n = y.size
        k = rng.index(n)
        length = 0
        while True:
            y[k] = g[k] + w[k] * (a[k] - b[k])
            k = (k + 1) % n
            length += 1
            if length >= n or not rng.uniform() < cr:
                break


CROSSOVERS: Dict[str, Type[Crossover]] = {
    "best1bin": Best1Bin,
    "rand1bin": Rand1Bin,
    "donor1bin": Donor1Bin,
    "randtobest1bin": RandToBest1Bin,
    "best1exp": Best1Exp,
}


# ======================================================================
# 2. Dither variants
# ======================================================================

DITHERS: Dict[str, str] = {
    "none": "",
    "generation": "-GenDither",
    "vector": "-VecDither",
    "element": "-Jitter",
}


class DESuite(PopulationOptimizer):
    """
    Generational Differential Evolution with a pluggable crossover strategy
    and optional dithering of the differential weight.

    Each sweep visits every agent in order. Donors are drawn without
    replacement from all agents except the target. The trial replaces the
    agent only on strict improvement.

    Dither variants draw the weight ``w`` from ``U(F_mid - F_range, F_mid + F_range)``:
    once per sweep (``"generation"``), once per trial (``"vector"``) or per
    dimension of every trial (``"element"``). Without dither ``w = F``.

    Control parameters: ``(NP, CR, F)`` without dither, otherwise
    ``(NP, CR, F_mid, F_range)``.

    Args:
        crossover (str): One of ``CROSSOVERS``.
        dither (str): One of ``DITHERS``.
    """

    uses_velocity = False

    def __init__(
        self,
        problem: Problem,
        rng: Union[Engine, Sampler],
        run_condition: Optional[RunCondition] = None,
        trace: Optional[TraceSink] = None,
        init: Optional[str] = None,
        crossover: str = "rand1bin",
        dither: str = "none",
    ) -> None:
        super().__init__(problem, rng, run_condition, trace, init)
        if crossover not in CROSSOVERS:
            raise ValueError(f"unknown crossover: '{crossover}'. available: {list(CROSSOVERS.keys())}")
        if dither not in DITHERS:
            raise ValueError(f"unknown dither: '{dither}'. available: {list(DITHERS.keys())}")

        self.crossover = CROSSOVERS[crossover]()
        self.dither = dither
        self.name = f"DE-{self.crossover.name}{DITHERS[dither]}"

        if dither == "none":
            self.parameter_names = ("NP", "CR", "F")
            self.default_parameters = (37.0, 0.496, 0.5313)
            self.lower_bound = (4.0, 0.0, 0.0)
            self.upper_bound = (200.0, 1.0, 2.0)
            self.presets = {"hand_tuned": (300.0, 0.9, 0.5), "mesh_tuned": (50.0, 0.9, 0.6)}
        else:
            self.parameter_names = ("NP", "CR", "F_mid", "F_range")
            self.default_parameters = (9.0, 0.5749, 1.1862, 2.1832)
            self.lower_bound = (4.0, 0.0, 0.0, 0.0)
            self.upper_bound = (200.0, 1.0, 2.0, 3.0)
            if dither == "element":
                self.presets = {"hand_tuned": (50.0, 0.9, 0.5, 0.0005)}
            elif dither == "vector":
                self.presets = {"hand_tuned": (50.0, 0.9, 0.75, 0.25)}
            else:
                self.presets = {}

    def setup(self, params: np.ndarray) -> Population:
        size = round_half_away(params[0])
        if size <= self.crossover.donors:
            raise ValueError(
                f"{self.name} draws {self.crossover.donors} donors distinct from the target, "
                f"NP must round to > {self.crossover.donors}, got {params[0]}"
            )
        pop = self._allocate(size)
        pop.cr = params[1]
        n = self.problem.dimensionality
        if self.dither == "none":
            pop.w_low = pop.w_high = params[2]
        else:
            pop.w_low, pop.w_high = params[2] - params[3], params[2] + params[3]
        pop.w = np.full(n, pop.w_low)
        pop.donor_set = RandomSet(self.rng, size)
        return pop

    def begin_sweep(self, pop: Population) -> None:
        if self.dither == "generation":
            pop.w[:] = self.rng.uniform(pop.w_low, pop.w_high)

    def update_agent(self, pop: Population, j: int) -> None:
        if self.dither == "vector":
            pop.w[:] = self.rng.uniform(pop.w_low, pop.w_high)
        elif self.dither == "element":
            pop.w[:] = self.rng.uniforms(pop.w.size, pop.w_low, pop.w_high)

        pop.donor_set.reset_exclude(j)
        y = pop.x[j]
        y[:] = pop.p[j]
        self.crossover(self.rng, pop.cr, pop.w, y, pop.best_position, pop.p[:pop.size], pop.donor_set)

        bound(y, self.problem.lower_bound, self.problem.upper_bound)
        pop.improve(j, self.problem.fitness(y, pop.p_fitness[j]))
