# swarmops/optimizers/__init__.py
"""
swarmops.optimizers: Optimization methods sharing one contract.
Includes:
    Optimizer Contract and Population Driver (base.py),
    Particle Swarm Family (pso.py, lpso.py, spso.py, psom.py, vpso.py, mol.py),
    Differential Evolution Family (de.py, de_suite.py),
    Local and Single-agent Methods (lus.py, ps.py, rnd.py, mesh.py, ged.py).
"""

from typing import Dict, Type

# Hoist from base (Optimizer Contract)
from .base import Optimizer, PopulationOptimizer, Population, round_half_away

# Hoist from the particle swarm family
from .pso import PSO
from .lpso import LPSO
from .spso import SPSO2007, calculate_parameters
from .psom import PSOM
from .vpso import VPSO, PositionMemory, spread_iterations
from .mol import MOL

# Hoist from the differential evolution family
from .de import DE
from .de_suite import DESuite, Crossover, Best1Bin, Rand1Bin, Donor1Bin, RandToBest1Bin, Best1Exp, CROSSOVERS, DITHERS

# Hoist from the local and single-agent methods
from .lus import LUS
from .ps import PS
from .rnd import RND
from .mesh import MESH
from .ged import GED


OPTIMIZERS: Dict[str, Type[Optimizer]] = {
    "pso": PSO,
    "lpso": LPSO,
    "spso2007": SPSO2007,
    "psom": PSOM,
    "vpso": VPSO,
    "mol": MOL,
    "de": DE,
    "de_suite": DESuite,
    "lus": LUS,
    "ps": PS,
    "rnd": RND,
    "mesh": MESH,
    "ged": GED,
}


def make_optimizer(name: str, problem, rng, **kwargs) -> Optimizer:
    """
    Instantiates a registered optimizer.

    Args:
        name (str): Key of ``OPTIMIZERS`` (case-insensitive).
        problem (Problem): Problem to optimize.
        rng (Engine | Sampler): Source of randomness.
        **kwargs: Forwarded to the optimizer, e.g. ``run_condition``, ``trace``,
            ``init``, ``crossover``, ``dither``.

    Returns:
        Optimizer: The optimizer instance.
    """
    key = name.lower()
    if key not in OPTIMIZERS:
        raise ValueError(f"unknown optimizer: '{name}'. available: {list(OPTIMIZERS.keys())}")
    return OPTIMIZERS[key](problem, rng, **kwargs)


__all__ = [
    # 1. Contract
    "Optimizer", "PopulationOptimizer", "Population", "round_half_away",
    # 2. Particle Swarm Family
    "PSO", "LPSO", "SPSO2007", "calculate_parameters", "PSOM",
    "VPSO", "PositionMemory", "spread_iterations", "MOL",
    # 3. Differential Evolution Family
    "DE", "DESuite", "Crossover", "Best1Bin", "Rand1Bin", "Donor1Bin", "RandToBest1Bin", "Best1Exp",
    "CROSSOVERS", "DITHERS",
    # 4. Local and Single-agent Methods
    "LUS", "PS", "RND", "MESH", "GED",
    # 5. Registry
    "OPTIMIZERS", "make_optimizer",
]
