# Population Designs: uniform, SOA, Latin hypercube and quasi-random starts
# Author: Shengning Wang

from typing import Callable, Dict, Optional

import numpy as np
from scipy.spatial.distance import pdist

from swarmops.prng.sampler import Sampler


def uniform_design(rng: Sampler, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """
    Independent uniform samples inside the box, drawn row by row.

    Returns:
    - np.ndarray: Design matrix (num_samples, num_dimensions)
    """
    _check_design(num_samples, lower, upper)
    return np.array([rng.uniforms(lower.size, lower, upper) for _ in range(num_samples)]).reshape(num_samples, lower.size)


def soa_design(rng: Sampler, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """
    Generate a Sampling-On-Axis design: per dimension the samples take the
    evenly spaced levels ``lower + (upper - lower) * k / (M - 1)`` in random order

    Args:
    - rng (Sampler): Source of the shuffles
    - num_samples (int): Number of samples M
    - lower (np.ndarray): Lower bounds (num_dimensions,)
    - upper (np.ndarray): Upper bounds (num_dimensions,)

    Returns:
    - np.ndarray: Design matrix (num_samples, num_dimensions)
    """
    _check_design(num_samples, lower, upper)
    design = np.zeros([num_samples, lower.size])

    if num_samples == 1:
        design[0] = 0.5 * (lower + upper)
        return design

    for dimension in range(lower.size):
        levels = list(range(num_samples))
        rng.shuffle(levels)
        design[:, dimension] = np.asarray(levels, dtype=float) / (num_samples - 1)

    return lower + (upper - lower) * design


def lhs_design(rng: Sampler, num_samples: int, num_dimensions: int, iterations: Optional[int] = None) -> np.ndarray:
    """
    Generate a latin hypercube sampling design with optional maximin optimization

    Args:
    - rng (Sampler): Source of permutations and jitter
    - num_samples (int): Number of samples to generate
    - num_dimensions (int): Number of dimensions for each sample
    - iterations (Optional[int]): Number of candidate designs for maximin selection.
                                  If None, returns one basic LHS design.

    Returns:
    - np.ndarray: The design matrix (num_samples, num_dimensions) normalized to [0, 1]
    """
    if num_samples < 1:
        raise ValueError(f"num_samples must be >= 1, got {num_samples}")
    if num_dimensions < 1:
        raise ValueError(f"num_dimensions must be >= 1, got {num_dimensions}")

    def generate_basic_lhs() -> np.ndarray:
        design = np.zeros([num_samples, num_dimensions])

        # one stratum per sample in every dimension
        for dimension in range(num_dimensions):
            strata = list(range(num_samples))
            rng.shuffle(strata)
            design[:, dimension] = np.asarray(strata, dtype=float) + rng.uniforms(num_samples)

        return design / num_samples

    if iterations is None or num_samples < 2:
        return generate_basic_lhs()

    # Maximin selection
    best_design = None
    best_min_distance = -np.inf

    for _ in range(iterations):
        current_design = generate_basic_lhs()
        current_min_distance = np.min(pdist(current_design))

        if current_min_distance > best_min_distance:
            best_min_distance = current_min_distance
            best_design = current_design

    return best_design


class QuasiRandomDesign:
    """
    Additive-recurrence low-discrepancy sequence with generalized golden-ratio steps.

    Sample ``n`` has coordinates ``(seed + alpha_i * (n + 1)) mod 1`` mapped
    into the box, where ``alpha_i = (1 / phi) ** (i + 1) mod 1`` and ``phi`` is
    the unique positive root of ``x ** (d + 1) = x + 1``.
    """

    def __init__(self, dimensions: int, seed: float = 0.5) -> None:
        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {dimensions}")
        x = 2.0
        for _ in range(30):
            x = (1.0 + x) ** (1.0 / (dimensions + 1))
        self.phi = x
        self.seed = seed
        self.alpha = np.array([(1.0 / self.phi) ** (i + 1) % 1.0 for i in range(dimensions)])

    def point(self, n: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
        """The ``n``-th point of the sequence inside ``[lower, upper]``."""
        if lower.size != self.alpha.size:
            raise ValueError(f"bounds must have {self.alpha.size} dimensions, got {lower.size}")
        return lower + (upper - lower) * ((self.seed + self.alpha * (n + 1)) % 1.0)

    def design(self, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
        """The first ``num_samples`` points. Shape: (num_samples, num_dimensions)."""
        _check_design(num_samples, lower, upper)
        return np.array([self.point(n, lower, upper) for n in range(num_samples)]).reshape(num_samples, lower.size)


# ======================================================================
# Dispatch
# ======================================================================

def _lhs_box(rng: Sampler, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    _check_design(num_samples, lower, upper)
    return lower + (upper - lower) * lhs_design(rng, num_samples, lower.size)


def _quasi_box(rng: Sampler, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    return QuasiRandomDesign(lower.size, seed=rng.uniform()).design(num_samples, lower, upper)


DESIGNS: Dict[str, Callable[[Sampler, int, np.ndarray, np.ndarray], np.ndarray]] = {
    "uniform": uniform_design,
    "soa": soa_design,
    "lhs": _lhs_box,
    "quasi": _quasi_box,
}


def make_design(name: str, rng: Sampler, num_samples: int, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """
    Builds an initial population with the named design.

    Args:
    - name (str): One of "uniform", "soa", "lhs", "quasi"
    - rng (Sampler): Source of randomness
    - num_samples (int): Number of agents
    - lower, upper (np.ndarray): Initialization box (num_dimensions,)

    Returns:
    - np.ndarray: Positions (num_samples, num_dimensions)
    """
    if name not in DESIGNS:
        raise ValueError(f"unknown design: '{name}'. available: {list(DESIGNS.keys())}")
    return DESIGNS[name](rng, num_samples, lower, upper)


def _check_design(num_samples: int, lower: np.ndarray, upper: np.ndarray) -> None:
    if num_samples < 1:
        raise ValueError(f"num_samples must be >= 1, got {num_samples}")
    if lower.shape != upper.shape:
        raise ValueError("lower and upper bounds must have the same shape")
