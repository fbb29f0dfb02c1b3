# Benchmark Problems: classic test functions for minimization
# Author: Shengning Wang

import math
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from swarmops.core.problem import Problem
from swarmops.prng.sampler import Sampler


# components summed between two checks against the fitness limit
_CHUNK: int = 16


def preemptive_sum(terms: np.ndarray, limit: float = math.inf) -> float:
    """
    Sums non-negative ``terms`` chunk by chunk and stops as soon as the partial
    sum exceeds ``limit``; the partial sum is returned in that case.
    """
    if math.isinf(limit):
        return float(np.sum(terms))
    value = 0.0
    for lo in range(0, terms.size, _CHUNK):
        value += float(np.sum(terms[lo:lo + _CHUNK]))
        if value > limit:
            break
    return value


def penalty(x: np.ndarray, a: float, k: float, m: float) -> np.ndarray:
    """Boundary penalty ``k * (|x| - a) ** m`` outside ``[-a, a]``, zero inside."""
    excess = np.maximum(np.abs(x) - a, 0.0)
    return k * excess ** m


class Benchmark(Problem):
    """
    Base class of the dimension-free benchmarks: a hypercube search space,
    a separate initialization region that excludes the optimum, and optional
    displacement of the optimum by ``displace_value`` in every dimension.

    Args:
        dimensionality (int): Number of dimensions.
        displace_optimum (bool): Evaluate ``f(x - displace_value)`` instead of ``f(x)``.
    """

    name: str = "Benchmark"
    min_fitness: float = 0.0
    search_range: Tuple[float, float] = (-100.0, 100.0)
    init_range: Tuple[float, float] = (50.0, 100.0)
    displace_value: float = 0.0

    def __init__(self, dimensionality: int, displace_optimum: bool = False) -> None:
        if dimensionality < 1:
            raise ValueError(f"dimensionality must be >= 1, got {dimensionality}")
        n = dimensionality
        super().__init__(
            np.full(n, self.search_range[0]), np.full(n, self.search_range[1]),
            np.full(n, self.init_range[0]), np.full(n, self.init_range[1]),
        )
        self.displace_optimum = displace_optimum

    def displace(self, x: np.ndarray) -> np.ndarray:
        """The point the formula is evaluated at. Never modifies ``x``."""
        if self.displace_optimum:
            return np.asarray(x, dtype=float) - self.displace_value
        return np.asarray(x, dtype=float)

    def __repr__(self) -> str:
        return f"{self.name}(dimensionality={self.dimensionality}, displace_optimum={self.displace_optimum})"


# ======================================================================
# 1. Unimodal
# ======================================================================

class Sphere(Benchmark):
    """``sum(z ** 2)``."""

    name = "Sphere"
    displace_value = 25.0
    has_gradient = True

    @property
    def acceptable_fitness(self) -> float:
        return 1.0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        return preemptive_sum(z * z, limit)

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        return 2.0 * self.displace(x), 0


class Rosenbrock(Benchmark):
    """``sum(100 * (z[i+1] - z[i] ** 2) ** 2 + (z[i] - 1) ** 2)``; needs two dimensions."""

    name = "Rosenbrock"
    init_range = (15.0, 30.0)
    has_gradient = True

    def __init__(self, dimensionality: int, displace_optimum: bool = False) -> None:
        if dimensionality < 2:
            raise ValueError(f"Rosenbrock needs dimensionality >= 2, got {dimensionality}")
        super().__init__(dimensionality, displace_optimum)

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        head, tail = z[:-1], z[1:]
        return preemptive_sum(100.0 * (tail - head * head) ** 2 + (head - 1.0) ** 2, limit)

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        z = self.displace(x)
        grad = np.zeros_like(z)
        head, tail = z[:-1], z[1:]
        grad[:-1] = -400.0 * (tail - head * head) * head + 2.0 * (head - 1.0)
        grad[1:] += 200.0 * (tail - head * head)
        return grad, 0


class Schwefel12(Benchmark):
    """``sum(cumsum(z) ** 2)``."""

    name = "Schwefel1-2"
    displace_value = -25.0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        partial = np.cumsum(self.displace(x))
        return preemptive_sum(partial * partial, limit)


class Schwefel221(Benchmark):
    """``max(|z|)``."""

    name = "Schwefel2-21"
    displace_value = -25.0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        return float(np.max(np.abs(self.displace(x))))


class Schwefel222(Benchmark):
    """``sum(|z|) + prod(|z|)``."""

    name = "Schwefel2-22"
    search_range = (-10.0, 10.0)
    init_range = (5.0, 10.0)
    displace_value = -2.5

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        a = np.abs(self.displace(x))
        return float(np.sum(a) + np.prod(a))


class Step(Benchmark):
    """``sum(floor(z + 0.5) ** 2)``."""

    name = "Step"
    displace_value = 25.0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        s = np.floor(self.displace(x) + 0.5)
        return preemptive_sum(s * s, limit)


class QuarticNoise(Benchmark):
    """
    ``sum((i + 1) * z[i] ** 4) + U(0, 1)``.

    Args:
        rng (Sampler): Source of the noise term, one draw per evaluation.
    """

    name = "QuarticNoise"
    search_range = (-1.28, 1.28)
    init_range = (0.64, 1.28)
    displace_value = -0.32

    def __init__(self, dimensionality: int, displace_optimum: bool = False,
                 rng: Optional[Sampler] = None) -> None:
        if rng is None:
            raise ValueError("QuarticNoise needs a Sampler for its noise term")
        super().__init__(dimensionality, displace_optimum)
        self.rng = rng

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        weights = np.arange(1, z.size + 1, dtype=float)
        return float(np.sum(weights * z ** 4)) + self.rng.uniform()


# ======================================================================
# 2. Multimodal
# ======================================================================

class Rastrigin(Benchmark):
    """``sum(z ** 2 - 10 cos(2 pi z) + 10)``."""

    name = "Rastrigin"
    search_range = (-5.12, 5.12)
    init_range = (2.56, 5.12)
    displace_value = 1.28
    has_gradient = True

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        return preemptive_sum(z * z - 10.0 * np.cos(2.0 * np.pi * z) + 10.0, limit)

    def gradient(self, x: np.ndarray) -> Tuple[np.ndarray, int]:
        z = self.displace(x)
        return 2.0 * z + 20.0 * np.pi * np.sin(2.0 * np.pi * z), 0


class Ackley(Benchmark):
    """``-20 exp(-0.2 sqrt(mean(z ** 2))) - exp(mean(cos(2 pi z))) + 20 + e``."""

    name = "Ackley"
    search_range = (-30.0, 30.0)
    init_range = (15.0, 30.0)
    displace_value = -7.5

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        a = -20.0 * math.exp(-0.2 * math.sqrt(float(np.mean(z * z))))
        b = -math.exp(float(np.mean(np.cos(2.0 * np.pi * z))))
        # rounding can push the optimum slightly below zero
        return max(a + b + 20.0 + math.e, 0.0)


class Griewank(Benchmark):
    """``1 + sum(z ** 2) / 4000 - prod(cos(z[i] / sqrt(i + 1)))``."""

    name = "Griewank"
    search_range = (-600.0, 600.0)
    init_range = (300.0, 600.0)
    displace_value = -150.0

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        roots = np.sqrt(np.arange(1, z.size + 1, dtype=float))
        value = 1.0 + float(np.sum(z * z)) / 4000.0 - float(np.prod(np.cos(z / roots)))
        return max(value, 0.0)


class Penalized1(Benchmark):
    """
    Generalized penalized function 1 with ``y = 1 + (z + 1) / 4``:

        pi / n * (10 sin^2(pi y0) + sum((y_i - 1)^2 (1 + 10 sin^2(pi y_{i+1}))) + (y_n - 1)^2)
            + sum(u(z, 10, 100, 4))
    """

    name = "Penalized1"
    search_range = (-50.0, 50.0)
    init_range = (5.0, 50.0)

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        y = 1.0 + 0.25 * (z + 1.0)
        value = 10.0 * math.sin(math.pi * y[0]) ** 2
        value += float(np.sum((y[:-1] - 1.0) ** 2 * (1.0 + 10.0 * np.sin(np.pi * y[1:]) ** 2)))
        value += (y[-1] - 1.0) ** 2
        return math.pi / z.size * value + float(np.sum(penalty(z, 10.0, 100.0, 4.0)))


class Penalized2(Benchmark):
    """
    Generalized penalized function 2:

        0.1 * (sin^2(3 pi z0) + sum((z_i - 1)^2 (1 + sin^2(3 pi z_{i+1})))
               + (z_n - 1)^2 (1 + sin^2(2 pi z_n)))
            + sum(u(z, 5, 100, 4))
    """

    name = "Penalized2"
    search_range = (-50.0, 50.0)
    init_range = (-5.0, 50.0)

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = self.displace(x)
        value = math.sin(3.0 * math.pi * z[0]) ** 2
        value += float(np.sum((z[:-1] - 1.0) ** 2 * (1.0 + np.sin(3.0 * np.pi * z[1:]) ** 2)))
        value += (z[-1] - 1.0) ** 2 * (1.0 + math.sin(2.0 * math.pi * z[-1]) ** 2)
        return 0.1 * value + float(np.sum(penalty(z, 5.0, 100.0, 4.0)))


# ======================================================================
# 3. Fixed-dimension problems
# ======================================================================

class Tripod(Problem):
    """Two-dimensional tripod with its global minimum 0 at ``(0, -50)`` and two local traps."""

    name = "Tripod"
    min_fitness = 0.0

    def __init__(self) -> None:
        super().__init__([-100.0, -100.0], [100.0, 100.0])

    @property
    def acceptable_fitness(self) -> float:
        return 1e-4

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        x1, x2 = float(x[0]), float(x[1])
        s1 = 1.0 if x1 > 0.0 else -1.0
        s2 = 1.0 if x2 > 0.0 else -1.0
        return (
            (1.0 - s2) / 2.0 * (abs(x1) + abs(x2 + 50.0))
            + (1.0 + s2) / 2.0 * (1.0 - s1) / 2.0 * (1.0 + abs(x1 + 50.0) + abs(x2 - 50.0))
            + (1.0 + s1) / 2.0 * (2.0 + abs(x1 - 50.0) + abs(x2 - 50.0))
        )


class RosenbrockF6(Problem):
    """Shifted ten-dimensional Rosenbrock with a bias of 390, reported as ``|390 - f|``."""

    name = "RosenbrockF6"
    min_fitness = 0.0
    offset = np.array([81.0232, -48.395, 19.2316, -2.5231, 70.4338,
                       47.1774, -7.8358, -86.6693, 57.8532, -9.9533])

    def __init__(self) -> None:
        super().__init__(np.full(10, -100.0), np.full(10, 100.0))

    @property
    def acceptable_fitness(self) -> float:
        return 0.01

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        z = np.asarray(x, dtype=float) - self.offset
        head, tail = z[:-1], z[1:]
        value = 390.0 + float(np.sum(100.0 * (head * head - tail) ** 2 + (head - 1.0) ** 2))
        return abs(390.0 - value)


class GearTrain(Problem):
    """
    Gear-train design: four integer teeth counts in ``[12, 60]`` whose ratio
    should match ``1 / 6.931``. Positions are rounded to integers before
    evaluation; ``x`` itself is left untouched.
    """

    name = "GearTrain"
    min_fitness = 0.0
    optimum = np.array([19.0, 16.0, 43.0, 49.0])

    def __init__(self) -> None:
        super().__init__(np.full(4, 12.0), np.full(4, 60.0))

    @property
    def acceptable_fitness(self) -> float:
        return 2.71e-12

    @staticmethod
    def quantize(x: np.ndarray) -> np.ndarray:
        return np.round(np.asarray(x, dtype=float))

    def fitness(self, x: np.ndarray, limit: float = math.inf) -> float:
        t1, t2, t3, t4 = self.quantize(x)
        error = 1.0 / 6.931 - t1 * t2 / (t3 * t4)
        return error * error


# ======================================================================
# 4. Registry
# ======================================================================

BENCHMARKS: Dict[str, Callable[..., Benchmark]] = {
    "ackley": Ackley,
    "griewank": Griewank,
    "penalized1": Penalized1,
    "penalized2": Penalized2,
    "quartic_noise": QuarticNoise,
    "rastrigin": Rastrigin,
    "rosenbrock": Rosenbrock,
    "schwefel12": Schwefel12,
    "schwefel221": Schwefel221,
    "schwefel222": Schwefel222,
    "sphere": Sphere,
    "step": Step,
}

FIXED_PROBLEMS: Dict[str, Callable[[], Problem]] = {
    "tripod": Tripod,
    "rosenbrock_f6": RosenbrockF6,
    "gear_train": GearTrain,
}


def create_benchmark(name: str, dimensionality: Optional[int] = None, displace_optimum: bool = False,
                     rng: Optional[Sampler] = None) -> Problem:
    """
    Builds a benchmark problem by name.

    Args:
        name (str): Key of ``BENCHMARKS`` or ``FIXED_PROBLEMS``.
        dimensionality (Optional[int]): Required for ``BENCHMARKS``; must be
            ``None`` or match for fixed-dimension problems.
        displace_optimum (bool): Move the optimum away from the origin.
        rng (Optional[Sampler]): Noise source, needed by "quartic_noise".

    Returns:
        Problem: The problem instance.
    """
    key = name.lower()
    if key in FIXED_PROBLEMS:
        problem = FIXED_PROBLEMS[key]()
        if dimensionality is not None and dimensionality != problem.dimensionality:
            raise ValueError(f"{problem.name} has dimensionality {problem.dimensionality}, got {dimensionality}")
        return problem

    if key not in BENCHMARKS:
        available = list(BENCHMARKS.keys()) + list(FIXED_PROBLEMS.keys())
        raise ValueError(f"unknown benchmark: '{name}'. available: {available}")
    if dimensionality is None:
        raise ValueError(f"{name} needs a dimensionality")
    if key == "quartic_noise":
        return QuarticNoise(dimensionality, displace_optimum, rng=rng)
    return BENCHMARKS[key](dimensionality, displace_optimum)
