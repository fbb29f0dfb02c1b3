# swarmops/problems/__init__.py
"""
swarmops.problems: Benchmark problems for testing and tuning optimizers.
Includes:
    Classic Test Functions (benchmarks.py).
"""

# Hoist from benchmarks (Classic Test Functions)
from .benchmarks import (
    # 1. Base and helpers
    Benchmark, preemptive_sum, penalty,
    # 2. Dimension-free benchmarks
    Sphere, Rosenbrock, Schwefel12, Schwefel221, Schwefel222, Step, QuarticNoise,
    Rastrigin, Ackley, Griewank, Penalized1, Penalized2,
    # 3. Fixed-dimension problems
    Tripod, RosenbrockF6, GearTrain,
    # 4. Registry
    BENCHMARKS, FIXED_PROBLEMS, create_benchmark,
)


__all__ = [
    # 1. Base and helpers
    "Benchmark", "preemptive_sum", "penalty",
    # 2. Dimension-free benchmarks
    "Sphere", "Rosenbrock", "Schwefel12", "Schwefel221", "Schwefel222", "Step", "QuarticNoise",
    "Rastrigin", "Ackley", "Griewank", "Penalized1", "Penalized2",
    # 3. Fixed-dimension problems
    "Tripod", "RosenbrockF6", "GearTrain",
    # 4. Registry
    "BENCHMARKS", "FIXED_PROBLEMS", "create_benchmark",
]
