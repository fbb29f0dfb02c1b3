# Args Config for the Benchmark Runner
# Author: Shengning Wang

import argparse
from typing import Optional, Sequence

from swarmops.optimizers import CROSSOVERS, DITHERS, OPTIMIZERS
from swarmops.prng import ENGINES
from swarmops.problems import BENCHMARKS, FIXED_PROBLEMS
from swarmops.sampling import DESIGNS


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for repeated benchmark runs.

    Args:
    - argv (Optional[Sequence[str]]): Argument list; ``sys.argv[1:]`` when None.

    Returns:
    - argparse.Namespace: The parsed arguments object.
    """
    parser = argparse.ArgumentParser(description="SwarmOps: repeated optimization runs on benchmark problems")

    # ----------------------------------------------------------------------
    # 1. General Settings
    # ----------------------------------------------------------------------
    parser.add_argument("--seed", type=int, default=42,
                        help="Seed of the master engine; every run continues its stream.")
    parser.add_argument("--engine", type=str, default="mt19937", choices=list(ENGINES.keys()),
                        help="Pseudo-random number engine.")
    parser.add_argument("--trace_file", type=str, default=None,
                        help="Write the mean fitness trace over all runs to this file.")
    parser.add_argument("--verbose", action="store_true",
                        help="Log every run's result and the optimizer's debug messages.")

    # ----------------------------------------------------------------------
    # 2. Problem Configuration
    # ----------------------------------------------------------------------
    parser.add_argument("--problem", type=str, default="sphere",
                        choices=list(BENCHMARKS.keys()) + list(FIXED_PROBLEMS.keys()),
                        help="Benchmark problem to minimize.")
    parser.add_argument("--dim", type=int, default=30,
                        help="Dimensionality of the dimension-free benchmarks.")
    parser.add_argument("--displace", action="store_true",
                        help="Move the benchmark optimum away from the origin.")

    # ----------------------------------------------------------------------
    # 3. Optimizer Configuration
    # ----------------------------------------------------------------------
    parser.add_argument("--optimizer", type=str, default="pso", choices=list(OPTIMIZERS.keys()),
                        help="Optimization method.")
    parser.add_argument("--preset", type=str, default=None,
                        help="Named control-parameter preset of the optimizer.")
    parser.add_argument("--parameters", type=float, nargs="+", default=None,
                        help="Explicit control parameters; overrides --preset.")
    parser.add_argument("--init", type=str, default=None, choices=list(DESIGNS.keys()),
                        help="Initial population design of population methods.")
    parser.add_argument("--crossover", type=str, default="rand1bin", choices=list(CROSSOVERS.keys()),
                        help="Crossover strategy of de_suite.")
    parser.add_argument("--dither", type=str, default="none", choices=list(DITHERS.keys()),
                        help="Dither variant of de_suite.")

    # ----------------------------------------------------------------------
    # 4. Budget
    # ----------------------------------------------------------------------
    parser.add_argument("--runs", type=int, default=50,
                        help="Number of repeated optimization runs.")
    parser.add_argument("--iterations_per_dim", type=int, default=20000,
                        help="Fitness evaluations per run, per problem dimension.")
    parser.add_argument("--fitness_below", type=float, default=None,
                        help="Stop a run early once its best fitness drops below this value.")
    parser.add_argument("--trace_intervals", type=int, default=100,
                        help="Number of checkpoints of the mean fitness trace.")

    args = parser.parse_args(argv)
    return args
