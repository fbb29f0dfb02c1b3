# Main Script for Repeated Optimization Runs on Benchmark Problems
# Author: Shengning Wang

import argparse
import logging
from typing import Dict, Optional, Sequence

import numpy as np
from tqdm.auto import tqdm

from swarmops.apps.bench import args as bench_args
from swarmops.core import FitnessTraceMean, RunConditionFitness, RunConditionIterations
from swarmops.optimizers import make_optimizer
from swarmops.prng import Sampler
from swarmops.problems import FIXED_PROBLEMS, create_benchmark
from swarmops.utils import hue, logger, make_engine


# ======================================================================
# 1. Benchmark Pipeline
# ======================================================================

def run_benchmark(args: argparse.Namespace) -> Dict[str, float]:
    """
    Runs one optimizer repeatedly on one benchmark problem.

    All runs draw from a single engine seeded once with ``args.seed``, so the
    whole experiment is reproducible while the runs differ from each other.

    Args:
    - args (argparse.Namespace): Parsed arguments of ``get_args()``.

    Returns:
    - Dict[str, float]: Summary statistics of the final fitness over all runs
      (mean, std, min, max, median, success_rate).
    """
    if args.runs < 1:
        raise ValueError(f"runs must be >= 1, got {args.runs}")
    if args.verbose:
        hue.set_level(logging.DEBUG)

    # --- 1. Problem and Engine ---
    engine = make_engine(args.engine, args.seed)
    rng = Sampler(engine)
    problem = create_benchmark(args.problem, None if args.problem in FIXED_PROBLEMS else args.dim,
                               displace_optimum=args.displace, rng=rng)
    num_iterations = args.iterations_per_dim * problem.dimensionality

    # --- 2. Optimizer ---
    if args.fitness_below is None:
        condition = RunConditionIterations(num_iterations)
    else:
        condition = RunConditionFitness(num_iterations, args.fitness_below)
    trace = FitnessTraceMean(num_iterations, args.trace_intervals) if args.trace_file else None

    kwargs = {}
    if args.init is not None:
        kwargs["init"] = args.init
    if args.optimizer == "de_suite":
        kwargs.update(crossover=args.crossover, dither=args.dither)
    optimizer = make_optimizer(args.optimizer, problem, rng, run_condition=condition, trace=trace, **kwargs)
    parameters = args.parameters if args.parameters is not None else args.preset

    logger.info(f"{hue.b}{optimizer.name}{hue.q} on {hue.c}{problem.name}{hue.q} "
                f"(dim={hue.m}{problem.dimensionality}{hue.q}, runs={hue.m}{args.runs}{hue.q}, "
                f"iterations={hue.m}{num_iterations}{hue.q})")

    # --- 3. Repeated Runs ---
    fitness = np.zeros(args.runs)
    for i in tqdm(range(args.runs), desc=optimizer.name, leave=False):
        result = optimizer.optimize(parameters)
        fitness[i] = result.fitness
        if args.verbose:
            logger.info(f"run {hue.c}{i + 1}{hue.q}: fitness={hue.m}{result.fitness:.6e}{hue.q} "
                        f"iterations={hue.m}{result.iterations}{hue.q}")

    # --- 4. Summary ---
    summary = {
        "mean": float(np.mean(fitness)),
        "std": float(np.std(fitness)),
        "min": float(np.min(fitness)),
        "max": float(np.max(fitness)),
        "median": float(np.median(fitness)),
        "success_rate": float(np.mean(fitness <= problem.acceptable_fitness)),
    }
    logger.info(" | ".join(f"{hue.c}{k}:{hue.q} {hue.m}{v:.4e}{hue.q}" for k, v in summary.items()))

    if trace is not None:
        trace.write(args.trace_file)

    logger.info(f"{hue.g}benchmark completed.{hue.q}")
    return summary


# ======================================================================
# 2. Main Execution
# ======================================================================

def main(argv: Optional[Sequence[str]] = None) -> None:
    run_benchmark(bench_args.get_args(argv))


if __name__ == "__main__":
    main()
