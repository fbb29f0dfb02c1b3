"""Differential evolution: steady-state DE and the crossover/dither suite."""

import numpy as np
import pytest

from swarmops.core import FitnessTraceList, FunctionProblem, RunConditionIterations
from swarmops.optimizers import CROSSOVERS, DE, DITHERS, Crossover, DESuite, Donor1Bin, Rand1Bin
from swarmops.prng import MersenneTwister, RandomSet, Sampler

from conftest import sphere


class BoxWatch:
    """Sphere that records whether every evaluated point lay inside the box."""

    def __init__(self, lower, upper):
        self.lower, self.upper = lower, upper
        self.outside = 0

    def __call__(self, x):
        if np.any(x < self.lower) or np.any(x > self.upper):
            self.outside += 1
        return sphere(x)


def watched_problem(n=4, low=-5.0, high=5.0):
    watch = BoxWatch(low, high)
    return FunctionProblem(watch, [(low, high)] * n, name="watched"), watch


def test_de_candidates_stay_in_bounds():
    problem, watch = watched_problem()
    # large F throws mutants far outside before clamping
    result = DE(problem, MersenneTwister(5), run_condition=RunConditionIterations(2000)).optimize([20.0, 0.9, 2.0])
    assert watch.outside == 0
    assert result.iterations == 2000
    assert np.all(np.abs(result.parameters) <= 5.0)


def test_de_improves_and_trace_monotone(sphere_problem, engine):
    trace = FitnessTraceList()
    result = DE(sphere_problem, engine, run_condition=RunConditionIterations(4000), trace=trace).optimize("hand_tuned")
    assert result.fitness < 1.0
    assert np.all(np.diff(trace.fitness) <= 0.0)
    assert sphere(result.parameters) == pytest.approx(result.fitness)


def test_de_needs_two_agents(sphere_problem, engine):
    with pytest.raises(ValueError):
        DE(sphere_problem, engine).optimize([1.0, 0.9, 0.5])
    assert sphere_problem.nfev == 0


@pytest.mark.parametrize("crossover", list(CROSSOVERS.keys()))
@pytest.mark.parametrize("dither", list(DITHERS.keys()))
def test_suite_variants_run_in_bounds(crossover, dither):
    problem, watch = watched_problem()
    optimizer = DESuite(problem, MersenneTwister(11), run_condition=RunConditionIterations(600),
                        crossover=crossover, dither=dither)
    result = optimizer.optimize([12.0, 0.9, 0.6] if dither == "none" else [12.0, 0.9, 0.6, 0.2])

    assert watch.outside == 0
    assert result.iterations == 600
    assert optimizer.dimensionality == (3 if dither == "none" else 4)


def test_suite_names():
    problem, _ = watched_problem()
    rng = MersenneTwister(1)
    assert DESuite(problem, rng).name == "DE-Rand1Bin"
    assert DESuite(problem, rng, crossover="best1bin", dither="element").name == "DE-Best1Bin-Jitter"
    assert DESuite(problem, rng, crossover="best1exp", dither="generation").name == "DE-Best1Exp-GenDither"
    assert DESuite(problem, rng, crossover="randtobest1bin", dither="vector").name == "DE-RandToBest1Bin-VecDither"


def test_suite_rejects_unknown_strategy():
    problem, _ = watched_problem()
    with pytest.raises(ValueError):
        DESuite(problem, MersenneTwister(1), crossover="current2rand")
    with pytest.raises(ValueError):
        DESuite(problem, MersenneTwister(1), dither="sometimes")


def test_suite_population_must_exceed_donors():
    problem, _ = watched_problem()
    with pytest.raises(ValueError):
        DESuite(problem, MersenneTwister(1), crossover="donor1bin").optimize([3.0, 0.9, 0.5])
    with pytest.raises(ValueError):
        DESuite(problem, MersenneTwister(1), crossover="best1bin").optimize([2.0, 0.9, 0.5])
    assert problem.nfev == 0


def test_binomial_mask_always_crosses_one_dimension():
    rng = Sampler(MersenneTwister(2))
    for _ in range(200):
        assert Crossover.binomial(rng, 0.0, 6).sum() == 1
    assert Crossover.binomial(rng, 1.0, 6).all()


def test_suite_solves_sphere(sphere_problem, engine):
    result = DESuite(sphere_problem, engine, run_condition=RunConditionIterations(5000)).optimize([20.0, 0.9, 0.5])
    assert result.fitness < 1.0


def crossover_trials(crossover, bases):
    """Trial vectors for target 0 built from the same draws against each base ``g``."""
    agents = np.array([[1.0, 1.0], [2.0, 2.0], [0.0, 0.0], [5.0, -5.0]])
    trials = []
    for g in bases:
        rng = Sampler(MersenneTwister(9))
        donor_set = RandomSet(rng, len(agents))
        donor_set.reset_exclude(0)
        y = agents[0].copy()
        crossover(rng, 1.0, np.full(2, 0.5), y, np.asarray(g, dtype=float), agents, donor_set)
        trials.append(y)
    return trials


def test_rand1bin_builds_on_swarm_best():
    assert Rand1Bin.donors == 2
    high, low = crossover_trials(Rand1Bin(), [[100.0, 100.0], [-100.0, -100.0]])
    # identical donors in both runs, so the trials differ exactly by the shift of g
    np.testing.assert_allclose(high - low, [200.0, 200.0])


def test_donor1bin_ignores_swarm_best():
    assert Donor1Bin.donors == 3
    high, low = crossover_trials(Donor1Bin(), [[100.0, 100.0], [-100.0, -100.0]])
    np.testing.assert_array_equal(high, low)


def test_default_suite_matches_canonical_rule():
    problem, _ = watched_problem()
    suite = DESuite(problem, MersenneTwister(1))
    assert isinstance(suite.crossover, Rand1Bin)
    assert suite.name == "DE-Rand1Bin"
