"""Optimizer contract and the population storage behind the generic driver."""

import math

import numpy as np
import pytest

from swarmops.core import RunConditionIterations
from swarmops.optimizers import OPTIMIZERS, PSO, Population, make_optimizer, round_half_away


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2
    assert round_half_away(0.5) == 1


def test_population_bests_move_on_strict_improvement():
    pop = Population(3, 2)
    assert pop.best_fitness == math.inf

    for j, f in enumerate([5.0, 3.0, 3.0]):
        pop.x[j] = j
        pop.initialize(j, f)
    assert pop.best_index == 1

    pop.x[2] = 9.0
    assert not pop.improve(2, 3.0)
    assert pop.best_index == 1
    assert pop.improve(2, 1.0)
    assert pop.best_index == 2
    np.testing.assert_array_equal(pop.best_position, [9.0, 9.0])


def test_population_swap_remove_moves_last_row():
    pop = Population(3, 1, capacity=5)
    for j, f in enumerate([1.0, 5.0, 0.5]):
        pop.x[j] = 10.0 * j
        pop.initialize(j, f)
    assert pop.best_index == 2

    assert pop.swap_remove(1) == 2
    assert pop.size == 2
    assert pop.best_index == 1
    np.testing.assert_array_equal(pop.p[1], [20.0])
    assert pop.p_fitness[2] == math.inf

    with pytest.raises(ValueError):
        pop.swap_remove(1)


def test_population_validates_sizes():
    with pytest.raises(ValueError):
        Population(0, 2)
    with pytest.raises(ValueError):
        Population(3, 2, capacity=2)
    assert Population(2, 2, velocity=False).v is None


def test_resolve_parameters(sphere_problem, engine):
    pso = PSO(sphere_problem, engine)
    np.testing.assert_array_equal(pso.resolve_parameters(), pso.default_parameters)
    np.testing.assert_array_equal(pso.resolve_parameters("hand_tuned"), pso.presets["hand_tuned"])
    assert pso.dimensionality == 4

    with pytest.raises(ValueError):
        pso.resolve_parameters("nope")
    with pytest.raises(ValueError):
        pso.optimize([20.0, 0.7, 1.5])


def test_degenerate_population_evaluates_nothing(sphere_problem, engine):
    pso = PSO(sphere_problem, engine)
    with pytest.raises(ValueError):
        pso.optimize([0.0, 0.7, 1.5, 1.5])
    assert sphere_problem.nfev == 0


def test_rng_must_be_engine_or_sampler(sphere_problem):
    with pytest.raises(ValueError):
        PSO(sphere_problem, 42)


def test_default_run_condition_scales_with_dimension(sphere_problem, engine):
    pso = PSO(sphere_problem, engine)
    assert isinstance(pso.run_condition, RunConditionIterations)
    assert pso.run_condition.max_iterations == 5000


def test_unknown_init_design(sphere_problem, engine):
    with pytest.raises(ValueError):
        PSO(sphere_problem, engine, init="sobol")


def test_registry(sphere_problem, engine):
    assert isinstance(make_optimizer("PSO", sphere_problem, engine), PSO)
    assert set(OPTIMIZERS) >= {"pso", "lpso", "spso2007", "psom", "vpso", "mol", "de", "de_suite",
                               "lus", "ps", "rnd", "mesh", "ged"}
    with pytest.raises(ValueError):
        make_optimizer("mts", sphere_problem, engine)


def test_fitness_limit_stops_early(sphere_problem, engine):
    pso = PSO(sphere_problem, engine, run_condition=RunConditionIterations(5000))
    result = pso.optimize([20.0, 0.7, 1.5, 1.5], fitness_limit=1.0)
    assert result.fitness < 1.0
    assert result.iterations < 5000


def test_population_declares_start_design(sphere_problem, engine):
    assert Population(3, 2).design is None
    assert PSO(sphere_problem, engine).setup(np.array([4.0, 0.7, 1.5, 1.5])).design is None
    designed = PSO(sphere_problem, engine, init="soa").setup(np.array([4.0, 0.7, 1.5, 1.5])).design
    assert designed.shape == (4, 5)
