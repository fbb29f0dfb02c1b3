"""Benchmark problems: optima, displacement, gradients and the registry."""

import numpy as np
import pytest

from swarmops.optimizers import PSO
from swarmops.core import RunConditionIterations
from swarmops.problems import (
    BENCHMARKS, GearTrain, Penalized1, Penalized2, Rastrigin, Rosenbrock, RosenbrockF6, Sphere,
    Tripod, create_benchmark, preemptive_sum,
)
from swarmops.prng import MersenneTwister, Sampler


OPTIMUM = {
    "ackley": 0.0, "griewank": 0.0, "penalized1": -1.0, "penalized2": 1.0, "rastrigin": 0.0,
    "rosenbrock": 1.0, "schwefel12": 0.0, "schwefel221": 0.0, "schwefel222": 0.0, "sphere": 0.0, "step": 0.0,
}


@pytest.mark.parametrize("name", sorted(OPTIMUM))
@pytest.mark.parametrize("displace", [False, True])
def test_benchmark_optimum_is_zero(name, displace):
    problem = create_benchmark(name, 6, displace_optimum=displace)
    x = np.full(6, OPTIMUM[name] + (problem.displace_value if displace else 0.0))
    assert problem.fitness(x) == pytest.approx(0.0, abs=1e-9)
    assert problem.min_fitness == 0.0


@pytest.mark.parametrize("name", sorted(OPTIMUM))
def test_benchmark_positive_elsewhere(name):
    problem = create_benchmark(name, 6)
    assert problem.fitness(problem.upper_init) > 0.0


@pytest.mark.parametrize("name", sorted(OPTIMUM))
def test_init_region_inside_search_space(name):
    problem = create_benchmark(name, 3)
    assert np.all(problem.lower_bound <= problem.lower_init)
    assert np.all(problem.upper_init <= problem.upper_bound)


def test_displacement_moves_optimum():
    plain, moved = Sphere(3), Sphere(3, displace_optimum=True)
    x = np.full(3, 25.0)
    assert moved.fitness(x) == 0.0
    assert plain.fitness(x) == pytest.approx(3 * 625.0)
    x_copy = x.copy()
    moved.fitness(x)
    np.testing.assert_array_equal(x, x_copy)


def test_preemptive_sum_stops_above_limit():
    terms = np.ones(100)
    assert preemptive_sum(terms) == 100.0
    partial = preemptive_sum(terms, limit=20.0)
    assert 20.0 < partial < 100.0


def test_preemptive_fitness_never_beats_limit():
    problem = Sphere(64)
    x = np.full(64, 3.0)
    full = problem.fitness(x)
    assert problem.fitness(x, limit=10.0) >= 10.0
    assert problem.fitness(x, limit=full + 1.0) == pytest.approx(full)


@pytest.mark.parametrize("problem", [Sphere(4), Rosenbrock(4), Rastrigin(4)])
def test_gradients_match_finite_differences(problem):
    x = np.array([0.3, -0.7, 1.1, 0.2])
    grad, cost = problem.gradient(x)
    assert cost == 0

    h = 1e-6
    numeric = np.array([
        (problem.fitness(x + h * e) - problem.fitness(x - h * e)) / (2 * h) for e in np.eye(4)
    ])
    np.testing.assert_allclose(grad, numeric, rtol=1e-4, atol=1e-4)


def test_rosenbrock_needs_two_dimensions():
    with pytest.raises(ValueError):
        Rosenbrock(1)


def test_quartic_noise_needs_sampler():
    with pytest.raises(ValueError):
        create_benchmark("quartic_noise", 4)
    problem = create_benchmark("quartic_noise", 4, rng=Sampler(MersenneTwister(1)))
    value = problem.fitness(np.zeros(4))
    assert 0.0 < value < 1.0


def test_penalties_outside_the_box():
    assert Penalized1(2).fitness(np.array([20.0, -1.0])) > 100.0 * 10.0 ** 4
    assert Penalized2(2).fitness(np.array([1.0, 10.0])) > 100.0 * 5.0 ** 4


def test_fixed_problems():
    assert Tripod().fitness(np.array([0.0, -50.0])) == 0.0
    assert Tripod().fitness(np.array([-50.0, 50.0])) > 0.0

    f6 = RosenbrockF6()
    assert f6.dimensionality == 10
    assert f6.fitness(f6.offset + 1.0) == pytest.approx(0.0, abs=1e-9)

    gears = GearTrain()
    x = np.array([19.2, 15.8, 43.4, 48.6])
    assert gears.fitness(x) <= gears.acceptable_fitness
    np.testing.assert_array_equal(x, [19.2, 15.8, 43.4, 48.6])


def test_registry():
    assert set(BENCHMARKS) == set(OPTIMUM) | {"quartic_noise"}
    assert create_benchmark("Tripod").name == "Tripod"
    with pytest.raises(ValueError):
        create_benchmark("tripod", 3)
    with pytest.raises(ValueError):
        create_benchmark("sphere")
    with pytest.raises(ValueError):
        create_benchmark("himmelblau", 2)


def test_pso_on_displaced_benchmark():
    problem = create_benchmark("sphere", 4, displace_optimum=True)
    result = PSO(problem, MersenneTwister(4), run_condition=RunConditionIterations(4000)).optimize("hand_tuned")
    assert result.fitness < problem.acceptable_fitness
    np.testing.assert_allclose(result.parameters, 25.0, atol=1.0)
