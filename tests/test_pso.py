"""Particle swarm family: PSO, LPSO, SPSO2007, PSOM, VPSO and MOL."""

import math

import numpy as np
import pytest

from swarmops.core import FitnessTraceList, FunctionProblem, RunConditionIterations
from swarmops.optimizers import (
    LPSO, MOL, PSO, PSOM, SPSO2007, VPSO, PositionMemory, calculate_parameters, spread_iterations,
)
from swarmops.prng import KISS, MersenneTwister

from conftest import sphere


def budget(n):
    return RunConditionIterations(n)


# --- PSO ---


def test_pso_solves_sphere():
    problem = FunctionProblem(sphere, [(-10.0, 10.0)] * 5)
    pso = PSO(problem, MersenneTwister(42), run_condition=budget(2000))
    result = pso.optimize([20.0, 0.7, 1.5, 1.5])

    assert result.fitness < 1e-3
    assert result.iterations == 2000
    assert problem.nfev == 2000
    assert result.optimizer == "PSO"


def test_pso_trace_is_non_increasing(sphere_problem, engine):
    trace = FitnessTraceList()
    PSO(sphere_problem, engine, run_condition=budget(1000), trace=trace).optimize("hand_tuned")

    fitness = trace.fitness
    assert len(fitness) == 1000
    assert np.all(np.diff(fitness) <= 0.0)
    assert [i for i, _ in trace.records] == list(range(1000))


def test_pso_result_does_not_alias_the_swarm(sphere_problem, engine):
    result = PSO(sphere_problem, engine, run_condition=budget(200)).optimize([10.0, 0.7, 1.5, 1.5])
    x = np.array(result.parameters)
    x[:] = 100.0
    assert np.all(np.abs(result.parameters) <= 10.0)
    assert not result.parameters.flags.writeable
    assert sphere(result.parameters) == pytest.approx(result.fitness)


def test_pso_is_reproducible(sphere_problem):
    a = PSO(sphere_problem, MersenneTwister(1), run_condition=budget(500)).optimize()
    b = PSO(sphere_problem, MersenneTwister(1), run_condition=budget(500)).optimize()
    np.testing.assert_array_equal(a.parameters, b.parameters)
    assert a.fitness == b.fitness


def test_pso_budget_smaller_than_swarm(sphere_problem, engine):
    result = PSO(sphere_problem, engine, run_condition=budget(5)).optimize([20.0, 0.7, 1.5, 1.5])
    assert result.iterations == 5
    assert math.isfinite(result.fitness)


def test_pso_with_designed_start(sphere_problem, engine):
    for init in ("soa", "lhs", "quasi"):
        result = PSO(sphere_problem, engine, run_condition=budget(300), init=init).optimize("hand_tuned")
        assert result.iterations == 300
        assert np.all(np.abs(result.parameters) <= 10.0)


# --- variants ---


@pytest.mark.parametrize("cls", [LPSO, SPSO2007, PSOM, VPSO, MOL])
def test_variant_uses_exact_budget_and_stays_in_bounds(cls, sphere_problem, engine):
    trace = FitnessTraceList()
    result = cls(sphere_problem, engine, run_condition=budget(1500), trace=trace).optimize()

    assert result.iterations == 1500
    assert sphere_problem.nfev == 1500
    assert np.all(result.parameters >= -10.0) and np.all(result.parameters <= 10.0)
    assert sphere(result.parameters) == pytest.approx(result.fitness)
    assert np.all(np.diff(trace.fitness) <= 0.0)


@pytest.mark.parametrize("cls", [LPSO, SPSO2007, PSOM, VPSO, MOL])
def test_variant_improves_on_sphere(cls, sphere_problem, engine):
    result = cls(sphere_problem, engine, run_condition=budget(5000)).optimize()
    assert result.fitness < 1.0


def test_lpso_neighborhood_window(sphere_problem, engine):
    lpso = LPSO(sphere_problem, engine)
    pop = lpso.setup(np.array([5.0, 3.0, 0.7, 1.5, 1.5]))
    pop.p_fitness[:5] = [4.0, 3.0, 5.0, 0.0, 2.0]
    assert pop.neighbors == 3
    assert LPSO.neighborhood_best(pop, 0) == 1
    assert LPSO.neighborhood_best(pop, 2) == 3
    assert LPSO.neighborhood_best(pop, 4) == 4

    pop = lpso.setup(np.array([4.0, 50.0, 0.7, 1.5, 1.5]))
    assert pop.neighbors == 4


def test_lpso_per_agent_engines_reproducible(sphere_problem):
    runs = [
        LPSO(sphere_problem, MersenneTwister(3), run_condition=budget(400), agent_engine=KISS).optimize()
        for _ in range(2)
    ]
    np.testing.assert_array_equal(runs[0].parameters, runs[1].parameters)


def test_spso_parameters_follow_dimensionality(sphere_problem, engine):
    size, k, p, w, c = calculate_parameters(5)
    assert size == 14.0 and k == 3.0
    assert p == pytest.approx(1.0 - (1.0 - 1.0 / 14.0) ** 3)
    assert w == pytest.approx(0.721347, abs=1e-6)
    assert c == pytest.approx(1.193147, abs=1e-6)

    spso = SPSO2007(sphere_problem, engine)
    assert spso.default_parameters == calculate_parameters(5)
    with pytest.raises(ValueError):
        calculate_parameters(0)


def test_spso_links_include_self(sphere_problem, engine):
    spso = SPSO2007(sphere_problem, engine)
    pop = spso.setup(np.array([6.0, 3.0, 0.0, 0.7, 1.2]))
    spso.draw_links(pop)
    np.testing.assert_array_equal(pop.links, np.eye(6, dtype=bool))

    pop.link_probability = 1.0
    spso.draw_links(pop)
    assert pop.links.all()


def test_spso_rejects_bad_link_probability(sphere_problem, engine):
    with pytest.raises(ValueError):
        SPSO2007(sphere_problem, engine).optimize([10.0, 3.0, 1.5, 0.7, 1.2])


def test_vpso_helpers():
    assert spread_iterations(3) == 1
    assert spread_iterations(20) == 14

    memory = PositionMemory(3, 1)
    with pytest.raises(ValueError):
        memory.far(np.array([-10.0]), np.array([10.0]))
    for value in (0.0, 1.0, 4.0):
        memory.save(np.array([value]))
    np.testing.assert_allclose(memory.far(np.array([-10.0]), np.array([10.0])), [2.5])

    # the oldest position is overwritten: {6, 1, 4} -> widest gap 1..4, later 4..6 is narrower
    memory.save(np.array([6.0]))
    assert memory.size == 3
    np.testing.assert_allclose(memory.far(np.array([-10.0]), np.array([10.0])), [2.5])

    ties = PositionMemory(5, 1)
    for value in (0.0, 2.0, 4.0):
        ties.save(np.array([value]))
    np.testing.assert_allclose(ties.far(np.array([-10.0]), np.array([10.0])), [3.0])


class WatchedVPSO(VPSO):
    """VPSO that checks the swarm after every adaptation step."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sizes = []

    def on_iteration_end(self, pop):
        before = pop.size
        super().on_iteration_end(pop)
        size = pop.size
        self.sizes.append(size)

        if size < before:
            assert size > self.problem.dimensionality
        assert not pop.links[size:, :].any()
        assert not pop.links[:, size:].any()
        assert 0 <= pop.best_index < size
        assert np.all(np.isfinite(pop.p_fitness[:size]))
        assert np.all(np.isinf(pop.p_fitness[size:]))


def test_vpso_population_adapts(sphere_problem, engine):
    vpso = WatchedVPSO(sphere_problem, engine, run_condition=budget(3000))
    result = vpso.optimize([4.0, 0.72, 1.19])

    assert result.iterations == 3000
    assert sphere_problem.nfev == 3000
    assert max(vpso.sizes) > 4
    assert sum(a != b for a, b in zip(vpso.sizes, vpso.sizes[1:])) > 0
    assert sphere(result.parameters) == pytest.approx(result.fitness)


def test_vpso_removal_compacts_rows_and_links(sphere_problem, engine):
    vpso = VPSO(sphere_problem, engine)
    pop = vpso.setup(np.array([8.0, 0.72, 1.19]))
    pop.p_fitness[:8] = np.arange(8) + 1.0
    pop.p[:8] = np.arange(8)[:, None]
    pop.best_index = 0
    pop.order = list(range(8))
    vpso.build_ring(pop)

    vpso.remove_agent(pop, 3)

    assert pop.size == 7
    # the last agent now lives in row 3 with its ring neighbours 6 and 0
    assert pop.p_fitness[3] == 8.0
    np.testing.assert_array_equal(pop.p[3], np.full(5, 7.0))
    assert set(np.flatnonzero(pop.links[3, :7])) == {0, 3, 6}
    assert set(np.flatnonzero(pop.links[:7, 3])) == {0, 3, 6}
    assert not pop.links[7:, :].any() and not pop.links[:, 7:].any()

    with pytest.raises(ValueError):
        vpso.remove_agent(pop, 0)


def test_mol_keeps_swarm_best_only(sphere_problem, engine):
    mol = MOL(sphere_problem, engine, run_condition=budget(2000))
    assert mol.dimensionality == 3
    result = mol.optimize("sphere_rosenbrock_60000")
    assert result.fitness < 1.0


@pytest.mark.parametrize("init", ["uniform", "lhs"])
@pytest.mark.parametrize("cls", [PSO, LPSO, SPSO2007, PSOM, VPSO, MOL])
def test_any_start_design(cls, init, sphere_problem):
    result = cls(sphere_problem, MersenneTwister(1), run_condition=budget(200), init=init).optimize()
    assert result.iterations == 200
    assert np.all(np.abs(result.parameters) <= 10.0)


def test_lpso_uniform_start_uses_agent_engines(sphere_problem):
    runs = [
        LPSO(sphere_problem, MersenneTwister(5), run_condition=budget(300), init="uniform",
             agent_engine=KISS).optimize()
        for _ in range(2)
    ]
    assert runs[0].iterations == 300
    np.testing.assert_array_equal(runs[0].parameters, runs[1].parameters)
