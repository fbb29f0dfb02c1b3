"""Problem contract, results, traces, vector tools and population designs."""

import math

import numpy as np
import pytest
from scipy.optimize import Bounds

from swarmops.core import (
    FitnessPrint, FitnessTraceList, FitnessTraceMean, FunctionProblem, LogSolutions, Problem, Result,
    Solution, bound, clamp, denormalize, init_range, sample_bounded,
)
from swarmops.sampling import QuasiRandomDesign, lhs_design, make_design, soa_design

from conftest import sphere


# --- problems ---


def test_function_problem_from_pairs_and_bounds():
    a = FunctionProblem(sphere, [(-1.0, 1.0), (0.0, 2.0)])
    b = FunctionProblem(sphere, Bounds([-1.0, 0.0], [1.0, 2.0]))
    for prob in (a, b):
        assert prob.dimensionality == 2
        np.testing.assert_array_equal(prob.lower_bound, [-1.0, 0.0])
        np.testing.assert_array_equal(prob.upper_init, [1.0, 2.0])
    assert a.name == "sphere"


def test_function_problem_counts_evaluations_and_passes_args():
    prob = FunctionProblem(lambda x, a, b: a * float(np.sum(x)) + b, [(0.0, 1.0)] * 3, args=(2.0, 1.0))
    assert prob.fitness(np.ones(3)) == 7.0
    prob.fitness(np.zeros(3))
    assert prob.nfev == 2


def test_function_problem_rejects_bad_bounds():
    with pytest.raises(ValueError):
        FunctionProblem(sphere, [-1.0, 1.0])
    with pytest.raises(ValueError):
        FunctionProblem(sphere, [(1.0, -1.0)])


def test_missing_gradient_raises(sphere_problem):
    prob = FunctionProblem(sphere, [(-1.0, 1.0)])
    assert not prob.has_gradient
    with pytest.raises(NotImplementedError):
        prob.gradient(np.zeros(1))

    grad, cost = sphere_problem.gradient(np.ones(5))
    np.testing.assert_array_equal(grad, 2.0 * np.ones(5))
    assert cost == 0


def test_problem_validates_lengths():
    with pytest.raises(ValueError):
        Problem([0.0, 0.0], [1.0])
    with pytest.raises(ValueError):
        Problem([0.0], [1.0], parameter_names=["a", "b"])
    with pytest.raises(ValueError):
        Problem([0.0], [math.inf])


def test_log_solutions_keeps_best(sphere_problem):
    logged = LogSolutions(sphere_problem, capacity=2)
    for value in (3.0, 1.0, 2.0, 0.5):
        logged.fitness(np.full(5, value))
    assert [s.fitness for s in logged.log] == [5 * 0.25, 5 * 1.0]
    assert logged.dimensionality == 5

    logged.fitness(np.full(5, 0.1), limit=0.0)
    assert len(logged.log) == 2 and logged.log[0].fitness == 1.25


def test_fitness_print_forwards(sphere_problem):
    printed = FitnessPrint(sphere_problem)
    assert printed.fitness(np.ones(5)) == 5.0
    assert printed.has_gradient


# --- results and traces ---


def test_result_copies_parameters():
    x = np.array([1.0, 2.0])
    result = Result(x, 3.0, 10, optimizer="PSO")
    x[:] = 0.0
    np.testing.assert_array_equal(result.parameters, [1.0, 2.0])
    with pytest.raises(ValueError):
        result.parameters[0] = 5.0

    res = result.to_optimize_result()
    res.x[0] = 9.0
    assert result.parameters[0] == 1.0
    assert res.fun == 3.0 and res.nfev == 10 and res.success


def test_solutions_order_by_fitness():
    a, b = Solution(np.zeros(2), 1.0), Solution(np.ones(2), 2.0)
    assert a < b and sorted([b, a]) == [a, b]


def test_trace_mean_rows(tmp_path):
    trace = FitnessTraceMean(num_iterations=10, num_intervals=5)
    for run in range(2):
        for i in range(10):
            trace(i, 10.0 - i + run)
    rows = trace.rows()
    assert rows.shape == (5, 5)
    np.testing.assert_array_equal(rows[:, 0], [0, 2, 4, 6, 8])
    np.testing.assert_allclose(rows[0, 1:], [10.5, 0.5, 10.0, 11.0])

    path = tmp_path / "out" / "trace.txt"
    trace.write(str(path))
    np.testing.assert_allclose(np.loadtxt(path), rows)


def test_trace_list():
    trace = FitnessTraceList()
    trace(0, 2.0)
    trace(1, 1.0)
    np.testing.assert_array_equal(trace.fitness, [2.0, 1.0])


# --- tools ---


def test_bound_in_place():
    x = np.array([-2.0, 0.5, 3.0])
    out = bound(x, np.zeros(3), np.ones(3))
    assert out is x
    np.testing.assert_array_equal(x, [0.0, 0.5, 1.0])
    with pytest.raises(ValueError):
        bound(x, np.zeros(2), np.ones(2))


def test_clamp_zeroes_clamped_velocity():
    x, v = np.array([-2.0, 0.5, 3.0]), np.array([1.0, 1.0, 1.0])
    clamp(x, v, np.zeros(3), np.ones(3))
    np.testing.assert_array_equal(x, [0.0, 0.5, 1.0])
    np.testing.assert_array_equal(v, [0.0, 1.0, 0.0])


def test_denormalize_flushes_subnormals():
    v = np.array([1e-310, -1e-320, 1e-300, 0.5])
    denormalize(v)
    np.testing.assert_array_equal(v, [0.0, 0.0, 1e-300, 0.5])


def test_sample_bounded_stays_in_both_boxes(rng):
    lower, upper = np.full(3, -1.0), np.full(3, 1.0)
    x, r = np.array([0.9, 0.0, -0.9]), np.full(3, 0.5)
    for _ in range(200):
        y = sample_bounded(x, r, lower, upper, rng)
        assert np.all(y >= np.maximum(x - r, lower)) and np.all(y <= np.minimum(x + r, upper))


def test_init_range_spans_negative_width(rng):
    lower, upper = np.zeros(2), np.array([1.0, 4.0])
    values = np.array([init_range(rng, lower, upper) for _ in range(200)])
    assert np.all(np.abs(values) <= upper)
    assert values.min() < 0.0


# --- designs ---


def test_soa_design_uses_every_level_once(rng):
    lower, upper = np.array([0.0, -1.0]), np.array([4.0, 1.0])
    design = soa_design(rng, 5, lower, upper)
    np.testing.assert_allclose(np.sort(design[:, 0]), [0.0, 1.0, 2.0, 3.0, 4.0])
    np.testing.assert_allclose(np.sort(design[:, 1]), [-1.0, -0.5, 0.0, 0.5, 1.0])


def test_lhs_design_one_sample_per_stratum(rng):
    design = lhs_design(rng, 8, 3)
    assert design.shape == (8, 3)
    for column in design.T:
        assert sorted(np.floor(column * 8).astype(int)) == list(range(8))


def test_lhs_maximin_returns_valid_design(rng):
    design = lhs_design(rng, 6, 2, iterations=5)
    assert design.shape == (6, 2)
    assert np.all((design >= 0.0) & (design <= 1.0))


def test_quasi_random_design_inside_box():
    q = QuasiRandomDesign(3)
    assert q.phi ** 4 == pytest.approx(q.phi + 1.0)
    design = q.design(20, np.zeros(3), np.full(3, 2.0))
    assert design.shape == (20, 3)
    assert np.all((design >= 0.0) & (design <= 2.0))


@pytest.mark.parametrize("name", ["uniform", "soa", "lhs", "quasi"])
def test_make_design_shapes(rng, name):
    lower, upper = np.full(4, -5.0), np.full(4, 5.0)
    design = make_design(name, rng, 10, lower, upper)
    assert design.shape == (10, 4)
    assert np.all((design >= lower) & (design <= upper))


def test_make_design_unknown(rng):
    with pytest.raises(ValueError):
        make_design("sobol", rng, 4, np.zeros(2), np.ones(2))
