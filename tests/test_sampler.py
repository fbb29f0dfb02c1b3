"""Derived distributions and draws without replacement."""

import math

import numpy as np
import pytest

from swarmops.prng import ENGINES, Engine, MersenneTwister, RandomSet, Sampler, UINT32_MASK


class ConstantEngine(Engine):
    """Always returns the seed word."""

    name = "Constant"
    seed_length = 1

    def _seed_words(self, words):
        self._value = words[0]

    def _next(self):
        return self._value


@pytest.mark.parametrize("name", list(ENGINES.keys()))
def test_uniform_strictly_inside_unit_interval(name):
    rng = Sampler(ENGINES[name](2024))
    values = np.array([rng.uniform() for _ in range(5000)])
    assert np.all(values > 0.0) and np.all(values < 1.0)


def test_uniform_extremes_never_reach_the_ends():
    assert 0.0 < Sampler(ConstantEngine(0)).uniform() < 1.0
    assert 0.0 < Sampler(ConstantEngine([UINT32_MASK])).uniform() < 1.0


def test_uniform_scaled_and_vectorized(rng):
    x = rng.uniform(-3.0, 2.0)
    assert -3.0 < x < 2.0

    lower, upper = np.array([0.0, 10.0, -1.0]), np.array([1.0, 20.0, 1.0])
    values = rng.uniforms(3, lower, upper)
    assert values.shape == (3,)
    assert np.all(values > lower) and np.all(values < upper)


def test_uniforms_consume_the_same_stream_as_uniform():
    a, b = Sampler(MersenneTwister(8)), Sampler(MersenneTwister(8))
    np.testing.assert_allclose(a.uniforms(10), [b.uniform() for _ in range(10)])


def test_index_range(rng):
    for n in (2, 3, 7, 100):
        values = [rng.index(n) for _ in range(2000)]
        assert min(values) >= 0 and max(values) < n
    assert all(rng.index(1) == 0 for _ in range(100))


def test_index_rejects_empty_range(rng):
    with pytest.raises(ValueError):
        rng.index(0)


def test_index2_distinct(rng):
    for n in (2, 3, 10):
        for _ in range(2000):
            i, j = rng.index2(n)
            assert i != j
            assert 0 <= i < n and 0 <= j < n
    with pytest.raises(ValueError):
        rng.index2(1)


def test_boolean(rng):
    with pytest.raises(ValueError):
        rng.boolean(1.5)
    assert not any(rng.boolean(0.0) for _ in range(500))
    share = np.mean([rng.boolean(0.5) for _ in range(10000)])
    assert abs(share - 0.5) < 0.03


def test_bytes(rng):
    data = rng.bytes(64)
    assert isinstance(data, bytes) and len(data) == 64
    assert Sampler(ConstantEngine([UINT32_MASK])).byte() == 255


def test_gaussian_pairs_share_one_disk_sample(rng):
    assert not rng.gauss_ready
    rng.gaussian()
    assert rng.gauss_ready
    rng.gaussian()
    assert not rng.gauss_ready


def test_gaussian_moments(rng):
    values = np.array([rng.gaussian() for _ in range(20000)])
    assert abs(values.mean()) < 0.05
    assert abs(values.var() - 1.0) < 0.05

    shifted = np.array([rng.gaussian(5.0, 0.1) for _ in range(2000)])
    assert abs(shifted.mean() - 5.0) < 0.02


def test_points_on_spheres(rng):
    x, y, s = rng.disk()
    assert 0.0 < s < 1.0 and math.isclose(s, x * x + y * y)
    assert math.isclose(math.hypot(*rng.circle()), 1.0)
    assert math.isclose(np.linalg.norm(rng.sphere3()), 1.0)
    assert math.isclose(np.linalg.norm(rng.sphere4()), 1.0)
    assert math.isclose(np.linalg.norm(rng.sphere(7, radius=2.5)), 2.5)


def test_shuffle_is_a_permutation(rng):
    items = list(range(50))
    rng.shuffle(items)
    assert sorted(items) == list(range(50))
    assert items != list(range(50))


def test_random_set_without_replacement(rng):
    rs = RandomSet(rng, 6)
    rs.reset_exclude(2)
    assert len(rs) == 5
    drawn = [rs.draw() for _ in range(5)]
    assert sorted(drawn) == [0, 1, 3, 4, 5]
    with pytest.raises(ValueError):
        rs.draw()

    rs.reset()
    assert len(rs) == 6
    with pytest.raises(ValueError):
        rs.reset_exclude(6)


def test_sampler_requires_engine():
    with pytest.raises(ValueError):
        Sampler(42)
