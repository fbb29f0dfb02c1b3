# Derived Distributions over any Engine
# Author: Shengning Wang

import math
from typing import Tuple

import numpy as np

from swarmops.prng.base import Engine


class Sampler:
    """
    Uniform, discrete, Gaussian and geometric distributions derived from one engine.

    Everything is computed from ``engine.draw()`` and ``engine.max_value`` alone.
    Indices come from the uniform real (never from a bit mask) and bytes from
    the most-significant bits, because several engines have weak low bits.

    The Gaussian generator caches the second value of each polar-method pair,
    so a sampler must not be shared between threads even when its engine is
    wrapped in a ``LockedEngine``.

    Attributes:
        engine (Engine): The underlying bit generator.
    """

    def __init__(self, engine: Engine) -> None:
        """
        Args:
            engine (Engine): Engine supplying raw values.
        """
        if not isinstance(engine, Engine):
            raise ValueError(f"engine must be an Engine, got {type(engine).__name__}")
        self.engine = engine
        self._denominator = float(engine.max_value) + 2.0
        self._byte_shift = engine.max_value.bit_length() - 8

        self._gauss_ready = False
        self._gauss_value = 0.0

    @property
    def name(self) -> str:
        return self.engine.name

    # ======================================================================
    # Uniform
    # ======================================================================

    def uniform(self, low: float = 0.0, high: float = 1.0) -> float:
        """
        Draws a real from the open interval (low, high).

        The unit value is ``(draw() + 1) / (max_value + 2)`` which can never be
        exactly 0 or 1.

        Args:
            low (float): Lower end of the interval.
            high (float): Upper end of the interval.

        Returns:
            float: ``low + u * (high - low)``.
        """
        u = (self.engine.draw() + 1.0) / self._denominator
        if low == 0.0 and high == 1.0:
            return u
        return low + u * (high - low)

    def uniforms(self, size: int, low=0.0, high=1.0) -> np.ndarray:
        """
        Draws ``size`` consecutive uniform reals.

        Args:
            size (int): Number of values.
            low (float | np.ndarray): Lower end(s), broadcast against the result.
            high (float | np.ndarray): Upper end(s), broadcast against the result.

        Returns:
            np.ndarray: Values of shape (size,), dtype: float64.
        """
        raw = self.engine.draw_many(size).astype(np.float64)
        u = (raw + 1.0) / self._denominator
        return low + u * (np.asarray(high, dtype=float) - low)

    def boolean(self, p: float = 0.5) -> bool:
        """
        Returns True with probability ``p``, using an integer threshold on the raw draw.

        Raises:
            ValueError: If ``p`` is outside [0, 1].
        """
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"p must be in [0, 1], got {p}")
        return self.engine.draw() < self.engine.max_value * p

    def byte(self) -> int:
        """Returns the 8 most-significant bits of one raw draw."""
        return self.engine.draw() >> self._byte_shift

    def bytes(self, length: int) -> bytes:
        """Returns ``length`` bytes, one raw draw per byte."""
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        return bytes(self.byte() for _ in range(length))

    # ======================================================================
    # Indices
    # ======================================================================

    def index(self, n: int) -> int:
        """
        Draws a uniform integer from [0, n).

        Raises:
            ValueError: If ``n`` < 1.
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        # rounding in u * n can reach n for huge n
        return min(int(self.uniform() * n), n - 1)

    def index2(self, n: int) -> Tuple[int, int]:
        """
        Draws two distinct uniform integers from [0, n), retrying on collision.

        Raises:
            ValueError: If ``n`` < 2, since no distinct pair exists.
        """
        if n < 2:
            raise ValueError(f"n must be >= 2 to draw two distinct indices, got {n}")
        i1 = self.index(n)
        i2 = self.index(n)
        while i2 == i1:
            i2 = self.index(n)
        return i1, i2

    def shuffle(self, array) -> None:
        """Shuffles a mutable sequence in place (Fisher-Yates)."""
        for i in range(len(array) - 1, 0, -1):
            j = self.index(i + 1)
            array[i], array[j] = array[j], array[i]

    # ======================================================================
    # Gaussian and geometric samples
    # ======================================================================

    def gaussian(self, mean: float = 0.0, deviation: float = 1.0) -> float:
        """
        Draws from a normal distribution with the polar method of Marsaglia.

        One point in the unit disk yields two independent values; the second is
        cached and returned by the next call.

        Args:
            mean (float): Mean of the distribution.
            deviation (float): Standard deviation.

        Returns:
            float: ``deviation * z + mean``.
        """
        if self._gauss_ready:
            self._gauss_ready = False
            z = self._gauss_value
        else:
            v1, v2, rsq = self.disk()
            fac = math.sqrt(-2.0 * math.log(rsq) / rsq)
            self._gauss_value = v1 * fac
            self._gauss_ready = True
            z = v2 * fac
        return deviation * z + mean

    @property
    def gauss_ready(self) -> bool:
        """True when the next ``gaussian()`` call returns the cached half of a pair."""
        return self._gauss_ready

    def disk(self) -> Tuple[float, float, float]:
        """
        Rejection-samples a uniform point strictly inside the unit disk.

        Returns:
            Tuple[float, float, float]: ``(x, y, s)`` with ``s = x^2 + y^2`` in (0, 1).
        """
        while True:
            x = 2.0 * self.uniform() - 1.0
            y = 2.0 * self.uniform() - 1.0
            s = x * x + y * y
            if 0.0 < s < 1.0:
                return x, y, s

    def circle(self) -> Tuple[float, float]:
        """Uniform point on the unit circle."""
        v1, v2, s = self.disk()
        return (v1 * v1 - v2 * v2) / s, 2.0 * v1 * v2 / s

    def sphere3(self) -> np.ndarray:
        """Uniform point on the surface of the unit sphere in 3 dimensions (Marsaglia 1972)."""
        v1, v2, s = self.disk()
        a = 2.0 * math.sqrt(1.0 - s)
        return np.array([v1 * a, v2 * a, 1.0 - 2.0 * s])

    def sphere4(self) -> np.ndarray:
        """Uniform point on the surface of the unit sphere in 4 dimensions (Marsaglia 1972)."""
        v1, v2, s1 = self.disk()
        v3, v4, s2 = self.disk()
        a = math.sqrt((1.0 - s1) / s2)
        return np.array([v1, v2, v3 * a, v4 * a])

    def sphere(self, n: int, radius: float = 1.0) -> np.ndarray:
        """
        Uniform point on the surface of an n-dimensional sphere.

        Args:
            n (int): Number of dimensions, >= 1.
            radius (float): Sphere radius.

        Returns:
            np.ndarray: Point of shape (n,), Euclidean norm ``radius``.
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        x = np.array([self.gaussian() for _ in range(n)])
        return x * (radius / math.sqrt(float(np.sum(x * x))))


class RandomSet:
    """
    Draws indices ``0..size-1`` without replacement.

    Used by differential evolution to pick donor agents distinct from each other
    and from the target agent.
    """

    def __init__(self, sampler: Sampler, size: int) -> None:
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        self.sampler = sampler
        self.capacity = size
        self.reset()

    def reset(self) -> None:
        """Refills the set with every index."""
        self._members = list(range(self.capacity))

    def reset_exclude(self, index: int) -> None:
        """Refills the set with every index except ``index``."""
        if not 0 <= index < self.capacity:
            raise ValueError(f"index must be in [0, {self.capacity}), got {index}")
        self.reset()
        self._members[index] = self._members[-1]
        self._members.pop()

    def draw(self) -> int:
        """
        Removes and returns a random member.

        Raises:
            ValueError: If the set is empty.
        """
        if not self._members:
            raise ValueError("cannot draw from an empty set")
        k = self.sampler.index(len(self._members))
        value = self._members[k]
        self._members[k] = self._members[-1]
        self._members.pop()
        return value

    def __len__(self) -> int:
        return len(self._members)
