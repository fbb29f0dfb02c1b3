# Vector Tools for Bounded Search Spaces
# Author: Shengning Wang

import numpy as np

from swarmops.prng.sampler import Sampler


# smallest positive normal double; anything below it in magnitude is subnormal
_TINY: float = np.finfo(np.float64).tiny


def _check_lengths(*arrays: np.ndarray) -> None:
    sizes = {np.shape(a)[-1] for a in arrays}
    if len(sizes) != 1:
        raise ValueError(f"array lengths must be equal, got {sorted(sizes)}")


def bound(x: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """
    Clamps ``x`` into the box ``[lower, upper]`` in place.

    Args:
        x (np.ndarray): Vector to clamp. Shape: (n_dim,).
        lower (np.ndarray): Lower bounds. Shape: (n_dim,).
        upper (np.ndarray): Upper bounds. Shape: (n_dim,).

    Returns:
        np.ndarray: ``x`` itself.
    """
    _check_lengths(x, lower, upper)
    np.clip(x, lower, upper, out=x)
    return x


def clamp(x: np.ndarray, v: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> None:
    """
    Clamps a position into its box in place and zeroes the velocity of every
    clamped component.

    Args:
        x (np.ndarray): Position. Shape: (n_dim,).
        v (np.ndarray): Velocity of the same agent. Shape: (n_dim,).
        lower (np.ndarray): Lower bounds. Shape: (n_dim,).
        upper (np.ndarray): Upper bounds. Shape: (n_dim,).
    """
    _check_lengths(x, v, lower, upper)
    outside = (x < lower) | (x > upper)
    np.clip(x, lower, upper, out=x)
    v[outside] = 0.0


def denormalize(v: np.ndarray) -> np.ndarray:
    """
    Flushes subnormal components of ``v`` to zero in place.

    Subnormal arithmetic is very slow on many FPUs and velocities decaying
    towards zero produce long runs of such values.

    Returns:
        np.ndarray: ``v`` itself.
    """
    v[np.abs(v) < _TINY] = 0.0
    return v


def sample_bounded(x: np.ndarray, r: np.ndarray, lower: np.ndarray, upper: np.ndarray,
                   rng: Sampler) -> np.ndarray:
    """
    Samples uniformly from the box ``x +/- r`` intersected with ``[lower, upper]``.

    One uniform draw per dimension, in dimension order.

    Args:
        x (np.ndarray): Centre. Shape: (n_dim,).
        r (np.ndarray): Half-width per dimension. Shape: (n_dim,).
        lower (np.ndarray): Lower bounds. Shape: (n_dim,).
        upper (np.ndarray): Upper bounds. Shape: (n_dim,).
        rng (Sampler): Source of uniform draws.

    Returns:
        np.ndarray: New sample. Shape: (n_dim,).
    """
    _check_lengths(x, r, lower, upper)
    lo = np.maximum(x - r, lower)
    hi = np.minimum(x + r, upper)
    return bound(rng.uniforms(x.size, lo, hi), lower, upper)


def init_uniform(rng: Sampler, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """Uniform random vector inside ``[lower, upper]``, one draw per dimension."""
    _check_lengths(lower, upper)
    return rng.uniforms(lower.size, lower, upper)


def init_range(rng: Sampler, lower: np.ndarray, upper: np.ndarray) -> np.ndarray:
    """Uniform random vector inside ``[-d, d]`` with ``d = |upper - lower|``, e.g. a velocity."""
    _check_lengths(lower, upper)
    d = np.abs(upper - lower)
    return rng.uniforms(lower.size, -d, d)
