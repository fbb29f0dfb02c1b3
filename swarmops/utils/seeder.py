# Reproducibility utilities for optimization experiments
# Author: Shengning Wang

from typing import Optional

from swarmops.prng import ENGINES, Engine, RanSystem, Sampler
from swarmops.utils.hue_logger import hue, logger


def make_engine(name: str = "mt19937", seed: Optional[int] = 42) -> Engine:
    """
    Creates and seeds a named engine so that a run can be repeated exactly.

    Args:
        name (str): Key of ``swarmops.prng.ENGINES``, e.g. "mt19937", "kiss", "ranqd".
        seed (Optional[int]): Integer seed. ``None`` seeds from operating-system entropy.

    Returns:
        Engine: A ready engine.

    Raises:
        ValueError: If ``name`` is not a registered engine.
    """
    if name not in ENGINES:
        raise ValueError(f"unknown engine: '{name}'. available: {list(ENGINES.keys())}")

    engine = ENGINES[name]()
    if seed is None:
        engine.seed(RanSystem())
        logger.info(f"engine {hue.c}{name}{hue.q} seeded from {hue.m}system entropy{hue.q}")
    else:
        engine.seed(seed)
        logger.info(f"engine {hue.c}{name}{hue.q} seeded with {hue.m}{seed}{hue.q}")
    return engine


def make_sampler(name: str = "mt19937", seed: Optional[int] = 42) -> Sampler:
    """Shorthand for ``Sampler(make_engine(name, seed))``."""
    return Sampler(make_engine(name, seed))
