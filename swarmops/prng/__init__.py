# swarmops/prng/__init__.py
"""
swarmops.prng: Bit-exact pseudo-random number engines and derived distributions.
Includes:
    Engine contract and seeding (base.py),
    Linear congruential engines (lcg.py),
    Multiply-with-carry engines (mwc.py),
    Shift-register engines (xorshift.py),
    Mersenne Twister (mersenne.py),
    NumPy-backed system engine (system.py),
    Composite engines (composite.py),
    Derived distributions (sampler.py).
"""

from typing import Dict, Type

# Hoist from base (Engine contract)
from .base import Engine, NotSeededError, UINT32_MASK, seed_words

# Hoist from the concrete engines
from .lcg import RanQD, Ran2
from .mwc import MWC256, CMWC4096
from .xorshift import XorShift, KISS
from .mersenne import MersenneTwister
from .system import RanSystem

# Hoist from composite (Composite Engines)
from .composite import SumEngine, SwitcherEngine, LockedEngine, spawn_engines

# Hoist from sampler (Derived Distributions)
from .sampler import Sampler, RandomSet


ENGINES: Dict[str, Type[Engine]] = {
    "ranqd": RanQD,
    "ran2": Ran2,
    "mwc256": MWC256,
    "cmwc4096": CMWC4096,
    "xorshift": XorShift,
    "kiss": KISS,
    "mt19937": MersenneTwister,
    "system": RanSystem,
}


__all__ = [
    # 1. Engine Contract
    "Engine", "NotSeededError", "UINT32_MASK", "seed_words",
    # 2. Concrete Engines
    "RanQD", "Ran2", "MWC256", "CMWC4096", "XorShift", "KISS", "MersenneTwister", "RanSystem",
    "ENGINES",
    # 3. Composite Engines
    "SumEngine", "SwitcherEngine", "LockedEngine", "spawn_engines",
    # 4. Derived Distributions
    "Sampler", "RandomSet",
]
