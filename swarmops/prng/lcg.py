# Linear Congruential Engines: RanQD and Ran2
# Author: Shengning Wang

from dataclasses import dataclass
from typing import List

import numpy as np

from swarmops.prng.base import Engine, UINT32_MASK
from swarmops.utils.hue_logger import hue, logger


class RanQD(Engine):
    """
    The "quick and dirty" 32-bit LCG of Numerical Recipes: ``x = 1664525*x + 1013904223``.

    Period 2^32. The low bits are weak, which is why indices are always derived
    from ``uniform()`` rather than from bit masks.
    """

    name = "RanQD"
    max_value = UINT32_MASK
    seed_length = 1

    def _seed_words(self, words: List[int]) -> None:
        self._x = words[0]

    def _next(self) -> int:
        self._x = (1664525 * self._x + 1013904223) & UINT32_MASK
        return self._x


# ======================================================================
# L'Ecuyer combined generator with Bays-Durham shuffle
# ======================================================================

@dataclass
class _Stream:
    """One Schrage-factored multiplicative congruential stream."""

    im: int
    ia: int
    iq: int
    ir: int
    idum: int = 0

    def next(self) -> int:
        # C-style truncating division; idum is positive after seeding
        k = int(self.idum / self.iq) if self.idum < 0 else self.idum // self.iq
        self.idum = self.ia * (self.idum - k * self.iq) - self.ir * k
        if self.idum < 0:
            self.idum += self.im
        return self.idum


class Ran2(Engine):
    """
    Ran2 from Numerical Recipes: two combined LCGs shuffled through a 32-entry table.

    Period > 2e18. Outputs lie in ``[1, 2147483562]``; ``max_value`` is
    ``2147483562``, so byte extraction takes bits 23..30.
    """

    name = "Ran2"

    IM0, IM1 = 2147483563, 2147483399
    IA0, IA1 = 40014, 40692
    IQ0, IQ1 = 53668, 52774
    IR0, IR1 = 12211, 3791
    NTAB = 32
    IMM = IM0 - 1
    NDIV = 1 + IMM // NTAB
    WARMUP = 1024 + 8
    WARMUP2 = 200

    max_value = IM0 - 1
    seed_length = 1

    def seed(self, seed) -> "Ran2":
        """
        Seeds from a signed 31-bit integer (0 maps to 1, negatives are negated),
        from a one-word sequence, or from another engine.
        """
        if isinstance(seed, (int, np.integer)):
            seed = int(seed)
            if abs(seed) > 0x7FFFFFFF:
                raise ValueError(f"Ran2 seed must fit in a signed 32-bit integer, got {seed}")
            self._seed_int(seed)
            logger.debug(f"{hue.c}{self.name}{hue.q} seeded with {hue.m}{seed}{hue.q}")
            return self
        return super().seed(seed)

    def _seed_words(self, words: List[int]) -> None:
        self._seed_int(words[0] & 0x7FFFFFFF)

    def _seed_int(self, seed: int) -> None:
        if seed == 0:
            seed = 1
        elif seed < 0:
            seed = -seed

        self._s0 = _Stream(self.IM0, self.IA0, self.IQ0, self.IR0, seed)
        self._s1 = _Stream(self.IM1, self.IA1, self.IQ1, self.IR1, seed)

        for _ in range(self.WARMUP):
            self._s0.next()

        self._iv = [0] * self.NTAB
        for j in range(self.NTAB - 1, -1, -1):
            self._iv[j] = self._s0.next()
        self._iy = self._iv[0]
        self._ready = True

        for _ in range(self.WARMUP2):
            self._next()

    def _next(self) -> int:
        self._s0.next()
        self._s1.next()

        j = self._iy // self.NDIV
        self._iy = self._iv[j] - self._s1.idum
        self._iv[j] = self._s0.idum
        if self._iy < 1:
            self._iy += self.IMM
        return self._iy
