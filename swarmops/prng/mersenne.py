# Mersenne Twister MT19937 Engine
# Author: Shengning Wang

from typing import List, Sequence, Union

import numpy as np

from swarmops.prng.base import Engine, UINT32_MASK, seed_words
from swarmops.utils.hue_logger import hue, logger


class MersenneTwister(Engine):
    """
    MT19937 by Matsumoto and Nishimura, period 2^19937 - 1.

    Integer seeds go through ``init_genrand``, word sequences of any length
    through ``init_by_array``; both reproduce the reference ``mt19937ar.c``
    output. Seeding from another engine draws 624 words and uses
    ``init_by_array``.
    """

    name = "MersenneTwister"
    max_value = UINT32_MASK
    seed_length = 624

    N: int = 624
    M: int = 397
    MATRIX_A: int = 0x9908B0DF
    UPPER_MASK: int = 0x80000000
    LOWER_MASK: int = 0x7FFFFFFF

    def seed(self, seed: Union[int, Sequence[int], Engine]) -> "MersenneTwister":
        """
        Args:
            seed: An unsigned 32-bit integer, a non-empty sequence of unsigned
                32-bit words (any length), or a ready engine.

        Returns:
            MersenneTwister: ``self``.
        """
        if isinstance(seed, Engine):
            key = seed_words(seed, self.seed_length)
        elif isinstance(seed, (int, np.integer)):
            seed = int(seed)
            if not 0 <= seed <= UINT32_MASK:
                raise ValueError(f"MersenneTwister seed must be an unsigned 32-bit integer, got {seed}")
            self._init_genrand(seed)
            self._ready = True
            logger.debug(f"{hue.c}{self.name}{hue.q} seeded with {hue.m}{seed}{hue.q}")
            return self
        else:
            key = [int(w) for w in seed]

        if len(key) == 0:
            raise ValueError("MersenneTwister seed array must not be empty")
        if any(not 0 <= w <= UINT32_MASK for w in key):
            raise ValueError("seed words must be unsigned 32-bit integers")

        self._init_by_array(key)
        self._ready = True
        logger.debug(f"{hue.c}{self.name}{hue.q} seeded with {hue.m}{len(key)}{hue.q} word(s)")
        return self

    # ------------------------------------------------------------------

    def _init_genrand(self, s: int) -> None:
        mt = [0] * self.N
        mt[0] = s
        for i in range(1, self.N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & UINT32_MASK
        self._mt = mt
        self._mti = self.N

    def _init_by_array(self, key: List[int]) -> None:
        self._init_genrand(19650218)
        mt, n = self._mt, self.N
        i, j = 1, 0

        for _ in range(max(n, len(key))):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * 1664525)) + key[j] + j) & UINT32_MASK
            i += 1
            j += 1
            if i >= n:
                mt[0] = mt[n - 1]
                i = 1
            if j >= len(key):
                j = 0

        for _ in range(n - 1):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * 1566083941)) - i) & UINT32_MASK
            i += 1
            if i >= n:
                mt[0] = mt[n - 1]
                i = 1

        # MSB is 1, assuring a non-zero initial array
        mt[0] = 0x80000000
        self._mti = n

    def _twist(self) -> None:
        mt, n, m = self._mt, self.N, self.M
        for k in range(n):
            y = (mt[k] & self.UPPER_MASK) | (mt[(k + 1) % n] & self.LOWER_MASK)
            mt[k] = mt[(k + m) % n] ^ (y >> 1) ^ (self.MATRIX_A if y & 1 else 0)
        self._mti = 0

    def _next(self) -> int:
        if self._mti >= self.N:
            self._twist()

        y = self._mt[self._mti]
        self._mti += 1

        # tempering
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y

    def state(self) -> np.ndarray:
        """
        Returns a copy of the 624-word internal state.

        Returns:
            np.ndarray: State words of shape (624,), dtype: uint32.
        """
        return np.asarray(self._mt, dtype=np.uint32)
