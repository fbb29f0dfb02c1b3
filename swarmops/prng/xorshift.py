# Shift-Register Engines: XorShift and KISS
# Author: Shengning Wang

from typing import List, Tuple

from swarmops.prng.base import Engine, UINT32_MASK


class XorShift(Engine):
    """
    Marsaglia's five-word xorshift generator with a multiplicative output stage.

    Period about 2^160. Seed: 5 words, not all zero.
    """

    name = "XorShift"
    max_value = UINT32_MASK
    seed_length = 5

    SEED_DEFAULT: Tuple[int, ...] = (123456789, 362436069, 521288629, 88675123, 886756453)

    def _seed_words(self, words: List[int]) -> None:
        self._x, self._y, self._z, self._w, self._v = words

    def _next(self) -> int:
        t = self._x ^ (self._x >> 7)
        self._x, self._y, self._z, self._w = self._y, self._z, self._w, self._v
        v = self._v
        self._v = ((v ^ (v << 6)) ^ (t ^ (t << 13))) & UINT32_MASK
        return ((self._y + self._y + 1) * self._v) & UINT32_MASK


class KISS(Engine):
    """
    Marsaglia's KISS: an LCG, a three-shift xorshift and a multiply-with-carry
    combined by addition.

    Period > 2^124. Seed: 4 words ``(x, y, z, c)``; ``y`` must be non-zero.
    """

    name = "KISS"
    max_value = UINT32_MASK
    seed_length = 4

    SEED_DEFAULT: Tuple[int, ...] = (123456789, 362436000, 521288629, 7654321)

    def _seed_words(self, words: List[int]) -> None:
        self._x, self._y, self._z, self._c = words

    def _next(self) -> int:
        self._x = (69069 * self._x + 12345) & UINT32_MASK

        y = self._y
        y ^= (y << 13) & UINT32_MASK
        y ^= y >> 17
        y ^= (y << 5) & UINT32_MASK
        self._y = y

        t = 698769069 * self._z + self._c
        self._c = t >> 32
        self._z = t & UINT32_MASK

        return (self._x + self._y + self._z) & UINT32_MASK
