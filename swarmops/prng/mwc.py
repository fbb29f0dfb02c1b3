# Multiply-With-Carry Engines: MWC256 and CMWC4096
# Author: Shengning Wang

from typing import List

from swarmops.prng.base import Engine, UINT32_MASK

# carry seeds are reduced modulo this constant to keep the carry below the multiplier
CARRY_MODULUS: int = 809430660


class MWC256(Engine):
    """
    Marsaglia's lag-256 multiply-with-carry generator, period about 2^8222.

    Seed: 257 words, the first one seeds the carry.
    """

    name = "MWC256"
    max_value = UINT32_MASK
    seed_length = 257

    A: int = 809430660

    def _seed_words(self, words: List[int]) -> None:
        self._c = words[0] % CARRY_MODULUS
        self._q = list(words[1:])
        self._i = 255

    def _next(self) -> int:
        self._i = (self._i + 1) & 255
        t = self.A * self._q[self._i] + self._c
        self._c = t >> 32
        x = t & UINT32_MASK
        self._q[self._i] = x
        return x


class CMWC4096(Engine):
    """
    Marsaglia's complementary multiply-with-carry generator, lag 4096, period about 2^131104.

    Seed: 4097 words, the first one seeds the carry.
    """

    name = "CMWC4096"
    max_value = UINT32_MASK
    seed_length = 4097

    A: int = 18782

    def _seed_words(self, words: List[int]) -> None:
        self._c = words[0] % CARRY_MODULUS
        self._q = list(words[1:])
        self._i = 4095

    def _next(self) -> int:
        self._i = (self._i + 1) & 4095
        t = self.A * self._q[self._i] + self._c
        self._c = t >> 32
        x = (t + self._c) & UINT32_MASK
        if x < self._c:
            x += 1
            self._c += 1
        x = (0xFFFFFFFE - x) & UINT32_MASK
        self._q[self._i] = x
        return x
