# System Engine: NumPy bit generator wrapper
# Author: Shengning Wang

from typing import List, Optional

import numpy as np

from swarmops.prng.base import Engine, UINT32_MASK


class RanSystem(Engine):
    """
    Delegates to ``numpy.random.default_rng`` (PCG64).

    Unlike the other engines it is ready on construction: without a seed it
    draws its entropy from the operating system. Values are fetched from NumPy
    in blocks and handed out one at a time.
    """

    name = "RanSystem"
    max_value = UINT32_MASK
    seed_length = 4

    BLOCK: int = 1024

    def __init__(self, seed: Optional[int] = None) -> None:
        super().__init__()
        self._reset_generator(np.random.default_rng(seed))

    def seed(self, seed) -> "RanSystem":
        """Re-seeds from an integer, a word sequence of any length, or another engine."""
        if isinstance(seed, (int, np.integer)):
            self._reset_generator(np.random.default_rng(int(seed)))
            return self
        if not isinstance(seed, Engine):
            self._seed_words([int(w) for w in seed])
            return self
        return super().seed(seed)

    def _seed_words(self, words: List[int]) -> None:
        self._reset_generator(np.random.default_rng(words))

    def _reset_generator(self, generator: np.random.Generator) -> None:
        self._generator = generator
        self._block: List[int] = []
        self._ready = True

    def _next(self) -> int:
        if not self._block:
            raw = self._generator.integers(0, UINT32_MASK, size=self.BLOCK, dtype=np.uint32, endpoint=True)
            # reversed so that pop() hands values out in generation order
            self._block = raw[::-1].tolist()
        return self._block.pop()
