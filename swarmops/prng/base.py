# Pseudo-Random Number Engine Contract
# Author: Shengning Wang

from typing import List, Sequence, Union

import numpy as np

from swarmops.utils.hue_logger import hue, logger


UINT32_MASK: int = 0xFFFFFFFF


class NotSeededError(RuntimeError):
    """Raised when an engine is asked for a value before it has been seeded."""


SeedLike = Union[int, Sequence[int], "Engine"]


class Engine:
    """
    Base class of all bit generators.

    An engine produces raw integers in ``[0, max_value]`` through ``draw()``.
    Every derived distribution (uniform reals, indices, Gaussians, ...) lives in
    ``swarmops.prng.sampler.Sampler`` and consumes nothing but ``draw()`` and
    ``max_value``, so any engine can stand in for any other.

    Subclasses implement ``_next()`` and ``_seed_words()`` and declare
    ``name``, ``max_value`` and ``seed_length`` (number of 32-bit seed words).
    """

    name: str = "Engine"
    max_value: int = UINT32_MASK
    seed_length: int = 1

    def __init__(self, seed: SeedLike = None) -> None:
        """
        Args:
            seed (SeedLike): Optional seed forwarded to ``seed()``. Without one
                the engine stays unseeded and refuses to draw.
        """
        self._ready: bool = False
        if seed is not None:
            self.seed(seed)

    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._ready

    def draw(self) -> int:
        """
        Returns the next raw value of the stream.

        Returns:
            int: Value in ``[0, max_value]``.

        Raises:
            NotSeededError: If the engine has not been seeded.
        """
        if not self._ready:
            raise NotSeededError(f"{self.name} must be seeded before drawing")
        return self._next()

    def draw_many(self, size: int) -> np.ndarray:
        """
        Draws ``size`` consecutive raw values.

        Returns:
            np.ndarray: Raw values of shape (size,), dtype: uint64.
        """
        if size < 0:
            raise ValueError(f"size must be >= 0, got {size}")
        return np.fromiter((self.draw() for _ in range(size)), dtype=np.uint64, count=size)

    # ------------------------------------------------------------------

    def seed(self, seed: SeedLike) -> "Engine":
        """
        Seeds the engine.

        Args:
            seed (SeedLike): One of
                - an ``int``: used directly by single-word engines, expanded into
                  ``seed_length`` words by a Mersenne Twister otherwise;
                - a sequence of exactly ``seed_length`` unsigned 32-bit words;
                - another ready ``Engine`` from which the words are drawn.

        Returns:
            Engine: ``self``, for chaining.

        Raises:
            ValueError: If the seed has the wrong length or holds values outside
                the unsigned 32-bit range.
        """
        if isinstance(seed, Engine):
            words = seed_words(seed, self.seed_length)
        elif isinstance(seed, (int, np.integer)):
            words = self._expand_int_seed(int(seed))
        else:
            words = [int(w) for w in seed]

        if len(words) != self.seed_length:
            raise ValueError(f"{self.name} seed must hold exactly {self.seed_length} words, got {len(words)}")
        for w in words:
            if not 0 <= w <= UINT32_MASK:
                raise ValueError(f"seed words must be unsigned 32-bit integers, got {w}")

        self._seed_words(words)
        self._ready = True
        logger.debug(f"{hue.c}{self.name}{hue.q} seeded with {hue.m}{len(words)}{hue.q} word(s)")
        return self

    def _expand_int_seed(self, seed: int) -> List[int]:
        if self.seed_length == 1:
            return [seed]
        # imported here because the Mersenne Twister is itself an Engine
        from swarmops.prng.mersenne import MersenneTwister
        return seed_words(MersenneTwister(seed), self.seed_length)

    def _seed_words(self, words: List[int]) -> None:
        raise NotImplementedError

    def _next(self) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        state = "ready" if self._ready else "unseeded"
        return f"{type(self).__name__}({state})"


def seed_words(source: Engine, count: int) -> List[int]:
    """
    Draws ``count`` seed words from another engine.

    Each word is assembled little-endian from four ``byte()`` draws, i.e. from
    the most-significant 8 bits of four consecutive raw values.

    Args:
        source (Engine): A ready engine.
        count (int): Number of 32-bit words to produce.

    Returns:
        List[int]: The seed words.
    """
    shift = source.max_value.bit_length() - 8
    words = []
    for _ in range(count):
        b0, b1, b2, b3 = (source.draw() >> shift for _ in range(4))
        words.append(b0 | (b1 << 8) | (b2 << 16) | (b3 << 24))
    return words
