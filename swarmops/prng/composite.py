# Composite Engines: sum, switcher, locked wrapper and engine spawning
# Author: Shengning Wang

import threading
from typing import Callable, List, Sequence

from swarmops.prng.base import Engine, UINT32_MASK
from swarmops.prng.sampler import Sampler
from swarmops.utils.hue_logger import hue, logger


class _CompositeEngine(Engine):
    """Shared plumbing for engines built from other engines."""

    def __init__(self, engines: Sequence[Engine]) -> None:
        if len(engines) == 0:
            raise ValueError("a composite engine needs at least one sub-engine")
        super().__init__()
        self.engines: List[Engine] = list(engines)

    @property
    def is_ready(self) -> bool:
        return all(e.is_ready for e in self.engines)

    def draw(self) -> int:
        # readiness is owned by the parts, each raises NotSeededError itself
        return self._next()

    def seed(self, seed) -> "Engine":
        """
        Re-seeds every sub-engine, in order, from one source engine.

        Raises:
            ValueError: If ``seed`` is not an engine.
        """
        if not isinstance(seed, Engine):
            raise ValueError(f"{self.name} can only be seeded from another engine, got {type(seed).__name__}")
        for e in self.engines:
            e.seed(seed)
        return self


class SumEngine(_CompositeEngine):
    """
    Adds the outputs of several engines modulo 2^32.

    Only unbiased when every part spans the full unsigned 32-bit range.
    """

    max_value = UINT32_MASK

    def __init__(self, engines: Sequence[Engine]) -> None:
        super().__init__(engines)
        self.name = "Sum(" + ", ".join(e.name for e in self.engines) + ")"
        for e in self.engines:
            if e.max_value != UINT32_MASK:
                logger.warning(f"{hue.y}{e.name}{hue.q} does not span 32 bits, {self.name} output is biased")

    def _next(self) -> int:
        total = 0
        for e in self.engines:
            total += e.draw()
        return total & UINT32_MASK


class SwitcherEngine(_CompositeEngine):
    """
    Delegates every draw to one of several engines, chosen at random by a
    separate selector engine.
    """

    def __init__(self, engines: Sequence[Engine], selector: Engine) -> None:
        """
        Args:
            engines (Sequence[Engine]): Engines to switch between. All must share one ``max_value``.
            selector (Engine): Engine whose uniform draws choose the delegate.
        """
        super().__init__(engines)
        max_values = {e.max_value for e in self.engines}
        if len(max_values) != 1:
            raise ValueError(f"switched engines must share one max_value, got {sorted(max_values)}")

        self.max_value = max_values.pop()
        self.selector = Sampler(selector)
        self.name = "Switcher(" + ", ".join(e.name for e in self.engines) + ")"

    @property
    def is_ready(self) -> bool:
        return super().is_ready and self.selector.engine.is_ready

    def _next(self) -> int:
        return self.engines[self.selector.index(len(self.engines))].draw()


class LockedEngine(Engine):
    """
    Thread-safe wrapper serializing all draws and seeding of one engine under a lock.

    Only raw draws are protected. A ``Sampler`` keeps its own Gaussian cache and
    should not itself be shared between threads.
    """

    def __init__(self, engine: Engine) -> None:
        super().__init__()
        self.engine = engine
        self.name = f"Locked({engine.name})"
        self.max_value = engine.max_value
        self.seed_length = engine.seed_length
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self.engine.is_ready

    def draw(self) -> int:
        with self._lock:
            return self.engine.draw()

    def seed(self, seed) -> "LockedEngine":
        with self._lock:
            self.engine.seed(seed)
        return self


def spawn_engines(factory: Callable[[], Engine], master: Engine, count: int) -> List[Engine]:
    """
    Builds ``count`` independent engines, each seeded from ``master`` in turn.

    Giving every agent its own engine keeps a run reproducible no matter in
    which order the agents are processed.

    Args:
        factory (Callable[[], Engine]): Creates an unseeded engine, e.g. an engine class.
        master (Engine): Ready engine supplying the seeds.
        count (int): Number of engines.

    Returns:
        List[Engine]: Seeded engines.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    return [factory().seed(master) for _ in range(count)]
