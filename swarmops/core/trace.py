# Fitness Traces: observers of the best fitness during a run
# Author: Shengning Wang

import os
from typing import List, Tuple

import numpy as np

from swarmops.utils.hue_logger import hue, logger


class FitnessTrace:
    """
    A sink called as ``trace(iteration, best_fitness)``.

    Optimizers call it once per initialization evaluation and once after every
    update step, so the fitness values a trace receives never increase within
    one run. Any plain callable with the same signature works as well.
    """

    def __call__(self, iteration: int, fitness: float) -> None:
        raise NotImplementedError


class FitnessTraceList(FitnessTrace):
    """Record every ``(iteration, best_fitness)`` pair."""

    def __init__(self) -> None:
        self.records: List[Tuple[int, float]] = []

    def __call__(self, iteration: int, fitness: float) -> None:
        self.records.append((iteration, fitness))

    @property
    def fitness(self) -> np.ndarray:
        return np.array([f for _, f in self.records], dtype=float)

    def clear(self) -> None:
        self.records.clear()


class FitnessTraceMean(FitnessTrace):
    """
    Accumulate the best fitness at evenly spaced iterations over repeated runs.

    The trace divides a budget of ``num_iterations`` into ``num_intervals``
    checkpoints; the fitness seen at each checkpoint is accumulated across
    runs, so ``rows()`` returns per-checkpoint mean, standard deviation,
    minimum and maximum.

    Args:
        num_iterations (int): Iteration budget of each run.
        num_intervals (int): Number of checkpoints.
    """

    def __init__(self, num_iterations: int, num_intervals: int) -> None:
        if num_iterations < 1:
            raise ValueError(f"num_iterations must be >= 1, got {num_iterations}")
        if num_intervals < 1:
            raise ValueError(f"num_intervals must be >= 1, got {num_intervals}")

        self.num_intervals = min(num_intervals, num_iterations)
        self.step = num_iterations // self.num_intervals
        self.clear()

    def clear(self) -> None:
        self._values: List[List[float]] = [[] for _ in range(self.num_intervals)]

    def __call__(self, iteration: int, fitness: float) -> None:
        if iteration % self.step == 0:
            index = iteration // self.step
            if index < self.num_intervals:
                self._values[index].append(fitness)

    def rows(self) -> np.ndarray:
        """
        Returns:
            np.ndarray: One row per checkpoint holding
            ``(iteration, mean, std, min, max)``; NaN where no run reached it.
            Shape: (num_intervals, 5).
        """
        table = np.full((self.num_intervals, 5), np.nan)
        for i, values in enumerate(self._values):
            table[i, 0] = i * self.step
            if values:
                arr = np.asarray(values, dtype=float)
                table[i, 1:] = (arr.mean(), arr.std(), arr.min(), arr.max())
        return table

    def write(self, path: str) -> None:
        """Writes ``rows()`` as a whitespace-separated text table."""
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        np.savetxt(path, self.rows(), fmt=["%d", "%.6e", "%.6e", "%.6e", "%.6e"],
                   header="iteration mean_fitness std min max")
        logger.info(f"fitness trace saved to {hue.g}{path}{hue.q}")


class FitnessTraceLogger(FitnessTrace):
    """Log the best fitness every ``every`` iterations."""

    def __init__(self, every: int = 1000, label: str = "run") -> None:
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.every = every
        self.label = label

    def __call__(self, iteration: int, fitness: float) -> None:
        if iteration % self.every == 0:
            logger.info(f"[{self.label}] iter={hue.c}{iteration:8d}{hue.q}  best={hue.m}{fitness:.8e}{hue.q}")
