"""Ready-made elimination strategies for the ``eliminate_members`` hook.

A remover receives a population ordered best-first and returns the survivors
in the same order.
"""

from abc import ABC, abstractmethod
import math

from genepool.population.candidate import Candidate


class MemberRemover(ABC):
    """Base class for member remover implementations."""

    def __call__(self, population: list[Candidate]) -> list[Candidate]:
        removed = {id(c) for c in self.select_removed(population)}
        return [c for c in population if id(c) not in removed]

    @abstractmethod
    def select_removed(self, population: list[Candidate]) -> list[Candidate]:
        """Return the members to drop."""


class FitnessThresholdRemover(MemberRemover):
    """Drops members scoring below ``min_fitness``, always keeping at least ``keep_at_least``."""

    def __init__(self, min_fitness: float, keep_at_least: int = 1):
        if keep_at_least < 0:
            raise ValueError(f"keep_at_least must be non-negative, got {keep_at_least}")
        self.min_fitness = min_fitness
        self.keep_at_least = keep_at_least

    def select_removed(self, population: list[Candidate]) -> list[Candidate]:
        below = [
            c
            for c in population[self.keep_at_least :]
            if c.fitness is not None and c.fitness < self.min_fitness
        ]
        return below


class BottomFractionRemover(MemberRemover):
    """Drops the worst ``fraction`` of an ordered population."""

    def __init__(self, fraction: float):
        if not 0.0 <= fraction < 1.0:
            raise ValueError(f"fraction must be in [0, 1), got {fraction}")
        self.fraction = fraction

    def select_removed(self, population: list[Candidate]) -> list[Candidate]:
        num_to_remove = math.floor(len(population) * self.fraction)
        if num_to_remove == 0:
            return []
        return population[-num_to_remove:]
