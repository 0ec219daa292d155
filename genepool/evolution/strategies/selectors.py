from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from itertools import accumulate, islice
import random
from typing import Iterator

from loguru import logger

from genepool.exceptions import EmptyPopulationError
from genepool.population.candidate import Candidate

ParentPair = tuple[Candidate, Candidate]


class WeightedPopulation:
    """Rank-weighted sampling structure.

    Behaves like a multiset holding each candidate ``rank`` times, without
    materialising the copies: sampling bisects the cumulative rank weights.
    Candidates with rank 0 (or no rank) carry no weight and are never drawn.
    """

    def __init__(self, population: list[Candidate]):
        self.members = list(population)
        weights = [max(0, c.rank or 0) for c in self.members]
        self.cum_weights = list(accumulate(weights))
        self.total = self.cum_weights[-1] if self.cum_weights else 0
        if self.total <= 0:
            raise EmptyPopulationError(
                f"Weighted population is empty ({len(self.members)} member(s), total weight 0)"
            )

    def __len__(self) -> int:
        return self.total

    def sample(self, rng: random.Random) -> Candidate:
        idx = bisect_right(self.cum_weights, rng.random() * self.total)
        return self.members[min(idx, len(self.members) - 1)]


class ParentSelector(ABC):
    """Abstract base class for selecting parent pairs for crossover."""

    @abstractmethod
    def create_parent_iterator(
        self, population: list[Candidate]
    ) -> Iterator[ParentPair]:
        """Yield parent pairs indefinitely (the consumer decides when to stop)."""

    def select_pairs(self, population: list[Candidate], count: int) -> list[ParentPair]:
        if count <= 0:
            return []
        return list(islice(self.create_parent_iterator(population), count))


class RankWeightedParentSelector(ParentSelector):
    """Draws both parents independently, with replacement, proportional to rank."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def create_parent_iterator(
        self, population: list[Candidate]
    ) -> Iterator[ParentPair]:
        weighted = WeightedPopulation(population)
        logger.trace(
            "[RankWeightedParentSelector] {} member(s), total weight {}",
            len(weighted.members),
            weighted.total,
        )
        while True:
            yield weighted.sample(self.rng), weighted.sample(self.rng)
