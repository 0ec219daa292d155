from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable

from loguru import logger

from genepool.evolution.strategies.diversity import unique_by
from genepool.population.candidate import Candidate


class EliteSelector(ABC):
    @abstractmethod
    async def __call__(self, population: list[Candidate], total: int) -> list[Candidate]:
        pass


class UniqueEliteSelector(EliteSelector):
    """Top ``total`` members of a ranked generation, one per identity key.

    The population must already be ordered best-first; the first occurrence of
    each key is the best-ranked one and is the one kept. *key* may be a
    coroutine function.
    """

    def __init__(self, key: Callable[[Any], Hashable]):
        self.key = key

    async def __call__(self, population: list[Candidate], total: int) -> list[Candidate]:
        if total <= 0:
            return []
        distinct = await unique_by(population, self.key)
        elites = distinct[:total]
        logger.debug(
            "UniqueEliteSelector: {} distinct of {}, kept {} (requested {})",
            len(distinct),
            len(population),
            len(elites),
            total,
        )
        return elites
