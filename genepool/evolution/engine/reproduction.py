from __future__ import annotations

import random
from typing import Any, Callable

from loguru import logger

from genepool.evolution.strategies.selectors import ParentPair
from genepool.population.candidate import Candidate
from genepool.problems.base import EvolutionProblem
from genepool.problems.guard import resolve, strategy_guard


async def generate_offspring(
    pairs: list[ParentPair], crossover: Callable[[tuple[Any, Any]], Any]
) -> list[Any]:
    """One crossover call, and exactly one offspring value, per parent pair."""
    offspring: list[Any] = []
    with strategy_guard("crossover"):
        for first, second in pairs:
            offspring.append(await resolve(crossover((first.value, second.value))))
    return offspring


async def mutate_offspring(
    values: list[Any],
    mutator: Callable[[Any], Any],
    probability: float,
    rng: random.Random,
) -> list[Any]:
    """Replace each value by ``mutator(value)`` when a uniform draw is <= *probability*."""
    mutated: list[Any] = []
    with strategy_guard("mutate"):
        for value in values:
            if rng.random() <= probability:
                mutated.append(await resolve(mutator(value)))
            else:
                mutated.append(value)
    return mutated


async def breed(
    pairs: list[ParentPair],
    problem: EvolutionProblem,
    probability: float,
    rng: random.Random,
) -> list[Candidate]:
    """Crossover then mutation; returns unscored offspring records."""
    offspring = await generate_offspring(pairs, problem.crossover)
    mutated = await mutate_offspring(offspring, problem.mutate, probability, rng)
    logger.trace("[reproduction] Bred {} offspring", len(mutated))
    return [Candidate(value=value) for value in mutated]
