from __future__ import annotations

from genepool.exceptions import EvolutionError
from genepool.population.candidate import Candidate


def order_by_fitness(population: list[Candidate]) -> list[Candidate]:
    """Sort best-first. ``sorted`` is stable with ``reverse=True``, so ties keep input order."""
    unscored = [c for c in population if c.fitness is None]
    if unscored:
        raise EvolutionError(
            f"Cannot order population: {len(unscored)} candidate(s) have no fitness"
        )
    return sorted(population, key=lambda c: c.fitness, reverse=True)


def attach_rank(population: list[Candidate]) -> list[Candidate]:
    """Assign ranks N..1 to an already ordered population (first = best = N)."""
    size = len(population)
    ranked: list[Candidate] = []
    for position, candidate in enumerate(population):
        if candidate.fitness is None:
            raise EvolutionError(
                f"Candidate at position {position} reached ranking without a fitness"
            )
        ranked.append(candidate.with_rank(size - position))
    return ranked
