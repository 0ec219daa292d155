from __future__ import annotations

from dataclasses import dataclass
import itertools
from typing import Any

import pytest

from genepool.problems.base import EvolutionProblem


@dataclass(frozen=True)
class Member:
    id: int
    f: float


class ScriptedProblem(EvolutionProblem):
    """Deterministic problem: fitness is ``member.f`` plus a per-generation bonus.

    Crossover returns a copy of the first parent, so without mutation the best
    raw score in a population can never rise above its initial maximum.
    """

    def __init__(self, bonuses: list[float] | None = None, mutation_step: float = 0.0):
        self.bonuses = bonuses or []
        self.mutation_step = mutation_step
        self.generation = 0
        self.fitness_calls = 0
        self.mutate_calls = 0
        self.seen_populations: list[list[Any]] = []
        self.generation_best: list[float] = []
        self.improvements: list[float] = []
        self._fresh_ids = itertools.count(1000)

    def before_fitness_evaluated(self, population):
        self.generation += 1
        self.seen_populations.append([c.value for c in population])
        return population

    def get_fitness(self, value: Member) -> float:
        self.fitness_calls += 1
        bonus = 0.0
        if self.bonuses:
            bonus = self.bonuses[min(self.generation, len(self.bonuses)) - 1]
        return value.f + bonus

    def crossover(self, parents):
        first, _ = parents
        return Member(first.id, first.f)

    def mutate(self, value: Member) -> Member:
        self.mutate_calls += 1
        return Member(value.id, value.f + self.mutation_step)

    def random_candidate(self) -> Member:
        return Member(next(self._fresh_ids), 0.0)

    def general_hash(self, value: Member):
        return value.id

    def on_generation_best_fitness(self, best_fitness: float) -> None:
        self.generation_best.append(best_fitness)

    def on_best_fitness_improved(self, best_fitness: float, population) -> None:
        self.improvements.append(best_fitness)


@pytest.fixture
def member():
    return Member


@pytest.fixture
def scripted_problem():
    return ScriptedProblem


@pytest.fixture
def three_members():
    return [Member(1, 0.2), Member(2, 0.9), Member(3, 0.5)]
