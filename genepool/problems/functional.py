from __future__ import annotations

from typing import Any, Callable, Hashable, Sequence

from genepool.exceptions import ConfigurationError
from genepool.population.candidate import Candidate
from genepool.problems.base import EvolutionProblem

_MANDATORY = ("get_fitness", "crossover", "mutator", "random_candidate_generator")


class FunctionalProblem(EvolutionProblem):
    """Build an :class:`EvolutionProblem` out of plain callables.

    Mandatory callables are checked at construction; a missing one raises
    :class:`ConfigurationError` instead of silently producing meaningless
    generations.
    """

    def __init__(
        self,
        *,
        get_fitness: Callable[[Any], Any] | None = None,
        crossover: Callable[[tuple[Any, Any]], Any] | None = None,
        mutator: Callable[[Any], Any] | None = None,
        random_candidate_generator: Callable[[], Any] | None = None,
        general_hash: Callable[[Any], Hashable] | None = None,
        elite_hash: Callable[[Any], Hashable] | None = None,
        before_fitness_evaluated: Callable[[list[Candidate]], Any] | None = None,
        after_fitness_evaluated: Callable[[list[Candidate]], Any] | None = None,
        order_by_fitness: Callable[[list[Candidate]], list[Candidate]] | None = None,
        eliminate_members: Callable[[list[Candidate]], Any] | None = None,
        on_best_fitness_improved: Callable[[float, list[Candidate]], Any] | None = None,
        on_generation_best_fitness: Callable[[float], Any] | None = None,
        attach_all_fitness: Callable[[list[Any]], Any] | None = None,
        describe: Callable[[Any], str] | None = None,
    ):
        supplied = {
            "get_fitness": get_fitness,
            "crossover": crossover,
            "mutator": mutator,
            "random_candidate_generator": random_candidate_generator,
        }
        missing = [name for name in _MANDATORY if not callable(supplied[name])]
        # A batch evaluator stands in for a per-member fitness function.
        if attach_all_fitness is not None and "get_fitness" in missing:
            missing.remove("get_fitness")
        if missing:
            raise ConfigurationError(
                f"Missing mandatory strategies: {', '.join(missing)}"
            )

        self._get_fitness = get_fitness
        self._crossover = crossover
        self._mutator = mutator
        self._random_candidate = random_candidate_generator
        self._general_hash = general_hash
        self._elite_hash = elite_hash
        self._before = before_fitness_evaluated
        self._after = after_fitness_evaluated
        self._order = order_by_fitness
        self._eliminate = eliminate_members
        self._on_best = on_best_fitness_improved
        self._on_generation = on_generation_best_fitness
        self._attach_all = attach_all_fitness
        self._describe = describe
        self.batch_fitness = attach_all_fitness is not None

    def get_fitness(self, value: Any) -> Any:
        if self._get_fitness is None:
            raise ConfigurationError("get_fitness is not configured")
        return self._get_fitness(value)

    def evaluate_batch(self, values: list[Any]) -> Sequence[float] | Any:
        if self._attach_all is None:
            return super().evaluate_batch(values)
        return self._attach_all(values)

    def crossover(self, parents: tuple[Any, Any]) -> Any:
        return self._crossover(parents)

    def mutate(self, value: Any) -> Any:
        return self._mutator(value)

    def random_candidate(self) -> Any:
        return self._random_candidate()

    def general_hash(self, value: Any) -> Hashable:
        if self._general_hash is None:
            return super().general_hash(value)
        return self._general_hash(value)

    def elite_hash(self, value: Any) -> Hashable:
        if self._elite_hash is None:
            return self.general_hash(value)
        return self._elite_hash(value)

    def before_fitness_evaluated(self, population: list[Candidate]) -> Any:
        return population if self._before is None else self._before(population)

    def after_fitness_evaluated(self, population: list[Candidate]) -> Any:
        return population if self._after is None else self._after(population)

    def order_by_fitness(self, population: list[Candidate]) -> list[Candidate]:
        if self._order is None:
            return super().order_by_fitness(population)
        return self._order(population)

    def eliminate_members(self, population: list[Candidate]) -> Any:
        return population if self._eliminate is None else self._eliminate(population)

    def on_best_fitness_improved(
        self, best_fitness: float, population: list[Candidate]
    ) -> Any:
        if self._on_best is not None:
            return self._on_best(best_fitness, population)
        return None

    def on_generation_best_fitness(self, best_fitness: float) -> Any:
        if self._on_generation is not None:
            return self._on_generation(best_fitness)
        return None

    def describe(self, value: Any) -> str:
        if self._describe is None:
            return super().describe(value)
        return self._describe(value)
