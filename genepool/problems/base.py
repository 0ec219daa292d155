from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Hashable, Sequence

from genepool.population.candidate import Candidate
from genepool.evolution.strategies.ranking import order_by_fitness


def default_identity(value: Any) -> Hashable:
    """Identity key used when a problem does not define its own hash.

    Hashable values are their own key; anything else falls back to ``repr``.
    """
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


class EvolutionProblem(ABC):
    """Strategy interface the engine is parameterised with.

    Subclasses MUST implement the four genetic operators. Every other hook has a
    neutral default. Any hook may be a coroutine function; the engine awaits
    whatever it returns.
    """

    #: When True the engine scores a generation with one call to
    #: :py:meth:`evaluate_batch` instead of one :py:meth:`get_fitness` per member.
    batch_fitness: bool = False

    # ------------------------------------------------------------------
    # Mandatory operators
    # ------------------------------------------------------------------

    @abstractmethod
    def get_fitness(self, value: Any) -> float | Awaitable[float]:
        """Score a single candidate value (higher is better)."""

    @abstractmethod
    def crossover(self, parents: tuple[Any, Any]) -> Any:
        """Produce exactly one offspring value from a parent pair."""

    @abstractmethod
    def mutate(self, value: Any) -> Any:
        """Return a mutated copy of *value*."""

    @abstractmethod
    def random_candidate(self) -> Any:
        """Generate a fresh random candidate value."""

    # ------------------------------------------------------------------
    # Optional hooks
    # ------------------------------------------------------------------

    def evaluate_batch(
        self, values: list[Any]
    ) -> Sequence[float] | Awaitable[Sequence[float]]:
        raise NotImplementedError("Problem does not support batch fitness")

    def general_hash(self, value: Any) -> Hashable:
        return default_identity(value)

    def elite_hash(self, value: Any) -> Hashable:
        return self.general_hash(value)

    def before_fitness_evaluated(self, population: list[Candidate]) -> Any:
        return population

    def after_fitness_evaluated(self, population: list[Candidate]) -> Any:
        return population

    def order_by_fitness(self, population: list[Candidate]) -> list[Candidate]:
        return order_by_fitness(population)

    def eliminate_members(self, population: list[Candidate]) -> Any:
        return population

    def on_best_fitness_improved(
        self, best_fitness: float, population: list[Candidate]
    ) -> Any:
        return None

    def on_generation_best_fitness(self, best_fitness: float) -> Any:
        return None

    def describe(self, value: Any) -> str:
        return repr(value)
