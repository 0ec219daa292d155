from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """One member of the population: an opaque value plus engine-managed scores.

    Records are immutable. Scoring and ranking return new records so that a
    value carried forward as an elite never shares state with the record of a
    previous generation.
    """

    value: Any = Field(..., description="Caller-defined candidate value")
    fitness: float | None = Field(
        default=None, description="Fitness for the current generation (higher is better)"
    )
    rank: int | None = Field(
        default=None, ge=0, description="Selection weight; N for the best, 1 for the worst"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @property
    def is_scored(self) -> bool:
        return self.fitness is not None

    def with_fitness(self, fitness: float) -> "Candidate":
        return Candidate(value=self.value, fitness=fitness, rank=None)

    def with_rank(self, rank: int) -> "Candidate":
        return Candidate(value=self.value, fitness=self.fitness, rank=rank)

    @classmethod
    def wrap(cls, member: Any) -> "Candidate":
        """Return *member* if it already is a Candidate, otherwise wrap it."""
        if isinstance(member, Candidate):
            return member
        return cls(value=member)


Population = list[Candidate]
