from __future__ import annotations

from collections import deque
from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, computed_field

from genepool.population.candidate import Candidate


class StopReason(str, Enum):
    TARGET_FITNESS = "target_fitness"
    STAGNATION = "stagnation"
    GENERATION_LIMIT = "generation_limit"


class GenerationStats(BaseModel):
    """Fitness summary of one ranked generation."""

    generation: int
    size: int
    best: float
    mean: float
    std: float
    worst: float

    @classmethod
    def from_population(
        cls, generation: int, population: list[Candidate]
    ) -> "GenerationStats":
        scores = np.fromiter((c.fitness for c in population), dtype=float)
        return cls(
            generation=generation,
            size=int(scores.size),
            best=float(scores.max()),
            mean=float(scores.mean()),
            std=float(scores.std()),
            worst=float(scores.min()),
        )


class RunState(BaseModel):
    """Accumulator state of a single ``EvolutionEngine.run`` call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    generation_index: int = Field(
        default=0, description="Incremented each time the generation budget is checked"
    )
    total_generations: int = Field(
        default=0, description="Generations evaluated and ranked so far"
    )
    last_best_fitness: float | None = None
    best_fitness_ever: float | None = None
    generations_without_improvement: int = 0
    stop_reason: StopReason | None = None
    history: deque = Field(
        default_factory=deque,
        description="Rolling window of per-generation stats",
    )

    @computed_field
    @property
    def stopped(self) -> bool:
        return self.stop_reason is not None

    @classmethod
    def fresh(cls, history_size: int) -> "RunState":
        state = cls()
        state.history = deque(maxlen=history_size)
        return state

    def to_dict(self) -> dict[str, int | float | str | bool | None]:
        return {
            "generation_index": self.generation_index,
            "total_generations": self.total_generations,
            "last_best_fitness": self.last_best_fitness,
            "best_fitness_ever": self.best_fitness_ever,
            "generations_without_improvement": self.generations_without_improvement,
            "stop_reason": self.stop_reason.value if self.stop_reason else None,
            "stopped": self.stopped,
        }
