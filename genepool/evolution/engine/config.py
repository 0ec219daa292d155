from __future__ import annotations

import math
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from genepool.exceptions import ConfigurationError


class PopulationPartition(NamedTuple):
    elite_count: int
    offspring_count: int
    new_blood_count: int

    @property
    def size(self) -> int:
        return self.elite_count + self.offspring_count + self.new_blood_count


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    elite_ratio: float = Field(
        default=0.1, ge=0, le=1, description="Share of N carried forward as elites"
    )
    new_blood_ratio: float = Field(
        default=0.05, ge=0, le=1, description="Share of N reserved for fresh random members"
    )
    mutation_probability: float = Field(default=0.5, ge=0, le=1)
    target_fitness: float | None = Field(
        default=None, description="Stop once best fitness reaches this value (None = disabled)"
    )
    target_generations_without_improvement: int = Field(default=50000, gt=0)
    target_generation_count: int = Field(default=50000, gt=0)
    max_concurrency: int | None = Field(
        default=None,
        gt=0,
        description="Concurrent fitness evaluations (None = os.cpu_count())",
    )
    offload_sync_fitness: bool = Field(
        default=False,
        description="Run synchronous fitness functions in worker threads",
    )
    seed: int | None = Field(default=None, description="Seed for the engine's random source")
    history_size: int = Field(default=100, gt=0)
    log_interval: int = Field(default=1, gt=0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def partition(self, population_size: int) -> PopulationPartition:
        """Split N into elite / offspring / new-blood counts.

        Raises:
            ConfigurationError: if no room is left for offspring.
        """
        elite_count = math.floor(population_size * self.elite_ratio)
        new_blood_count = math.floor(population_size * self.new_blood_ratio)
        offspring_count = population_size - elite_count - new_blood_count
        if offspring_count <= 0:
            raise ConfigurationError(
                f"Population of {population_size} leaves no room for offspring "
                f"(elite={elite_count}, new_blood={new_blood_count})"
            )
        return PopulationPartition(elite_count, offspring_count, new_blood_count)
