"""Generic generational evolutionary search."""

from genepool.evolution.engine import (
    EngineConfig,
    EvolutionEngine,
    GenerationStats,
    RunState,
    StopReason,
)
from genepool.exceptions import (
    ConfigurationError,
    EmptyPopulationError,
    EvolutionError,
    GenePoolError,
    StrategyError,
)
from genepool.population import Candidate
from genepool.problems import EvolutionProblem, FunctionalProblem

__all__ = [
    "Candidate",
    "ConfigurationError",
    "EmptyPopulationError",
    "EngineConfig",
    "EvolutionEngine",
    "EvolutionError",
    "EvolutionProblem",
    "FunctionalProblem",
    "GenePoolError",
    "GenerationStats",
    "RunState",
    "StopReason",
    "StrategyError",
]
