from __future__ import annotations

from genepool.evolution.engine.config import EngineConfig, PopulationPartition
from genepool.evolution.engine.core import EvolutionEngine
from genepool.evolution.engine.fitness import FitnessEvaluator
from genepool.evolution.engine.metrics import GenerationStats, RunState, StopReason
