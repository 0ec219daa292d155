from __future__ import annotations

import random
from typing import Any, Iterable

from loguru import logger

from genepool.evolution.engine.config import EngineConfig, PopulationPartition
from genepool.evolution.engine.fitness import FitnessEvaluator
from genepool.evolution.engine.metrics import GenerationStats, RunState, StopReason
from genepool.evolution.engine.reproduction import breed
from genepool.evolution.strategies.diversity import replenish, unique_by
from genepool.evolution.strategies.elite_selectors import (
    EliteSelector,
    UniqueEliteSelector,
)
from genepool.evolution.strategies.ranking import attach_rank
from genepool.evolution.strategies.selectors import (
    ParentSelector,
    RankWeightedParentSelector,
)
from genepool.exceptions import ConfigurationError, EmptyPopulationError
from genepool.population.candidate import Candidate
from genepool.problems.base import EvolutionProblem
from genepool.problems.guard import call_hook, guarded, resolve, strategy_guard

__all__ = ["EvolutionEngine"]


class EvolutionEngine:
    """
    Generational evolution loop:
    - score -> order -> rank -> bookkeeping -> stop check -> breed -> elites ->
      dedupe -> replenish, repeated until a stop condition fires.
    - Run state lives in :class:`RunState` and is only mutated here.
    """

    def __init__(
        self,
        problem: EvolutionProblem,
        config: EngineConfig | None = None,
        *,
        initial_population: Iterable[Any] | None = None,
        parent_selector: ParentSelector | None = None,
        elite_selector: EliteSelector | None = None,
        rng: random.Random | None = None,
    ):
        self.problem = problem
        self.config = config or EngineConfig()
        self.initial_population = (
            list(initial_population) if initial_population is not None else None
        )
        self.rng = rng or random.Random(self.config.seed)
        self.parent_selector = parent_selector or RankWeightedParentSelector(self.rng)
        self.elite_selector = elite_selector or UniqueEliteSelector(
            guarded("elite_hash", problem.elite_hash)
        )
        self.evaluator = FitnessEvaluator(
            problem,
            max_concurrency=self.config.max_concurrency,
            offload_sync=self.config.offload_sync_fitness,
        )
        self.state = RunState.fresh(self.config.history_size)

        logger.info(
            "[EvolutionEngine] Init | problem={}, selector={}, elites={}",
            type(self.problem).__name__,
            type(self.parent_selector).__name__,
            type(self.elite_selector).__name__,
        )

    async def run(self, population: Iterable[Any] | None = None) -> list[Candidate]:
        """Evolve until a stop condition fires and return the final ranked population."""
        seed = list(population) if population is not None else self.initial_population
        if seed is None:
            raise ConfigurationError("No population supplied and no initial_population configured")

        current = [Candidate.wrap(member) for member in seed]
        target_size = len(current)
        partition = self.config.partition(target_size)
        self.state = RunState.fresh(self.config.history_size)

        logger.info(
            "[EvolutionEngine] Start | size={}, elite={}, offspring={}, new_blood={}",
            target_size,
            partition.elite_count,
            partition.offspring_count,
            partition.new_blood_count,
        )

        first_generation = True
        while True:
            current = await self._score(current)
            best_fitness = current[0].fitness
            await self._track(best_fitness, current, first_generation)

            reason = self._stop_reason(best_fitness)
            if reason is not None:
                self.state.stop_reason = reason
                logger.info(
                    "[EvolutionEngine] Stop: {} | generations={}, best={}",
                    reason.value,
                    self.state.total_generations,
                    best_fitness,
                )
                return current

            current = await self._evolve(current, partition, target_size)
            first_generation = False

    async def _score(self, population: list[Candidate]) -> list[Candidate]:
        """Hooks + fitness + ordering + elimination + ranking for one generation."""
        logger.trace("[EvolutionEngine] Population count: {}", len(population))
        population = await self._population_hook("before_fitness_evaluated", population)
        population = await self.evaluator.evaluate(population)
        population = await self._population_hook("after_fitness_evaluated", population)
        population = await self._population_hook("order_by_fitness", population)
        population = await self._population_hook("eliminate_members", population)
        if not population:
            raise EmptyPopulationError("No members left to rank after elimination")
        return attach_rank(population)

    async def _track(
        self, best_fitness: float, population: list[Candidate], first_generation: bool
    ) -> None:
        state = self.state
        state.total_generations += 1

        await call_hook(
            "on_generation_best_fitness", self.problem.on_generation_best_fitness, best_fitness
        )

        if first_generation or best_fitness != state.last_best_fitness:
            state.generations_without_improvement = 0
        else:
            state.generations_without_improvement += 1
        state.last_best_fitness = best_fitness

        if state.best_fitness_ever is None or best_fitness > state.best_fitness_ever:
            await call_hook(
                "on_best_fitness_improved",
                self.problem.on_best_fitness_improved,
                best_fitness,
                population,
            )
            if state.best_fitness_ever is not None:
                logger.info(
                    "[EvolutionEngine] New best fitness {} (was {})",
                    best_fitness,
                    state.best_fitness_ever,
                )
            state.best_fitness_ever = best_fitness

        stats = GenerationStats.from_population(state.total_generations, population)
        state.history.append(stats)
        if state.total_generations % self.config.log_interval == 0:
            logger.debug(
                "[EvolutionEngine] Generation: {}, Best fitness: {}, Mean: {:.6f}, "
                "Fit not changed: {}",
                stats.generation,
                best_fitness,
                stats.mean,
                state.generations_without_improvement,
            )
        self._trace_members("ranked", population)

    def _stop_reason(self, best_fitness: float) -> StopReason | None:
        config, state = self.config, self.state
        if config.target_fitness is not None and best_fitness >= config.target_fitness:
            return StopReason.TARGET_FITNESS
        if state.generations_without_improvement >= config.target_generations_without_improvement:
            return StopReason.STAGNATION
        state.generation_index += 1
        if state.generation_index >= config.target_generation_count:
            return StopReason.GENERATION_LIMIT
        return None

    async def _evolve(
        self, population: list[Candidate], partition: PopulationPartition, target_size: int
    ) -> list[Candidate]:
        pairs = self.parent_selector.select_pairs(population, partition.offspring_count)
        offspring = await breed(pairs, self.problem, self.config.mutation_probability, self.rng)

        elites = await self.elite_selector(population, partition.elite_count)
        self._trace_members("elite", elites)

        pool = await unique_by(
            elites + offspring, guarded("general_hash", self.problem.general_hash)
        )
        next_population = await replenish(
            pool, target_size, guarded("random_candidate", self.problem.random_candidate)
        )

        logger.trace(
            "[EvolutionEngine] Next generation | elites={}, offspring={}, unique={}, new_blood={}",
            len(elites),
            len(offspring),
            len(pool),
            len(next_population) - len(pool),
        )
        return next_population

    async def _population_hook(self, hook: str, population: list[Candidate]) -> list[Candidate]:
        with strategy_guard(hook):
            result = await resolve(getattr(self.problem, hook)(population))
            return [Candidate.wrap(member) for member in result]

    def _trace_members(self, label: str, population: list[Candidate]) -> None:
        for member in population:
            logger.opt(lazy=True).trace(
                "[EvolutionEngine] {} {} {} {}",
                lambda: label,
                lambda: member.fitness,
                lambda: member.rank,
                lambda: self.problem.describe(member.value),
            )

    def get_status(self) -> dict[str, object]:
        """Light snapshot of the current (or last) run."""
        return {
            "problem": type(self.problem).__name__,
            **self.state.to_dict(),
        }
