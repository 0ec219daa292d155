"""Concurrent fitness evaluation.

`FitnessEvaluator` fans one task per candidate out onto the event loop, bounded
by a semaphore, and joins them back in input order.
"""

from __future__ import annotations

import asyncio
import inspect
import os

from loguru import logger

from genepool.population.candidate import Candidate
from genepool.problems.base import EvolutionProblem
from genepool.problems.guard import resolve, strategy_guard

__all__ = ["FitnessEvaluator"]


class FitnessEvaluator:
    def __init__(
        self,
        problem: EvolutionProblem,
        *,
        max_concurrency: int | None = None,
        offload_sync: bool = False,
    ):
        self.problem = problem
        self.max_concurrency = max_concurrency or max(1, os.cpu_count() or 1)
        self.offload_sync = offload_sync

    async def evaluate(self, population: list[Candidate]) -> list[Candidate]:
        """Return new records carrying a fresh fitness, in the input order."""
        if not population:
            return []
        if self.problem.batch_fitness:
            return await self._evaluate_batch(population)

        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [
            asyncio.ensure_future(self._score(candidate, semaphore))
            for candidate in population
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # Cancel & drain whatever is still in flight before propagating.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _score(self, candidate: Candidate, semaphore: asyncio.Semaphore) -> Candidate:
        get_fitness = self.problem.get_fitness
        async with semaphore:
            with strategy_guard("get_fitness"):
                if self.offload_sync and not inspect.iscoroutinefunction(get_fitness):
                    # A sync wrapper may still hand back a coroutine.
                    raw = await resolve(await asyncio.to_thread(get_fitness, candidate.value))
                else:
                    raw = await resolve(get_fitness(candidate.value))
                fitness = float(raw)
        return candidate.with_fitness(fitness)

    async def _evaluate_batch(self, population: list[Candidate]) -> list[Candidate]:
        with strategy_guard("evaluate_batch"):
            scores = list(
                await resolve(self.problem.evaluate_batch([c.value for c in population]))
            )
            if len(scores) != len(population):
                raise ValueError(
                    f"expected {len(population)} fitness values, got {len(scores)}"
                )
            fitnesses = [float(s) for s in scores]
        logger.trace("[FitnessEvaluator] Batch-scored {} member(s)", len(fitnesses))
        return [c.with_fitness(f) for c, f in zip(population, fitnesses)]

