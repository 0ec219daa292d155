import asyncio
import time

from loguru import logger

from genepool import EngineConfig, EvolutionEngine
from genepool.problems.onemax import OneMaxProblem
from genepool.utils.logger_setup import setup_logger

LENGTH = 64
POPULATION_SIZE = 60


async def run_experiment() -> None:
    start_time = time.time()
    problem = OneMaxProblem(LENGTH, seed=7)
    config = EngineConfig(
        elite_ratio=0.1,
        new_blood_ratio=0.05,
        mutation_probability=0.3,
        target_fitness=float(LENGTH),
        target_generations_without_improvement=200,
        target_generation_count=2000,
        seed=7,
        log_interval=10,
    )
    engine = EvolutionEngine(
        problem, config, initial_population=problem.initial_population(POPULATION_SIZE)
    )

    population = await engine.run()

    best = population[0]
    status = engine.get_status()
    logger.info(f"Stop reason: {status['stop_reason']}")
    logger.info(f"Generations: {status['total_generations']}")
    logger.info(f"Best fitness: {best.fitness} / {LENGTH}")
    logger.info(f"Best member: {problem.describe(best.value)}")
    logger.info(f"Total duration: {time.time() - start_time:.2f} seconds")


def main() -> None:
    log_file_path = setup_logger(
        run_name="onemax", log_dir="logs", level="INFO", engine_level="DEBUG"
    )
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_experiment())


if __name__ == "__main__":
    main()
