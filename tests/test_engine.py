from __future__ import annotations

import asyncio
import itertools

import pytest

from genepool import (
    Candidate,
    ConfigurationError,
    EmptyPopulationError,
    EngineConfig,
    EvolutionEngine,
    FunctionalProblem,
    StopReason,
    StrategyError,
)
from genepool.evolution.strategies.removers import FitnessThresholdRemover
from genepool.problems.onemax import OneMaxProblem


def _config(**overrides) -> EngineConfig:
    options = {"elite_ratio": 0.0, "new_blood_ratio": 0.0, "mutation_probability": 0.0, "seed": 1}
    options.update(overrides)
    return EngineConfig(**options)


def test_single_generation_ranking(scripted_problem, three_members) -> None:
    problem = scripted_problem()
    engine = EvolutionEngine(problem, _config(target_generation_count=1))

    final = asyncio.run(engine.run(three_members))

    assert [c.value.id for c in final] == [2, 3, 1]
    assert [c.rank for c in final] == [3, 2, 1]
    assert final[0].fitness == 0.9
    assert engine.state.stop_reason is StopReason.GENERATION_LIMIT
    assert engine.state.total_generations == 1


def test_target_fitness_stops_immediately(scripted_problem, member) -> None:
    problem = scripted_problem()
    engine = EvolutionEngine(problem, _config(target_fitness=1.0))

    final = asyncio.run(engine.run([member(1, 0.3), member(2, 1.0), member(3, 0.5)]))

    assert final[0].fitness == 1.0
    assert engine.state.stop_reason is StopReason.TARGET_FITNESS
    assert engine.state.total_generations == 1
    # Budget check is never reached when an earlier condition fires.
    assert engine.state.generation_index == 0


def test_stagnation_stops_on_fourth_generation(scripted_problem, member) -> None:
    problem = scripted_problem()
    population = [member(i, i / 10) for i in range(10)]
    engine = EvolutionEngine(
        problem, _config(elite_ratio=0.1, target_generations_without_improvement=3)
    )

    final = asyncio.run(engine.run(population))

    assert engine.state.stop_reason is StopReason.STAGNATION
    assert engine.state.total_generations == 4
    assert engine.state.generations_without_improvement == 3
    assert final[0].fitness == 0.9
    assert problem.generation_best == [0.9, 0.9, 0.9, 0.9]


def test_stagnation_counter_resets_on_change(scripted_problem, member) -> None:
    problem = scripted_problem(bonuses=[0, 0, 5, 5, 5, 5])
    population = [member(i, i / 10) for i in range(10)]
    engine = EvolutionEngine(
        problem, _config(elite_ratio=0.1, target_generations_without_improvement=3)
    )

    asyncio.run(engine.run(population))

    assert engine.state.total_generations == 6
    assert problem.generation_best == pytest.approx([0.9, 0.9, 5.9, 5.9, 5.9, 5.9])
    assert problem.improvements == pytest.approx([0.9, 5.9])
    assert engine.state.best_fitness_ever == pytest.approx(5.9)
    assert engine.state.generations_without_improvement == 3


def test_stop_priority_prefers_target_fitness(scripted_problem, member) -> None:
    problem = scripted_problem()
    engine = EvolutionEngine(
        problem,
        _config(
            target_fitness=0.5,
            target_generations_without_improvement=1,
            target_generation_count=1,
        ),
    )

    asyncio.run(engine.run([member(1, 0.7), member(2, 0.1)]))

    assert engine.state.stop_reason is StopReason.TARGET_FITNESS


def test_population_size_is_restored_every_generation(scripted_problem, member) -> None:
    problem = scripted_problem()
    population = [member(i, i / 20) for i in range(20)]
    engine = EvolutionEngine(
        problem,
        _config(elite_ratio=0.2, new_blood_ratio=0.1, target_generation_count=5),
    )

    asyncio.run(engine.run(population))

    assert len(problem.seen_populations) == 5
    assert all(len(generation) == 20 for generation in problem.seen_populations)


def test_all_collisions_are_replenished(member) -> None:
    fresh: list[int] = []
    seen: list[list] = []

    def random_member():
        fresh.append(len(fresh))
        return member(100 + len(fresh), 0.0)

    def record(population):
        seen.append([c.value for c in population])
        return population

    problem = FunctionalProblem(
        get_fitness=lambda m: m.f,
        crossover=lambda parents: parents[0],
        mutator=lambda m: m,
        random_candidate_generator=random_member,
        general_hash=lambda m: "same",
        before_fitness_evaluated=record,
    )
    population = [member(i, i / 10) for i in range(6)]
    engine = EvolutionEngine(problem, _config(target_generation_count=2))

    asyncio.run(engine.run(population))

    second = seen[1]
    assert len(second) == 6
    assert len(fresh) == 5
    assert sum(1 for m in second if m.id >= 100) == 5


def test_elites_come_from_previous_generation(scripted_problem, member) -> None:
    problem = scripted_problem()
    population = [member(i, float(i)) for i in range(10)]
    engine = EvolutionEngine(
        problem, _config(elite_ratio=0.3, target_generation_count=2)
    )

    asyncio.run(engine.run(population))

    second = problem.seen_populations[1]
    assert [m.id for m in second[:3]] == [9, 8, 7]


def test_configuration_error_before_first_generation(scripted_problem, member) -> None:
    problem = scripted_problem()
    engine = EvolutionEngine(problem, EngineConfig(elite_ratio=0.5, new_blood_ratio=0.5))

    with pytest.raises(ConfigurationError):
        asyncio.run(engine.run([member(i, 0.1) for i in range(4)]))

    assert problem.fitness_calls == 0


def test_missing_population_is_configuration_error(scripted_problem) -> None:
    engine = EvolutionEngine(scripted_problem(), _config())

    with pytest.raises(ConfigurationError):
        asyncio.run(engine.run())


def test_initial_population_from_constructor(scripted_problem, three_members) -> None:
    engine = EvolutionEngine(
        scripted_problem(),
        _config(target_generation_count=1),
        initial_population=three_members,
    )

    final = asyncio.run(engine.run())

    assert len(final) == 3


def test_strategy_error_aborts_run(member) -> None:
    def crossover(parents):
        raise ValueError("incompatible parents")

    problem = FunctionalProblem(
        get_fitness=lambda m: m.f,
        crossover=crossover,
        mutator=lambda m: m,
        random_candidate_generator=lambda: member(0, 0.0),
    )
    engine = EvolutionEngine(problem, _config(target_generation_count=10))

    with pytest.raises(StrategyError) as excinfo:
        asyncio.run(engine.run([member(1, 0.1), member(2, 0.2)]))

    assert excinfo.value.hook == "crossover"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_hook_failure_names_the_hook(scripted_problem, three_members) -> None:
    problem = scripted_problem()
    problem.on_generation_best_fitness = lambda best: 1 / 0

    engine = EvolutionEngine(problem, _config(target_generation_count=3))

    with pytest.raises(StrategyError) as excinfo:
        asyncio.run(engine.run(three_members))

    assert excinfo.value.hook == "on_generation_best_fitness"


def _functional_problem(member, **hooks) -> FunctionalProblem:
    options = {
        "get_fitness": lambda m: m.f,
        "crossover": lambda parents: parents[0],
        "mutator": lambda m: m,
        "random_candidate_generator": lambda: member(0, 0.0),
    }
    options.update(hooks)
    return FunctionalProblem(**options)


def test_general_hash_failure_is_strategy_error(member) -> None:
    problem = _functional_problem(member, general_hash=lambda m: 1 / 0)
    engine = EvolutionEngine(problem, _config(target_generation_count=5))

    with pytest.raises(StrategyError) as excinfo:
        asyncio.run(engine.run([member(1, 0.1), member(2, 0.2)]))

    assert excinfo.value.hook == "general_hash"
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)


def test_elite_hash_failure_is_strategy_error(member) -> None:
    problem = _functional_problem(member, elite_hash=lambda m: m.missing)
    engine = EvolutionEngine(problem, _config(elite_ratio=0.2, target_generation_count=5))

    with pytest.raises(StrategyError) as excinfo:
        asyncio.run(engine.run([member(i, i / 10) for i in range(10)]))

    assert excinfo.value.hook == "elite_hash"
    assert isinstance(excinfo.value.__cause__, AttributeError)


def test_random_generator_failure_is_strategy_error(member) -> None:
    def exhausted():
        raise RuntimeError("generator exhausted")

    problem = _functional_problem(
        member, random_candidate_generator=exhausted, general_hash=lambda m: "same"
    )
    engine = EvolutionEngine(problem, _config(target_generation_count=5))

    with pytest.raises(StrategyError) as excinfo:
        asyncio.run(engine.run([member(1, 0.1), member(2, 0.2)]))

    assert excinfo.value.hook == "random_candidate"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_async_operators_are_awaited(member) -> None:
    seen: list[list] = []
    fresh = itertools.count(1000)

    async def crossover(parents):
        await asyncio.sleep(0)
        return member(parents[0].id, parents[0].f)

    async def mutator(m):
        return member(m.id, m.f + 0.01)

    async def same_identity(m):
        return "same"

    async def random_member():
        return member(next(fresh), 0.0)

    def record(population):
        seen.append([c.value for c in population])
        return population

    problem = _functional_problem(
        member,
        crossover=crossover,
        mutator=mutator,
        random_candidate_generator=random_member,
        general_hash=same_identity,
        before_fitness_evaluated=record,
    )
    engine = EvolutionEngine(
        problem, _config(mutation_probability=1.0, target_generation_count=2)
    )

    asyncio.run(engine.run([member(1, 0.1), member(2, 0.2), member(3, 0.3)]))

    assert len(seen) == 2
    assert all(isinstance(value, member) for value in seen[1])
    # Every offspring shares one awaited identity, so one survives dedup.
    assert len(seen[1]) == 3
    assert sorted(value.id for value in seen[1] if value.id >= 1000) == [1000, 1001]


def test_elimination_emptying_population(member) -> None:
    problem = FunctionalProblem(
        get_fitness=lambda m: m.f,
        crossover=lambda parents: parents[0],
        mutator=lambda m: m,
        random_candidate_generator=lambda: member(0, 0.0),
        eliminate_members=FitnessThresholdRemover(min_fitness=5.0, keep_at_least=0),
    )
    engine = EvolutionEngine(problem, _config())

    with pytest.raises(EmptyPopulationError):
        asyncio.run(engine.run([member(1, 0.1), member(2, 0.2)]))


def test_elimination_shrinks_ranking(member) -> None:
    problem = FunctionalProblem(
        get_fitness=lambda m: m.f,
        crossover=lambda parents: parents[0],
        mutator=lambda m: m,
        random_candidate_generator=lambda: member(0, 0.0),
        eliminate_members=FitnessThresholdRemover(min_fitness=0.5),
    )
    engine = EvolutionEngine(problem, _config(target_generation_count=1))

    final = asyncio.run(engine.run([member(1, 0.9), member(2, 0.1), member(3, 0.6)]))

    assert [c.value.id for c in final] == [1, 3]
    assert [c.rank for c in final] == [2, 1]


def test_async_hooks_are_awaited(member) -> None:
    events: list[str] = []

    async def fitness(m):
        await asyncio.sleep(0)
        return m.f

    async def after(population):
        events.append("after")
        return population

    async def on_best(best, population):
        events.append(f"best:{best}")

    problem = FunctionalProblem(
        get_fitness=fitness,
        crossover=lambda parents: parents[0],
        mutator=lambda m: m,
        random_candidate_generator=lambda: member(0, 0.0),
        after_fitness_evaluated=after,
        on_best_fitness_improved=on_best,
    )
    engine = EvolutionEngine(problem, _config(target_generation_count=1))

    asyncio.run(engine.run([member(1, 0.4), member(2, 0.8)]))

    assert events == ["after", "best:0.8"]


def test_custom_order_by_fitness(member) -> None:
    problem = FunctionalProblem(
        get_fitness=lambda m: m.f,
        crossover=lambda parents: parents[0],
        mutator=lambda m: m,
        random_candidate_generator=lambda: member(0, 0.0),
        order_by_fitness=lambda population: sorted(population, key=lambda c: c.fitness),
    )
    engine = EvolutionEngine(problem, _config(target_generation_count=1))

    final = asyncio.run(engine.run([member(1, 0.4), member(2, 0.8)]))

    assert [c.value.id for c in final] == [1, 2]
    assert final[0].rank == 2


def test_mutation_is_applied_to_offspring(scripted_problem, member) -> None:
    problem = scripted_problem(mutation_step=1.0)
    engine = EvolutionEngine(
        problem, _config(mutation_probability=1.0, target_generation_count=2)
    )

    asyncio.run(engine.run([member(1, 0.0), member(2, 0.5)]))

    assert problem.mutate_calls == 2
    bred = [m for m in problem.seen_populations[1] if m.id < 1000]
    assert bred
    assert all(m.f >= 1.0 for m in bred)


def test_history_and_status(scripted_problem, member) -> None:
    engine = EvolutionEngine(
        scripted_problem(), _config(target_generation_count=3, history_size=2)
    )

    asyncio.run(engine.run([member(1, 0.25), member(2, 0.75)]))

    status = engine.get_status()
    assert status["stop_reason"] == "generation_limit"
    assert status["total_generations"] == 3
    assert status["stopped"] is True
    assert len(engine.state.history) == 2
    last = engine.state.history[-1]
    assert last.generation == 3
    assert last.best >= last.mean >= last.worst


def test_run_state_is_reset_between_runs(scripted_problem, three_members) -> None:
    engine = EvolutionEngine(scripted_problem(), _config(target_generation_count=2))

    asyncio.run(engine.run(three_members))
    asyncio.run(engine.run(three_members))

    assert engine.state.total_generations == 2
    assert engine.state.generation_index == 2


def test_raw_candidates_and_records_both_accepted(scripted_problem, member) -> None:
    engine = EvolutionEngine(scripted_problem(), _config(target_generation_count=1))

    final = asyncio.run(
        engine.run([Candidate(value=member(1, 0.3)), member(2, 0.6)])
    )

    assert [c.value.id for c in final] == [2, 1]


def test_onemax_reaches_optimum() -> None:
    problem = OneMaxProblem(16, seed=3)
    config = EngineConfig(
        mutation_probability=0.6,
        target_fitness=16.0,
        target_generation_count=500,
        seed=3,
    )
    engine = EvolutionEngine(problem, config, initial_population=problem.initial_population(30))

    final = asyncio.run(engine.run())

    assert final[0].fitness == 16.0
    assert engine.state.stop_reason is StopReason.TARGET_FITNESS
    assert len(final) == 30
