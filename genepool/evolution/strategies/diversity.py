from __future__ import annotations

from typing import Any, Callable, Hashable

from genepool.population.candidate import Candidate
from genepool.problems.guard import resolve


async def unique_by(
    population: list[Candidate], key: Callable[[Any], Hashable]
) -> list[Candidate]:
    """Drop members whose ``key(value)`` was already seen; keeps first occurrences in order.

    *key* may be a coroutine function; each key is awaited before it is compared.
    """
    seen: set[Hashable] = set()
    unique: list[Candidate] = []
    for candidate in population:
        identity = await resolve(key(candidate.value))
        if identity in seen:
            continue
        seen.add(identity)
        unique.append(candidate)
    return unique


async def replenish(
    pool: list[Candidate], target_size: int, generator: Callable[[], Any]
) -> list[Candidate]:
    """Append fresh random candidates until *pool* has *target_size* members.

    Fresh members are not checked against any identity hash.
    """
    shortfall = max(0, target_size - len(pool))
    fresh = [Candidate(value=await resolve(generator())) for _ in range(shortfall)]
    return list(pool) + fresh
