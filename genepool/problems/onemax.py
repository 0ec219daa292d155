"""OneMax: maximise the number of set bits in a fixed-length bit string.

A small reference problem exercising every mandatory operator. Candidate
values are read-only ``numpy`` boolean arrays; identity is their packed bytes.
"""

from __future__ import annotations

from typing import Any, Hashable

import numpy as np

from genepool.problems.base import EvolutionProblem


class OneMaxProblem(EvolutionProblem):
    def __init__(self, length: int = 32, *, seed: int | None = None, flip_rate: float | None = None):
        if length < 2:
            raise ValueError(f"length must be at least 2, got {length}")
        self.length = length
        self.flip_rate = flip_rate if flip_rate is not None else 1.0 / length
        self.rng = np.random.default_rng(seed)

    def _freeze(self, bits: np.ndarray) -> np.ndarray:
        bits = np.asarray(bits, dtype=bool)
        bits.setflags(write=False)
        return bits

    def get_fitness(self, value: np.ndarray) -> float:
        return float(np.count_nonzero(value))

    def crossover(self, parents: tuple[Any, Any]) -> np.ndarray:
        first, second = parents
        point = int(self.rng.integers(1, self.length))
        return self._freeze(np.concatenate([first[:point], second[point:]]))

    def mutate(self, value: np.ndarray) -> np.ndarray:
        flips = self.rng.random(self.length) < self.flip_rate
        if not flips.any():
            flips[int(self.rng.integers(0, self.length))] = True
        return self._freeze(np.logical_xor(value, flips))

    def random_candidate(self) -> np.ndarray:
        return self._freeze(self.rng.random(self.length) < 0.5)

    def general_hash(self, value: np.ndarray) -> Hashable:
        return np.packbits(value).tobytes()

    def describe(self, value: np.ndarray) -> str:
        return "".join("1" if bit else "0" for bit in value)

    def initial_population(self, size: int) -> list[np.ndarray]:
        return [self.random_candidate() for _ in range(size)]
