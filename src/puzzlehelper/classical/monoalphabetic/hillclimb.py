from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from puzzlehelper.classical.common import ALPHABET, decipher_with_key, mutate_key, random_key
from puzzlehelper.core.config import HillclimbConfig
from puzzlehelper.core.errors import ShortInputError
from puzzlehelper.core.logger import get_logger
from puzzlehelper.core.ngrams import FrequencyModel, NgramScanner
from puzzlehelper.core.results import HillclimbResult
from puzzlehelper.core.scoring import ngram_fitness

LOGGER = get_logger(__name__)

StepObserver = Callable[[int, float], None]


@dataclass(frozen=True)
class Candidate:
    # key[i] is the plaintext letter for cipher letter 'A'+i
    key: tuple[str, ...]
    fitness: float


class CandidateArchive:
    """Top-K candidates by fitness, best first. Not thread-safe; one optimizer owns it."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._items: list[Candidate] = []

    def offer(self, cand: Candidate) -> bool:
        if any(c.key == cand.key for c in self._items):
            return False
        if len(self._items) < self.capacity:
            self._items.append(cand)
        elif cand.fitness > self._items[-1].fitness:
            self._items[-1] = cand
        else:
            return False
        self._items.sort(key=lambda c: c.fitness, reverse=True)
        return True

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)


class HillclimbOptimizer:
    """
    Random-restart hill climbing over full substitution keys.

    Each generation starts from a random key. Every step looks at
    `local_lookaround` neighbours (the current key with `mutations` random
    swaps) and moves to the best one if it improves. When the best key of the
    generation has not improved for more than `regen_after` steps the
    generation ends and a fresh random key is drawn. Improvements are offered
    to a bounded archive, which is what run() returns.

    Best effort only: nothing guarantees the global optimum. Pass a seeded
    `rng` (or HillclimbConfig.seed) for reproducible runs.
    """

    def __init__(
        self,
        model: FrequencyModel,
        config: Optional[HillclimbConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        on_step: Optional[StepObserver] = None,
    ):
        self.model = model
        self.config = config or HillclimbConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.on_step = on_step

    def _letters_only(self, ciphertext: str) -> str:
        letters = "".join(NgramScanner(ciphertext, 1))
        if len(letters) < self.model.size:
            raise ShortInputError(
                f"Ciphertext has {len(letters)} letters; hill climbing with {self.model.size}-grams needs more."
            )
        return letters

    def _score(self, letters: str, key: Sequence[str]) -> Candidate:
        table = str.maketrans(ALPHABET, "".join(key))
        return Candidate(key=tuple(key), fitness=ngram_fitness(letters.translate(table), self.model))

    def climb(self, letters: str) -> CandidateArchive:
        cfg = self.config
        archive = CandidateArchive(cfg.candidate_count)

        current = self._score(letters, random_key(self.rng))
        best_of_generation = current
        archive.offer(best_of_generation)
        stale = 0

        generation = 1
        while generation <= cfg.generations:
            if current.fitness > best_of_generation.fitness:
                best_of_generation = current
                stale = 0
                archive.offer(best_of_generation)
            else:
                stale += 1

            if stale > cfg.regen_after:
                LOGGER.debug("Generation %d done, best fitness %.4f", generation, best_of_generation.fitness)
                current = self._score(letters, random_key(self.rng))
                best_of_generation = current
                stale = 0
                generation += 1
                continue

            best_neighbour = current
            for _ in range(cfg.local_lookaround):
                check = self._score(letters, mutate_key(current.key, cfg.mutations, self.rng))
                if check.fitness > best_neighbour.fitness:
                    best_neighbour = check
            current = best_neighbour

            if self.on_step is not None:
                self.on_step(generation, best_of_generation.fitness)

        return archive

    def run(self, ciphertext: str) -> list[HillclimbResult]:
        letters = self._letters_only(ciphertext)
        LOGGER.info(
            "Hill climbing %d letters: %d generations, regen after %d",
            len(letters),
            self.config.generations,
            self.config.regen_after,
        )
        archive = self.climb(letters)
        results = [
            HillclimbResult(fitness=c.fitness, key="".join(c.key), plaintext=decipher_with_key(ciphertext, c.key))
            for c in archive
        ]
        return sorted(results)


def solve_hillclimb(
    ciphertext: str,
    model: FrequencyModel,
    config: Optional[HillclimbConfig] = None,
    *,
    rng: Optional[random.Random] = None,
) -> list[HillclimbResult]:
    return HillclimbOptimizer(model, config, rng=rng).run(ciphertext)
