from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional

from puzzlehelper.classical.common import apply_mapping
from puzzlehelper.core.budget import SearchBudget
from puzzlehelper.core.channels import Collector, ResultChannel
from puzzlehelper.core.config import SubstitutionConfig
from puzzlehelper.core.logger import get_logger
from puzzlehelper.core.ngrams import FrequencyModel
from puzzlehelper.core.results import SubstitutionSolution
from puzzlehelper.core.scoring import ngram_fitness
from puzzlehelper.core.trie import Trie
from puzzlehelper.core.utils import normalize_az, split_words

LOGGER = get_logger(__name__)

# cipher letter -> plain letter; not necessarily injective
ByteMap = dict[str, str]


def substitution_pattern(word: str) -> str:
    """
    Shape of a word: each new letter gets the next symbol A, B, C...,
    repeats reuse theirs. substitution_pattern("HELLO") == "ABCCD".
    """
    symbols: dict[str, str] = {}
    out = []
    for ch in word:
        sym = symbols.get(ch)
        if sym is None:
            sym = chr(ord("A") + len(symbols))
            symbols[ch] = sym
        out.append(sym)
    return "".join(out)


@dataclass
class WordMatchSet:
    word: str
    pattern: str
    matches: list[str] = field(default_factory=list)

    @classmethod
    def for_word(cls, word: str) -> "WordMatchSet":
        return cls(word=word, pattern=substitution_pattern(word))

    def add_match(self, candidate: str) -> None:
        self.matches.append(candidate)


def find_matches(match_sets: list[WordMatchSet], words: Iterable[str]) -> None:
    """Append every word from `words` to each match set sharing its pattern (mutates match_sets)."""
    by_pattern: dict[str, list[WordMatchSet]] = {}
    for ms in match_sets:
        by_pattern.setdefault(ms.pattern, []).append(ms)

    for entry in words:
        targets = by_pattern.get(substitution_pattern(entry))
        if targets:
            for ms in targets:
                ms.add_match(entry)


def build_match_sets(ciphertext: str, dictionary: Trie) -> list[WordMatchSet]:
    """
    One match set per distinct ciphertext word, filled from a full walk of the
    dictionary, fewest candidates first so the search prunes early.
    """
    seen: set[str] = set()
    match_sets: list[WordMatchSet] = []
    for word in split_words(ciphertext):
        if word not in seen:
            seen.add(word)
            match_sets.append(WordMatchSet.for_word(word))

    find_matches(match_sets, (tw.word for tw in dictionary.enumerate_words()))
    match_sets.sort(key=lambda ms: len(ms.matches))
    return match_sets


def partition_matches(count: int, match_set: WordMatchSet) -> list[WordMatchSet]:
    """
    Split one match set round-robin into `count` parts. A count of zero, or one
    larger than the number of candidates, is clamped to the candidate count.
    """
    n = len(match_set.matches)
    if count <= 0 or count > n:
        count = n
    parts = [WordMatchSet(match_set.word, match_set.pattern) for _ in range(count)]
    for idx, candidate in enumerate(match_set.matches):
        parts[idx % count].add_match(candidate)
    return parts


def extend_map(current: ByteMap, cipher_word: str, candidate: str) -> Optional[ByteMap]:
    """
    Copy of `current` extended so cipher_word decodes to candidate,
    or None if some cipher letter is already bound to a different plain letter.
    """
    extended = dict(current)
    for cipher_ch, plain_ch in zip(cipher_word, candidate):
        bound = extended.get(cipher_ch)
        if bound is None:
            extended[cipher_ch] = plain_ch
        elif bound != plain_ch:
            return None
    return extended


def collect_valid_maps(
    match_sets: list[WordMatchSet],
    current: ByteMap,
    results: ResultChannel[ByteMap],
    budget: Optional[SearchBudget] = None,
) -> None:
    """Backtrack over match_sets, sending every map consistent with all of them to `results`."""
    if budget is not None and not budget.spend():
        return

    if not match_sets:
        results.send(current)
        return

    head, rest = match_sets[0], match_sets[1:]
    for candidate in head.matches:
        extended = extend_map(current, head.word, candidate)
        if extended is None:
            continue
        collect_valid_maps(rest, extended, results, budget)


class SubstitutionPatternSolver:
    """
    Dictionary-driven solver for word-separated substitution ciphers.

    Every ciphertext word is matched against dictionary words of the same
    shape; the backtracking search then keeps only letter maps that stay
    consistent across all words. The first word's candidates are partitioned
    among `concurrency` workers sharing one results channel.
    """

    def __init__(
        self,
        dictionary: Trie,
        config: Optional[SubstitutionConfig] = None,
        *,
        model: Optional[FrequencyModel] = None,
        budget: Optional[SearchBudget] = None,
    ):
        self.dictionary = dictionary
        self.config = config or SubstitutionConfig()
        self.model = model
        # None: each solve() starts a fresh budget from the config
        self.budget = budget

    def _new_budget(self) -> SearchBudget:
        if self.budget is not None:
            return self.budget
        return SearchBudget(max_seconds=self.config.max_seconds, max_nodes=self.config.max_nodes)

    def find_maps(self, match_sets: list[WordMatchSet], budget: Optional[SearchBudget] = None) -> list[ByteMap]:
        if budget is None:
            budget = self._new_budget()
        if not match_sets:
            return []

        head, rest = match_sets[0], match_sets[1:]
        partitions = partition_matches(self.config.concurrency, head)
        if not partitions:
            LOGGER.info("No dictionary word matches the shape of %s (%s)", head.word, head.pattern)
            return []

        LOGGER.info(
            "Searching %d candidates for %s across %d workers",
            len(head.matches),
            head.word,
            len(partitions),
        )

        results: ResultChannel[ByteMap] = ResultChannel()
        collector = Collector(results, name="substitution-collector")
        try:
            with ThreadPoolExecutor(max_workers=len(partitions), thread_name_prefix="substitution") as pool:
                futures = [
                    pool.submit(collect_valid_maps, [part] + rest, {}, results, budget)
                    for part in partitions
                ]
                # join barrier: every partition is exhausted before the channel closes
                for fut in futures:
                    fut.result()
        finally:
            results.close()

        maps = collector.join()
        if budget.exhausted:
            LOGGER.warning(
                "Substitution search stopped early after %d nodes; returning %d partial maps",
                budget.nodes,
                len(maps),
            )
        return maps

    def _score(self, plaintext: str) -> Optional[float]:
        if self.model is None:
            return None
        if len(normalize_az(plaintext)) < self.model.size:
            LOGGER.debug("Text too short to score with %d-grams", self.model.size)
            return None
        return ngram_fitness(plaintext, self.model)

    def solve(self, ciphertext: str) -> list[SubstitutionSolution]:
        text = ciphertext.upper()
        match_sets = build_match_sets(text, self.dictionary)
        for ms in match_sets:
            LOGGER.debug("%s (%s): %d matches", ms.word, ms.pattern, len(ms.matches))

        solutions = []
        for mapping in self.find_maps(match_sets):
            plaintext = apply_mapping(text, mapping)
            solutions.append(SubstitutionSolution(mapping=mapping, plaintext=plaintext, fitness=self._score(plaintext)))

        # best fitness first; unscored solutions last, alphabetically
        solutions.sort(key=lambda s: (s.fitness is None, -(s.fitness or 0.0), s.plaintext))
        LOGGER.info("Substitution solve produced %d solutions", len(solutions))
        return solutions


def solve_substitution(
    ciphertext: str,
    dictionary: Trie,
    config: Optional[SubstitutionConfig] = None,
    *,
    model: Optional[FrequencyModel] = None,
    budget: Optional[SearchBudget] = None,
) -> list[SubstitutionSolution]:
    return SubstitutionPatternSolver(dictionary, config, model=model, budget=budget).solve(ciphertext)
