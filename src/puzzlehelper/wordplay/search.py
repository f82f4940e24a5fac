from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from puzzlehelper.core.budget import SearchBudget
from puzzlehelper.core.channels import Collector, ResultChannel
from puzzlehelper.core.config import WordSearchConfig
from puzzlehelper.core.logger import get_logger
from puzzlehelper.core.results import WordListResult
from puzzlehelper.core.trie import Trie, TrieNode

from .constraints import LetterConstraint, MultisetConstraint, SetConstraint

LOGGER = get_logger(__name__)

WordList = tuple[str, ...]


class ConstrainedWordSearch:
    """
    Multi-word trie walk under a letter budget.

    Each branch extends the current word one trie child at a time while the
    constraint allows the letter. At a word boundary the branch may also close
    the word and start over at the root. A word list is emitted when the
    constraint is satisfied at a word boundary.

    One task per starting letter runs on a thread pool; finished word lists
    travel through a ResultChannel to a single collector that applies the
    length / word-count filters.
    """

    def __init__(
        self,
        trie: Trie,
        constraint: LetterConstraint,
        config: Optional[WordSearchConfig] = None,
        *,
        budget: Optional[SearchBudget] = None,
    ):
        self.trie = trie
        self.constraint = constraint
        self.config = config or WordSearchConfig()
        # injected budgets are shared with the caller (e.g. to cancel from outside);
        # otherwise every run() gets a fresh one
        self.budget = budget

    def _new_budget(self) -> SearchBudget:
        if self.budget is not None:
            return self.budget
        return SearchBudget(max_seconds=self.config.max_seconds, max_nodes=self.config.max_nodes)

    def _accept(self, words: WordList) -> bool:
        return self.config.accepts(list(words))

    def run(self) -> list[WordListResult]:
        budget = self._new_budget()
        root = self.trie.root
        starts = [
            (letter, child)
            for letter in self.constraint.letters()
            if (child := root.child(letter)) is not None
        ]
        LOGGER.info(
            "%s search over %d starting letters (%s)",
            type(self.constraint).__name__,
            len(starts),
            "".join(letter for letter, _ in starts),
        )

        solutions: ResultChannel[WordList] = ResultChannel()
        collector = Collector(solutions, accept=self._accept, name="word-search-collector")
        try:
            if starts:
                with ThreadPoolExecutor(max_workers=len(starts), thread_name_prefix="word-search") as pool:
                    futures = [
                        pool.submit(self._search_from, letter, child, solutions, budget)
                        for letter, child in starts
                    ]
                    for fut in futures:
                        fut.result()
        finally:
            solutions.close()

        found = collector.join()
        if budget.exhausted:
            LOGGER.warning(
                "Word search stopped early after %d nodes; returning %d partial results",
                budget.nodes,
                len(found),
            )
        LOGGER.info("Word search finished: %d solutions", len(found))
        return sorted(WordListResult(words) for words in found)

    def _search_from(
        self, letter: str, child: TrieNode, solutions: ResultChannel[WordList], budget: SearchBudget
    ) -> None:
        self._recurse(child, self.constraint.consume(letter), self.constraint, (), letter, solutions, budget)

    def _recurse(
        self,
        node: TrieNode,
        constraint: LetterConstraint,
        word_start: LetterConstraint,
        words: WordList,
        current: str,
        solutions: ResultChannel[WordList],
        budget: SearchBudget,
    ) -> None:
        if not budget.spend():
            return

        if constraint.is_satisfied():
            if node.is_word:
                solutions.send(words + (current,))
            if constraint.stop_on_match:
                return

        for letter, child in node.iter_children():
            if constraint.allows(letter):
                self._recurse(child, constraint.consume(letter), word_start, words, current + letter, solutions, budget)

        # Word break: close `current` and restart at the root. With no max_words
        # a word that left the letter budget untouched (a letter bank word adding
        # no new letter) is never followed by another one, which keeps the
        # restart chain finite.
        if node.at_word_break and self._may_restart(constraint, word_start, len(words) + 1):
            self._recurse(self.trie.root, constraint, constraint, words + (current,), "", solutions, budget)

    def _may_restart(self, constraint: LetterConstraint, word_start: LetterConstraint, closed_words: int) -> bool:
        if self.config.max_words is None:
            return constraint is not word_start
        return self.config.room_for_another_word(closed_words)


def solve_transposals(
    text: str,
    trie: Trie,
    config: Optional[WordSearchConfig] = None,
    *,
    budget: Optional[SearchBudget] = None,
) -> list[WordListResult]:
    """Word lists whose combined letters are exactly the letters of `text` (as a multiset)."""
    return ConstrainedWordSearch(trie, MultisetConstraint.from_text(text), config, budget=budget).run()


def solve_letter_banks(
    text: str,
    trie: Trie,
    config: Optional[WordSearchConfig] = None,
    *,
    budget: Optional[SearchBudget] = None,
) -> list[WordListResult]:
    """Word lists whose combined unique letters are exactly the unique letters of `text`."""
    return ConstrainedWordSearch(trie, SetConstraint.from_text(text), config, budget=budget).run()
