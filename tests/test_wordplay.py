from collections import Counter
from itertools import product

import pytest

from puzzlehelper.core.budget import SearchBudget
from puzzlehelper.core.config import WordSearchConfig
from puzzlehelper.core.errors import InvalidInputError
from puzzlehelper.core.trie import Trie
from puzzlehelper.wordplay.constraints import MultisetConstraint, SetConstraint
from puzzlehelper.wordplay.search import ConstrainedWordSearch, solve_letter_banks, solve_transposals

LETTER_BANK_WORDS = ["LENDS", "NEEDLESS", "NEEDLES", "DELL", "SEND"]
ROOT_WORDS = ["TO", "OR", "ROOT", "TOR", "O", "ROT"]


def _word_sets(results):
    return {r.words for r in results}


# ----------------------------
# constraints
# ----------------------------

def test_multiset_counts_letters():
    c = MultisetConstraint.from_text("THIS IS A STRING WITH REPEATED LETTERS")
    assert c.counts == {
        "A": 2, "D": 1, "E": 5, "G": 1, "H": 2, "I": 4, "L": 1,
        "N": 1, "P": 1, "R": 3, "S": 4, "T": 6, "W": 1,
    }
    assert c.letters() == sorted(c.counts)


def test_multiset_consume_is_immutable():
    c = MultisetConstraint.from_text("TNT")
    after_t = c.consume("T")
    assert after_t.counts == {"N": 1, "T": 1}
    assert c.counts == {"N": 1, "T": 2}

    after_n = after_t.consume("N")
    # exhausted letters disappear
    assert "N" not in after_n.counts
    assert not after_n.allows("N")
    assert after_n.consume("T").is_satisfied()


def test_multiset_consume_missing_letter():
    with pytest.raises(InvalidInputError):
        MultisetConstraint.from_text("AB").consume("C")


def test_multiset_rejects_negative_counts():
    with pytest.raises(InvalidInputError):
        MultisetConstraint({"A": -1})


@pytest.mark.parametrize("text,expected", [
    ("NEEDLESS", {"D", "E", "L", "N", "S"}),
    ("a b c", {"A", "B", "C"}),
    ("", set()),
])
def test_set_constraint_bank(text, expected):
    assert SetConstraint.from_text(text).bank == expected


def test_set_constraint_reuse():
    c = SetConstraint.from_text("LENDS")
    once = c.consume("E")
    assert once.used == {"E"}
    assert once.consume("E") is once
    assert c.used == frozenset()

    full = c
    for letter in "LENDS":
        full = full.consume(letter)
    assert full.is_satisfied()
    assert full.allows("E")
    assert not full.allows("X")


def test_set_constraint_foreign_letter():
    with pytest.raises(InvalidInputError):
        SetConstraint.from_text("LENDS").consume("X")


# ----------------------------
# letter banks
# ----------------------------

def test_letter_bank_single_words():
    trie = Trie.from_words(LETTER_BANK_WORDS)
    config = WordSearchConfig(min_word_len=1, max_word_len=100, min_words=1, max_words=1)
    results = solve_letter_banks("LENDS", trie, config)
    assert _word_sets(results) == {("LENDS",), ("NEEDLES",), ("NEEDLESS",)}


def test_letter_bank_min_word_length():
    trie = Trie.from_words(["LENDS", "NEEDLESS"])
    config = WordSearchConfig(min_word_len=6, max_word_len=100, min_words=1, max_words=1)
    results = solve_letter_banks("LENDS", trie, config)
    assert _word_sets(results) == {("NEEDLESS",)}


def test_letter_bank_multi_word():
    trie = Trie.from_words(["SEND", "DELL", "LEND"])
    config = WordSearchConfig(max_words=2)
    results = solve_letter_banks("LENDS", trie, config)
    assert ("SEND", "DELL") in _word_sets(results)
    assert ("DELL", "SEND") in _word_sets(results)
    for r in results:
        assert set("".join(r.words)) == set("LENDS")


def test_letter_bank_bounded_allows_words_adding_no_letter():
    words = ["SEND", "ENDS", "DELL"]
    trie = Trie.from_words(words)
    results = solve_letter_banks("LENDS", trie, WordSearchConfig(max_words=3))

    # DELL plus at least one of SEND / ENDS, in every order, up to three words
    expected = {
        seq
        for n in (2, 3)
        for seq in product(words, repeat=n)
        if "DELL" in seq and {"SEND", "ENDS"} & set(seq)
    }
    assert len(expected) == 22
    assert ("SEND", "ENDS", "DELL") in expected
    assert _word_sets(results) == expected
    assert len(results) == len(expected)


def test_letter_bank_unbounded_words_terminates():
    trie = Trie.from_words(["A", "AB", "B"])
    results = solve_letter_banks("AB", trie)
    words = _word_sets(results)
    assert ("AB",) in words
    assert ("A", "B") in words
    assert ("B", "A") in words
    for r in results:
        assert set("".join(r.words)) == {"A", "B"}


# ----------------------------
# transposals
# ----------------------------

def test_transposal_of_lends():
    trie = Trie.from_words(LETTER_BANK_WORDS)
    assert _word_sets(solve_transposals("LENDS", trie)) == {("LENDS",)}


def test_transposal_multiword_uses_exact_letters():
    trie = Trie.from_words(ROOT_WORDS)
    results = solve_transposals("root", trie)
    assert _word_sets(results) == {
        ("ROOT",),
        ("TO", "OR"), ("OR", "TO"),
        ("TOR", "O"), ("O", "TOR"),
        ("ROT", "O"), ("O", "ROT"),
    }
    for r in results:
        assert Counter("".join(r.words)) == Counter("ROOT")
    assert results == sorted(results)


@pytest.mark.parametrize("config,expected", [
    (WordSearchConfig(max_words=1), {("ROOT",)}),
    (WordSearchConfig(min_words=2), {("TO", "OR"), ("OR", "TO"), ("TOR", "O"), ("O", "TOR"), ("ROT", "O"), ("O", "ROT")}),
    (WordSearchConfig(min_word_len=2), {("ROOT",), ("TO", "OR"), ("OR", "TO")}),
    (WordSearchConfig(max_word_len=3, min_word_len=2), {("TO", "OR"), ("OR", "TO")}),
])
def test_transposal_filters(config, expected):
    trie = Trie.from_words(ROOT_WORDS)
    assert _word_sets(solve_transposals("ROOT", trie, config)) == expected


def test_transposal_no_letters_or_no_match():
    trie = Trie.from_words(ROOT_WORDS)
    assert solve_transposals("", trie) == []
    assert solve_transposals("XYZ", trie) == []


def test_search_budget_stops_early():
    trie = Trie.from_words(ROOT_WORDS)
    budget = SearchBudget(max_nodes=1)
    results = solve_transposals("ROOT", trie, budget=budget)
    assert budget.exhausted
    assert len(results) < 7


def test_cancelled_budget_returns_nothing():
    trie = Trie.from_words(ROOT_WORDS)
    budget = SearchBudget()
    budget.cancel()
    assert solve_transposals("ROOT", trie, budget=budget) == []


@pytest.mark.parametrize("kwargs", [
    {"min_word_len": 0},
    {"min_words": 0},
    {"min_words": 3, "max_words": 2},
    {"min_word_len": 5, "max_word_len": 4},
])
def test_word_search_config_validation(kwargs):
    with pytest.raises(InvalidInputError):
        WordSearchConfig(**kwargs)


def test_search_object_can_run_twice():
    trie = Trie.from_words(["AB"])
    # a full run spends two nodes
    search = ConstrainedWordSearch(trie, MultisetConstraint.from_text("AB"), WordSearchConfig(max_nodes=3))
    assert _word_sets(search.run()) == {("AB",)}
    assert _word_sets(search.run()) == {("AB",)}


def test_injected_budget_is_shared_between_runs():
    trie = Trie.from_words(["AB"])
    budget = SearchBudget()
    search = ConstrainedWordSearch(trie, MultisetConstraint.from_text("AB"), budget=budget)
    assert len(search.run()) == 1
    budget.cancel()
    assert search.run() == []
