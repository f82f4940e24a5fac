import pytest

from puzzlehelper.core.errors import InvalidInputError
from puzzlehelper.core.trie import Trie, TrieWord


def test_adds_create_child_nodes():
    trie = Trie()
    trie.insert("HELLO")

    h = trie.child("H")
    assert h is not None and h.letter == "H"
    assert h.child("E") is not None
    assert trie.child("X") is None


@pytest.mark.parametrize("word,value", [
    ("THIRSTY", 123),
    ("THI", None),
    ("A", "payload"),
])
def test_insert_then_lookup(word, value):
    trie = Trie()
    trie.insert(word, value)
    assert trie.lookup(word) == (value, True)
    assert word in trie


def test_prefix_is_not_a_word():
    trie = Trie()
    trie.insert("THIRSTY", 123)
    assert trie.lookup("THI") == (None, False)
    assert trie.lookup("THIRSTYS") == (None, False)
    assert trie.lookup("THIS") == (None, False)
    assert trie.lookup("") == (None, False)
    assert "thirsty" not in trie


@pytest.mark.parametrize("bad", ["hello", "Hello", "HELLO WORLD", "IT'S", "", "A1"])
def test_insert_rejects_non_uppercase(bad):
    trie = Trie()
    with pytest.raises(InvalidInputError):
        trie.insert(bad)
    assert trie.size() == 0


def test_insert_overwrites_value_and_keeps_size():
    trie = Trie()
    trie.insert("STRING", 1)
    trie.insert("STRING", 2)
    trie.insert("STRINGING", 3)
    trie.insert("ABC")
    trie.insert("ABC")

    assert trie.size() == 3
    assert len(trie) == 3
    assert trie.lookup("STRING") == (2, True)


def test_enumerate_words_is_alphabetical_and_restartable():
    trie = Trie()
    for word, value in [("STRINGING", 123), ("STRING", 456), ("ABC", 7), ("ABD", 8)]:
        trie.insert(word, value)

    expected = [
        TrieWord("ABC", 7),
        TrieWord("ABD", 8),
        TrieWord("STRING", 456),
        TrieWord("STRINGING", 123),
    ]
    assert list(trie.enumerate_words()) == expected
    # second walk starts over
    assert list(trie) == expected


def test_word_break_slot_marks_boundaries_only():
    trie = Trie.from_words(["STRING", "STRINGING"])
    node = trie.root
    for ch in "STRI":
        node = node.child(ch)
    assert not node.at_word_break

    for ch in "NG":
        node = node.child(ch)
    assert node.is_word and node.at_word_break
    # the marker is not a letter child
    assert [letter for letter, _ in node.iter_children()] == ["I"]
