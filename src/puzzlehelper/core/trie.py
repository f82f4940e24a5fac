from __future__ import annotations

import re
from typing import Any, Iterable, Iterator, NamedTuple, Optional

from .errors import InvalidInputError

A_ORD = ord("A")
ALPHABET_SIZE = 26

# Slot 26 is reserved: a boundary node carries a childless marker there so a
# search walking `children` sees "word ends here" and "word continues" side by side.
WORD_BREAK = 26

_ALL_UPPER_RE = re.compile(r"^[A-Z]+$")


class TrieWord(NamedTuple):
    word: str
    value: Any


class TrieNode:
    __slots__ = ("letter", "is_word", "value", "children")

    def __init__(self, letter: str = ""):
        self.letter = letter
        self.is_word = False
        self.value: Any = None
        self.children: list[Optional[TrieNode]] = [None] * (ALPHABET_SIZE + 1)

    def child(self, letter: str) -> Optional["TrieNode"]:
        idx = ord(letter) - A_ORD
        if 0 <= idx < ALPHABET_SIZE:
            return self.children[idx]
        return None

    def iter_children(self) -> Iterator[tuple[str, "TrieNode"]]:
        """(letter, node) pairs in A..Z order; the word-break slot is not included."""
        for idx in range(ALPHABET_SIZE):
            node = self.children[idx]
            if node is not None:
                yield chr(A_ORD + idx), node

    @property
    def at_word_break(self) -> bool:
        return self.children[WORD_BREAK] is not None

    def _mark_word(self, value: Any) -> None:
        self.is_word = True
        self.value = value
        if self.children[WORD_BREAK] is None:
            self.children[WORD_BREAK] = TrieNode("")

    def __repr__(self) -> str:
        kids = "".join(letter for letter, _ in self.iter_children())
        return f"TrieNode({self.letter!r}, is_word={self.is_word}, value={self.value!r}, children={kids!r})"


class Trie:
    """
    Letter-indexed prefix tree over uppercase A-Z strings.

    Built once from a dictionary (or from n-gram counts) and read-only after
    that, so any number of search threads can walk it without locking.
    """

    def __init__(self) -> None:
        self.root = TrieNode()

    @classmethod
    def from_words(cls, words: Iterable[str], value: Any = None) -> "Trie":
        trie = cls()
        for w in words:
            trie.insert(w, value)
        return trie

    def insert(self, word: str, value: Any = None) -> None:
        if not isinstance(word, str) or not _ALL_UPPER_RE.match(word):
            raise InvalidInputError(f"This trie only accepts upper case A-Z. String {word!r} is invalid.")

        node = self.root
        for ch in word:
            idx = ord(ch) - A_ORD
            nxt = node.children[idx]
            if nxt is None:
                nxt = TrieNode(ch)
                node.children[idx] = nxt
            node = nxt
        node._mark_word(value)

    def _walk(self, word: str) -> Optional[TrieNode]:
        node: Optional[TrieNode] = self.root
        for ch in word:
            node = node.child(ch)
            if node is None:
                return None
        return node

    def lookup(self, word: str) -> tuple[Any, bool]:
        """Return (value, True) for a stored word, (None, False) otherwise; a bare prefix is not a word."""
        node = self._walk(word)
        if node is None or not node.is_word:
            return None, False
        return node.value, True

    def child(self, letter: str) -> Optional[TrieNode]:
        return self.root.child(letter)

    def enumerate_words(self) -> Iterator[TrieWord]:
        """Depth-first, A..Z order. Each call starts a fresh traversal."""
        stack: list[tuple[TrieNode, str]] = [(self.root, "")]
        while stack:
            node, prefix = stack.pop()
            if node.is_word:
                yield TrieWord(prefix, node.value)
            for idx in range(ALPHABET_SIZE - 1, -1, -1):
                kid = node.children[idx]
                if kid is not None:
                    stack.append((kid, prefix + kid.letter))

    def size(self) -> int:
        # no cached counter; always a full walk
        return sum(1 for _ in self.enumerate_words())

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[TrieWord]:
        return self.enumerate_words()

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        return self.lookup(word)[1]
