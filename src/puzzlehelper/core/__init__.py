from .errors import InvalidInputError, PuzzleError, ShortInputError
from .ngrams import FrequencyModel, NgramScanner
from .results import CaesarShift, HillclimbResult, SubstitutionSolution, WordListResult
from .trie import Trie, TrieNode, TrieWord

__all__ = [
    "PuzzleError",
    "InvalidInputError",
    "ShortInputError",
    "FrequencyModel",
    "NgramScanner",
    "Trie",
    "TrieNode",
    "TrieWord",
    "WordListResult",
    "SubstitutionSolution",
    "HillclimbResult",
    "CaesarShift",
]
