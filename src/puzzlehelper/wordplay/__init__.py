from .constraints import LetterConstraint, MultisetConstraint, SetConstraint
from .search import ConstrainedWordSearch, solve_letter_banks, solve_transposals

__all__ = [
    "LetterConstraint",
    "MultisetConstraint",
    "SetConstraint",
    "ConstrainedWordSearch",
    "solve_letter_banks",
    "solve_transposals",
]
