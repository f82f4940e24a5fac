from .monoalphabetic.caesar import caesar_shifts
from .monoalphabetic.hillclimb import HillclimbOptimizer, solve_hillclimb
from .monoalphabetic.substitution import SubstitutionPatternSolver, solve_substitution, substitution_pattern

__all__ = [
    "caesar_shifts",
    "HillclimbOptimizer",
    "solve_hillclimb",
    "SubstitutionPatternSolver",
    "solve_substitution",
    "substitution_pattern",
]
