from __future__ import annotations

from .errors import ShortInputError
from .ngrams import FrequencyModel
from .utils import normalize_az

# Score charged for every n-gram the model has never seen
UNSEEN_NGRAM_PENALTY = -1000.0


def ngram_fitness(text: str, model: FrequencyModel, *, penalty: float = UNSEEN_NGRAM_PENALTY) -> float:
    """
    Sum of log10 probabilities of every n-gram window in `text` (letters only).
    Higher is better (less negative).
    """
    s = normalize_az(text)
    n = model.size
    if len(s) < n:
        raise ShortInputError(f"Text has {len(s)} letters; at least {n} are needed to score {n}-grams.")

    logp = model.logp
    total = 0.0
    for i in range(len(s) - n + 1):
        total += logp.get(s[i:i + n], penalty)
    return total

