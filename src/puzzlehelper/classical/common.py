from __future__ import annotations

import random
from typing import Mapping, Sequence

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
A_ORD = ord("A")
Z_ORD = ord("Z")


def is_az(ch: str) -> bool:
    o = ord(ch)
    return A_ORD <= o <= Z_ORD


def shift_char(ch: str, shift: int) -> str:
    """Shift one A-Z character by 'shift' (can be negative)."""
    idx = (ord(ch) - A_ORD + shift) % 26
    return chr(A_ORD + idx)


def shift_text(text: str, shift: int) -> str:
    """Caesar shift; preserves non-letters; preserves case."""
    out = []
    for ch in text:
        up = ch.upper()
        if ch.isascii() and ch.isalpha():
            shifted = shift_char(up, shift)
            out.append(shifted if ch.isupper() else shifted.lower())
        else:
            out.append(ch)
    return "".join(out)


def apply_mapping(text: str, mapping: Mapping[str, str]) -> str:
    """
    Replace each cipher letter found in `mapping` (cipher -> plain).
    Unmapped letters and non-letters pass through; case is preserved.
    """
    out = []
    for ch in text:
        up = ch.upper()
        plain = mapping.get(up)
        if plain is None:
            out.append(ch)
        else:
            out.append(plain if ch.isupper() else plain.lower())
    return "".join(out)


def decipher_with_key(text: str, key: Sequence[str]) -> str:
    """key[i] is the plaintext letter for cipher letter 'A'+i."""
    return apply_mapping(text, dict(zip(ALPHABET, key)))


def random_key(rng: random.Random) -> list[str]:
    letters = list(ALPHABET)
    rng.shuffle(letters)
    return letters


def mutate_key(key: Sequence[str], swaps: int, rng: random.Random) -> list[str]:
    """Copy of `key` with `swaps` random pairwise swaps (a swap may pick the same slot twice)."""
    new_key = list(key)
    n = len(new_key)
    for _ in range(swaps):
        i, j = rng.randrange(n), rng.randrange(n)
        new_key[i], new_key[j] = new_key[j], new_key[i]
    return new_key
