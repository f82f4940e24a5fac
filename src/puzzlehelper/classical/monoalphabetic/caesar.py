from __future__ import annotations

from puzzlehelper.core.results import CaesarShift

from puzzlehelper.classical.common import shift_text


def caesar_shifts(text: str) -> list[CaesarShift]:
    """Every forward shift 1..25 of `text`, case and punctuation preserved."""
    return [CaesarShift(shift=k, text=shift_text(text, k)) for k in range(1, 26)]
