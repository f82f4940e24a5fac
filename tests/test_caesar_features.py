import pytest

from puzzlehelper.classical.common import apply_mapping, decipher_with_key, shift_text
from puzzlehelper.classical.monoalphabetic.caesar import caesar_shifts
from puzzlehelper.core.features import letter_frequencies


def test_caesar_shifts_all_25():
    shifts = caesar_shifts("Abc, xyz!")
    assert [s.shift for s in shifts] == list(range(1, 26))
    assert shifts[0].text == "Bcd, yza!"
    assert shifts[-1].text == "Zab, wxy!"
    assert str(shifts[0]) == "1. Bcd, yza!"


def test_caesar_round_trip():
    text = "Attack at Dawn."
    for s in caesar_shifts(text):
        assert shift_text(s.text, -s.shift) == text


@pytest.mark.parametrize("text,shift,expected", [
    ("HAL", 1, "IBM"),
    ("ibm", -1, "hal"),
    ("Zz", 27, "Aa"),
    ("héllo", 1, "iémmp"),
])
def test_shift_text(text, shift, expected):
    assert shift_text(text, shift) == expected


def test_apply_mapping_leaves_unmapped_letters():
    assert apply_mapping("Abc-d", {"A": "X", "C": "Y"}) == "Xby-d"


def test_decipher_with_identity_key():
    assert decipher_with_key("Hello!", "ABCDEFGHIJKLMNOPQRSTUVWXYZ") == "Hello!"


def test_letter_frequencies():
    table = letter_frequencies("a, A b!")
    assert [(row.letter, row.count) for row in table] == [("A", 2), ("B", 1)]
    assert table[0].percent == pytest.approx(200 / 3)
    assert str(table[1]) == "B: 1 (33.33%)"


def test_letter_frequencies_ties_and_empty():
    assert [row.letter for row in letter_frequencies("cba")] == ["A", "B", "C"]
    assert letter_frequencies("123 ...") == []
