"""
patron/core/frequency.py
Digit frequency and delay ("racha") over a draw window.
"""
from __future__ import annotations

from collections import Counter

from patron.core.parser import Draw

DIGITS = range(10)


def get_frequencies(history: list[Draw]) -> dict[int, int]:
    """
    Count every digit occurrence in the window. Repeats inside one draw count
    each time; invalid slots are skipped.
    """
    counter: Counter = Counter()
    for draw in history:
        counter.update(draw.valid_digits())
    return dict(counter)


def top_digit(digit_freq: dict[int, int]) -> int:
    """Most frequent digit, ties go to the smaller digit."""
    if not digit_freq:
        return 0
    return max(sorted(digit_freq), key=lambda d: digit_freq[d])


def digit_delay(history: list[Draw], digit: int) -> int:
    """
    1-based index of the first draw (from the latest) containing `digit`.
    Saturates at len(history) + 1 when the digit never shows up.
    """
    for idx, draw in enumerate(history):
        if digit in draw.digits:
            return idx + 1
    return len(history) + 1


def get_delays(history: list[Draw]) -> dict[int, int]:
    return {d: digit_delay(history, d) for d in DIGITS}
