"""
patron/core/groups.py
Digit/pair groupings built from a draw window:

  A  positional pairs of the latest draw, ranked by accumulated frequency
  B  "rescue" digits seen in draws 2-3 but missing from the latest
  C  all ten digits ranked by delay (most overdue first)
  D  pairs crossing B and C, ranked by summed delay
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from patron.core.frequency import DIGITS, digit_delay, top_digit
from patron.core.parser import Draw
from patron.utils.logger import get_logger

log = get_logger("core.groups")

POSITIONS: tuple[str, ...] = ("12", "13", "14", "23", "24", "34")

POS_INDICES: dict[str, tuple[int, int]] = {
    "12": (0, 1), "13": (0, 2), "14": (0, 3),
    "23": (1, 2), "24": (1, 3), "34": (2, 3),
}


def check_pacha(digits) -> bool:
    """True if any value repeats."""
    digits = list(digits)
    return len(set(digits)) < len(digits)


def slot_pair(draw: Draw, pos: str) -> str:
    i, j = POS_INDICES[pos]
    return draw.full[i] + draw.full[j]


def _pair_counts(history: list[Draw]) -> tuple[Counter, dict[str, Counter]]:
    """
    One pass over the window: how often each pair string shows up at any slot,
    and per pair string, how often at each slot.
    """
    totals: Counter = Counter()
    by_slot: dict[str, Counter] = {}
    for draw in history:
        for pos in POSITIONS:
            pair = slot_pair(draw, pos)
            totals[pair] += 1
            by_slot.setdefault(pair, Counter())[pos] += 1
    return totals, by_slot


def _best_slot(slot_counts: Counter | None) -> str:
    if not slot_counts:
        return "12"
    # max() keeps the first slot on ties
    return max((pos for pos in POSITIONS if pos in slot_counts), key=lambda p: slot_counts[p])


# ── Group A ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class PairCandidate:
    pair: str
    freq: int
    pair_count: int
    best_pos: str
    original_pos: str


def _pacha_digit(latest: Draw, digit_freq: dict[int, int]) -> int:
    counts = Counter(latest.valid_digits())
    for d in latest.digits:
        if d is not None and counts[d] >= 2:
            return d
    return top_digit(digit_freq)


def get_group_a(history: list[Draw], digit_freq: dict[int, int]) -> list[PairCandidate]:
    latest = history[0]
    pair_totals, _ = _pair_counts(history)

    latest_pairs = []
    for pos in POSITIONS:
        i, j = POS_INDICES[pos]
        pair = slot_pair(latest, pos)
        freq = digit_freq.get(latest.digits[i], 0) + digit_freq.get(latest.digits[j], 0)
        latest_pairs.append(PairCandidate(
            pair=pair,
            freq=freq,
            pair_count=pair_totals.get(pair, 0),
            best_pos=pos,
            original_pos=pos,
        ))

    ranked = sorted(latest_pairs, key=lambda c: c.freq, reverse=True)

    if check_pacha(latest.digits):
        digit = _pacha_digit(latest, digit_freq)
        pacha_pair = f"{digit}{digit}"
        if not any(c.pair == pacha_pair for c in ranked):
            doubled = sum(1 for h in history if h.digits.count(digit) >= 2)
            ranked.insert(0, PairCandidate(
                pair=pacha_pair,
                freq=digit_freq.get(digit, 0) * 2,
                pair_count=doubled,
                best_pos="12",
                original_pos="12",
            ))
            log.debug(f"Group A: forced pacha pair {pacha_pair}")

    return ranked[:6]


# ── Group B ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class GroupB:
    b1: int
    b2: int

    @property
    def pair(self) -> str:
        return f"{self.b1}{self.b2}"


def get_group_b(history: list[Draw], digit_freq: dict[int, int]) -> GroupB:
    if len(history) < 3:
        return GroupB(b1=0, b2=1)

    latest = set(history[0].digits)
    seen: list[int] = []
    for d in (*history[1].digits, *history[2].digits):
        if d is not None and d not in seen:
            seen.append(d)

    candidates = sorted(
        (d for d in seen if d not in latest),
        key=lambda d: digit_freq.get(d, 0),
        reverse=True,
    )
    return GroupB(
        b1=candidates[0] if len(candidates) > 0 else 0,
        b2=candidates[1] if len(candidates) > 1 else 1,
    )


# ── Group C ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class DigitRacha:
    digit: int
    racha: int
    freq: int


@dataclass(frozen=True)
class GroupC:
    c1: int
    c2: int
    en_fuego: int
    all: tuple[DigitRacha, ...]
    sorted_by_racha: tuple[DigitRacha, ...]

    @property
    def pair(self) -> str:
        return f"{self.c1}{self.c2}"

    def racha_of(self, digit: int) -> int:
        for row in self.all:
            if row.digit == digit:
                return row.racha
        return 0


def get_group_c(history: list[Draw], digit_freq: dict[int, int]) -> GroupC:
    rows = tuple(
        DigitRacha(digit=d, racha=digit_delay(history, d), freq=digit_freq.get(d, 0))
        for d in DIGITS
    )
    by_racha = tuple(sorted(rows, key=lambda r: r.racha, reverse=True))
    return GroupC(
        c1=by_racha[0].digit,
        c2=by_racha[1].digit,
        en_fuego=by_racha[0].digit,
        all=rows,
        sorted_by_racha=by_racha,
    )


# ── Group D ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class DelayPair:
    pair: str
    sum: int
    best_pos: str
    delay: int
    pair_count: int


def get_group_d(b1: int, b2: int, c1: int, c2: int, history: list[Draw]) -> list[DelayPair]:
    racha = {d: digit_delay(history, d) for d in (b1, b2, c1, c2)}

    combos = [(b1, c1), (b1, c2), (b2, c1), (b2, c2), (b1, b2), (c1, c2)]
    combos.sort(key=lambda xy: racha[xy[0]] + racha[xy[1]], reverse=True)

    pair_totals, by_slot = _pair_counts(history)

    pairs = []
    for x, y in combos:
        pair = f"{x}{y}"
        total = racha[x] + racha[y]
        pairs.append(DelayPair(
            pair=pair,
            sum=total,
            best_pos=_best_slot(by_slot.get(pair)),
            delay=total,
            pair_count=pair_totals.get(pair, 0),
        ))
    return pairs
