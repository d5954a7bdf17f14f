"""
patron/core/patterns.py
Historical trend statistics over a draw window: pacha rate, adjacent-draw
repetition, positional slot transitions and group hit rates.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from patron.core.groups import POSITIONS, PairCandidate, check_pacha, slot_pair
from patron.core.parser import Draw
from patron.utils.logger import get_logger

log = get_logger("core.patterns")

PACHA_THRESHOLD = 40
REPETITION_THRESHOLD = 30


class Group(Enum):
    A = "A"
    B = "B"
    C = "C"


class PachaPrediction(Enum):
    PACHA = "Probable Pacha"
    NO_PACHA = "Sin Pacha"


class RepetitionLevel(Enum):
    HIGH = "Repetición Alta"
    LOW = "Baja Repetición"


@dataclass(frozen=True)
class GroupPrediction:
    """The two groups with the most historical hits, strongest first."""

    first: Group
    second: Group

    def includes(self, group: Group) -> bool:
        return group in (self.first, self.second)

    @property
    def label(self) -> str:
        return f"Fuerza en Grupos {self.first.value} y {self.second.value}"


@dataclass(frozen=True)
class PatternSummary:
    pacha_percent: float
    pacha_prediction: PachaPrediction
    repetition_percent: float
    repetition_level: RepetitionLevel
    origin_best: str
    origin_percent: float
    target_best: str
    target_percent: float
    group_hits: dict[Group, float]
    group_prediction: GroupPrediction

    @property
    def expects_pacha(self) -> bool:
        return self.pacha_prediction is PachaPrediction.PACHA


def _best(tracker: Counter, default: str) -> str:
    hit = [pos for pos in POSITIONS if tracker.get(pos, 0) > 0]
    if not hit:
        return default
    return max(hit, key=lambda p: tracker[p])


def slot_transitions(history: list[Draw]) -> tuple[Counter, Counter]:
    """
    For each adjacent (current, previous) pair, count every origin slot in the
    previous draw whose 2-digit value reappears at a target slot in the
    current one.
    """
    origin: Counter = Counter()
    target: Counter = Counter()
    for current, prev in zip(history, history[1:]):
        for orig_pos in POSITIONS:
            pair = slot_pair(prev, orig_pos)
            for target_pos in POSITIONS:
                if slot_pair(current, target_pos) == pair:
                    origin[orig_pos] += 1
                    target[target_pos] += 1
    return origin, target


def group_hit_counts(history: list[Draw], group_a: list[PairCandidate],
                     b1: int, b2: int, c1: int, c2: int) -> dict[Group, int]:
    hits = {Group.A: 0, Group.B: 0, Group.C: 0}
    for draw in history:
        digits = set(draw.digits)
        if any(all(ch in draw.full for ch in a.pair) for a in group_a):
            hits[Group.A] += 1
        if b1 in digits and b2 in digits:
            hits[Group.B] += 1
        if c1 in digits and c2 in digits:
            hits[Group.C] += 1
    return hits


def analyze_patterns(
    history: list[Draw],
    group_a: list[PairCandidate],
    b1: int,
    b2: int,
    c1: int,
    c2: int,
    pacha_threshold: float = PACHA_THRESHOLD,
    repetition_threshold: float = REPETITION_THRESHOLD,
) -> PatternSummary | None:
    """Return None when there are fewer than two draws to compare."""
    total = len(history) - 1
    if total <= 0:
        return None

    pachas = sum(1 for d in history if check_pacha(d.digits))
    pacha_percent = pachas / len(history) * 100

    rep2 = 0
    for newer, older in zip(history, history[1:]):
        shared = set(newer.valid_digits()) & set(older.valid_digits())
        if len(shared) >= 2:
            rep2 += 1
    rep2_percent = rep2 / total * 100

    origin, target = slot_transitions(history)
    best_origin = _best(origin, "12")
    best_target = _best(target, "34")

    hits = group_hit_counts(history, group_a, b1, b2, c1, c2)
    ranked = sorted(hits, key=lambda g: hits[g], reverse=True)

    summary = PatternSummary(
        pacha_percent=pacha_percent,
        pacha_prediction=(
            PachaPrediction.PACHA if pacha_percent > pacha_threshold else PachaPrediction.NO_PACHA
        ),
        repetition_percent=rep2_percent,
        repetition_level=(
            RepetitionLevel.HIGH if rep2_percent > repetition_threshold else RepetitionLevel.LOW
        ),
        origin_best=best_origin,
        origin_percent=origin.get(best_origin, 0) / total * 100,
        target_best=best_target,
        target_percent=target.get(best_target, 0) / total * 100,
        group_hits={g: n / len(history) * 100 for g, n in hits.items()},
        group_prediction=GroupPrediction(first=ranked[0], second=ranked[1]),
    )
    log.debug(
        f"Patterns: pacha={pacha_percent:.1f}% rep2={rep2_percent:.1f}% "
        f"origin={best_origin} target={best_target} | {summary.group_prediction.label}"
    )
    return summary
