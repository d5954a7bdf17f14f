"""
patron/core/scorer.py
Back-test the matrix against recent draws and rank its candidates.

The score of a candidate is a base (average digit frequency and delay) plus
the weight of every rule whose predicate holds. Rules are plain data so they
can be tested one by one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from patron.core.groups import DelayPair, GroupC, PairCandidate, check_pacha
from patron.core.matrix import Matrix, flatten
from patron.core.parser import Draw, parse_draw
from patron.core.patterns import Group, PatternSummary
from patron.utils.logger import get_logger

log = get_logger("core.scorer")

BACKTEST_WINDOW = 15
FREQ_FACTOR = 5
DELAY_FACTOR = 10

DEFAULT_WEIGHTS: dict[str, float] = {
    "pacha_match": 30,
    "repeats_latest": 25,
    "target_12_in_group_a": 15,
    "target_34_in_group_d": 15,
    "group_a_strength": 20,
    "group_c_strength": 20,
}


# ── Back-test ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class PredictionHits:
    hits4: int
    hits3: int
    total: int


def positional_matches(a: str, b: str) -> int:
    return sum(1 for x, y in zip(a, b) if x == y)


def check_predictions(matrix: Matrix, history: list[Draw], window: int = BACKTEST_WINDOW) -> PredictionHits:
    """
    For each recent draw: an exact cell match counts as hits4, otherwise a
    cell sharing at least 3 positions counts as hits3.
    """
    recent = history[:window]
    cells = flatten(matrix)
    hits4 = 0
    hits3 = 0
    for draw in recent:
        if draw.full in cells:
            hits4 += 1
        elif any(positional_matches(cell, draw.full) >= 3 for cell in cells):
            hits3 += 1
    return PredictionHits(hits4=hits4, hits3=hits3, total=len(recent))


# ── Scoring ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringContext:
    """Everything the rules look at, computed once per analysis run."""

    digit_freq: dict[int, int]
    group_a: list[PairCandidate]
    group_c: GroupC
    group_d: list[DelayPair]
    patterns: PatternSummary
    latest: Draw


@dataclass(frozen=True)
class Candidate:
    num: str
    digits: tuple[int | None, ...]

    @classmethod
    def from_num(cls, num: str) -> "Candidate":
        return cls(num=num, digits=parse_draw(num).digits)


@dataclass(frozen=True)
class ScoringRule:
    name: str
    weight: float
    predicate: Callable[[Candidate, ScoringContext], bool] = field(compare=False)

    def apply(self, cand: Candidate, ctx: ScoringContext) -> float:
        return self.weight if self.predicate(cand, ctx) else 0


@dataclass(frozen=True)
class ScoredCandidate:
    num: str
    score: float

    @property
    def is_pacha(self) -> bool:
        return check_pacha(self.num)


def _pacha_match(cand: Candidate, ctx: ScoringContext) -> bool:
    return check_pacha(cand.digits) == ctx.patterns.expects_pacha


def _repeats_latest(cand: Candidate, ctx: ScoringContext) -> bool:
    return sum(1 for d in cand.digits if d in ctx.latest.digits) >= 2


def _target_12_in_group_a(cand: Candidate, ctx: ScoringContext) -> bool:
    return ctx.patterns.target_best == "12" and any(a.pair == cand.num[:2] for a in ctx.group_a)


def _target_34_in_group_d(cand: Candidate, ctx: ScoringContext) -> bool:
    return ctx.patterns.target_best == "34" and any(d.pair == cand.num[2:] for d in ctx.group_d)


def _group_a_strength(cand: Candidate, ctx: ScoringContext) -> bool:
    if not ctx.patterns.group_prediction.includes(Group.A):
        return False
    return any(
        str(d) in a.pair
        for d in cand.digits if d is not None
        for a in ctx.group_a
    )


def _group_c_strength(cand: Candidate, ctx: ScoringContext) -> bool:
    if not ctx.patterns.group_prediction.includes(Group.C):
        return False
    return ctx.group_c.c1 in cand.digits or ctx.group_c.c2 in cand.digits


_PREDICATES: dict[str, Callable[[Candidate, ScoringContext], bool]] = {
    "pacha_match": _pacha_match,
    "repeats_latest": _repeats_latest,
    "target_12_in_group_a": _target_12_in_group_a,
    "target_34_in_group_d": _target_34_in_group_d,
    "group_a_strength": _group_a_strength,
    "group_c_strength": _group_c_strength,
}


def build_rules(weights: dict[str, float] | None = None) -> list[ScoringRule]:
    """Rule list in evaluation order; unknown weight names are rejected."""
    weights = {**DEFAULT_WEIGHTS, **(weights or {})}
    unknown = set(weights) - set(_PREDICATES)
    if unknown:
        raise ValueError(f"Unknown scoring rules: {sorted(unknown)}")
    return [ScoringRule(name, weights[name], pred) for name, pred in _PREDICATES.items()]


def base_score(cand: Candidate, ctx: ScoringContext,
               freq_factor: float = FREQ_FACTOR, delay_factor: float = DELAY_FACTOR) -> float:
    # Always averaged over 4 slots, missing lookups count as 0.
    avg_freq = sum(ctx.digit_freq.get(d, 0) for d in cand.digits) / 4
    avg_delay = sum(ctx.group_c.racha_of(d) for d in cand.digits) / 4
    return avg_freq * freq_factor + avg_delay * delay_factor


def score_candidate(num: str, ctx: ScoringContext, rules: list[ScoringRule],
                    freq_factor: float = FREQ_FACTOR, delay_factor: float = DELAY_FACTOR) -> ScoredCandidate:
    cand = Candidate.from_num(num)
    score = base_score(cand, ctx, freq_factor, delay_factor)
    score += sum(rule.apply(cand, ctx) for rule in rules)
    return ScoredCandidate(num=num, score=score)


def candidate_pool(matrix: Matrix) -> list[str]:
    """Row-major cells with duplicates removed, first occurrence wins."""
    return list(dict.fromkeys(flatten(matrix)))


def score_candidates(
    matrix: Matrix,
    ctx: ScoringContext,
    rules: list[ScoringRule] | None = None,
    freq_factor: float = FREQ_FACTOR,
    delay_factor: float = DELAY_FACTOR,
) -> list[ScoredCandidate]:
    """Score the de-duplicated pool, best first. Ties keep pool order."""
    rules = rules if rules is not None else build_rules()
    scored = [
        score_candidate(num, ctx, rules, freq_factor, delay_factor)
        for num in candidate_pool(matrix)
    ]
    return sorted(scored, key=lambda s: s.score, reverse=True)


def pick_master_choices(ranked: list[ScoredCandidate], size: int = 3) -> list[ScoredCandidate]:
    """
    Best pacha candidate plus the two best non-pacha ones, padded from the
    rest of the ranking when short, then re-sorted by score.
    """
    masters: list[ScoredCandidate] = []
    pacha = next((c for c in ranked if c.is_pacha), None)
    if pacha:
        masters.append(pacha)
    masters.extend([c for c in ranked if not c.is_pacha][:2])

    if len(masters) < size:
        used = {m.num for m in masters}
        masters.extend([c for c in ranked if c.num not in used][: size - len(masters)])

    return sorted(masters, key=lambda s: s.score, reverse=True)


def final_choice(masters: list[ScoredCandidate]) -> str | None:
    return masters[0].num if masters else None
