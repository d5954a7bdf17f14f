"""
patron/pipeline/analysis_runner.py
Full analysis flow: text → parsed history → groups → matrix → patterns →
back-test → ranked master choices and the final choice.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from patron.core.frequency import get_frequencies, top_digit
from patron.core.groups import (
    DelayPair,
    GroupB,
    GroupC,
    PairCandidate,
    get_group_a,
    get_group_b,
    get_group_c,
    get_group_d,
)
from patron.core.matrix import Matrix, generate_matrix, get_diagonal
from patron.core.parser import Draw, parse_draws
from patron.core.patterns import PatternSummary, analyze_patterns
from patron.core.scorer import (
    PredictionHits,
    ScoredCandidate,
    ScoringContext,
    build_rules,
    check_predictions,
    final_choice,
    pick_master_choices,
    score_candidates,
)
from patron.utils.config import get_analysis_config, get_scoring_weights
from patron.utils.logger import get_logger

log = get_logger("pipeline.analysis")

MIN_PATTERN_DRAWS = 2


@dataclass(frozen=True)
class AnalysisResult:
    history: list[Draw]
    window: list[Draw]
    frequencies: dict[int, int]
    group_a: list[PairCandidate]
    group_b: GroupB
    group_c: GroupC
    group_d: list[DelayPair]
    matrix: Matrix
    diagonal: list[str]
    patterns: PatternSummary
    prediction_hits: PredictionHits
    ranked: list[ScoredCandidate]
    master_choices: list[ScoredCandidate]
    final_choice: str
    pair_a: str
    pair_b: str
    pair_c: str
    top_freq_digit: int
    top_racha_digit: int


def run_analysis(history: list[Draw], config: dict[str, Any] | None = None) -> AnalysisResult | None:
    """
    Run every stage over a newest-first history. Returns None when there are
    not enough draws to analyse.
    """
    config = config or get_analysis_config()
    # Patterns compare adjacent draws, so two is the floor.
    min_draws = max(config["min_draws"], MIN_PATTERN_DRAWS)

    if len(history) < min_draws:
        log.info(f"Insufficient data: {len(history)} draws (need {min_draws})")
        return None

    invalid = [d.full for d in history if not d.is_valid]
    if invalid:
        log.warning(f"{len(invalid)} draws contain non-digit characters: {invalid}")

    window = history[: config["history_window"]]
    digit_freq = get_frequencies(window)

    # Groups
    group_a = get_group_a(window, digit_freq)
    group_b = get_group_b(window, digit_freq)
    group_c = get_group_c(window, digit_freq)
    group_d = get_group_d(group_b.b1, group_b.b2, group_c.c1, group_c.c2, window)

    matrix = generate_matrix(group_a, group_d)
    pattern_cfg = config["patterns"]
    patterns = analyze_patterns(
        window, group_a, group_b.b1, group_b.b2, group_c.c1, group_c.c2,
        pacha_threshold=pattern_cfg["pacha_threshold"],
        repetition_threshold=pattern_cfg["repetition_threshold"],
    )
    hits = check_predictions(matrix, history, window=config["backtest_window"])

    # Scoring
    scoring_cfg = config["scoring"]
    ctx = ScoringContext(
        digit_freq=digit_freq,
        group_a=group_a,
        group_c=group_c,
        group_d=group_d,
        patterns=patterns,
        latest=history[0],
    )
    ranked = score_candidates(
        matrix,
        ctx,
        rules=build_rules(get_scoring_weights(config)),
        freq_factor=scoring_cfg["freq_factor"],
        delay_factor=scoring_cfg["delay_factor"],
    )
    masters = pick_master_choices(ranked)
    choice = final_choice(masters)

    log.info(
        f"[ANALYSIS] {len(history)} draws | A={group_a[0].pair} B={group_b.pair} C={group_c.pair} "
        f"| hits4={hits.hits4} hits3={hits.hits3}/{hits.total} | final={choice}"
    )

    return AnalysisResult(
        history=history,
        window=window,
        frequencies=digit_freq,
        group_a=group_a,
        group_b=group_b,
        group_c=group_c,
        group_d=group_d,
        matrix=matrix,
        diagonal=get_diagonal(matrix),
        patterns=patterns,
        prediction_hits=hits,
        ranked=ranked,
        master_choices=masters,
        final_choice=choice,
        pair_a=group_a[0].pair,
        pair_b=group_b.pair,
        pair_c=group_c.pair,
        top_freq_digit=top_digit(digit_freq),
        top_racha_digit=group_c.c1,
    )


def analyze_text(text: str, config: dict[str, Any] | None = None) -> AnalysisResult | None:
    """Parse a newline/comma separated history (newest first) and analyse it."""
    return run_analysis(parse_draws(text), config=config)
