"""
patron/pipeline/history_fetcher.py
Fetch a lottery's recent results and run the analysis on them.
"""
from __future__ import annotations

from datetime import date

from patron.fetchers.base_fetcher import BaseFetcher
from patron.fetchers.gemini_fetcher import GeminiFetcher
from patron.pipeline.analysis_runner import analyze_text
from patron.utils.config import get_lottery_day
from patron.utils.logger import get_logger

log = get_logger("pipeline.fetch")


def fetch_and_analyze(lottery: str, as_of: date | str | None = None, fetcher: BaseFetcher | None = None) -> dict:
    """
    1. Validate the lottery name against the catalog
    2. Fetch the latest results as free text
    3. Analyse the extracted history
    """
    day = get_lottery_day(lottery)
    log.info(f"[FETCH+ANALYZE] {lottery}" + (f" ({day})" if day else " (diaria)"))

    fetcher = fetcher or GeminiFetcher()
    fetched = fetcher.fetch_history(lottery, as_of)
    if not fetched["success"]:
        log.warning(f"{lottery}: {fetched['error']}")
        return {**fetched, "analysis": None}

    analysis = analyze_text(fetched["text"])
    return {**fetched, "analysis": analysis}
