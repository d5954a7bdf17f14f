"""
scripts/run_analysis.py
Analyse a 4-digit draw history (newest first) from a file, stdin, or a
search-grounded fetch of a catalog lottery.
"""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from patron.fetchers.base_fetcher import FetcherConfigError
from patron.notifications.report import format_fetch_error, format_report, format_sources
from patron.pipeline.analysis_runner import analyze_text
from patron.pipeline.history_fetcher import fetch_and_analyze
from patron.utils.config import ALL_LOTTERIES, LOTTERY_CATEGORIES, get_analysis_config
from patron.utils.logger import get_logger

log = get_logger("run_analysis")


def print_catalog() -> None:
    print("LOTERÍAS TRADICIONALES")
    for cat in LOTTERY_CATEGORIES["traditional"]:
        print(f"  {cat['day']:10s} | " + ", ".join(cat["items"]))
    print("SORTEOS DIARIOS")
    for name in LOTTERY_CATEGORIES["daily"]:
        print(f"  {name}")


def main():
    parser = argparse.ArgumentParser(description="Método Patrón — 4-digit history analysis")
    parser.add_argument("--file", default=None, help="History file, one draw per line or comma separated")
    parser.add_argument("--lottery", choices=ALL_LOTTERIES, default=None, help="Fetch this lottery's results")
    parser.add_argument("--date", default=date.today().isoformat(), help="As-of date (YYYY-MM-DD)")
    parser.add_argument("--list", action="store_true", help="Print the lottery catalog and exit")
    args = parser.parse_args()

    if args.list:
        print_catalog()
        return 0

    if args.lottery:
        try:
            outcome = fetch_and_analyze(args.lottery, args.date)
        except FetcherConfigError as exc:
            log.error(str(exc))
            return 2
        if not outcome["success"]:
            print(format_fetch_error(outcome))
            return 1
        analysis = outcome["analysis"]
        title, sources = args.lottery, outcome["sources"]
    else:
        text = Path(args.file).read_text(encoding="utf-8") if args.file else sys.stdin.read()
        analysis = analyze_text(text)
        title, sources = None, []

    if analysis is None:
        min_draws = get_analysis_config()["min_draws"]
        print(f"Datos insuficientes: se necesitan al menos {min_draws} sorteos.")
        return 1

    print(format_report(analysis, lottery=title, as_of=args.date))
    if sources:
        print(format_sources(sources))

    print("\n" + "=" * 60)
    print(f"FINAL CHOICE: {analysis.final_choice} | masters={[c.num for c in analysis.master_choices]}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
