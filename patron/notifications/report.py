"""
patron/notifications/report.py
Markdown text report of an analysis run, for the console or a chat message.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from patron.core.patterns import Group
from patron.pipeline.analysis_runner import AnalysisResult

_RULE = "──────────────────────────────────────"
_LATEST_LABELS = ("Actual", "Previo", "Anterior")


def _now_str() -> str:
    return datetime.now().strftime("%H:%M %d/%m/%Y")


def _pct(value: float) -> str:
    return f"{value:.0f}%"


def format_matrix(result: AnalysisResult) -> str:
    """6×6 grid with Group D pairs as header; diagonal cells are bracketed."""
    header = "        " + " ".join(f"D{j + 1}({d.pair})" for j, d in enumerate(result.group_d))
    lines = [header]
    for i, row in enumerate(result.matrix):
        cells = []
        for j, cell in enumerate(row):
            cells.append(f"[{cell}]" if i == j else f" {cell} ")
        lines.append(f"A{i + 1}({result.group_a[i].pair}) " + "  ".join(cells))
    return "\n".join(lines)


def format_digit_table(result: AnalysisResult) -> str:
    max_freq = max(r.freq for r in result.group_c.all)
    max_racha = max(r.racha for r in result.group_c.all)
    lines = ["Dígito | Frec | Racha"]
    for row in result.group_c.all:
        marks = ("🔥" if row.freq == max_freq else "") + ("⏳" if row.racha == max_racha else "")
        lines.append(f"  {row.digit}    | {row.freq:4d} | {row.racha:5d} {marks}".rstrip())
    return "\n".join(lines)


def format_patterns(result: AnalysisResult) -> str:
    p = result.patterns
    hits = p.group_hits
    return (
        f"1. Pachas: {_pct(p.pacha_percent)} → {p.pacha_prediction.value}\n"
        f"2. Repetición 2+: {_pct(p.repetition_percent)} → {p.repetition_level.value}\n"
        f"3. Origen: pos {p.origin_best} ({_pct(p.origin_percent)})\n"
        f"4. Destino: pos {p.target_best} ({_pct(p.target_percent)})\n"
        f"5. Grupos: A {_pct(hits[Group.A])} | B {_pct(hits[Group.B])} | C {_pct(hits[Group.C])}"
        f" → {p.group_prediction.label}"
    )


def format_report(result: AnalysisResult, lottery: str | None = None, as_of: str | None = None) -> str:
    title = lottery or "Historial manual"
    date_str = f"{as_of} | " if as_of else ""
    latest = "\n".join(
        f"{label}: `{draw.full}`" for label, draw in zip(_LATEST_LABELS, result.history)
    )
    hits = result.prediction_hits
    masters = "\n".join(
        f"#{idx + 1} `{c.num}` ({c.score:.1f})" for idx, c in enumerate(result.master_choices)
    )
    return (
        f"🎯 *MÉTODO PATRÓN — {title}*\n"
        f"📅 {date_str}{_now_str()} | {len(result.history)} sorteos\n"
        f"{_RULE}\n"
        f"{latest}\n"
        f"{_RULE}\n"
        f"Par A: {result.pair_a} | Par B: {result.pair_b} | Par C: {result.pair_c}\n"
        f"Más frecuente: {result.top_freq_digit} | Más atrasado: {result.top_racha_digit}\n"
        f"{_RULE}\n"
        f"{format_matrix(result)}\n"
        f"{_RULE}\n"
        f"Aciertos últimos {hits.total}: 4 cifras {hits.hits4} | 3 cifras {hits.hits3}\n"
        f"{_RULE}\n"
        f"{format_digit_table(result)}\n"
        f"{_RULE}\n"
        f"{format_patterns(result)}\n"
        f"{_RULE}\n"
        f"Elecciones maestras:\n{masters}\n"
        f"⭐ Elección final: `{result.final_choice}`"
    )


def format_fetch_error(fetched: dict[str, Any]) -> str:
    lottery = fetched.get("lottery", "?")
    error = fetched.get("error") or "Error desconocido"
    return (
        f"❌ *[CONSULTA] {lottery} — FALLÓ*\n"
        f"⚠ Motivo: {error}\n"
        f"🔁 Intenta de nuevo o pega el historial manualmente"
    )


def format_sources(sources: list[dict[str, str]], limit: int = 2) -> str:
    return "\n".join(f"🔗 {s.get('title') or s['uri']} — {s['uri']}" for s in sources[:limit])
