"""
patron/core/parser.py
Turn a free-text draw history into Draw records (newest first).
"""
from __future__ import annotations

import re
from dataclasses import dataclass

DRAW_LENGTH = 4

_SPLIT_RE = re.compile(r"\n|,")


@dataclass(frozen=True)
class Draw:
    """One 4-digit result. Non-digit characters are kept as None slots."""

    digits: tuple[int | None, ...]
    full: str

    @property
    def is_valid(self) -> bool:
        return all(d is not None for d in self.digits)

    def valid_digits(self) -> list[int]:
        return [d for d in self.digits if d is not None]


def _to_digit(ch: str) -> int | None:
    return int(ch) if ch.isdigit() and ch.isascii() else None


def parse_draw(token: str) -> Draw:
    full = token[:DRAW_LENGTH]
    return Draw(digits=tuple(_to_digit(ch) for ch in full), full=full)


def parse_draws(text: str) -> list[Draw]:
    """
    Split on newline or comma, drop tokens shorter than 4 chars and keep the
    first 4 chars of the rest. Caller controls ordering (newest first).
    """
    tokens = (line.strip() for line in _SPLIT_RE.split(text or ""))
    return [parse_draw(tok) for tok in tokens if len(tok) >= DRAW_LENGTH]
