"""
patron/fetchers/base_fetcher.py
Abstract result fetcher: one HTTP round trip, 4-digit token extraction and
validation of the extracted history.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import requests

from patron.utils.config import FETCH_TIMEOUT, get_analysis_config
from patron.utils.logger import get_logger

log = get_logger("fetcher")

_DRAW_RE = re.compile(r"\d{4}")

MSG_NOT_ENOUGH = "No se obtuvieron suficientes resultados."
MSG_CONNECTION = "Error al conectar con la fuente."


class FetcherConfigError(RuntimeError):
    """Raised when a fetcher is missing credentials or settings."""


def extract_draws(text: str, max_draws: int = 15) -> list[str]:
    """Every run of 4 consecutive digits, in order, capped at max_draws."""
    return _DRAW_RE.findall(text or "")[:max_draws]


class BaseFetcher(ABC):
    """Base class for services that return a free-text draw history."""

    def __init__(self, timeout: int = FETCH_TIMEOUT, max_draws: int | None = None, min_draws: int | None = None):
        fetch_cfg = get_analysis_config()["fetch"]
        self.timeout = timeout
        self.max_draws = max_draws if max_draws is not None else fetch_cfg["max_draws"]
        self.min_draws = min_draws if min_draws is not None else fetch_cfg["min_draws"]
        self.last_error: str | None = None
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    # ── HTTP helpers ──────────────────────────────────────────────

    def _post(self, url: str, payload: dict[str, Any], headers: dict[str, str] | None = None) -> requests.Response | None:
        """Single POST, no retry. Returns None on any request failure."""
        self.last_error = None
        try:
            log.debug(f"POST {url}")
            resp = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            return resp
        except requests.RequestException as exc:
            log.error(f"Request failed for {url}: {exc}")
            self.last_error = str(exc)
            return None

    # ── Validation ────────────────────────────────────────────────

    def validate_draws(self, draws: list[str]) -> bool:
        if len(draws) < self.min_draws:
            log.warning(f"Only {len(draws)} draws extracted, need at least {self.min_draws}")
            return False
        return True

    # ── Public flow ───────────────────────────────────────────────

    def fetch_history(self, lottery: str, as_of: date | str | None = None) -> dict[str, Any]:
        """
        Ask the source for the latest results of `lottery` up to `as_of` and
        return a result dict. `text` holds one draw per line, newest first.
        """
        as_of_str = str(as_of or date.today().isoformat())
        log.info(f"[FETCH] {lottery} as of {as_of_str}")

        result: dict[str, Any] = {
            "success": False,
            "lottery": lottery,
            "as_of": as_of_str,
            "draws": [],
            "text": "",
            "sources": [],
            "error": None,
        }

        response = self.fetch_text(lottery, as_of_str)
        if response is None:
            reason = self.last_error
            result["error"] = f"{MSG_CONNECTION} {reason}" if reason else MSG_CONNECTION
            return result

        raw_text, sources = response
        result["sources"] = sources
        draws = extract_draws(raw_text, self.max_draws)
        if not self.validate_draws(draws):
            result["error"] = MSG_NOT_ENOUGH
            return result

        result.update({"success": True, "draws": draws, "text": "\n".join(draws)})
        log.info(f"[FETCH] {lottery}: {len(draws)} draws, {len(sources)} sources")
        return result

    # ── Abstract interface ────────────────────────────────────────

    @abstractmethod
    def fetch_text(self, lottery: str, as_of: str) -> tuple[str, list[dict[str, str]]] | None:
        """Return (free text, sources) or None when the request failed."""
        ...
