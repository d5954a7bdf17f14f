"""
patron/fetchers/gemini_fetcher.py
Fetch recent 4-digit results through a search-grounded Gemini
generateContent call. The model answers in free text; sources come from the
grounding metadata.
"""
from __future__ import annotations

from typing import Any

from patron.fetchers.base_fetcher import BaseFetcher, FetcherConfigError
from patron.utils.config import GEMINI_API_KEY, GEMINI_API_URL, GEMINI_MODEL
from patron.utils.logger import get_logger

log = get_logger("fetcher.gemini")

PROMPT_TEMPLATE = (
    'Resultados de 4 cifras para "{lottery}" hasta {as_of}. '
    "Busca en astroluna.co o similares. "
    "Responde SOLO los {count} números más recientes separados por comas."
)


class GeminiFetcher(BaseFetcher):

    def __init__(self, api_key: str | None = None, model: str = GEMINI_MODEL,
                 api_url: str = GEMINI_API_URL, temperature: float = 0.1, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        if not self.api_key:
            raise FetcherConfigError("GEMINI_API_KEY is not set")
        self.model = model
        self.api_url = api_url.rstrip("/")
        self.temperature = temperature

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model}:generateContent"

    def build_payload(self, lottery: str, as_of: str) -> dict[str, Any]:
        prompt = PROMPT_TEMPLATE.format(lottery=lottery, as_of=as_of, count=self.max_draws)
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {"temperature": self.temperature},
        }

    @staticmethod
    def parse_response(body: dict[str, Any]) -> tuple[str, list[dict[str, str]]]:
        candidates = body.get("candidates") or []
        if not candidates:
            return "", []
        first = candidates[0]
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts)

        chunks = (first.get("groundingMetadata") or {}).get("groundingChunks") or []
        sources = []
        for chunk in chunks:
            web = chunk.get("web") or {}
            if web.get("uri"):
                sources.append({"uri": web["uri"], "title": web.get("title") or web["uri"]})
        return text, sources

    def fetch_text(self, lottery: str, as_of: str) -> tuple[str, list[dict[str, str]]] | None:
        resp = self._post(
            self.endpoint,
            self.build_payload(lottery, as_of),
            headers={"x-goog-api-key": self.api_key},
        )
        if resp is None:
            return None
        try:
            body = resp.json()
        except ValueError as exc:
            log.error(f"Invalid JSON from {self.model}: {exc}")
            self.last_error = f"Respuesta inválida: {exc}"
            return None
        return self.parse_response(body)
