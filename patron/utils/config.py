"""
patron/utils/config.py
Load env vars, the lottery catalog and the analysis params JSON.
"""
import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = ROOT / "config"

# ── Result fetcher (search-grounded text generation) ─────────────
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_URL: str = os.getenv(
    "GEMINI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models",
)
FETCH_TIMEOUT: int = int(os.getenv("FETCH_TIMEOUT", "30"))

# ── Lottery catalog ──────────────────────────────────────────────
# Traditional draws are grouped by weekday, daily draws run every day.
LOTTERY_CATEGORIES: dict[str, Any] = {
    "traditional": [
        {"day": "Lunes", "items": ["Lotería de Cundinamarca", "Lotería del Tolima"]},
        {"day": "Martes", "items": ["Lotería de la Cruz Roja", "Lotería del Huila"]},
        {"day": "Miércoles", "items": ["Lotería de Manizales", "Lotería del Meta", "Lotería del Valle"]},
        {"day": "Jueves", "items": ["Lotería de Bogotá", "Lotería del Quindío"]},
        {"day": "Viernes", "items": ["Lotería de Medellín", "Lotería de Santander", "Lotería de Risaralda"]},
        {"day": "Sábado", "items": ["Lotería de Boyacá", "Lotería del Cauca", "Lotería del Extra Colombia"]},
    ],
    "daily": [
        "Astro Sol", "Astro Luna", "Dorado Mañana", "Dorado Tarde", "Dorado Noche",
        "Chontico Día", "Chontico Noche", "Paisita Día", "Paisita Noche",
        "Cafeterito Tarde", "Cafeterito Noche", "Sinuano Día", "Sinuano Noche",
        "Caribeña Día", "Caribeña Noche", "Motilón Día", "Motilón Noche",
        "Antioqueñita Día", "Antioqueñita Tarde", "Fantástica Día", "Fantástica Noche",
        "Culona Día", "Culona Noche", "Pijao de Oro", "Samán Día", "Play Four Noche",
    ],
}

ALL_LOTTERIES: list[str] = [
    *(name for cat in LOTTERY_CATEGORIES["traditional"] for name in cat["items"]),
    *LOTTERY_CATEGORIES["daily"],
]

ANALYSIS_CONFIG_FILE = "analysis_params.json"

_config_cache: dict[str, Any] = {}


def get_analysis_config(filename: str = ANALYSIS_CONFIG_FILE) -> dict[str, Any]:
    """Load and cache the analysis params JSON (windows, thresholds, weights)."""
    if filename in _config_cache:
        return _config_cache[filename]
    path = CONFIG_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    _config_cache[filename] = config
    return config


def get_scoring_weights(config: dict[str, Any] | None = None) -> dict[str, float]:
    """Rule weights from `config`, or from the analysis params file."""
    config = config or get_analysis_config()
    return dict(config["scoring"]["weights"])


def get_lottery_day(lottery: str) -> str | None:
    """Return the weekday of a traditional lottery, or None for daily draws."""
    for cat in LOTTERY_CATEGORIES["traditional"]:
        if lottery in cat["items"]:
            return cat["day"]
    if lottery in LOTTERY_CATEGORIES["daily"]:
        return None
    raise ValueError(f"Unknown lottery: {lottery}")
