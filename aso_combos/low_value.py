"""Split noise combos (numbers, promotions, version markers) from valuable ones."""

import logging
import re
from dataclasses import replace

from .generator import SOURCE_TITLE, Combo, default_token_relevance
from .normalize import normalize

logger = logging.getLogger(__name__)

LOW_VALUE_PATTERNS = [
    re.compile(r"^\d+"),                                                   # leading number
    re.compile(r"\b\d+\b"),                                                # standalone number
    re.compile(r"day|week|month|year|trial|limited|offer|sale|deal", re.IGNORECASE),  # time-bound
    re.compile(r"new|latest|updated|version", re.IGNORECASE),                         # freshness
]

BRAND_TOKEN_COUNT = 2
BRAND_MIN_RELEVANCE = 2
BRANDED_RELEVANCE = 3
GENERIC_MAX_RELEVANCE = 2


def _combo_text(combo) -> str:
    if isinstance(combo, Combo):
        return combo.text
    if isinstance(combo, dict):
        return combo.get("combo") or combo.get("text") or ""
    return combo if isinstance(combo, str) else ""


def is_low_value(text: str) -> bool:
    if not isinstance(text, str):
        return False
    text = text.strip()
    return any(pattern.search(text) for pattern in LOW_VALUE_PATTERNS)


def _zeroed(combo):
    if isinstance(combo, Combo):
        return replace(combo, relevance_score=0)
    if isinstance(combo, dict):
        return {**combo, "score": 0}
    return combo


def filter_low_value_combos(combos) -> dict:
    """Return {"valuable", "low_value"}.

    Low-value combos are kept, with their score zeroed, so callers can still
    show them.
    """
    valuable = []
    low_value = []
    if not isinstance(combos, (list, tuple)):
        return {"valuable": valuable, "low_value": low_value}

    for combo in combos:
        if is_low_value(_combo_text(combo)):
            low_value.append(_zeroed(combo))
        else:
            valuable.append(combo)

    logger.debug("Low-value filter: %d valuable, %d low-value", len(valuable), len(low_value))
    return {"valuable": valuable, "low_value": low_value}


def separate_combos_by_source(combos) -> dict:
    """Split combos into title-only ones and those the subtitle adds."""
    if not isinstance(combos, (list, tuple)):
        combos = []
    combos = [c for c in combos if isinstance(c, Combo)]
    title_only = [c for c in combos if c.source == SOURCE_TITLE]
    subtitle_incremental = [c for c in combos if c.source != SOURCE_TITLE]
    return {"title_only": title_only, "subtitle_incremental": subtitle_incremental}


def classify_combo(text: str, title_tokens, get_token_relevance=default_token_relevance) -> dict:
    """Label a combo branded, generic or low_value for display."""
    words = normalize(text)
    if not words:
        return {"type": "low_value", "relevance_score": 0}

    avg_relevance = sum(get_token_relevance(w) for w in words) / len(words)
    if avg_relevance == 0 or is_low_value(text):
        return {"type": "low_value", "relevance_score": 0}

    brand_tokens = [
        t.lower() for t in title_tokens or []
        if get_token_relevance(t) >= BRAND_MIN_RELEVANCE
    ][:BRAND_TOKEN_COUNT]
    if any(w in brand_tokens for w in words):
        return {"type": "branded", "relevance_score": BRANDED_RELEVANCE}

    return {"type": "generic", "relevance_score": min(GENERIC_MAX_RELEVANCE, round(avg_relevance))}
