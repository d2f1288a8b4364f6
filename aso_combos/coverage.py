"""Existing vs missing keyword combos for a title/subtitle pair.

Every combination (not only contiguous runs) of the title and subtitle
keywords is checked against the metadata text. Combos that are not present
yet are ranked by strategic value and the best ones are recommended.
"""

import logging
from itertools import combinations, islice

from .generator import MAX_COMBOS_PER_SOURCE, SOURCE_SUBTITLE, SOURCE_TITLE
from .normalize import canonical_form, normalize

logger = logging.getLogger(__name__)

MAX_TOTAL_COMBOS = MAX_COMBOS_PER_SOURCE * 3   # title, subtitle, cross
RECOMMENDATION_COUNT = 10
MIN_KEYWORD_LENGTH = 2

SOURCE_BOTH = "both"
SOURCE_MISSING = "missing"

# ── Strategic Value ────────────────────────────────────────────────────────

BASE_STRATEGIC_VALUE = 50
LENGTH_VALUE_BONUS = {2: 10, 3: 20, 4: 15}   # 3-word combos are the sweet spot


def filter_keywords(tokens, stopwords) -> list[str]:
    """Drop stopwords and single characters, keeping the first of repeats."""
    seen = set()
    keywords = []
    for token in tokens or []:
        if not isinstance(token, str):
            continue
        token = token.lower()
        if len(token) < MIN_KEYWORD_LENGTH or token in (stopwords or ()) or token in seen:
            continue
        seen.add(token)
        keywords.append(token)
    return keywords


def _combinations(keywords: list[str], min_length: int, max_length: int):
    for size in range(min_length, min(max_length, len(keywords)) + 1):
        for combo in combinations(keywords, size):
            yield combo


def generate_all_possible_combos(title_keywords, subtitle_keywords,
                                 min_length: int = 2, max_length: int = 4) -> list[str]:
    """Every in-order keyword combination from title, subtitle and both.

    Cross combos must mix at least one title and one subtitle keyword; a
    keyword both elements share is used once. The total is capped at
    MAX_TOTAL_COMBOS.
    """
    title_set = set(title_keywords)
    subtitle_set = set(subtitle_keywords)

    def mixed(combo):
        return any(k in title_set for k in combo) and any(k in subtitle_set for k in combo)

    runs = [
        _combinations(title_keywords, min_length, max_length),
        _combinations(subtitle_keywords, min_length, max_length),
    ]
    if title_keywords and subtitle_keywords:
        combined = title_keywords + [k for k in subtitle_keywords if k not in title_set]
        cross = _combinations(combined, min_length, max_length)
        runs.append(combo for combo in cross if mixed(combo))

    seen = {}
    for run in runs:
        remaining = MAX_TOTAL_COMBOS - len(seen)
        if remaining <= 0:
            logger.debug("Coverage generation hit the %d combo cap", MAX_TOTAL_COMBOS)
            break
        for combo in islice(run, remaining):
            seen.setdefault(" ".join(combo), None)
    return list(seen)


def combo_exists_in_text(combo: str, text: str) -> bool:
    """True if the combo's words appear in the text in order.

    Words need not be adjacent and match as substrings, so "learn spanish"
    exists in "learn to speak spanish".
    """
    combo = canonical_form(combo)
    text = canonical_form(text)
    if not combo or not text:
        return False
    if combo in text:
        return True

    last_index = -1
    for word in combo.split():
        index = text.find(word, last_index + 1)
        if index == -1:
            return False
        last_index = index
    return True


def determine_combo_source(combo: str, title: str, subtitle: str) -> str:
    in_title = combo_exists_in_text(combo, title)
    in_subtitle = combo_exists_in_text(combo, subtitle)
    if in_title and in_subtitle:
        return SOURCE_BOTH
    if in_title:
        return SOURCE_TITLE
    if in_subtitle:
        return SOURCE_SUBTITLE
    return SOURCE_MISSING


def calculate_strategic_value(word_count: int) -> int:
    score = BASE_STRATEGIC_VALUE + LENGTH_VALUE_BONUS.get(word_count, 0)
    return max(0, min(100, score))


def analyze_coverage(title, subtitle, stopwords=frozenset(),
                     min_length: int = 2, max_length: int = 4) -> dict:
    """Split every possible combo into existing and missing.

    Returns {"all_possible_combos", "existing_combos", "missing_combos",
    "recommended_to_add", "stats"}; stats carry the coverage percentage.
    """
    title = title if isinstance(title, str) else ""
    subtitle = subtitle if isinstance(subtitle, str) else ""

    combo_texts = generate_all_possible_combos(
        filter_keywords(normalize(title), stopwords),
        filter_keywords(normalize(subtitle), stopwords),
        min_length=min_length,
        max_length=max_length,
    )

    all_combos = []
    for text in combo_texts:
        keywords = text.split()
        source = determine_combo_source(text, title, subtitle)
        all_combos.append({
            "text": text,
            "keywords": keywords,
            "length": len(keywords),
            "exists": source != SOURCE_MISSING,
            "source": source,
            "strategic_value": calculate_strategic_value(len(keywords)),
        })

    existing = [c for c in all_combos if c["exists"]]
    missing = [c for c in all_combos if not c["exists"]]

    ranked = sorted(missing, key=lambda c: c["strategic_value"], reverse=True)
    recommended = [
        {**c, "recommendation": f"Consider adding \"{c['text']}\" - Strategic value: {c['strategic_value']}/100"}
        for c in ranked[:RECOMMENDATION_COUNT]
    ]

    total = len(all_combos)
    logger.debug("Coverage: %d of %d possible combos present", len(existing), total)

    return {
        "all_possible_combos": all_combos,
        "existing_combos": existing,
        "missing_combos": missing,
        "recommended_to_add": recommended,
        "stats": {
            "total_possible": total,
            "existing": len(existing),
            "missing": len(missing),
            "coverage": round(100 * len(existing) / total) if total else 0,
        },
    }
