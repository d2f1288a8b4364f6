"""Deterministic 0-100 impact score for a keyword combo.

Every combo starts at BASE_SCORE; bonuses and penalties are added and the sum
is clamped to 0-100. The per-rule contributions are returned alongside the
score so the UI can explain it.
"""

import logging
from collections import Counter

from .normalize import normalize

logger = logging.getLogger(__name__)

# ── Scoring Weights ────────────────────────────────────────────────────────

BASE_SCORE = 50
CATEGORY_BONUS = 30        # Combo names the app's category
ACTION_BONUS = 30          # Combo carries a CTA verb or a benefit keyword
LONG_TAIL_BONUS = 20
MID_TAIL_BONUS = 10
FILLER_PENALTY = -30       # Too many stopwords
DUPLICATION_PENALTY = -20  # A token repeats inside the combo

FILLER_RATIO_THRESHOLD = 0.4
MID_TAIL_WORDS = 3
LONG_TAIL_MIN_WORDS = 4

LENGTH_BONUSES = {"short": 0, "mid-tail": MID_TAIL_BONUS, "long-tail": LONG_TAIL_BONUS}


# ── Length Classification ──────────────────────────────────────────────────


def classify_length(word_count: int) -> str:
    """Classify a combo by word count: "short", "mid-tail" or "long-tail".

    The bands are defined only here; score_combo calls it and reports
    the label it returns.
    """
    if word_count >= LONG_TAIL_MIN_WORDS:
        return "long-tail"
    if word_count == MID_TAIL_WORDS:
        return "mid-tail"
    return "short"


# ── Rule Sub-Scores ────────────────────────────────────────────────────────


def _contains_any(text: str, keywords) -> bool:
    return any(kw and kw.lower() in text for kw in keywords or ())


def score_category(text: str, category_keywords) -> int:
    return CATEGORY_BONUS if _contains_any(text, category_keywords) else 0


def score_action(text: str, benefit_keywords, cta_verbs) -> int:
    """CTA verbs and benefit keywords share one bonus; they do not stack."""
    if _contains_any(text, cta_verbs) or _contains_any(text, benefit_keywords):
        return ACTION_BONUS
    return 0


def score_filler(tokens: list[str], stopwords) -> int:
    if not tokens:
        return 0
    stop_count = sum(1 for t in tokens if t in (stopwords or ()))
    return FILLER_PENALTY if stop_count / len(tokens) > FILLER_RATIO_THRESHOLD else 0


def score_duplication(tokens: list[str]) -> int:
    counts = Counter(tokens)
    return DUPLICATION_PENALTY if any(n > 1 for n in counts.values()) else 0


# ── Composite Score ────────────────────────────────────────────────────────


def score_combo(combo_text, category_keywords, benefit_keywords, cta_verbs, stopwords) -> dict:
    """Score one combo and return {"combo", "score", "length_class", "breakdown"}."""
    text = combo_text.lower() if isinstance(combo_text, str) else ""
    tokens = normalize(text)
    length_class = classify_length(len(tokens))

    breakdown = {
        "category_bonus": score_category(text, category_keywords),
        "action_bonus": score_action(text, benefit_keywords, cta_verbs),
        "length_bonus": LENGTH_BONUSES[length_class],
        "filler_penalty": score_filler(tokens, stopwords),
        "duplication_penalty": score_duplication(tokens),
    }
    raw = BASE_SCORE + sum(breakdown.values())

    return {
        "combo": combo_text if isinstance(combo_text, str) else "",
        "score": max(0, min(100, raw)),
        "length_class": length_class,
        "breakdown": breakdown,
    }


def score_combos(combos, ruleset) -> list[dict]:
    """Score combo texts (or Combo objects) against a RuleSet, best first."""
    scored = []
    if not isinstance(combos, (list, tuple)):
        return scored

    for combo in combos:
        text = getattr(combo, "text", combo)
        scored.append(score_combo(
            text,
            ruleset.category_keywords,
            ruleset.benefit_keywords,
            ruleset.cta_verbs,
            ruleset.stopwords,
        ))
    scored.sort(key=lambda s: s["score"], reverse=True)
    logger.debug("Scored %d combos", len(scored))
    return scored


def calculate_avg_impact_from_scores(scores) -> float:
    """Arithmetic mean of raw scores; 0 for an empty list."""
    values = [s for s in scores or [] if isinstance(s, (int, float))]
    if not values:
        return 0
    return sum(values) / len(values)


def calculate_avg_impact(scored_combos) -> float:
    """Mean impact score of scored combos; 0 for an empty list."""
    return calculate_avg_impact_from_scores(
        [s.get("score") for s in scored_combos or [] if isinstance(s, dict)]
    )
