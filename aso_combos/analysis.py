"""End-to-end combo coverage analysis for one title/subtitle pair."""

import logging

from .coverage import analyze_coverage
from .generator import GeneratorConfig, generate_combos, make_token_relevance
from .impact import calculate_avg_impact, score_combos
from .low_value import classify_combo, filter_low_value_combos, separate_combos_by_source
from .normalize import normalize
from .redundancy import find_redundant_combos
from .ruleset import RuleSet

logger = logging.getLogger(__name__)


def _classified(combos, title_tokens, get_token_relevance) -> list[dict]:
    return [
        {"text": c.text, **classify_combo(c.text, title_tokens, get_token_relevance)}
        for c in combos
    ]


def analyze_metadata(title, subtitle, ruleset: RuleSet | None = None,
                     min_length: int = 2, max_length: int = 4) -> dict:
    """Run the full combo pipeline over an app's title and subtitle.

    Returns the generated combos split by value and source, their impact
    scores, the redundancy report for the valuable set and the
    existing/missing combo coverage.
    """
    ruleset = ruleset or RuleSet()
    title_tokens = normalize(title)
    subtitle_tokens = normalize(subtitle)
    get_token_relevance = make_token_relevance(ruleset.token_relevance_overrides)

    config = GeneratorConfig(
        min_length=min_length,
        max_length=max_length,
        stopwords=ruleset.stopwords,
        get_token_relevance=get_token_relevance,
    )
    combos = generate_combos(title_tokens, subtitle_tokens, config)

    split = filter_low_value_combos(combos)
    valuable = split["valuable"]
    by_source = separate_combos_by_source(valuable)

    scored = score_combos(valuable, ruleset)
    avg_impact = calculate_avg_impact(scored)
    redundancy = find_redundant_combos([c.text for c in valuable])
    coverage = analyze_coverage(title, subtitle, ruleset.stopwords,
                                min_length=min_length, max_length=max_length)

    logger.debug("Analyzed %r / %r: %d valuable, %d low-value combos",
                 title, subtitle, len(valuable), len(split["low_value"]))

    return {
        "title": title if isinstance(title, str) else "",
        "subtitle": subtitle if isinstance(subtitle, str) else "",
        "combos": valuable,
        "low_value_combos": split["low_value"],
        "title_combos": _classified(by_source["title_only"], title_tokens, get_token_relevance),
        "subtitle_new_combos": _classified(by_source["subtitle_incremental"], title_tokens, get_token_relevance),
        "scored_combos": scored,
        "redundancy": redundancy,
        "coverage": coverage,
        "stats": {
            "total_combos": len(valuable),
            "low_value_count": len(split["low_value"]),
            "title_combo_count": len(by_source["title_only"]),
            "subtitle_new_combo_count": len(by_source["subtitle_incremental"]),
            "avg_impact": round(avg_impact, 2),
            "redundancy_score": redundancy["redundancy_score"],
            "coverage": coverage["stats"]["coverage"],
        },
    }
