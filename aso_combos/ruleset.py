"""Keyword vocabularies and the JSON rule set loader."""

import json
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# ── Default Vocabularies ───────────────────────────────────────────────────

DEFAULT_STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "be", "been",
    "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "could", "may", "might", "can", "must", "shall",
})

DEFAULT_CTA_VERBS = ("download", "try", "start", "get", "join", "subscribe")

DEFAULT_BENEFIT_KEYWORDS = ("easy", "fast", "quick", "fun", "simple", "effective")


@dataclass
class RuleSet:
    """Keyword lists and token overrides injected into one analysis run."""

    stopwords: frozenset = DEFAULT_STOPWORDS
    category_keywords: tuple = ()
    benefit_keywords: tuple = DEFAULT_BENEFIT_KEYWORDS
    cta_verbs: tuple = DEFAULT_CTA_VERBS
    token_relevance_overrides: dict = field(default_factory=dict)


def _string_list(value, key: str) -> tuple:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Rule set key '{key}' must be a list of strings")
    return tuple(v.lower().strip() for v in value if v.strip())


def ruleset_from_dict(data: dict) -> RuleSet:
    """Build a RuleSet, letting keys present in data override the defaults."""
    if not isinstance(data, dict):
        raise ValueError("Rule set must be a JSON object")

    ruleset = RuleSet()
    if "stopwords" in data:
        ruleset.stopwords = frozenset(_string_list(data["stopwords"], "stopwords"))
    for key in ("category_keywords", "benefit_keywords", "cta_verbs"):
        if key in data:
            setattr(ruleset, key, _string_list(data[key], key))

    overrides = data.get("token_relevance_overrides", {})
    if not isinstance(overrides, dict):
        raise ValueError("Rule set key 'token_relevance_overrides' must be an object")
    for token, level in overrides.items():
        if level not in (0, 1, 2, 3):
            raise ValueError(f"Relevance override for '{token}' must be 0-3, got {level!r}")
        ruleset.token_relevance_overrides[token.lower()] = level

    ignored = set(data) - {
        "stopwords", "category_keywords", "benefit_keywords",
        "cta_verbs", "token_relevance_overrides",
    }
    if ignored:
        logger.debug("Ignoring unknown rule set keys: %s", ", ".join(sorted(ignored)))
    return ruleset


def load_ruleset(path: str) -> RuleSet:
    """Read a rule set from a JSON file.

    Raises FileNotFoundError, json.JSONDecodeError or ValueError; the
    analysis functions themselves never raise.
    """
    with open(path) as f:
        data = json.load(f)
    return ruleset_from_dict(data)
