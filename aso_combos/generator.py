"""Keyword combo generation from title and subtitle tokens.

Four strategies feed one candidate pool:

    sequential        contiguous n-grams with at least one meaningful token
    stopword_bridged  n-grams holding exactly one interior stopword
                      ("learn the language")
    cross_element     title token + subtitle token pairs that never occur
                      contiguously but both rank on their own
    semantic_pair     overlay re-tagging language + action verb pairs
                      ("learn spanish") with maximum relevance

The pool is folded into a canonical-form keyed mapping that keeps the most
relevant variant of each phrase.
"""

import logging
import re
from dataclasses import dataclass, replace
from itertools import chain, islice
from typing import Callable, Iterable, Iterator

from .normalize import canonical_form, normalize

logger = logging.getLogger(__name__)

# ── Generation Limits ──────────────────────────────────────────────────────

MAX_COMBOS_PER_SOURCE = 500    # per generation run (title, combined, cross)
MIN_MEANINGFUL_LENGTH = 3      # tokens of 2 chars or fewer never carry a combo
CROSS_ELEMENT_MIN_RELEVANCE = 2
SEMANTIC_PAIR_RELEVANCE = 3

# ── Combo Types & Sources ──────────────────────────────────────────────────

SEQUENTIAL = "sequential"
STOPWORD_BRIDGED = "stopword_bridged"
CROSS_ELEMENT = "cross_element"
SEMANTIC_PAIR = "semantic_pair"

SOURCE_TITLE = "title"
SOURCE_SUBTITLE = "subtitle"
SOURCE_TITLE_AND_SUBTITLE = "title+subtitle"

# ── Token Vocabularies ─────────────────────────────────────────────────────

LANGUAGE_PATTERN = re.compile(
    r"^(english|spanish|french|german|italian|chinese|japanese|korean|"
    r"portuguese|russian|arabic|hindi|mandarin)$",
    re.IGNORECASE,
)
ACTION_VERB_PATTERN = re.compile(
    r"^(learn|speak|study|master|practice|improve|understand|read|write|listen|teach)$",
    re.IGNORECASE,
)
LOW_VALUE_TOKEN_PATTERN = re.compile(
    r"^(best|top|great|good|new|latest|free|premium|pro|plus|lite|\d+|one|two|three)$",
    re.IGNORECASE,
)
DOMAIN_NOUN_PATTERN = re.compile(
    r"^(lesson|lessons|course|courses|class|classes|grammar|vocabulary|"
    r"pronunciation|conversation|fluency|language|languages|learning|app|"
    r"application|tutorial|training|education|skill|skills|method|techniques|guide)$",
    re.IGNORECASE,
)


def default_token_relevance(token: str, overrides: dict | None = None) -> int:
    """Rate a token's ASO importance from 0 (noise) to 3 (core intent).

    An override table (token -> level) wins over the built-in patterns.
    """
    token_lower = token.lower()
    if overrides and token_lower in overrides:
        return overrides[token_lower]

    if LOW_VALUE_TOKEN_PATTERN.match(token_lower):
        return 0
    if LANGUAGE_PATTERN.match(token_lower) or ACTION_VERB_PATTERN.match(token_lower):
        return 3
    if DOMAIN_NOUN_PATTERN.match(token_lower):
        return 2
    return 1


def make_token_relevance(overrides: dict | None) -> Callable[[str], int]:
    """Bind an override table into a one-argument relevance callback."""
    table = {k.lower(): v for k, v in (overrides or {}).items()}
    return lambda token: default_token_relevance(token, table)


# ── Data Model ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Combo:
    text: str
    type: str
    relevance_score: float
    source: str

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass(frozen=True)
class GeneratorConfig:
    """Length bounds plus the injected stopwords and relevance lookup."""

    min_length: int = 2
    max_length: int = 4
    stopwords: frozenset = frozenset()
    get_token_relevance: Callable[[str], int] = default_token_relevance

    def is_stopword(self, token: str) -> bool:
        return token.lower() in self.stopwords

    def is_meaningful(self, token: str) -> bool:
        return not self.is_stopword(token) and len(token) >= MIN_MEANINGFUL_LENGTH

    def mean_relevance(self, tokens: list[str]) -> float:
        if not tokens:
            return 0.0
        return sum(self.get_token_relevance(t) for t in tokens) / len(tokens)


def _clean_tokens(tokens) -> list[str]:
    if not tokens or isinstance(tokens, str):
        return []
    return [t for t in tokens if isinstance(t, str) and t.strip()]


def _windows(tokens: list[str], size: int) -> Iterator[list[str]]:
    for start in range(len(tokens) - size + 1):
        yield tokens[start:start + size]


# ── Strategies ─────────────────────────────────────────────────────────────


def _iter_sequential(tokens: list[str], config: GeneratorConfig, source: str) -> Iterator[Combo]:
    for size in range(max(config.min_length, 1), config.max_length + 1):
        for window in _windows(tokens, size):
            meaningful = [t for t in window if config.is_meaningful(t)]
            if not meaningful:
                continue
            yield Combo(" ".join(window), SEQUENTIAL, config.mean_relevance(meaningful), source)


def _iter_stopword_bridged(tokens: list[str], config: GeneratorConfig, source: str) -> Iterator[Combo]:
    for size in range(max(config.min_length, 2), config.max_length + 1):
        for window in _windows(tokens, size):
            stop_positions = [i for i, t in enumerate(window) if config.is_stopword(t)]
            if len(stop_positions) != 1:
                continue
            pos = stop_positions[0]
            before = [t for t in window[:pos] if config.is_meaningful(t)]
            after = [t for t in window[pos + 1:] if config.is_meaningful(t)]
            if not before or not after:
                continue
            meaningful = before + after
            yield Combo(" ".join(window), STOPWORD_BRIDGED, config.mean_relevance(meaningful), source)


def _strong_tokens(tokens: list[str], config: GeneratorConfig) -> list[tuple[str, int]]:
    seen = set()
    strong = []
    for token in tokens:
        key = token.lower()
        if key in seen or not config.is_meaningful(token):
            continue
        relevance = config.get_token_relevance(token)
        if relevance >= CROSS_ELEMENT_MIN_RELEVANCE:
            seen.add(key)
            strong.append((token, relevance))
    return strong


def _iter_cross_element(title_tokens: list[str], subtitle_tokens: list[str],
                        config: GeneratorConfig) -> Iterator[Combo]:
    if not config.min_length <= 2 <= config.max_length:
        return
    subtitle_side = _strong_tokens(subtitle_tokens, config)
    for title_token, title_rel in _strong_tokens(title_tokens, config):
        for subtitle_token, subtitle_rel in subtitle_side:
            if title_token.lower() == subtitle_token.lower():
                continue
            yield Combo(
                f"{title_token} {subtitle_token}",
                CROSS_ELEMENT,
                (title_rel + subtitle_rel) / 2,
                SOURCE_TITLE_AND_SUBTITLE,
            )


def generate_sequential(tokens, config: GeneratorConfig, source: str = SOURCE_TITLE) -> list[Combo]:
    """Contiguous n-grams between min_length and max_length words."""
    return list(_iter_sequential(_clean_tokens(tokens), config, source))


def generate_stopword_bridged(tokens, config: GeneratorConfig, source: str = SOURCE_TITLE) -> list[Combo]:
    """N-grams whose single stopword sits between meaningful tokens."""
    return list(_iter_stopword_bridged(_clean_tokens(tokens), config, source))


def generate_cross_element(title_tokens, subtitle_tokens, config: GeneratorConfig) -> list[Combo]:
    """Pair every strong title token with every strong subtitle token."""
    return list(_iter_cross_element(_clean_tokens(title_tokens), _clean_tokens(subtitle_tokens), config))


def is_semantic_pair(text: str) -> bool:
    """True for a two-word language + action verb phrase, in either order."""
    tokens = normalize(text)
    if len(tokens) != 2:
        return False
    first, second = tokens
    return bool(
        (LANGUAGE_PATTERN.match(first) and ACTION_VERB_PATTERN.match(second))
        or (ACTION_VERB_PATTERN.match(first) and LANGUAGE_PATTERN.match(second))
    )


def apply_semantic_pair(combo: Combo) -> Combo:
    """Re-tag a semantic pair with maximum relevance, whatever produced it."""
    if is_semantic_pair(combo.text):
        return replace(combo, type=SEMANTIC_PAIR, relevance_score=SEMANTIC_PAIR_RELEVANCE)
    return combo


# ── Merge ──────────────────────────────────────────────────────────────────


def merge_best(combos: Iterable[Combo]) -> dict[str, Combo]:
    """Fold combos into canonical form -> most relevant combo.

    On equal relevance the combo seen first is kept.
    """
    best: dict[str, Combo] = {}
    for combo in combos:
        key = canonical_form(combo.text)
        if not key:
            continue
        current = best.get(key)
        if current is None or combo.relevance_score > current.relevance_score:
            best[key] = combo
    return best


def _take_capped(run: Iterator[Combo], name: str) -> list[Combo]:
    batch = list(islice(run, MAX_COMBOS_PER_SOURCE + 1))
    if len(batch) > MAX_COMBOS_PER_SOURCE:
        logger.debug("%s run hit the %d combo cap", name, MAX_COMBOS_PER_SOURCE)
        batch = batch[:MAX_COMBOS_PER_SOURCE]
    return batch


def generate_combos(title_tokens, subtitle_tokens, config: GeneratorConfig | None = None) -> list[Combo]:
    """Generate every candidate combo for one title/subtitle pair.

    Runs the title stream alone, the concatenated title+subtitle stream and
    the cross-element pairs, then keeps the most relevant variant of each
    phrase. Sorted by relevance, highest first.
    """
    config = config or GeneratorConfig()
    title = _clean_tokens(title_tokens)
    subtitle = _clean_tokens(subtitle_tokens)
    combined = title + subtitle

    runs = [
        ("title", chain(
            _iter_stopword_bridged(title, config, SOURCE_TITLE),
            _iter_sequential(title, config, SOURCE_TITLE),
        )),
        ("title+subtitle", chain(
            _iter_stopword_bridged(combined, config, SOURCE_TITLE_AND_SUBTITLE),
            _iter_sequential(combined, config, SOURCE_TITLE_AND_SUBTITLE),
        )),
        ("cross-element", _iter_cross_element(title, subtitle, config)),
    ]

    candidates = []
    for name, run in runs:
        candidates.extend(apply_semantic_pair(c) for c in _take_capped(run, name))

    best = merge_best(candidates)
    logger.debug("Generated %d candidates, %d unique combos", len(candidates), len(best))
    return sorted(best.values(), key=lambda c: c.relevance_score, reverse=True)
