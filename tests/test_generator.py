"""Unit tests for the combo generator (aso_combos.generator)."""

import pytest

from aso_combos.generator import (
    CROSS_ELEMENT,
    MAX_COMBOS_PER_SOURCE,
    SEMANTIC_PAIR,
    SEQUENTIAL,
    SOURCE_TITLE,
    SOURCE_TITLE_AND_SUBTITLE,
    STOPWORD_BRIDGED,
    Combo,
    GeneratorConfig,
    apply_semantic_pair,
    default_token_relevance,
    generate_combos,
    generate_cross_element,
    generate_sequential,
    generate_stopword_bridged,
    is_semantic_pair,
    make_token_relevance,
    merge_best,
)


def texts(combos) -> list[str]:
    return [c.text for c in combos]


def by_text(combos) -> dict:
    return {c.text: c for c in combos}


# ── Token relevance ────────────────────────────────────────────────────────


@pytest.mark.parametrize("token, expected", [
    ("Spanish", 3),
    ("learn", 3),
    ("lessons", 2),
    ("grammar", 2),
    ("best", 0),
    ("2024", 0),
    ("free", 0),
    ("calendar", 1),
])
def test_default_token_relevance(token: str, expected: int) -> None:
    assert default_token_relevance(token) == expected


def test_override_table_wins() -> None:
    get_relevance = make_token_relevance({"Calendar": 3, "spanish": 1})
    assert get_relevance("calendar") == 3
    assert get_relevance("spanish") == 1
    assert get_relevance("lessons") == 2


# ── Sequential ─────────────────────────────────────────────────────────────


def test_sequential_covers_all_ngrams() -> None:
    config = GeneratorConfig(min_length=2, max_length=3)
    result = texts(generate_sequential(["learn", "spanish", "fast"], config))

    assert "learn spanish" in result
    assert "spanish fast" in result
    assert "learn spanish fast" in result
    assert len(result) == 3


def test_sequential_drops_pure_filler(config) -> None:
    assert generate_sequential(["the", "of", "go"], config) == []


def test_sequential_relevance_is_mean_of_meaningful_tokens(config) -> None:
    result = by_text(generate_sequential(["learn", "the", "app"], config))

    assert result["learn the"].relevance_score == 3
    assert result["the app"].relevance_score == 2
    assert result["learn the app"].relevance_score == 2.5
    assert all(c.type == SEQUENTIAL for c in result.values())


def test_sequential_respects_length_bounds() -> None:
    config = GeneratorConfig(min_length=3, max_length=3)
    result = generate_sequential(["learn", "spanish", "words", "daily"], config)
    assert all(c.word_count == 3 for c in result)
    assert len(result) == 2


# ── Stopword-bridged ───────────────────────────────────────────────────────


def test_bridged_accepts_single_interior_stopword(config) -> None:
    result = generate_stopword_bridged(["learn", "the", "language"], config)

    assert texts(result) == ["learn the language"]
    assert result[0].type == STOPWORD_BRIDGED
    assert result[0].relevance_score == 2.5


def test_bridged_rejects_two_stopwords(config) -> None:
    result = generate_stopword_bridged(["learn", "the", "a", "language"], config)

    assert "learn the a language" not in texts(result)
    assert result == []


def test_bridged_rejects_edge_stopwords(config) -> None:
    result = texts(generate_stopword_bridged(["the", "spanish", "lessons", "for"], config))
    assert result == []


def test_bridged_needs_meaningful_token_on_each_side(config) -> None:
    assert generate_stopword_bridged(["go", "the", "language"], config) == []


# ── Cross-element ──────────────────────────────────────────────────────────


def test_cross_element_pairs_strong_tokens(config) -> None:
    result = generate_cross_element(["spanish", "lessons"], ["grammar", "fun"], config)

    assert set(texts(result)) == {"spanish grammar", "lessons grammar"}
    assert all(c.type == CROSS_ELEMENT for c in result)
    assert all(c.source == SOURCE_TITLE_AND_SUBTITLE for c in result)
    assert by_text(result)["spanish grammar"].relevance_score == 2.5


def test_cross_element_keeps_title_first(config) -> None:
    result = generate_cross_element(["grammar"], ["lessons"], config)
    assert texts(result) == ["grammar lessons"]


def test_cross_element_skips_identical_tokens(config) -> None:
    assert generate_cross_element(["spanish"], ["Spanish"], config) == []


def test_cross_element_outside_length_bounds(stopwords) -> None:
    config = GeneratorConfig(min_length=3, max_length=4, stopwords=stopwords)
    assert generate_cross_element(["spanish"], ["grammar"], config) == []


# ── Semantic pair ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("text, expected", [
    ("learn spanish", True),
    ("Spanish SPEAK", True),
    ("learn speak", False),
    ("spanish french", False),
    ("learn spanish fast", False),
    ("learning spanish", False),
])
def test_is_semantic_pair(text: str, expected: bool) -> None:
    assert is_semantic_pair(text) is expected


def test_semantic_pair_overrides_low_token_relevance() -> None:
    config = GeneratorConfig(get_token_relevance=lambda token: 1)
    result = by_text(generate_combos(["learn", "spanish"], [], config))

    combo = result["learn spanish"]
    assert combo.type == SEMANTIC_PAIR
    assert combo.relevance_score == 3


def test_apply_semantic_pair_leaves_other_combos() -> None:
    combo = Combo("grammar lessons", SEQUENTIAL, 2, SOURCE_TITLE)
    assert apply_semantic_pair(combo) is combo


# ── Merge & pipeline ───────────────────────────────────────────────────────


def test_merge_keeps_first_on_tie() -> None:
    first = Combo("learn grammar", SEQUENTIAL, 2, SOURCE_TITLE)
    second = Combo("Learn Grammar", CROSS_ELEMENT, 2, SOURCE_TITLE_AND_SUBTITLE)
    assert merge_best([first, second]) == {"learn grammar": first}


def test_merge_keeps_higher_relevance() -> None:
    first = Combo("learn grammar", SEQUENTIAL, 2, SOURCE_TITLE)
    second = Combo("learn grammar", CROSS_ELEMENT, 2.5, SOURCE_TITLE_AND_SUBTITLE)
    assert merge_best([first, second]) == {"learn grammar": second}


def test_generate_combos_sorted_and_unique(config) -> None:
    result = generate_combos(["learn", "spanish"], ["grammar", "lessons"], config)

    scores = [c.relevance_score for c in result]
    assert scores == sorted(scores, reverse=True)
    assert len(texts(result)) == len(set(texts(result)))


def test_generate_combos_title_source_wins_tie(config) -> None:
    result = by_text(generate_combos(["learn", "spanish"], ["grammar", "lessons"], config))

    assert result["learn spanish"].source == SOURCE_TITLE
    assert result["grammar lessons"].source == SOURCE_TITLE_AND_SUBTITLE
    assert result["spanish grammar"].source == SOURCE_TITLE_AND_SUBTITLE


def test_generate_combos_prefers_bridged_tag(config) -> None:
    result = by_text(generate_combos(["learn", "the", "language"], [], config))
    assert result["learn the language"].type == STOPWORD_BRIDGED


def test_generate_combos_invalid_input(config) -> None:
    assert generate_combos(None, None) == []
    assert generate_combos("learn spanish", [], config) == []
    assert generate_combos([], [], config) == []


def test_generate_combos_is_capped_per_run() -> None:
    tokens = [f"word{i}" for i in range(600)]
    result = generate_combos(tokens, [])
    assert len(result) == MAX_COMBOS_PER_SOURCE
