import pytest

from aso_combos.generator import GeneratorConfig
from aso_combos.ruleset import RuleSet


@pytest.fixture
def stopwords() -> frozenset:
    return frozenset({"the", "a", "an", "of", "with", "for"})


@pytest.fixture
def config(stopwords) -> GeneratorConfig:
    """Default 2-4 word generator config with a small stopword set."""
    return GeneratorConfig(min_length=2, max_length=4, stopwords=stopwords)


@pytest.fixture
def ruleset() -> RuleSet:
    return RuleSet(
        category_keywords=("language", "spanish"),
        benefit_keywords=("fast", "easy"),
        cta_verbs=("download", "start"),
    )
