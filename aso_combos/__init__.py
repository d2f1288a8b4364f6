"""Keyword combo generation and scoring for App Store title/subtitle audits."""

from .analysis import analyze_metadata
from .coverage import analyze_coverage, combo_exists_in_text
from .dedupe import dedupe
from .generator import Combo, GeneratorConfig, default_token_relevance, generate_combos
from .impact import (
    calculate_avg_impact,
    calculate_avg_impact_from_scores,
    classify_length,
    score_combo,
)
from .low_value import filter_low_value_combos
from .normalize import canonical_form, normalize
from .redundancy import find_redundant_combos
from .ruleset import RuleSet, load_ruleset

__version__ = "0.1.0"
