"""Detect combo families that share a 2-token prefix or suffix.

Using "learn spanish fast", "learn spanish now" and "learn spanish today"
together spends the "learn spanish" prefix three times; only one of those is
needed for ranking. The redundancy score is the share of all tokens wasted
this way.
"""

import logging
from collections import defaultdict

from .normalize import normalize

logger = logging.getLogger(__name__)

MIN_GROUP_TOKENS = 3   # shorter combos are all prefix/suffix
MIN_GROUP_SIZE = 2
PATTERN_TOKENS = 2


def _wasted_tokens(group_size: int) -> int:
    return PATTERN_TOKENS * (group_size - 1)


def _collect_groups(candidates: list[tuple[int, list[str]]], kind: str) -> list[dict]:
    groups = defaultdict(list)
    for index, tokens in candidates:
        part = tokens[:PATTERN_TOKENS] if kind == "prefix" else tokens[-PATTERN_TOKENS:]
        groups[" ".join(part)].append((index, tokens))

    redundant = []
    for pattern, members in groups.items():
        if len(members) < MIN_GROUP_SIZE:
            continue
        redundant.append({
            "pattern": pattern,
            "type": kind,
            "combos": [" ".join(tokens) for _, tokens in members],
            "wasted_tokens": _wasted_tokens(len(members)),
            "_indexes": [index for index, _ in members],
        })
    return redundant


def find_redundant_combos(combos) -> dict:
    """Group combos by shared prefix, then by shared suffix.

    Prefix groups are found first and their members are left out of the
    suffix pass. Returns {"redundancy_score", "redundant_groups"}.
    """
    empty = {"redundancy_score": 0, "redundant_groups": []}
    if not isinstance(combos, (list, tuple)) or len(combos) < MIN_GROUP_SIZE:
        return empty

    tokenized = [normalize(c) for c in combos]
    total_tokens = sum(len(tokens) for tokens in tokenized)
    if total_tokens == 0:
        return empty

    eligible = [(i, tokens) for i, tokens in enumerate(tokenized) if len(tokens) >= MIN_GROUP_TOKENS]

    prefix_groups = _collect_groups(eligible, "prefix")
    processed = {i for group in prefix_groups for i in group["_indexes"]}
    remaining = [(i, tokens) for i, tokens in eligible if i not in processed]
    suffix_groups = _collect_groups(remaining, "suffix")

    redundant_groups = []
    for group in prefix_groups + suffix_groups:
        group.pop("_indexes")
        redundant_groups.append(group)

    total_wasted = sum(g["wasted_tokens"] for g in redundant_groups)
    score = min(100, round(100 * total_wasted / total_tokens))
    logger.debug("Found %d redundant groups wasting %d of %d tokens",
                 len(redundant_groups), total_wasted, total_tokens)

    return {"redundancy_score": score, "redundant_groups": redundant_groups}
