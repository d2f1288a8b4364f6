"""Order-preserving combo deduplication for curated keyword lists."""

import logging

from .normalize import canonical_form

logger = logging.getLogger(__name__)


def dedupe(combos) -> list[str]:
    """Keep the first occurrence of each canonical form, casing untouched.

    Unlike the generator's merge this is first-wins: the lists it cleans up
    are already ordered for display.
    """
    if not isinstance(combos, (list, tuple)):
        return []

    seen = set()
    unique = []
    for combo in combos:
        if not isinstance(combo, str):
            continue
        key = canonical_form(combo)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(combo)

    if len(unique) < len(combos):
        logger.debug("Dropped %d duplicate combos", len(combos) - len(unique))
    return unique
