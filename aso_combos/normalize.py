"""Text normalization shared by every stage of the combo pipeline."""

import re

_NON_WORD = re.compile(r"[^\w\s]")


def normalize(text) -> list[str]:
    """Split text into lowercase, punctuation-free tokens.

    Anything that is not a string yields an empty list.
    """
    if not isinstance(text, str):
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [token for token in cleaned.split() if token]


def canonical_form(text) -> str:
    """Space-joined normalized tokens, used for combo equality."""
    return " ".join(normalize(text))
