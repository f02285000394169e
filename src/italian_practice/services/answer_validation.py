"""Answer normalization and validation for typed Italian answers."""

import unicodedata


def normalize_answer(text: str) -> str:
    """
    Normalize an answer so accents, case and padding do not matter.

    Rules:
    - Case-fold the text
    - Decompose accented letters (NFD) and drop the combining marks
    - Trim leading and trailing whitespace
    - No locale-specific collation; the transform is codepoint level

    Args:
        text: Raw answer as typed or as stored.

    Returns:
        Normalized answer; normalizing it again returns the same string.
    """
    decomposed = unicodedata.normalize("NFD", text.casefold())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip()


def is_correct(user_input: str, expected_answer: str) -> bool:
    """Return True when the input matches the expected answer after normalization.

    Two blank strings match. Partial answers never do.
    """
    return normalize_answer(user_input) == normalize_answer(expected_answer)


def is_blank(value: str) -> bool:
    return not value.strip()
