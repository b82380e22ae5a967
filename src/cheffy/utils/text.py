"""Text comparison helpers used for step deduplication."""

from __future__ import annotations


def jaccard_similarity(first: str, second: str) -> float:
    """Return the Jaccard similarity of the whitespace token sets of two strings.

    Parameters
    ----------
    first, second:
        Instructions to compare. Comparison is case-insensitive.

    Returns
    -------
    float
        ``|intersection| / |union|`` in ``[0, 1]``; ``0.0`` when both inputs are empty.
    """

    tokens_a = set(first.lower().split())
    tokens_b = set(second.lower().split())
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


__all__ = ["jaccard_similarity"]
