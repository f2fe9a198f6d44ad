"""Lexical overlap between two pieces of text."""

from __future__ import annotations


def word_set(text: str) -> set[str]:
    """Lowercased whitespace tokens of ``text`` as a set."""
    return set(text.lower().split())


def similarity(text_a: str, text_b: str) -> float:
    """Jaccard similarity of the lowercased word sets of two texts.

    Tokens are whatever whitespace separates; punctuation stays attached
    and no words are filtered. Two texts with no tokens at all score 0.0
    rather than the undefined 0/0.

    Returns:
        A float in [0, 1]
    """
    words_a = word_set(text_a)
    words_b = word_set(text_b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
