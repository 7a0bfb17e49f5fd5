"""
String similarity metrics for catalog matching.
"""

import re
from collections import Counter
from typing import Callable

SimilarityMetric = Callable[[str, str], float]


def bigrams(text: str) -> Counter:
    """Multiset of character bigrams, lowercased and with whitespace removed."""
    text = re.sub(r'\s+', '', text.lower())
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def dice_coefficient(first: str, second: str) -> float:
    """
    Sørensen-Dice coefficient over character bigrams.

    score = 2 * |shared bigrams| / (|bigrams(a)| + |bigrams(b)|), in [0, 1].
    Identical strings score 1.0; strings with fewer than two characters
    have no bigrams and score 0.0 against anything else.
    """
    a = re.sub(r'\s+', '', first.lower())
    b = re.sub(r'\s+', '', second.lower())

    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0

    first_bigrams = bigrams(a)
    second_bigrams = bigrams(b)
    shared = sum((first_bigrams & second_bigrams).values())
    total = sum(first_bigrams.values()) + sum(second_bigrams.values())

    return 2.0 * shared / total
