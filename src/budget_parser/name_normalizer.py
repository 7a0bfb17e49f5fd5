#!/usr/bin/env python3
"""
Name Normalizer
Turns the residue of a requested line into a canonical catalog search string.
"""

import logging
import re
from typing import Iterable, List, Pattern, Tuple

from .rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)

NUMBER = r'\d+(?:[.,]\d+)?'


def build_alternation(words: Iterable[str]) -> str:
    """Regex alternation for a word set, longest first; never matches when empty."""
    ordered = sorted({w for w in words if w}, key=lambda w: (-len(w), w))
    if not ordered:
        return '(?!)'
    return '|'.join(re.escape(w) for w in ordered)


def compile_ocr_repairs(rules: RuleTables) -> List[Tuple[Pattern, str]]:
    return [(re.compile(pattern), replacement) for pattern, replacement in rules.ocr_repairs]


class NameNormalizer:
    """Removes attribute numerics, leftover quantities, noise characters and noise words."""

    def __init__(self, rules: RuleTables = DEFAULT_RULES):
        self.rules = rules

        units = build_alternation(rules.attribute_markers)
        separators = build_alternation(rules.dimension_separators)
        markers = build_alternation(rules.explicit_quantity_markers)

        # 21x30cm, 20 x 30, 1,5 x 2 m
        self.dimension_pattern = re.compile(
            rf'(?<!\w){NUMBER}\s*(?:{separators})\s*{NUMBER}(?:\s*(?:{units})(?!\w))?',
            re.IGNORECASE,
        )
        # 96 fls, 500g, 1,5 L
        self.attribute_pattern = re.compile(
            rf'(?<!\w){NUMBER}\s*(?:{units})(?!\w)',
            re.IGNORECASE,
        )
        self.quantity_pattern = re.compile(
            rf'(?<!\w)\d+\s*(?:{markers})(?!\w)',
            re.IGNORECASE,
        )
        self.noise_word_pattern = re.compile(
            rf'(?<!\w)(?:{build_alternation(rules.noise_words)})(?!\w)',
            re.IGNORECASE,
        )
        if rules.noise_characters:
            self.noise_char_pattern = re.compile('[' + re.escape(rules.noise_characters) + ']')
        else:
            self.noise_char_pattern = None
        self.bare_digit_pattern = re.compile(r'(?<!\w)\d+(?!\w)')
        self.ocr_repairs = compile_ocr_repairs(rules)

    def strip_attributes(self, text: str) -> str:
        text = self.dimension_pattern.sub(' ', text)
        return self.attribute_pattern.sub(' ', text)

    def normalize(self, text: str) -> str:
        name = self.strip_attributes(text)
        name = self.quantity_pattern.sub(' ', name)
        if self.noise_char_pattern is not None:
            name = self.noise_char_pattern.sub(' ', name)
        name = self.noise_word_pattern.sub(' ', name)
        name = self.bare_digit_pattern.sub(' ', name)
        name = re.sub(r'\s+', ' ', name).strip()
        name = self._drop_leading_digit_lookalikes(name)

        logger.debug(f"Normalized '{text}' -> '{name}'")
        return name

    def _drop_leading_digit_lookalikes(self, name: str) -> str:
        """Drop a leading token that OCR repair would read as a number."""
        changed = True
        while changed and name:
            changed = False
            for pattern, _ in self.ocr_repairs:
                match = pattern.match(name)
                if match:
                    name = name[match.end():].strip()
                    changed = True
                    break
        return name
