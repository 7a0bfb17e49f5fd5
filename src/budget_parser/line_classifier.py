#!/usr/bin/env python3
"""
Line Classifier
Separates item candidates from headers, totals, instructions and other noise.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)

# "1)", "12)", "(3)", "a)" style enumerations in front of an item
ENUMERATION_PATTERN = re.compile(r'^(?:\(\d{1,3}\)|\d{1,3}\)|[A-Za-z]\))\s*')


@dataclass(frozen=True)
class Classification:
    """Classifier decision for one raw line."""
    skip: bool
    text: str
    reason: Optional[str] = None


class LineClassifier:
    """
    Decides whether a raw line is worth extracting.

    Rules run in order: PDF page separators, list marker stripping,
    minimum length, header denylist.
    """

    def __init__(self, rules: RuleTables = DEFAULT_RULES):
        self.rules = rules

    def strip_markers(self, line: str) -> str:
        """Remove bullets, dashes and enumerations from the start of a line."""
        text = line.strip()
        while True:
            stripped = text.lstrip(self.rules.list_markers).lstrip()
            stripped = ENUMERATION_PATTERN.sub('', stripped, count=1)
            if stripped == text:
                return text
            text = stripped

    def classify(self, line: str) -> Classification:
        if line.strip().startswith(self.rules.page_separator_prefix):
            return Classification(skip=True, text="", reason="page separator")

        text = self.strip_markers(line)

        if len(text) < self.rules.min_line_length:
            return Classification(skip=True, text=text, reason="too short")

        term = self._find_header_term(text.lower())
        if term:
            return Classification(skip=True, text=text, reason=f"header term '{term}'")

        return Classification(skip=False, text=text)

    def is_noise(self, line: str) -> bool:
        return self.classify(line).skip

    def _find_header_term(self, text_lower: str) -> Optional[str]:
        for term in sorted(self.rules.header_denylist):
            if term in text_lower:
                return term
        return None
