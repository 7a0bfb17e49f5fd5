#!/usr/bin/env python3
"""
Quantity Extractor
Finds the purchase quantity in a candidate line without mistaking product
attributes ("96 fls", "500g", "21x30cm") for quantities.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from .models import ExtractionResult
from .name_normalizer import NameNormalizer, build_alternation, compile_ocr_repairs
from .rules import DEFAULT_RULES, RuleTables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuantityMatch:
    """A quantity found by one strategy and the line with its token removed."""
    quantity: int
    remainder: str
    strategy: str


QuantityStrategy = Callable[[str], Optional[QuantityMatch]]


class QuantityExtractor:
    """
    Extracts ``(quantity, normalized name)`` from a classifier-accepted line.

    Leading OCR confusions are repaired first, then the strategies run in
    order until one returns a match:

    1. explicit quantity: a number followed by a unit marker ("2 unid", "3x")
    2. implicit quantity: a bare leading number that is not an attribute
    3. default: quantity 1, text unchanged
    """

    def __init__(self, rules: RuleTables = DEFAULT_RULES,
                 normalizer: Optional[NameNormalizer] = None):
        self.rules = rules
        self.normalizer = normalizer or NameNormalizer(rules)
        self.ocr_repairs = compile_ocr_repairs(rules)

        markers = build_alternation(rules.explicit_quantity_markers)
        units = build_alternation(rules.attribute_markers)
        separators = build_alternation(rules.dimension_separators)

        self.explicit_pattern = re.compile(
            rf'(?<!\w)(\d+)\s*({markers})(?!\w)', re.IGNORECASE
        )
        self.leading_pattern = re.compile(r'^(\d+)\s+(?=\S)')
        self.attribute_start = re.compile(rf'^(?:{units})(?!\w)', re.IGNORECASE)
        self.dimension_start = re.compile(rf'^(?:{separators})\s*\d', re.IGNORECASE)
        self.dimension_separators = {s.lower() for s in rules.dimension_separators}

        self.strategies: List[QuantityStrategy] = [
            self._explicit_quantity,
            self._leading_quantity,
        ]

    def repair_ocr_digits(self, text: str) -> str:
        """Fix OCR letter/digit confusions in the leading token ("l Caneta" -> "1 Caneta")."""
        for pattern, replacement in self.ocr_repairs:
            repaired, count = pattern.subn(replacement, text, count=1)
            if count:
                logger.debug(f"OCR repair: '{text}' -> '{repaired}'")
                return repaired
        return text

    def find_quantity(self, text: str) -> Optional[QuantityMatch]:
        """Run the strategy chain on already repaired text."""
        for strategy in self.strategies:
            match = strategy(text)
            if match is not None:
                return match
        return None

    def extract(self, text: str) -> ExtractionResult:
        repaired = self.repair_ocr_digits(text.strip())

        match = self.find_quantity(repaired)
        if match is None:
            quantity, remainder = 1, repaired
        else:
            quantity, remainder = match.quantity, match.remainder
            logger.debug(f"Quantity {quantity} via {match.strategy} in '{text}'")

        name = self.normalizer.normalize(remainder)
        skip = len(name) < self.rules.min_name_length
        if skip:
            logger.debug(f"Name too short after cleanup: '{text}' -> '{name}'")

        return ExtractionResult(quantity=quantity, normalized_name=name, skip=skip)

    def _explicit_quantity(self, text: str) -> Optional[QuantityMatch]:
        for match in self.explicit_pattern.finditer(text):
            marker = match.group(2).lower()
            # "20 x 30" is a dimension, not "20 times"
            if marker in self.dimension_separators and re.match(r'\s*\d', text[match.end():]):
                continue
            remainder = f"{text[:match.start()]} {text[match.end():]}"
            return QuantityMatch(_as_quantity(match.group(1)), remainder, "explicit")
        return None

    def _leading_quantity(self, text: str) -> Optional[QuantityMatch]:
        match = self.leading_pattern.match(text)
        if not match:
            return None

        rest = text[match.end():]
        if self.attribute_start.match(rest) or self.dimension_start.match(rest):
            logger.debug(f"Leading number in '{text}' is an attribute, not a quantity")
            return None

        return QuantityMatch(_as_quantity(match.group(1)), rest, "leading")


def _as_quantity(digits: str) -> int:
    return max(int(digits), 1)
