#!/usr/bin/env python3
"""
Budget Engine
Reconciles the lines of a requested-items list against a priced catalog.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .aggregator import LineAggregator
from .catalog_matcher import DEFAULT_CONFIDENCE_THRESHOLD, CatalogMatcher
from .exceptions import EmptyCatalog
from .line_classifier import LineClassifier
from .models import BudgetReport, CatalogEntry
from .quantity_extractor import QuantityExtractor
from .rules import DEFAULT_RULES, RuleTables
from .similarity import SimilarityMetric, dice_coefficient

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    """Split extracted document text into non-blank lines, keeping order."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class BudgetEngine:
    """
    Runs classifier -> quantity extraction -> catalog matching -> aggregation
    for every line of a document.

    The engine holds configuration only; each ``process`` call builds its
    own aggregator, so one instance can serve any number of runs.
    """

    def __init__(self, rules: RuleTables = DEFAULT_RULES,
                 threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
                 metric: SimilarityMetric = dice_coefficient):
        self.rules = rules
        self.threshold = threshold
        self.metric = metric
        self.classifier = LineClassifier(rules)
        self.extractor = QuantityExtractor(rules)

    def process(self, lines: Iterable[str], catalog: Sequence[CatalogEntry]) -> BudgetReport:
        catalog = tuple(catalog)
        if not catalog:
            logger.error("❌ No products in catalog, nothing can be matched")
            raise EmptyCatalog()

        matcher = CatalogMatcher(catalog, threshold=self.threshold, metric=self.metric)
        aggregator = LineAggregator()
        lines = list(lines)
        logger.info(f"Comparing {len(lines)} lines against {len(catalog)} catalog products")

        for line in lines:
            classification = self.classifier.classify(line)
            if classification.skip:
                logger.debug(f"Skipping '{line}': {classification.reason}")
                aggregator.add_rejected(line)
                continue

            extraction = self.extractor.extract(classification.text)
            if extraction.skip:
                aggregator.add_unmatched(line, extraction)
                continue

            match = matcher.best_match(extraction.normalized_name)
            if match.accepted:
                aggregator.add_matched(line, extraction, match)
            else:
                aggregator.add_unmatched(line, extraction, match)

        return aggregator.report()


def process(lines: Iterable[str], catalog: Sequence[CatalogEntry],
            rules: Optional[RuleTables] = None,
            threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> BudgetReport:
    """Convenience wrapper building a one-off engine."""
    engine = BudgetEngine(rules or DEFAULT_RULES, threshold=threshold)
    return engine.process(lines, catalog)
