#!/usr/bin/env python3
"""
Catalog Matcher
Finds the catalog entry most similar to a normalized item name.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .exceptions import EmptyCatalog
from .models import CatalogEntry
from .similarity import SimilarityMetric, dice_coefficient

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.3


@dataclass(frozen=True)
class CatalogMatch:
    """Best scoring entry for a name and whether it clears the threshold."""
    entry: CatalogEntry
    score: float
    accepted: bool


class CatalogMatcher:
    """
    Scores a name against every catalog entry and keeps the best one.

    Ties keep the entry seen first in catalog order. The threshold is
    exclusive: a score equal to it is not a match.
    """

    def __init__(self, catalog: Sequence[CatalogEntry],
                 threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
                 metric: SimilarityMetric = dice_coefficient):
        self.catalog = tuple(catalog)
        if not self.catalog:
            raise EmptyCatalog()
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"Confidence threshold must be in [0, 1], got {threshold}")
        self.threshold = threshold
        self.metric = metric

    def best_match(self, name: str) -> CatalogMatch:
        best_entry: Optional[CatalogEntry] = None
        best_score = -1.0

        for entry in self.catalog:
            score = self.metric(name, entry.name)
            if score > best_score:
                best_entry, best_score = entry, score

        accepted = best_score > self.threshold
        if accepted:
            logger.debug(f"✔️  '{name}' | similar to | '{best_entry.name}' ({best_score:.0%})")
        else:
            logger.debug(f"❌  '{name}' | similar to | '{best_entry.name}' ({best_score:.0%}) - LOW CONFIDENCE")

        return CatalogMatch(entry=best_entry, score=best_score, accepted=accepted)
