"""
Line Aggregator
Prices matched lines and keeps the running budget total.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from .catalog_matcher import CatalogMatch
from .models import (
    CENTS, MATCHED, REJECTED, UNMATCHED, BudgetReport, ExtractionResult, MatchResult,
)

logger = logging.getLogger(__name__)


class LineAggregator:
    """Accumulates per-line outcomes in document order for a single run."""

    def __init__(self):
        self.items: List[MatchResult] = []
        self.rejected: List[MatchResult] = []
        self.total = Decimal('0')

    def add_matched(self, line: str, extraction: ExtractionResult, match: CatalogMatch) -> MatchResult:
        # The total is the sum of the cent-rounded line amounts
        amount = (match.entry.unit_price * extraction.quantity).quantize(CENTS, rounding=ROUND_HALF_UP)
        self.total += amount
        result = MatchResult(
            original_line=line,
            matched=True,
            status=MATCHED,
            quantity=extraction.quantity,
            normalized_name=extraction.normalized_name,
            catalog_entry=match.entry,
            similarity_score=match.score,
            line_amount=amount,
        )
        self.items.append(result)
        return result

    def add_unmatched(self, line: str, extraction: ExtractionResult,
                      match: Optional[CatalogMatch] = None) -> MatchResult:
        result = MatchResult(
            original_line=line,
            matched=False,
            status=UNMATCHED,
            quantity=extraction.quantity,
            normalized_name=extraction.normalized_name,
            best_candidate=match.entry.name if match else None,
            best_score=match.score if match else None,
        )
        self.items.append(result)
        return result

    def add_rejected(self, line: str) -> MatchResult:
        result = MatchResult(original_line=line, matched=False, status=REJECTED)
        self.rejected.append(result)
        return result

    def report(self) -> BudgetReport:
        logger.info(
            f"Budget: {sum(1 for i in self.items if i.matched)} matched, "
            f"{sum(1 for i in self.items if not i.matched)} unmatched, "
            f"{len(self.rejected)} rejected, total {self.total}"
        )
        return BudgetReport(
            items=tuple(self.items),
            total=self.total,
            rejected=tuple(self.rejected),
        )
