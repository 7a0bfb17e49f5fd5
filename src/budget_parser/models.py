"""
Data models for the Budget List Parser.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

CENTS = Decimal('0.01')

MATCHED = "matched"
UNMATCHED = "unmatched"
REJECTED = "rejected"


def money_str(amount: Optional[Decimal]) -> Optional[str]:
    """Render a Decimal amount as a two-decimal string."""
    if amount is None:
        return None
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class CatalogEntry:
    """A purchasable product with a unique name and unit price."""
    id: int
    name: str
    unit_price: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nome": self.name,
            "preco": money_str(self.unit_price),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Quantity and search name pulled out of a single line."""
    quantity: int
    normalized_name: str
    skip: bool = False


@dataclass(frozen=True)
class MatchResult:
    """Outcome of one document line after the whole pipeline."""
    original_line: str
    matched: bool
    status: str = UNMATCHED
    quantity: int = 1
    normalized_name: str = ""
    catalog_entry: Optional[CatalogEntry] = None
    similarity_score: Optional[float] = None
    line_amount: Optional[Decimal] = None
    # Best candidate for lines below the threshold, diagnostics only
    best_candidate: Optional[str] = None
    best_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        score = self.similarity_score if self.matched else self.best_score
        return {
            "nomeBuscado": self.original_line,
            "encontrado": self.matched,
            "quantidade": self.quantity,
            "similaridade": round(score, 4) if score is not None else None,
            "produto": self.catalog_entry.to_dict() if self.catalog_entry else None,
            "subtotal": money_str(self.line_amount),
        }


@dataclass(frozen=True)
class BudgetReport:
    """Priced, ordered result of one processing run."""
    items: Tuple[MatchResult, ...]
    total: Decimal
    rejected: Tuple[MatchResult, ...] = field(default_factory=tuple)

    @property
    def matched_items(self) -> Tuple[MatchResult, ...]:
        return tuple(item for item in self.items if item.matched)

    @property
    def unmatched_items(self) -> Tuple[MatchResult, ...]:
        return tuple(item for item in self.items if not item.matched)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-serializable record returned to callers."""
        return {
            "itens": [item.to_dict() for item in self.items],
            "total": money_str(self.total),
        }
