"""
Exceptions raised by the Budget List Parser.

Per-line outcomes (noise, low confidence) are never exceptions; only
conditions that abort a whole run live here.
"""

from typing import Optional


class BudgetParserError(Exception):
    """Base class for all budget parser errors."""


class DecodeFailure(BudgetParserError):
    """A document could not be turned into text lines."""

    def __init__(self, path: str, stage: str, reason: str):
        self.path = path
        self.stage = stage
        self.reason = reason
        super().__init__(f"Could not read {path} ({stage}): {reason}")


class EmptyCatalog(BudgetParserError):
    """The catalog snapshot has no entries, so nothing can be matched."""

    def __init__(self, source: Optional[str] = None):
        self.source = source
        message = "Catalog is empty"
        if source:
            message += f": {source}"
        super().__init__(message)


class CatalogError(BudgetParserError):
    """The catalog file or one of its entries is invalid."""


class RuleTableError(BudgetParserError):
    """A rule table file could not be loaded."""
