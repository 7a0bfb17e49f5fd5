"""
Budget List Parser

Prices free-form supply lists (text, PDF, DOCX or scanned images) against a
product catalog using heuristic line extraction and fuzzy matching.
"""

__version__ = "1.0.0"

from .catalog import CatalogStore, load_catalog
from .catalog_matcher import CatalogMatcher
from .engine import BudgetEngine, process, split_lines
from .exceptions import (
    BudgetParserError,
    CatalogError,
    DecodeFailure,
    EmptyCatalog,
    RuleTableError,
)
from .line_classifier import LineClassifier
from .models import BudgetReport, CatalogEntry, ExtractionResult, MatchResult
from .quantity_extractor import QuantityExtractor
from .rules import DEFAULT_RULES, RuleTables, load_rule_tables
from .text_extractor import DocumentTextExtractor, extract_document_lines

__all__ = [
    "BudgetEngine",
    "process",
    "split_lines",
    "LineClassifier",
    "QuantityExtractor",
    "CatalogMatcher",
    "CatalogStore",
    "load_catalog",
    "DocumentTextExtractor",
    "extract_document_lines",
    "RuleTables",
    "DEFAULT_RULES",
    "load_rule_tables",
    "CatalogEntry",
    "ExtractionResult",
    "MatchResult",
    "BudgetReport",
    "BudgetParserError",
    "DecodeFailure",
    "EmptyCatalog",
    "CatalogError",
    "RuleTableError",
]
