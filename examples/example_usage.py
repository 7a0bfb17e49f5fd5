#!/usr/bin/env python3
"""
Example usage of the Budget List Parser
Prices a sample school supply list against a small catalog.
"""

import json
import os
import sys
import tempfile
from decimal import Decimal
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from budget_parser import BudgetEngine, CatalogStore, LineClassifier, QuantityExtractor, split_lines
from budget_parser.formatting import format_money


SAMPLE_LIST = """
ESCOLA MUNICIPAL JOÃO XXIII
LISTA DE MATERIAL ESCOLAR - 3º ANO
2 unid Caderno universitário
96 fls Caderno Espiral
3x Caneta Azul
1 cx Lápis de cor 12 cores
l Borracha
2 Cola branca 90g
Xilofone
-- 1 of 2 --
OBS: todo material deve ser identificado
"""


def build_sample_catalog(path):
    """Create a small catalog file."""
    store = CatalogStore(path)
    for name, price in [("Caneta", "2.50"), ("Caderno", "15.90"), ("Lápis de cor", "18,75"),
                        ("Borracha", "1.20"), ("Cola", "4.30"), ("Mochila", "129.90")]:
        store.add_product(name, price)
    return store


def demonstrate_line_analysis():
    """Show how each line is classified and normalized."""
    print("=" * 60)
    print("DEMONSTRATION: Line analysis")
    print("=" * 60)

    classifier = LineClassifier()
    extractor = QuantityExtractor()

    for line in split_lines(SAMPLE_LIST):
        classification = classifier.classify(line)
        if classification.skip:
            print(f"  skip  {line!r} ({classification.reason})")
            continue
        extraction = extractor.extract(classification.text)
        print(f"  item  {line!r} -> {extraction.quantity} x {extraction.normalized_name!r}")


def demonstrate_budget():
    """Build a budget against a temporary catalog."""
    print("\n" + "=" * 60)
    print("DEMONSTRATION: Budget")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = build_sample_catalog(os.path.join(tmpdir, "catalog.json"))
        report = BudgetEngine().process(split_lines(SAMPLE_LIST), store.snapshot())

    for item in report.items:
        if item.matched:
            print(f"  ✔ {item.original_line:<30} {item.quantity} x {item.catalog_entry.name:<14} "
                  f"{format_money(item.line_amount)}")
        else:
            print(f"  ✘ {item.original_line:<30} not found")

    print(f"\nTOTAL: {format_money(report.total)}")
    assert report.total == sum((i.line_amount for i in report.matched_items), Decimal("0"))

    output_file = "sample_budget_result.json"
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    print(f"Results saved to: {output_file}")


def demonstrate_cli_usage():
    """Print CLI commands to try."""
    print("\n" + "=" * 60)
    print("DEMONSTRATION: CLI Usage")
    print("=" * 60)
    print("budget-parser catalog add Caneta 2,50 -c catalog.json")
    print("budget-parser catalog list -c catalog.json")
    print("budget-parser classify lista.pdf")
    print("budget-parser parse lista.pdf -c catalog.json --table")
    print("budget-parser parse foto.jpg -c catalog.json -o budget.json")


if __name__ == "__main__":
    demonstrate_line_analysis()
    demonstrate_budget()
    demonstrate_cli_usage()
