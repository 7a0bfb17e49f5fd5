#!/usr/bin/env python3
"""
Budget Parser CLI
Reads a supply list, prices it against the catalog and prints the budget.
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .catalog import CatalogStore
from .catalog_matcher import DEFAULT_CONFIDENCE_THRESHOLD
from .engine import BudgetEngine
from .exceptions import CatalogError, DecodeFailure, EmptyCatalog, RuleTableError
from .formatting import format_money, format_score
from .line_classifier import LineClassifier
from .models import BudgetReport
from .ocr import DEFAULT_LANGUAGE
from .quantity_extractor import QuantityExtractor
from .rules import DEFAULT_RULES, RuleTables, load_rule_tables
from .text_extractor import extract_document_lines

logger = logging.getLogger(__name__)

EXIT_DECODE_FAILURE = 3
EXIT_CATALOG_FAILURE = 4
EXIT_RULES_FAILURE = 5

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _load_rules(rules_path: Optional[str]) -> RuleTables:
    if not rules_path:
        return DEFAULT_RULES
    try:
        return load_rule_tables(rules_path)
    except RuleTableError as e:
        err_console.print(f"[red]❌ Invalid rule tables: {e}[/red]")
        sys.exit(EXIT_RULES_FAILURE)


def render_report(report: BudgetReport):
    """Print the budget as a table, one row per requested item."""
    table = Table(title="Budget", show_lines=False)
    table.add_column("", width=2)
    table.add_column("Requested")
    table.add_column("Qty", justify="right")
    table.add_column("Product")
    table.add_column("Match", justify="right")
    table.add_column("Unit price", justify="right")
    table.add_column("Subtotal", justify="right")

    for item in report.items:
        if item.matched:
            table.add_row(
                "[green]✔[/green]",
                item.original_line,
                str(item.quantity),
                item.catalog_entry.name,
                format_score(item.similarity_score),
                format_money(item.catalog_entry.unit_price),
                format_money(item.line_amount),
            )
        else:
            candidate = f"[dim]{item.best_candidate}?[/dim]" if item.best_candidate else "[dim]-[/dim]"
            table.add_row(
                "[red]✘[/red]",
                item.original_line,
                str(item.quantity),
                candidate,
                format_score(item.best_score),
                "-",
                "-",
            )

    console.print(table)
    console.print(Panel.fit(
        f"[bold]TOTAL: {format_money(report.total)}[/bold]\n"
        f"[dim]{len(report.matched_items)} matched, {len(report.unmatched_items)} not found, "
        f"{len(report.rejected)} lines ignored[/dim]",
        border_style="blue"
    ))


@click.group()
@click.version_option(__version__, prog_name="budget-parser")
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose: bool):
    """Price a school supply list against a product catalog."""
    _configure_logging(verbose)


@cli.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--catalog', '-c', 'catalog_path', required=True, type=click.Path(dir_okay=False),
              help='Catalog file (.json or .csv)')
@click.option('--rules', 'rules_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file overriding the heuristic rule tables')
@click.option('--threshold', type=click.FloatRange(0.0, 1.0), default=DEFAULT_CONFIDENCE_THRESHOLD,
              show_default=True, help='Minimum similarity (exclusive) to accept a match')
@click.option('--lang', default=DEFAULT_LANGUAGE, show_default=True,
              help='Tesseract language for scanned documents')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output JSON file path')
@click.option('--table', 'as_table', is_flag=True, help='Show a table instead of JSON')
def parse(document: str, catalog_path: str, rules_path: Optional[str], threshold: float,
          lang: str, output: Optional[str], as_table: bool):
    """Build a priced budget from DOCUMENT (.txt, .pdf, .docx or image)."""
    rules = _load_rules(rules_path)

    try:
        catalog = CatalogStore(catalog_path).snapshot()
        if not catalog:
            raise EmptyCatalog(catalog_path)
    except (CatalogError, EmptyCatalog) as e:
        err_console.print(f"[red]❌ Catalog problem: {e}[/red]")
        sys.exit(EXIT_CATALOG_FAILURE)

    try:
        lines = extract_document_lines(document, lang)
    except DecodeFailure as e:
        err_console.print(f"[red]❌ Could not read document: {e}[/red]")
        sys.exit(EXIT_DECODE_FAILURE)

    report = BudgetEngine(rules, threshold=threshold).process(lines, catalog)
    result = report.to_dict()

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            json.dump(result, f, indent=2, ensure_ascii=False)
        logger.info(f"✅ Results saved to: {output}")

    if as_table:
        render_report(report)
    elif not output:
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))

    if report.unmatched_items:
        logger.warning(f"⚠️  {len(report.unmatched_items)} item(s) had no confident catalog match")


@cli.command()
@click.argument('document', type=click.Path(exists=True, dir_okay=False))
@click.option('--rules', 'rules_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON file overriding the heuristic rule tables')
@click.option('--lang', default=DEFAULT_LANGUAGE, show_default=True,
              help='Tesseract language for scanned documents')
def classify(document: str, rules_path: Optional[str], lang: str):
    """Show how each line of DOCUMENT is classified and normalized."""
    rules = _load_rules(rules_path)
    classifier = LineClassifier(rules)
    extractor = QuantityExtractor(rules)

    try:
        lines = extract_document_lines(document, lang)
    except DecodeFailure as e:
        err_console.print(f"[red]❌ Could not read document: {e}[/red]")
        sys.exit(EXIT_DECODE_FAILURE)

    table = Table(title=f"Lines of {click.format_filename(document)}")
    table.add_column("Line")
    table.add_column("Decision")
    table.add_column("Qty", justify="right")
    table.add_column("Search name")

    for line in lines:
        classification = classifier.classify(line)
        if classification.skip:
            table.add_row(line, f"[yellow]ignored ({classification.reason})[/yellow]", "", "")
            continue
        extraction = extractor.extract(classification.text)
        decision = "[red]name too short[/red]" if extraction.skip else "[green]item[/green]"
        table.add_row(line, decision, str(extraction.quantity), extraction.normalized_name)

    console.print(table)


@cli.group()
def catalog():
    """Manage the product catalog."""


@catalog.command('list')
@click.option('--catalog', '-c', 'catalog_path', required=True, type=click.Path(dir_okay=False),
              help='Catalog file (.json or .csv)')
def list_products(catalog_path: str):
    """List catalog products."""
    try:
        products = CatalogStore(catalog_path).list_products()
    except CatalogError as e:
        err_console.print(f"[red]❌ Catalog problem: {e}[/red]")
        sys.exit(EXIT_CATALOG_FAILURE)

    table = Table(title="Products")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    for product in products:
        table.add_row(str(product.id), product.name, format_money(product.unit_price))
    console.print(table)


@catalog.command('add')
@click.argument('name')
@click.argument('price')
@click.option('--catalog', '-c', 'catalog_path', required=True, type=click.Path(dir_okay=False),
              help='Catalog file (.json or .csv)')
def add_product(name: str, price: str, catalog_path: str):
    """Add product NAME with unit PRICE (e.g. 15.90 or 15,90)."""
    try:
        product = CatalogStore(catalog_path).add_product(name, price)
    except CatalogError as e:
        err_console.print(f"[red]❌ Catalog problem: {e}[/red]")
        sys.exit(EXIT_CATALOG_FAILURE)

    console.print(f"[green]✅ {product.id}: {product.name} ({format_money(product.unit_price)})[/green]")


if __name__ == '__main__':
    cli()
