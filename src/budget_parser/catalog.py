#!/usr/bin/env python3
"""
Product catalog storage.
Keeps the priced product list in a JSON or CSV file.
"""

import csv
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from babel.numbers import NumberFormatError, parse_decimal

from .exceptions import CatalogError
from .models import CatalogEntry, money_str

logger = logging.getLogger(__name__)

CSV_FIELDS = ["id", "name", "price"]


def parse_price(value: Any) -> Decimal:
    """
    Parse a catalog price.

    Accepts numbers and strings in either "15.90" or Brazilian "15,90" /
    "1.234,56" notation, with or without an "R$" prefix.
    """
    if isinstance(value, bool):
        raise CatalogError(f"Invalid price: {value!r}")
    if isinstance(value, (int, float, Decimal)):
        price = Decimal(str(value))
    elif isinstance(value, str):
        clean = value.replace('R$', '').strip()
        locale = 'pt_BR' if ',' in clean else 'en_US'
        try:
            price = parse_decimal(clean, locale=locale)
        except NumberFormatError:
            raise CatalogError(f"Invalid price: {value!r}")
    else:
        raise CatalogError(f"Invalid price: {value!r}")

    if not price.is_finite():
        raise CatalogError(f"Invalid price: {value!r}")
    if price < 0:
        raise CatalogError(f"Price cannot be negative: {value!r}")
    return price


class CatalogStore:
    """
    File-backed product catalog.

    ``.json`` files hold a list of ``{"id", "name", "price"}`` objects (or an
    object with a ``"products"`` list); ``.csv`` files have ``id,name,price``
    columns where ``id`` may be left empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.format = self.path.suffix.lower()
        if self.format not in ('.json', '.csv'):
            raise CatalogError(f"Unsupported catalog format: {self.path.suffix or '(none)'}")
        self._products: Optional[List[CatalogEntry]] = None

    def load(self, create: bool = False) -> List[CatalogEntry]:
        if not self.path.exists():
            if create:
                self._products = []
                return []
            raise CatalogError(f"Catalog file not found: {self.path}")

        try:
            if self.format == '.json':
                records = self._read_json()
            else:
                records = self._read_csv()
        except (OSError, json.JSONDecodeError, csv.Error, UnicodeDecodeError) as e:
            raise CatalogError(f"Could not read catalog {self.path}: {e}")

        self._products = self._build_entries(records)
        logger.info(f"Loaded {len(self._products)} products from {self.path}")
        return list(self._products)

    def list_products(self) -> List[CatalogEntry]:
        if self._products is None:
            self.load()
        return list(self._products)

    def snapshot(self) -> Tuple[CatalogEntry, ...]:
        """Immutable view of the catalog for one processing run."""
        return tuple(self.list_products())

    def find_by_name(self, name: str) -> Optional[CatalogEntry]:
        for product in self.list_products():
            if product.name == name:
                return product
        return None

    def add_product(self, name: str, price: Any) -> CatalogEntry:
        """Add a product and save the file; an existing name returns the stored product."""
        name = name.strip()
        if not name:
            raise CatalogError("Product name cannot be empty")
        unit_price = parse_price(price)

        if self._products is None:
            self.load(create=True)

        existing = self.find_by_name(name)
        if existing:
            logger.warning(f"[DB] Product already exists: {name}. Ignored.")
            return existing

        next_id = max((p.id for p in self._products), default=0) + 1
        product = CatalogEntry(id=next_id, name=name, unit_price=unit_price)
        self._products.append(product)
        self.save()

        logger.info(f"[DB] Product added: {product.name} ({money_str(product.unit_price)})")
        return product

    def save(self) -> None:
        products = self._products or []
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.format == '.json':
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump([_entry_record(p) for p in products], f, indent=2, ensure_ascii=False)
        else:
            with open(self.path, 'w', encoding='utf-8', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
                writer.writeheader()
                for product in products:
                    writer.writerow(_entry_record(product))

    def _read_json(self) -> List[Dict[str, Any]]:
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f, parse_float=Decimal)
        if isinstance(data, dict):
            data = data.get("products")
        if not isinstance(data, list):
            raise CatalogError(f"Catalog {self.path} must contain a list of products")
        return data

    def _read_csv(self) -> List[Dict[str, Any]]:
        with open(self.path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.DictReader(f)
            missing = {"name", "price"} - set(reader.fieldnames or [])
            if missing:
                raise CatalogError(f"Catalog {self.path} is missing columns: {', '.join(sorted(missing))}")
            return [row for row in reader if any((v or '').strip() for v in row.values())]

    def _build_entries(self, records: List[Dict[str, Any]]) -> List[CatalogEntry]:
        rows: List[Tuple[Optional[int], str, Decimal]] = []
        seen_names = set()
        taken_ids = set()

        for index, record in enumerate(records, 1):
            if not isinstance(record, dict):
                raise CatalogError(f"Product #{index} is not an object")

            name = str(record.get("name") or "").strip()
            if not name:
                raise CatalogError(f"Product #{index} has no name")
            if name in seen_names:
                raise CatalogError(f"Duplicate product name: {name}")

            raw_id = record.get("id")
            product_id = None
            if raw_id not in (None, ""):
                try:
                    product_id = int(raw_id)
                except (TypeError, ValueError):
                    raise CatalogError(f"Product '{name}' has an invalid id: {raw_id!r}")
                if product_id in taken_ids:
                    raise CatalogError(f"Duplicate product id: {product_id}")
                taken_ids.add(product_id)

            try:
                price = parse_price(record.get("price"))
            except (CatalogError, InvalidOperation) as e:
                raise CatalogError(f"Product '{name}': {e}")

            rows.append((product_id, name, price))
            seen_names.add(name)

        # Rows without an id get the smallest ids no other row declares
        products: List[CatalogEntry] = []
        next_id = 1
        for product_id, name, price in rows:
            if product_id is None:
                while next_id in taken_ids:
                    next_id += 1
                product_id = next_id
                taken_ids.add(product_id)
            products.append(CatalogEntry(id=product_id, name=name, unit_price=price))

        return products


def _entry_record(entry: CatalogEntry) -> Dict[str, Any]:
    return {"id": entry.id, "name": entry.name, "price": money_str(entry.unit_price)}


def load_catalog(path: Union[str, Path]) -> Tuple[CatalogEntry, ...]:
    """Convenience function returning a catalog snapshot from a file."""
    return CatalogStore(path).snapshot()
