from __future__ import annotations

"""Catalog store for the storefront.

Loads the bundled catalog JSON into immutable Product records and exposes the
lookups the filter engine, the segmenter, and the controller rely on.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .utils import normalize_text

logger = logging.getLogger("lumina.catalog")

REQUIRED_FIELDS = ["id", "name", "price", "category", "image", "description", "fabric", "care", "colors"]


class CatalogError(ValueError):
    """Raised when the catalog resource violates the product data model."""


class Category(str, Enum):
    WOMEN_FASHION = "Women's Fashion"
    ACTIVEWEAR = "Fitness / Activewear"
    DRESSES = "Dresses"
    TOPS_BOTTOMS = "Tops & Bottoms"
    GYM_WEAR = "Gym Wear"
    YOGA_FITNESS = "Yoga & Fitness Sets"
    LINGERIE = "Lingerie & Intimates"
    JUMPSUITS = "Jumpsuits & Rompers"

    @classmethod
    def from_label(cls, label: str) -> "Category":
        """Resolve a display label (or member name) to a Category."""
        for member in cls:
            if label == member.value or label == member.name:
                return member
        raise CatalogError(f"Unknown category: {label!r}")


@dataclass(frozen=True)
class Product:
    """Immutable catalog record."""
    id: str
    name: str
    price: str
    category: Category
    image: str
    description: str
    fabric: str
    care: str
    colors: Tuple[str, ...]


@dataclass(frozen=True)
class CatalogMeta:
    """Metadata describing the catalog file version for logging."""
    file_name: str
    updated_at: str
    sha256: str


class Catalog:
    """Ordered, read-only product collection with id and name indexes."""

    def __init__(self, products: Sequence[Product]) -> None:
        """Purpose: Build id/name indexes over an ordered product sequence.
        Inputs/Outputs: Input is a sequence of Product; no return value.
        Side Effects / State: Freezes the product order as a tuple.
        Dependencies: Uses normalize_text for the name index.
        Failure Modes: Empty/duplicate ids and duplicate names raise CatalogError.
        If Removed: Matching and filtering lose their single source of truth.
        Testing Notes: Duplicate names that differ only by case must be rejected.
        """
        # Index products by id and normalized name, rejecting collisions.
        self._products: Tuple[Product, ...] = tuple(products)
        self._by_id: Dict[str, Product] = {}
        self._by_name: Dict[str, Product] = {}
        for product in self._products:
            if not product.id:
                raise CatalogError(f"Product {product.name!r} has an empty id")
            if product.id in self._by_id:
                raise CatalogError(f"Duplicate product id: {product.id!r}")
            name_key = normalize_text(product.name)
            if not name_key:
                raise CatalogError(f"Product {product.id!r} has an empty name")
            if name_key in self._by_name:
                raise CatalogError(f"Duplicate product name: {product.name!r}")
            self._by_id[product.id] = product
            self._by_name[name_key] = product

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def find_by_name(self, name: str) -> Optional[Product]:
        """Case-insensitive exact lookup by display name."""
        return self._by_name.get(normalize_text(name))

    def in_category(self, category: Category) -> List[Product]:
        return [product for product in self._products if product.category == category]


class CatalogLoader:
    def __init__(self, path: Path) -> None:
        # Store the catalog file location for subsequent loads.
        self._path = path

    def load(self) -> Tuple[Catalog, CatalogMeta]:
        """Purpose: Load and validate catalog data from the resource file.
        Inputs/Outputs: No inputs; returns a Catalog and CatalogMeta.
        Side Effects / State: Reads file contents and computes hash/mtime.
        Dependencies: Uses json, hashlib, and parse_product.
        Failure Modes: JSON decode errors and invalid records raise to the caller.
        If Removed: The storefront has no products to filter, link, or recommend.
        Testing Notes: Load the bundled catalog and a temp file with a bad category.
        """
        # Read bytes for hashing and parse JSON into validated products.
        raw_bytes = self._path.read_bytes()
        sha256 = hashlib.sha256(raw_bytes).hexdigest()
        updated_at = datetime.fromtimestamp(self._path.stat().st_mtime).isoformat()

        data = json.loads(raw_bytes.decode("utf-8-sig"))
        items: List[Dict[str, Any]]
        if isinstance(data, dict):
            items = data.get("items", [])
        elif isinstance(data, list):
            items = data
        else:
            raise CatalogError(f"Catalog root must be an object or list, got {type(data).__name__}")

        products = [parse_product(item) for item in items]
        catalog = Catalog(products)
        meta = CatalogMeta(file_name=self._path.name, updated_at=updated_at, sha256=sha256)
        logger.info(
            "catalog=%s products=%d updated_at=%s sha256=%s",
            meta.file_name,
            len(catalog),
            meta.updated_at,
            meta.sha256[:12],
        )
        return catalog, meta


def parse_product(item: Any) -> Product:
    """Purpose: Convert one raw catalog record into a Product.
    Inputs/Outputs: Input is a decoded JSON value; output is a Product.
    Side Effects / State: None.
    Dependencies: Uses Category.from_label and REQUIRED_FIELDS.
    Failure Modes: Missing fields, unknown category, or empty colors raise CatalogError.
    If Removed: load() cannot build products from the resource file.
    Testing Notes: Check each failure mode with a minimal record.
    """
    # Validate shape first, then coerce scalar fields to strings.
    if not isinstance(item, dict):
        raise CatalogError(f"Catalog item must be an object, got {type(item).__name__}")
    missing = [key for key in REQUIRED_FIELDS if key not in item]
    if missing:
        raise CatalogError(f"Catalog item {item.get('id')!r} is missing fields: {', '.join(missing)}")
    colors = item["colors"]
    if not isinstance(colors, list) or not colors:
        raise CatalogError(f"Catalog item {item['id']!r} must list at least one color")
    return Product(
        id=str(item["id"]).strip(),
        name=str(item["name"]).strip(),
        price=str(item["price"]),
        category=Category.from_label(str(item["category"])),
        image=str(item["image"]),
        description=str(item["description"]),
        fabric=str(item["fabric"]),
        care=str(item["care"]),
        colors=tuple(str(color) for color in colors),
    )
