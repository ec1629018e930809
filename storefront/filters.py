from __future__ import annotations

"""Facet filtering over the catalog.

Three independent facets combine with AND; values inside one facet combine
with OR; an empty facet places no constraint. The size facet is accepted and
carried in the selection but never excludes a product: products have no size
attribute, so every product is treated as available in every size.
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List

from .catalog import Category, Product
from .utils import unique_in_order

SIZES = ("S", "M", "L", "XL", "XXL")
FACETS = ("category", "size", "color")


@dataclass(frozen=True)
class FilterSelection:
    categories: FrozenSet[Category] = field(default_factory=frozenset)
    sizes: FrozenSet[str] = field(default_factory=frozenset)
    colors: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_active(self) -> bool:
        return bool(self.categories or self.sizes or self.colors)


def matches(product: Product, selection: FilterSelection) -> bool:
    """Return True when product satisfies the category and color facets."""
    if selection.categories and product.category not in selection.categories:
        return False
    # Size facet intentionally not consulted.
    if selection.colors and selection.colors.isdisjoint(product.colors):
        return False
    return True


def filter_products(products: Iterable[Product], selection: FilterSelection) -> List[Product]:
    """Purpose: Compute the filtered catalog view for a facet selection.
    Inputs/Outputs: Inputs are products in catalog order and a FilterSelection;
        output is the matching products, order preserved.
    Side Effects / State: None; pure and deterministic.
    Failure Modes: None; an empty list is a valid result for the caller to render
        as an empty state.
    Testing Notes: Filtering a filtered result by the same selection is a no-op.
    """
    return [product for product in products if matches(product, selection)]


def toggle_facet(selection: FilterSelection, facet: str, value: object) -> FilterSelection:
    """Add value to a facet if absent, remove it if present; returns a new selection."""
    if facet == "category":
        category = value if isinstance(value, Category) else Category.from_label(str(value))
        return replace(selection, categories=selection.categories ^ {category})
    if facet == "size":
        return replace(selection, sizes=selection.sizes ^ {str(value)})
    if facet == "color":
        return replace(selection, colors=selection.colors ^ {str(value)})
    raise ValueError(f"Unknown facet {facet!r}; expected one of {FACETS}")


def clear_filters() -> FilterSelection:
    return FilterSelection()


def available_colors(products: Iterable[Product]) -> List[str]:
    """Distinct colors across products, in first-encountered order."""
    return unique_in_order(color for product in products for color in product.colors)
