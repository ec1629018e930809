from __future__ import annotations

"""Single owner of storefront UI state.

State is an immutable StorefrontState snapshot. Every mutation goes through a
named action that builds the next snapshot with dataclasses.replace and stores
it; views read snapshots and derived lists but never mutate them.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple
from urllib.parse import quote

from .catalog import Catalog, Category, Product
from .filters import FilterSelection, clear_filters, filter_products, toggle_facet
from .recommender import recommend
from .wishlist import WishlistIds, WishlistStore

logger = logging.getLogger("lumina.controller")

PAGES = ("home", "shop", "wishlist", "about", "contact", "policies")
DEFAULT_PAGE = "home"
NEW_ARRIVALS_COUNT = 4
DEFAULT_ORDER_SIZE = "M"


@dataclass(frozen=True)
class StorefrontState:
    page: str = DEFAULT_PAGE
    selection: FilterSelection = field(default_factory=FilterSelection)
    wishlist: WishlistIds = ()
    selected_product_id: Optional[str] = None


def build_whatsapp_order_url(
    product: Product,
    number: str,
    brand_name: str = "Lumina Style",
    size: Optional[str] = None,
    color: Optional[str] = None,
) -> str:
    """Prefilled WhatsApp order link; size defaults to M, color to the first listed."""
    text = (
        f"Hi {brand_name}! I'd like to order: \n\n"
        f"Product: {product.name}\n"
        f"Size: {size or DEFAULT_ORDER_SIZE}\n"
        f"Color: {color or product.colors[0]}\n"
        f"Price: {product.price}"
    )
    return f"https://wa.me/{number}?text={quote(text, safe='')}"


class StorefrontController:
    def __init__(
        self,
        catalog: Catalog,
        wishlist_store: WishlistStore,
        rng: Optional[random.Random] = None,
        deterministic_recommendations: bool = False,
    ) -> None:
        """Purpose: Hydrate storefront state once, at session start.
        Inputs/Outputs: Inputs are the catalog, wishlist store, and recommendation
            policy options; no return value.
        Side Effects / State: Reads the persisted wishlist.
        Dependencies: WishlistStore.load never raises for bad payloads.
        If Removed: Views have no single state owner and actions have no home.
        Testing Notes: Seed storage, construct, and check state.wishlist.
        """
        self._catalog = catalog
        self._wishlist_store = wishlist_store
        self._rng = rng or random.Random()
        self._deterministic = deterministic_recommendations
        self._state = StorefrontState(wishlist=wishlist_store.load())

    @property
    def state(self) -> StorefrontState:
        return self._state

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def _commit(self, state: StorefrontState) -> StorefrontState:
        self._state = state
        return state

    # Actions

    def navigate(self, page: str) -> StorefrontState:
        target = page if page in PAGES else DEFAULT_PAGE
        return self._commit(replace(self._state, page=target))

    def shop_category(self, category: Category) -> StorefrontState:
        selection = FilterSelection(categories=frozenset({category}))
        return self._commit(replace(self._state, selection=selection, page="shop"))

    def toggle_filter(self, facet: str, value: object) -> StorefrontState:
        selection = toggle_facet(self._state.selection, facet, value)
        return self._commit(replace(self._state, selection=selection))

    def clear_filters(self) -> StorefrontState:
        return self._commit(replace(self._state, selection=clear_filters()))

    def view_product(self, product_id: str) -> StorefrontState:
        """Open the product detail; unknown ids leave state unchanged."""
        if product_id not in self._catalog:
            logger.debug("view product=%s status=miss", product_id)
            return self._state
        return self._commit(replace(self._state, selected_product_id=product_id))

    def view_product_named(self, name: str) -> StorefrontState:
        product = self._catalog.find_by_name(name)
        if product is None:
            logger.debug("view name=%s status=miss", name)
            return self._state
        return self.view_product(product.id)

    def close_product(self) -> StorefrontState:
        return self._commit(replace(self._state, selected_product_id=None))

    def toggle_wishlist(self, product_id: str) -> StorefrontState:
        """Add or remove product_id and persist; unknown ids are only removable."""
        if product_id not in self._catalog and product_id not in self._state.wishlist:
            logger.debug("wishlist product=%s status=miss", product_id)
            return self._state
        ids = self._wishlist_store.toggle(self._state.wishlist, product_id)
        return self._commit(replace(self._state, wishlist=ids))

    # Derived views

    def filtered_products(self) -> List[Product]:
        return filter_products(self._catalog, self._state.selection)

    def wishlisted_products(self) -> List[Product]:
        # Catalog order; ids with no product are skipped, not purged.
        ids = set(self._state.wishlist)
        return [product for product in self._catalog if product.id in ids]

    def is_wishlisted(self, product_id: str) -> bool:
        return product_id in self._state.wishlist

    def new_arrivals(self) -> List[Product]:
        return list(self._catalog.products[:NEW_ARRIVALS_COUNT])

    def selected_product(self) -> Optional[Product]:
        if self._state.selected_product_id is None:
            return None
        return self._catalog.get(self._state.selected_product_id)

    def recommendations_for(self, product: Product) -> List[Product]:
        return recommend(self._catalog, product, rng=self._rng, deterministic=self._deterministic)

    def recommendations(self) -> List[Product]:
        product = self.selected_product()
        if product is None:
            return []
        return self.recommendations_for(product)


def selection_labels(values: Iterable[object]) -> Tuple[str, ...]:
    """Sorted display labels for a facet's selected values."""
    return tuple(sorted(value.value if isinstance(value, Category) else str(value) for value in values))
