from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Tuple

from .kv_store import KeyValueStore
from .utils import unique_in_order

logger = logging.getLogger("lumina.wishlist")

WISHLIST_KEY = "lumina_wishlist"

WishlistIds = Tuple[str, ...]


def toggle_id(ids: Iterable[str], product_id: str) -> WishlistIds:
    """Return ids with product_id removed if present, appended otherwise."""
    current = tuple(ids)
    if product_id in current:
        return tuple(existing for existing in current if existing != product_id)
    return current + (product_id,)


def decode_ids(raw: Optional[str]) -> Optional[WishlistIds]:
    """Purpose: Decode a stored wishlist payload.
    Inputs/Outputs: Input is the raw stored string or None; output is the ordered
        unique ids, or None when the payload is malformed.
    Side Effects / State: None; pure function.
    Failure Modes: Bad JSON, a non-list root, or non-string entries return None.
    Testing Notes: '["1", 2]' and '{"ids": []}' both decode to None.
    """
    # Absent key is a valid empty wishlist; anything unparsable is reported as None.
    if raw is None:
        return ()
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        return None
    return tuple(unique_in_order(data))


class WishlistStore:
    """Persisted wishlist of product ids for the active shopper."""

    def __init__(self, store: KeyValueStore, key: str = WISHLIST_KEY) -> None:
        """Purpose: Bind the wishlist to a key-value store under a fixed key.
        Inputs/Outputs: Inputs are a KeyValueStore and optional key; no return value.
        Side Effects / State: None until load/save is called.
        Dependencies: Any object implementing KeyValueStore.get/set.
        If Removed: Favorites are not remembered between sessions.
        Testing Notes: Use InMemoryKeyValueStore to verify save/load round trips.
        """
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> WishlistIds:
        """Purpose: Hydrate the wishlist from durable storage.
        Inputs/Outputs: No inputs; returns ordered unique product ids.
        Side Effects / State: Reads the storage key; logs malformed payloads.
        Dependencies: Uses decode_ids.
        Failure Modes: Never raises for bad payloads; absent or malformed data
            yields an empty wishlist.
        If Removed: Startup cannot restore saved favorites.
        Testing Notes: Store "not json" under the key and expect ().
        """
        # Decode the payload, degrading to empty on any decode failure.
        raw = self._store.get(self._key)
        ids = decode_ids(raw)
        if ids is None:
            logger.warning("wishlist key=%s status=malformed action=reset", self._key)
            return ()
        logger.debug("wishlist key=%s status=loaded count=%d", self._key, len(ids))
        return ids

    def save(self, ids: Iterable[str]) -> None:
        """Purpose: Write the full wishlist back to storage as a JSON list.
        Inputs/Outputs: Input is the ids to persist; no return value.
        Side Effects / State: Overwrites the storage key.
        Failure Modes: Storage IO errors propagate.
        Testing Notes: save then load returns the same ids.
        """
        # Persist the whole set on every transition; the latest write wins.
        payload: List[str] = unique_in_order(ids)
        self._store.set(self._key, json.dumps(payload))
        logger.debug("wishlist key=%s status=saved count=%d", self._key, len(payload))

    def toggle(self, ids: Iterable[str], product_id: str) -> WishlistIds:
        """Toggle product_id in ids, persist the result, and return it."""
        updated = toggle_id(ids, product_id)
        self.save(updated)
        logger.info(
            "wishlist product=%s action=%s count=%d",
            product_id,
            "add" if product_id in updated else "remove",
            len(updated),
        )
        return updated
