from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger("lumina.storage")


class KeyValueStore(Protocol):
    """Durable string storage addressed by key."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local store used by tests and as a no-disk fallback."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """Key-value storage backed by a single JSON object file."""

    def __init__(self, path: Path) -> None:
        """Purpose: Initialize the store and hydrate entries from disk if available.
        Inputs/Outputs: Input is the backing file path; no return value.
        Side Effects / State: Loads and caches all entries in memory.
        Dependencies: Calls _load.
        Failure Modes: Missing file or corrupt JSON leaves an empty cache.
        If Removed: Wishlist state is lost between restarts.
        Testing Notes: Corrupt file content must not raise on construction.
        """
        # Keep the backing path and preload persisted entries.
        self._path = path
        self._data: Dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Purpose: Load persisted entries from disk into memory.
        Inputs/Outputs: Reads from self._path; no return value.
        Side Effects / State: Populates self._data.
        Dependencies: Uses json.loads and Path.read_text.
        Failure Modes: Missing file, JSONDecodeError, or a non-object root results
            in an empty cache; non-string values are skipped.
        If Removed: Previously stored values are never restored on startup.
        Testing Notes: Corrupt JSON should not crash; valid JSON should hydrate.
        """
        # Read and decode the persisted JSON object if present.
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("storage=%s status=corrupt action=reset", self._path.name)
            return
        if not isinstance(data, dict):
            logger.warning("storage=%s status=unexpected_root action=reset", self._path.name)
            return
        self._data = {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _persist(self) -> None:
        """Purpose: Persist all entries to disk.
        Inputs/Outputs: Writes to self._path; no return value.
        Side Effects / State: Creates the parent directory and rewrites the file.
        Failure Modes: IO errors raise exceptions (not caught here).
        Testing Notes: Ensure the file is created and holds a JSON object.
        """
        # Serialize the whole cache so the file always reflects the latest state.
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        # Update cache and flush to disk.
        self._data[key] = value
        self._persist()
