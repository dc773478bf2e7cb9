"""In-memory store catalog."""

import threading
from typing import Iterable, List, Optional

from storedup.models import Store
from .base import StoreCatalog


class MemoryStoreCatalog(StoreCatalog):
    """List-backed catalog preserving insertion order."""

    def __init__(self, stores: Optional[Iterable[Store]] = None, name: str = "memory"):
        super().__init__(name)
        self._stores: List[Store] = list(stores or [])
        self._lock = threading.Lock()

    def add(self, store: Store) -> Store:
        """Add a store (seeding and tests)."""
        with self._lock:
            self._stores.append(store)
        return store

    def clear(self) -> None:
        with self._lock:
            self._stores.clear()

    def list_active_stores(self) -> List[Store]:
        with self._lock:
            active = [store for store in self._stores if store.is_active]
        return self._record_query(active)

    def __len__(self) -> int:
        return len(self._stores)
