"""Abstract base class for read-only store catalogs."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from storedup.models import Store, StoreLink

LinkPredicate = Callable[[StoreLink], bool]


class StoreCatalog(ABC):
    """Read-only view over the stores a new submission is compared against.

    Backends return fresh snapshots on every call; nothing is cached between
    queries.  Storage failures must surface as ``CatalogError``.
    """

    def __init__(self, name: str):
        self.name = name
        self.queries = 0
        self.stores_returned = 0

    @abstractmethod
    def list_active_stores(self) -> List[Store]:
        """Return every store with status ``active``, links included."""
        pass

    def find_active_stores_with_link(self, predicate: LinkPredicate) -> List[Store]:
        """Return active stores owning at least one link matching ``predicate``."""
        return [
            store for store in self.list_active_stores()
            if any(predicate(link) for link in store.links)
        ]

    def close(self) -> None:
        """Release backend resources."""
        pass

    # Utility methods

    def _record_query(self, stores: List[Store]) -> List[Store]:
        """Record query statistics and pass the result through."""
        self.queries += 1
        self.stores_returned += len(stores)
        return stores

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        return {
            "backend": self.name,
            "queries": self.queries,
            "stores_returned": self.stores_returned,
        }
