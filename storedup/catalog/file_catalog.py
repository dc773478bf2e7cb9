"""JSON file store catalog."""

import json
from pathlib import Path
from typing import Any, List

from storedup.errors import CatalogError
from storedup.models import Store
from storedup.utils.logger import log_debug, log_error
from .base import StoreCatalog


class FileStoreCatalog(StoreCatalog):
    """Catalog reading a JSON export of stores on every query.

    The document is either a list of store objects or ``{"stores": [...]}``;
    each store carries its ``links`` inline.
    """

    def __init__(self, path: str = "stores.json", name: str = "file"):
        super().__init__(name)
        self.path = Path(path)

    def _load_rows(self) -> List[Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log_error("Failed to read store catalog file", path=str(self.path), error=str(e))
            raise CatalogError(f"Cannot read store catalog {self.path}: {e}", backend=self.name) from e

        rows = document.get("stores") if isinstance(document, dict) else document
        if not isinstance(rows, list):
            raise CatalogError(
                f"Store catalog {self.path} must contain a list of stores", backend=self.name
            )
        return rows

    def list_active_stores(self) -> List[Store]:
        try:
            stores = [Store.from_dict(row) for row in self._load_rows()]
        except (TypeError, ValueError, AttributeError) as e:
            raise CatalogError(f"Malformed store in {self.path}: {e}", backend=self.name) from e

        active = [store for store in stores if store.is_active]
        log_debug("Loaded store catalog file", path=str(self.path),
                  total=len(stores), active=len(active))
        return self._record_query(active)
