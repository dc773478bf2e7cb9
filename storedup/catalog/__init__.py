"""Read-only store catalogs the duplicate detector queries.

Backends:
- Memory: list-backed, for tests and embedding
- File: JSON export read on every query
- SQL: relational database through SQLAlchemy
"""

from storedup.config import Config, get_config
from storedup.utils.logger import log_info
from .base import StoreCatalog
from .file_catalog import FileStoreCatalog
from .memory_catalog import MemoryStoreCatalog
from .sql_catalog import SqlStoreCatalog


def create_catalog(config: Config = None) -> StoreCatalog:
    """Create the catalog backend selected by ``CATALOG_BACKEND``."""
    config = config or get_config()
    backend = config.catalog_backend

    if backend == "file":
        catalog = FileStoreCatalog(config.catalog_file_path)
    elif backend == "sql":
        catalog = SqlStoreCatalog(config.catalog_database_url)
    else:
        catalog = MemoryStoreCatalog()

    log_info("Store catalog initialized", backend=catalog.name)
    return catalog


__all__ = [
    "StoreCatalog",
    "MemoryStoreCatalog",
    "FileStoreCatalog",
    "SqlStoreCatalog",
    "create_catalog",
]
