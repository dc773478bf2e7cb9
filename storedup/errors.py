"""Exceptions raised by the duplicate-store engine and its catalogs."""
from typing import Any, Dict, Optional


class StoreDedupError(Exception):
    """Base exception for the package."""

    def __init__(self, message: str = "Duplicate store detection failed"):
        self.message = message
        super().__init__(self.message)


class CatalogError(StoreDedupError):
    """Raised when a store catalog cannot be read.

    Never converted into a negative duplicate result.
    """

    def __init__(self, message: str = "Store catalog query failed", backend: Optional[str] = None):
        self.backend = backend
        super().__init__(message)


class DuplicateStoreError(StoreDedupError):
    """Raised by the store-creation guard when a submission collides.

    ``to_dict`` and ``status_code`` give the conflict response handed back
    to the submitter.
    """

    status_code = 409

    _MESSAGES = {
        "name": "A store with a similar name already exists.",
        "handle": "A store with this social media handle already exists.",
        "social_link": "A store with this social media link already exists.",
    }

    def __init__(
        self,
        duplicate_type: str,
        existing_store: Dict[str, Any],
        message: str = "A store with similar details already exists",
    ):
        self.duplicate_type = duplicate_type
        self.existing_store = existing_store
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return self._MESSAGES.get(self.duplicate_type, "This store already exists.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.user_message,
            "error": "duplicate_store",
            "duplicate_type": self.duplicate_type,
            "existing_store": self.existing_store,
        }
