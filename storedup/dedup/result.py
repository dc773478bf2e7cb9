"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from storedup.models import StoreSummary


class DuplicateType(str, Enum):
    NAME = "name"
    HANDLE = "handle"
    SOCIAL_LINK = "social_link"


@dataclass(frozen=True)
class MatchResult:
    """Result of a duplicate check for a proposed store.

    Attributes:
        has_duplicate: Whether an active store collides with the proposal.
        duplicate_type: Which check fired (``name``, ``handle`` or
            ``social_link``). ``None`` when no duplicate was found.
        existing_store: Summary of the first colliding store, if any.
    """

    has_duplicate: bool
    duplicate_type: Optional[DuplicateType] = None
    existing_store: Optional[StoreSummary] = None

    @classmethod
    def none(cls) -> "MatchResult":
        return cls(has_duplicate=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_duplicate": self.has_duplicate,
            "duplicate_type": self.duplicate_type.value if self.duplicate_type else None,
            "existing_store": self.existing_store.to_dict() if self.existing_store else None,
        }
