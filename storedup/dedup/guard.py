"""Store-creation guard that turns a duplicate match into an error."""

from __future__ import annotations

from typing import Any, Mapping

from storedup.dedup.detector import DuplicateStoreDetector
from storedup.dedup.result import MatchResult
from storedup.errors import DuplicateStoreError


def ensure_no_duplicate(detector: DuplicateStoreDetector, data: Mapping[str, Any]) -> MatchResult:
    """Validate a store submission against existing active stores.

    Reads ``name`` and ``links`` from the submitted data.  Raises
    ``DuplicateStoreError`` carrying the existing store so the caller can
    answer "did you mean X?"; returns the negative result otherwise.
    """
    result = detector.check_for_duplicates(data.get("name") or "", data.get("links") or [])
    if result.has_duplicate:
        raise DuplicateStoreError(
            result.duplicate_type.value,
            result.existing_store.to_dict(),
        )
    return result
