"""Duplicate store detection.

Strategies run as a chain: the name check first, then each proposed link by
handle and URL, short-circuiting on the first positive match.
"""

from storedup.dedup.result import DuplicateType, MatchResult
from storedup.dedup.detector import DuplicateStoreDetector
from storedup.dedup.guard import ensure_no_duplicate

__all__ = ["DuplicateType", "MatchResult", "DuplicateStoreDetector", "ensure_no_duplicate"]
