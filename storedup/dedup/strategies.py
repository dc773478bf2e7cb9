"""Individual duplicate-detection strategies.

Each strategy implements the ``DedupStrategy`` protocol: a ``check`` method
that receives the detector, the proposed name and the proposed links, and
returns a ``MatchResult``.  The name check runs before any link check.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Sequence

from storedup.dedup.result import DuplicateType, MatchResult
from storedup.models import LinkInput, StoreSummary
from storedup.utils.logger import log_debug

if TYPE_CHECKING:
    from storedup.dedup.detector import DuplicateStoreDetector

# ---------------------------------------------------------------------------
# Base protocol
# ---------------------------------------------------------------------------


class DedupStrategy(abc.ABC):
    """Abstract base for duplicate-detection strategies."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short machine-readable name for logs."""

    @abc.abstractmethod
    def check(
        self,
        detector: "DuplicateStoreDetector",
        name: str,
        links: Sequence[LinkInput],
    ) -> MatchResult:
        """Run the strategy.

        Args:
            detector: Detector providing the ``find_by_*`` queries.
            name: Proposed store name.
            links: Proposed links, in submission order.

        Returns:
            A ``MatchResult``.  When ``has_duplicate`` is ``False`` the
            detector moves on to the next strategy in the chain.
        """


# ---------------------------------------------------------------------------
# Strategy 1 – Name similarity (full scan of active stores)
# ---------------------------------------------------------------------------


class NameSimilarityStrategy(DedupStrategy):
    """Match on normalized, transliterated or fuzzy-similar store names."""

    @property
    def name(self) -> str:
        return "name_similarity"

    def check(self, detector, name, links) -> MatchResult:
        matches = detector.find_by_name(name)
        if matches:
            return MatchResult(
                has_duplicate=True,
                duplicate_type=DuplicateType.NAME,
                existing_store=StoreSummary.from_store(matches[0]),
            )
        return MatchResult.none()


# ---------------------------------------------------------------------------
# Strategy 2 – Links (handle first, then URL, link by link)
# ---------------------------------------------------------------------------


class LinkStrategy(DedupStrategy):
    """Match each proposed link, in order, by handle and then by URL.

    A link carrying both a handle and a URL gets its URL checked when the
    handle finds nothing.
    """

    @property
    def name(self) -> str:
        return "social_links"

    def check(self, detector, name, links) -> MatchResult:
        for position, link in enumerate(links):
            if link.handle:
                matches = detector.find_by_handle(link.handle, link.platform)
                if matches:
                    log_debug("Handle match", position=position, platform=link.platform)
                    return MatchResult(
                        has_duplicate=True,
                        duplicate_type=DuplicateType.HANDLE,
                        existing_store=StoreSummary.from_store(matches[0]),
                    )

            if link.url:
                matches = detector.find_by_url(link.url)
                if matches:
                    log_debug("URL match", position=position, platform=link.platform)
                    return MatchResult(
                        has_duplicate=True,
                        duplicate_type=DuplicateType.SOCIAL_LINK,
                        existing_store=StoreSummary.from_store(matches[0]),
                    )

        return MatchResult.none()
