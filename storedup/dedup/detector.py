"""Duplicate store detector.

``DuplicateStoreDetector`` answers whether a proposed store (a name and a
list of links) collides with an existing *active* store.  It only reads from
the injected catalog, keeps no state between calls and can be shared across
threads.  Every call works on a fresh catalog snapshot, so a store created
between the check and the caller's insert is not seen.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from storedup.catalog.base import StoreCatalog
from storedup.config import Config, get_config
from storedup.dedup.result import MatchResult
from storedup.dedup.strategies import DedupStrategy, LinkStrategy, NameSimilarityStrategy
from storedup.models import LinkInput, Platform, Store, StoreLink
from storedup.normalization import (
    calculate_similarity,
    extract_handle_from_url,
    normalize_handle,
    normalize_name,
    normalize_to_alphanumeric,
    normalize_url,
)
from storedup.transliteration import Transliterator, get_transliterator
from storedup.utils.logger import log_debug, log_duplicate_detection

LinkLike = Union[LinkInput, Mapping[str, Any]]


def build_default_strategies() -> List[DedupStrategy]:
    """Build the default ordered chain: name first, then links."""
    return [
        NameSimilarityStrategy(),
        LinkStrategy(),
    ]


def _only_active(stores: Iterable[Store]) -> List[Store]:
    return [store for store in stores if store.is_active]


class DuplicateStoreDetector:
    """Find existing active stores that look like a proposed one.

    Args:
        catalog: Read-only store catalog.
        config: Matching configuration.  Defaults to ``get_config()``.
        transliterator: Script transliterator for strict alphanumeric name
            matching.  Defaults to the one selected by the configuration.
        strategies: Ordered strategies for ``check_for_duplicates``.

    Usage::

        detector = DuplicateStoreDetector(catalog)
        result = detector.check_for_duplicates("Doum Doum", [
            {"url": "https://instagram.com/doumdoum", "handle": "doumdoum",
             "platform": "instagram"},
        ])
        if result.has_duplicate:
            ...
    """

    def __init__(
        self,
        catalog: StoreCatalog,
        config: Optional[Config] = None,
        transliterator: Optional[Transliterator] = None,
        strategies: Optional[List[DedupStrategy]] = None,
    ):
        config = config or get_config()
        self.catalog = catalog
        self.similarity_threshold = config.similarity_threshold
        self.suffixes = tuple(config.get_business_suffixes())
        self.substitutions = tuple(config.get_transliterations())
        self.transliterator = transliterator or get_transliterator(config.transliterator)
        self.strategies = (
            strategies if strategies is not None else build_default_strategies()
        )

    # ------------------------------------------------------------------
    # Normalization bound to this detector's configuration
    # ------------------------------------------------------------------

    def normalize_name(self, name: str) -> str:
        return normalize_name(name, self.suffixes, self.substitutions)

    def normalize_to_alphanumeric(self, text: str) -> str:
        return normalize_to_alphanumeric(text, self.transliterator)

    def calculate_similarity(self, a: str, b: str) -> float:
        return calculate_similarity(a, b, self.suffixes, self.substitutions)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> List[Store]:
        """Active stores whose name matches ``name``.

        A store matches on equal ``normalize_name`` keys, equal transliterated
        alphanumeric keys, or a similarity score at or above the threshold.
        Order follows the catalog.
        """
        normalized = self.normalize_name(name)
        alphanumeric = self.normalize_to_alphanumeric(name)

        def matches(store: Store) -> bool:
            if self.normalize_name(store.name) == normalized:
                return True
            if self.normalize_to_alphanumeric(store.name) == alphanumeric:
                return True
            return self.calculate_similarity(store.name, name) >= self.similarity_threshold

        stores = _only_active(self.catalog.list_active_stores())
        found = [store for store in stores if matches(store)]
        log_debug("Name lookup", candidates=len(stores), matches=len(found))
        return found

    def find_by_handle(self, handle: str, platform: Optional[Union[str, Platform]] = None) -> List[Store]:
        """Active stores with a link whose handle or URL ends in ``handle``.

        With ``platform``, only links of that platform are considered.
        """
        normalized = normalize_handle(handle)
        if not normalized:
            return []

        if isinstance(platform, Platform):
            platform = platform.value
        platform = platform.lower() if platform else None
        url_endings = (
            f"/{normalized}",
            f"/{normalized}/",
            f"/@{normalized}",
            f"/@{normalized}/",
        )

        def link_matches(link: StoreLink) -> bool:
            if platform and link.platform != platform:
                return False
            if link.handle and normalize_handle(link.handle) == normalized:
                return True
            return (link.url or "").lower().endswith(url_endings)

        found = _only_active(self.catalog.find_active_stores_with_link(link_matches))
        log_debug("Handle lookup", platform=platform, matches=len(found))
        return found

    def find_by_url(self, url: str) -> List[Store]:
        """Active stores linking to ``url``.

        Social URLs are reduced to their handle and matched with
        :meth:`find_by_handle` on any platform; other URLs are compared in
        normalized form, including substring containment.
        """
        handle = extract_handle_from_url(url)
        if handle:
            return self.find_by_handle(handle)

        normalized = normalize_url(url)
        if not normalized:
            return []

        def link_matches(link: StoreLink) -> bool:
            link_url = link.url or ""
            return (
                link_url == url
                or link_url == normalized
                or normalized in link_url.lower()
            )

        found = _only_active(self.catalog.find_active_stores_with_link(link_matches))
        log_debug("URL lookup", matches=len(found))
        return found

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def check_for_duplicates(self, name: str, links: Sequence[LinkLike] = ()) -> MatchResult:
        """Run each strategy in order; return on the first duplicate hit.

        Args:
            name: Proposed store name.
            links: Proposed links as ``LinkInput`` or mappings with ``url``,
                ``handle`` and ``platform`` keys, in submission order.

        Returns:
            ``MatchResult`` naming the first colliding store, or a negative
            result.  Catalog errors propagate.
        """
        proposed = [LinkInput.coerce(link) for link in links or ()]
        log_debug(
            "Starting duplicate store check",
            strategy_count=len(self.strategies),
            link_count=len(proposed),
        )

        for strategy in self.strategies:
            result = strategy.check(self, name, proposed)
            if result.has_duplicate:
                log_duplicate_detection(
                    result.duplicate_type.value,
                    result.existing_store.id,
                    strategy=strategy.name,
                )
                return result

        log_debug("No duplicate store found")
        return MatchResult.none()
