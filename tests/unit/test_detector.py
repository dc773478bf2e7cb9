"""Unit tests for the duplicate store detector queries and orchestration."""

import threading

import pytest
from unittest.mock import MagicMock

from storedup.catalog.base import StoreCatalog
from storedup.catalog.memory_catalog import MemoryStoreCatalog
from storedup.config import Config
from storedup.dedup.detector import DuplicateStoreDetector
from storedup.dedup.result import DuplicateType, MatchResult
from storedup.errors import CatalogError
from storedup.models import LinkInput, Platform, Store, StoreLink, StoreStatus
from storedup.transliteration import NullTransliterator

pytestmark = pytest.mark.unit


def _ids(stores):
    return [store.id for store in stores]


# ---------------------------------------------------------------------------
# find_by_name
# ---------------------------------------------------------------------------


class TestFindByName:
    def test_normalized_spelling_variant(self, detector):
        assert _ids(detector.find_by_name("DumDum BabyCare")) == [1]

    def test_fuzzy_match_above_threshold(self, detector):
        assert _ids(detector.find_by_name("Tech Korner")) == [2]

    def test_suffix_ignored(self, detector):
        assert _ids(detector.find_by_name("Beauty Line DZ")) == [5]

    def test_unrelated_name(self, detector):
        assert detector.find_by_name("Totally Different") == []

    def test_suspended_and_pending_stores_ignored(self, detector):
        assert detector.find_by_name("Ghost Boutique") == []
        assert detector.find_by_name("Pending Place") == []

    def test_threshold_is_configurable(self, memory_catalog):
        strict = DuplicateStoreDetector(
            memory_catalog, Config(transliterator="none", similarity_threshold=0.95)
        )
        assert strict.find_by_name("Tech Korner") == []

    def test_all_matches_in_catalog_order(self, test_config):
        catalog = MemoryStoreCatalog([
            Store(id=7, name="Nour Shop"),
            Store(id=3, name="Nur"),
            Store(id=5, name="Other"),
        ])
        detector = DuplicateStoreDetector(catalog, test_config)
        assert _ids(detector.find_by_name("nour")) == [7, 3]

    def test_transliterated_names_match(self, test_config):
        class Latinizer(NullTransliterator):
            def to_ascii_lower(self, text):
                return text.replace("متجر نور", "mtjr nwr").lower()

        catalog = MemoryStoreCatalog([Store(id=1, name="متجر نور")])
        detector = DuplicateStoreDetector(catalog, test_config, transliterator=Latinizer())
        assert _ids(detector.find_by_name("Mtjr Nwr")) == [1]

    def test_names_reduced_to_nothing_match(self, test_config):
        """Empty normalized keys are equal, so suffix-only names collide."""
        catalog = MemoryStoreCatalog([Store(id=1, name="Shop DZ")])
        detector = DuplicateStoreDetector(catalog, test_config, transliterator=NullTransliterator())
        assert _ids(detector.find_by_name("Store")) == [1]

    def test_untransliterated_scripts_collide(self, test_config):
        """Without transliteration two different Arabic names share the empty key."""
        catalog = MemoryStoreCatalog([Store(id=1, name="متجر نور")])
        detector = DuplicateStoreDetector(catalog, test_config, transliterator=NullTransliterator())
        assert _ids(detector.find_by_name("بيت العطور")) == [1]
        result = detector.check_for_duplicates("بيت العطور")
        assert result.duplicate_type is DuplicateType.NAME


# ---------------------------------------------------------------------------
# find_by_handle
# ---------------------------------------------------------------------------


class TestFindByHandle:
    def test_handle_normalized_before_comparison(self, detector):
        assert _ids(detector.find_by_handle("@john.doe_shop", "instagram")) == [3]

    def test_stored_handle_normalized(self, detector):
        assert _ids(detector.find_by_handle("DoumDoumBabyCare")) == [1]

    def test_platform_restriction(self, detector):
        assert detector.find_by_handle("johndoeshop", "facebook") == []
        assert _ids(detector.find_by_handle("johndoeshop", Platform.INSTAGRAM)) == [3]

    def test_url_ending_with_at_handle_and_slash(self, detector):
        assert _ids(detector.find_by_handle("beautyline")) == [5]
        assert _ids(detector.find_by_handle("@BeautyLine", "tiktok")) == [5]
        assert detector.find_by_handle("beautyline", "instagram") == []

    def test_url_ending_with_plain_handle(self, detector):
        assert _ids(detector.find_by_handle("213555123456", "whatsapp")) == [3]

    def test_url_compared_against_normalized_handle(self, detector):
        """URL endings use the dot-free handle, so dotted URL paths need a handle field."""
        assert detector.find_by_handle("techcorner.dz") == []

    def test_suspended_store_ignored(self, detector):
        assert detector.find_by_handle("ghost") == []

    def test_empty_handle_matches_nothing(self, detector):
        assert detector.find_by_handle("@") == []
        assert detector.find_by_handle("") == []


# ---------------------------------------------------------------------------
# find_by_url
# ---------------------------------------------------------------------------


class TestFindByUrl:
    def test_social_url_delegates_to_handle(self, detector):
        assert _ids(detector.find_by_url("https://www.tiktok.com/@beautyline?lang=fr")) == [5]
        assert _ids(detector.find_by_url("https://instagram.com/doumdoum.babycare/")) == [1]

    def test_whatsapp_url(self, detector):
        assert _ids(detector.find_by_url("https://wa.me/213555123456")) == [3]

    def test_social_url_ignores_platform(self, detector):
        """A facebook URL finds a store whose instagram handle is the same."""
        assert _ids(detector.find_by_url("https://facebook.com/johndoeshop")) == [3]

    def test_website_url_normalized_containment(self, detector):
        assert _ids(detector.find_by_url("http://techcorner.com")) == [2]
        assert _ids(detector.find_by_url("https://WWW.TechCorner.com/")) == [2]

    def test_website_exact_raw_url(self, test_config):
        catalog = MemoryStoreCatalog([
            Store(id=9, name="Raw", links=[StoreLink("website", "HTTPS://Shop.Example/Path")]),
        ])
        detector = DuplicateStoreDetector(catalog, test_config)
        assert _ids(detector.find_by_url("HTTPS://Shop.Example/Path")) == [9]

    def test_unknown_website(self, detector):
        assert detector.find_by_url("https://unknown-site.org/catalog") == []

    def test_pending_store_website_ignored(self, detector):
        assert detector.find_by_url("https://pendingplace.dz") == []

    def test_empty_url_matches_nothing(self, detector):
        assert detector.find_by_url("https://") == []


# ---------------------------------------------------------------------------
# check_for_duplicates
# ---------------------------------------------------------------------------


class TestCheckForDuplicates:
    def test_name_duplicate(self, detector):
        result = detector.check_for_duplicates("DumDum BabyCare")
        assert result.has_duplicate is True
        assert result.duplicate_type is DuplicateType.NAME
        assert result.existing_store.id == 1
        assert result.existing_store.slug == "doum-doum-babycare"
        assert result.existing_store.is_verified is True
        assert result.existing_store.avg_rating == 4.6
        assert result.existing_store.reviews_count == 31

    def test_handle_match_with_dissimilar_name(self, test_config):
        catalog = MemoryStoreCatalog([
            Store(id=10, name="Sahara Spices", links=[
                StoreLink("instagram", "https://instagram.com/existinghandle", "existinghandle"),
            ]),
        ])
        detector = DuplicateStoreDetector(catalog, test_config)
        result = detector.check_for_duplicates("New Store", [{
            "url": "https://instagram.com/existinghandle",
            "handle": "existinghandle",
            "platform": "instagram",
        }])
        assert result.has_duplicate is True
        assert result.duplicate_type is DuplicateType.HANDLE
        assert result.existing_store.id == 10

    def test_name_checked_before_links(self, detector):
        result = detector.check_for_duplicates(
            "DumDum BabyCare", [LinkInput(handle="johndoeshop", platform="instagram")]
        )
        assert result.duplicate_type is DuplicateType.NAME
        assert result.existing_store.id == 1

    def test_links_checked_in_input_order(self, detector):
        links = [
            {"handle": "@beautyline", "platform": "tiktok"},
            {"handle": "johndoeshop", "platform": "instagram"},
        ]
        first = detector.check_for_duplicates("Brand New Concept", links)
        second = detector.check_for_duplicates("Brand New Concept", list(reversed(links)))
        assert first.existing_store.id == 5
        assert second.existing_store.id == 3

    def test_url_only_link_is_social_link(self, detector):
        result = detector.check_for_duplicates(
            "Brand New Concept", [{"url": "https://instagram.com/johndoeshop", "platform": "instagram"}]
        )
        assert result.duplicate_type is DuplicateType.SOCIAL_LINK
        assert result.existing_store.id == 3

    def test_url_checked_when_handle_misses(self, detector):
        result = detector.check_for_duplicates("Brand New Concept", [
            {"handle": "nomatch", "url": "http://techcorner.com", "platform": "website"},
        ])
        assert result.duplicate_type is DuplicateType.SOCIAL_LINK
        assert result.existing_store.id == 2

    def test_no_duplicate(self, detector):
        result = detector.check_for_duplicates("Brand New Concept", [
            {"url": "https://instagram.com/brandnewconcept", "handle": "brandnewconcept",
             "platform": "instagram"},
            {"url": "https://brandnewconcept.dz"},
        ])
        assert result == MatchResult(has_duplicate=False)
        assert result.to_dict() == {
            "has_duplicate": False,
            "duplicate_type": None,
            "existing_store": None,
        }

    def test_to_dict_shape(self, detector):
        result = detector.check_for_duplicates("Tech Corner")
        assert result.to_dict() == {
            "has_duplicate": True,
            "duplicate_type": "name",
            "existing_store": {
                "id": 2,
                "name": "Tech Corner",
                "slug": "tech-corner",
                "is_verified": False,
                "avg_rating": 3.9,
                "reviews_count": 12,
            },
        }

    def test_idempotent(self, detector):
        links = [{"url": "https://www.tiktok.com/@beautyline"}]
        assert detector.check_for_duplicates("Brand New Concept", links) == \
            detector.check_for_duplicates("Brand New Concept", links)
        assert detector.check_for_duplicates("Nothing Alike") == \
            detector.check_for_duplicates("Nothing Alike")

    def test_concurrent_calls_agree(self, detector):
        results = []

        def worker():
            results.append(detector.check_for_duplicates("Tech Korner"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r == results[0] for r in results)
        assert results[0].existing_store.id == 2


class TestEmptyCatalog:
    def test_every_lookup_is_empty(self, empty_detector):
        assert empty_detector.find_by_name("Anything") == []
        assert empty_detector.find_by_handle("@anything", "instagram") == []
        assert empty_detector.find_by_url("https://instagram.com/anything") == []
        assert empty_detector.find_by_url("https://anything.dz") == []

    def test_no_duplicate(self, empty_detector):
        result = empty_detector.check_for_duplicates(
            "Anything", [{"url": "https://instagram.com/anything", "handle": "anything"}]
        )
        assert result.has_duplicate is False


class TestCatalogContract:
    def test_catalog_errors_propagate(self, test_config):
        catalog = MagicMock(spec=StoreCatalog)
        catalog.list_active_stores.side_effect = CatalogError("database down")
        detector = DuplicateStoreDetector(catalog, test_config)

        with pytest.raises(CatalogError):
            detector.check_for_duplicates("Anything")

    def test_inactive_rows_from_catalog_are_filtered(self, test_config):
        """Stores a backend wrongly returns as active candidates are still skipped."""
        catalog = MagicMock(spec=StoreCatalog)
        catalog.list_active_stores.return_value = [
            Store(id=1, name="Nour", status=StoreStatus.SUSPENDED),
        ]
        detector = DuplicateStoreDetector(catalog, test_config)
        assert detector.find_by_name("Nour") == []

    def test_catalog_is_not_mutated(self, detector, memory_catalog):
        before = [(s.id, s.name, s.status, len(s.links)) for s in memory_catalog.list_active_stores()]
        detector.check_for_duplicates("Tech Korner", [{"handle": "johndoeshop"}])
        after = [(s.id, s.name, s.status, len(s.links)) for s in memory_catalog.list_active_stores()]
        assert before == after
