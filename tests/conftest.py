"""Pytest configuration and fixtures for storedup tests."""

import pytest

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from storedup import config as config_module
from storedup.catalog.memory_catalog import MemoryStoreCatalog
from storedup.config import Config
from storedup.dedup.detector import DuplicateStoreDetector
from storedup.models import Store, StoreLink, StoreStatus
from storedup.utils import logger as logger_module


@pytest.fixture(autouse=True)
def reset_global_config():
    """Drop the lazily built global configuration between tests."""
    config_module._config = None
    yield
    config_module._config = None


@pytest.fixture(autouse=True)
def restore_logger_state():
    """Undo handler, level and context-length changes made by configure_logging."""
    log = logger_module.logger
    saved = (list(log.handlers), log.level, log.propagate, logger_module._max_json_length)
    yield
    log.handlers, log.level, log.propagate, logger_module._max_json_length = saved


@pytest.fixture
def test_config():
    """Configuration with defaults and transliteration disabled."""
    return Config(transliterator="none")


@pytest.fixture
def sample_stores():
    """A small catalog covering every link platform and every status."""
    return [
        Store(
            id=1,
            name="Doum Doum BabyCare",
            slug="doum-doum-babycare",
            is_verified=True,
            avg_rating=4.6,
            reviews_count=31,
            links=[
                StoreLink("instagram", "https://instagram.com/doumdoum.babycare", "doumdoum.babycare"),
            ],
        ),
        Store(
            id=2,
            name="Tech Corner",
            slug="tech-corner",
            avg_rating=3.9,
            reviews_count=12,
            links=[
                StoreLink("facebook", "https://www.facebook.com/techcorner.dz"),
                StoreLink("website", "https://www.techcorner.com/"),
            ],
        ),
        Store(
            id=3,
            name="John Doe Shop",
            slug="john-doe-shop",
            links=[
                StoreLink("instagram", "https://instagram.com/johndoeshop", "johndoeshop"),
                StoreLink("whatsapp", "https://wa.me/213555123456"),
            ],
        ),
        Store(
            id=4,
            name="Ghost Boutique",
            slug="ghost-boutique",
            status=StoreStatus.SUSPENDED,
            links=[StoreLink("instagram", "https://instagram.com/ghost", "ghost")],
        ),
        Store(
            id=5,
            name="Beauty Line",
            slug="beauty-line",
            links=[StoreLink("tiktok", "https://www.tiktok.com/@BeautyLine/")],
        ),
        Store(
            id=6,
            name="Pending Place",
            slug="pending-place",
            status=StoreStatus.PENDING,
            links=[StoreLink("website", "https://pendingplace.dz")],
        ),
    ]


@pytest.fixture
def memory_catalog(sample_stores):
    """In-memory catalog seeded with the sample stores."""
    return MemoryStoreCatalog(sample_stores)


@pytest.fixture
def detector(memory_catalog, test_config):
    """Detector over the sample catalog."""
    return DuplicateStoreDetector(memory_catalog, test_config)


@pytest.fixture
def empty_detector(test_config):
    """Detector over a catalog without stores."""
    return DuplicateStoreDetector(MemoryStoreCatalog(), test_config)
