"""Store catalog entities and the inputs accepted by the detector.

Stores and links are read-only snapshots handed out by a catalog backend;
nothing in the engine mutates them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union


class StoreStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


class Platform(str, Enum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    WHATSAPP = "whatsapp"
    WEBSITE = "website"


def _platform_value(platform: Union[str, Platform, None]) -> Optional[str]:
    if platform is None:
        return None
    if isinstance(platform, Platform):
        return platform.value
    return str(platform).lower() or None


@dataclass
class StoreLink:
    """A social or web link attached to a store."""

    platform: str
    url: str
    handle: Optional[str] = None

    def __post_init__(self):
        self.platform = _platform_value(self.platform) or ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StoreLink":
        return cls(
            platform=data.get("platform") or "",
            url=data.get("url") or "",
            handle=data.get("handle"),
        )


@dataclass
class Store:
    """A store as seen by the detector.

    Attributes:
        id: Catalog identifier.
        name: Display name, any script.
        slug: URL slug.
        status: Lifecycle status; only ``active`` stores are duplicate candidates.
        is_verified: Whether the store owner has been verified.
        avg_rating: Cached average rating.
        reviews_count: Cached number of approved reviews.
        links: Social and web links.
    """

    id: Any
    name: str
    slug: str = ""
    status: StoreStatus = StoreStatus.ACTIVE
    is_verified: bool = False
    avg_rating: float = 0.0
    reviews_count: int = 0
    links: List[StoreLink] = field(default_factory=list)

    def __post_init__(self):
        self.status = StoreStatus(self.status)

    @property
    def is_active(self) -> bool:
        return self.status is StoreStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Store":
        """Build a store from a plain mapping such as a JSON export row."""
        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            status=data.get("status") or StoreStatus.ACTIVE,
            is_verified=bool(data.get("is_verified", False)),
            avg_rating=float(data.get("avg_rating") or 0.0),
            reviews_count=int(data.get("reviews_count") or 0),
            links=[StoreLink.from_dict(link) for link in data.get("links") or []],
        )


@dataclass(frozen=True)
class LinkInput:
    """A link proposed for a new store; any field may be missing."""

    url: Optional[str] = None
    handle: Optional[str] = None
    platform: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["LinkInput", Mapping[str, Any]]) -> "LinkInput":
        if isinstance(value, LinkInput):
            return value
        return cls(
            url=value.get("url") or None,
            handle=value.get("handle") or None,
            platform=_platform_value(value.get("platform")),
        )


@dataclass(frozen=True)
class StoreSummary:
    """Public view of an existing store returned alongside a duplicate match."""

    id: Any
    name: str
    slug: str
    is_verified: bool
    avg_rating: float
    reviews_count: int

    @classmethod
    def from_store(cls, store: Store) -> "StoreSummary":
        return cls(
            id=store.id,
            name=store.name,
            slug=store.slug,
            is_verified=store.is_verified,
            avg_rating=store.avg_rating,
            reviews_count=store.reviews_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "is_verified": self.is_verified,
            "avg_rating": self.avg_rating,
            "reviews_count": self.reviews_count,
        }
