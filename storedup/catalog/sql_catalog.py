"""Relational store catalog backed by SQLAlchemy."""

from typing import List, Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship, selectinload
from sqlalchemy.pool import StaticPool

from storedup.errors import CatalogError
from storedup.models import Store, StoreLink, StoreStatus
from storedup.utils.logger import log_error, log_info
from .base import StoreCatalog


class Base(DeclarativeBase):
    pass


class StoreRow(Base):
    """Store row; rating and review count are denormalized caches."""

    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    slug: Mapped[str] = mapped_column(String(255), default="")
    status: Mapped[str] = mapped_column(String(20), default=StoreStatus.ACTIVE.value, index=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    avg_rating_cache: Mapped[float] = mapped_column(Float, default=0.0)
    reviews_count_cache: Mapped[int] = mapped_column(Integer, default=0)

    links: Mapped[List["StoreLinkRow"]] = relationship(
        back_populates="store", cascade="all, delete-orphan", order_by="StoreLinkRow.id"
    )

    def to_store(self) -> Store:
        return Store(
            id=self.id,
            name=self.name,
            slug=self.slug or "",
            status=self.status,
            is_verified=bool(self.is_verified),
            avg_rating=float(self.avg_rating_cache or 0.0),
            reviews_count=int(self.reviews_count_cache or 0),
            links=[link.to_link() for link in self.links],
        )

    def __repr__(self) -> str:
        return f"<StoreRow {self.id} {self.name} ({self.status})>"


class StoreLinkRow(Base):
    __tablename__ = "store_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), index=True)
    platform: Mapped[str] = mapped_column(String(20))
    url: Mapped[str] = mapped_column(String(2048))
    handle: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    store: Mapped[StoreRow] = relationship(back_populates="links")

    def to_link(self) -> StoreLink:
        return StoreLink(platform=self.platform, url=self.url, handle=self.handle)


class SqlStoreCatalog(StoreCatalog):
    """Catalog reading stores and their links from a relational database."""

    def __init__(self, database_url: str = "sqlite:///stores.db",
                 engine: Optional[Engine] = None, name: str = "sql"):
        super().__init__(name)
        if engine is None:
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine = create_engine(
                    database_url,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                engine = create_engine(database_url)
        self.engine = engine

    def create_schema(self) -> None:
        """Create the ``stores`` and ``store_links`` tables if missing."""
        Base.metadata.create_all(self.engine)

    def add(self, store: Store) -> Store:
        """Persist a store with its links (seeding and tests)."""
        row = StoreRow(
            name=store.name,
            slug=store.slug,
            status=store.status.value,
            is_verified=store.is_verified,
            avg_rating_cache=store.avg_rating,
            reviews_count_cache=store.reviews_count,
            links=[
                StoreLinkRow(platform=link.platform, url=link.url, handle=link.handle)
                for link in store.links
            ],
        )
        if store.id is not None:
            row.id = store.id
        try:
            with Session(self.engine) as session, session.begin():
                session.add(row)
                session.flush()
                store.id = row.id
        except SQLAlchemyError as e:
            log_error("Failed to insert store", name=store.name, error=str(e))
            raise CatalogError(f"Cannot insert store {store.name!r}: {e}", backend=self.name) from e
        log_info("Store added to catalog", store_id=store.id, backend=self.name)
        return store

    def list_active_stores(self) -> List[Store]:
        stmt = (
            select(StoreRow)
            .where(StoreRow.status == StoreStatus.ACTIVE.value)
            .options(selectinload(StoreRow.links))
            .order_by(StoreRow.id)
        )
        try:
            with Session(self.engine) as session:
                stores = [row.to_store() for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            log_error("Store catalog query failed", backend=self.name, error=str(e))
            raise CatalogError(f"Store catalog query failed: {e}", backend=self.name) from e
        return self._record_query(stores)

    def close(self) -> None:
        self.engine.dispose()
