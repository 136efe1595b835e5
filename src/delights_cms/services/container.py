"""Service composition: build stores once and inject them into repositories."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url

from ..config import AppConfig
from ..domain.models import GiftProduct, HeroSlide, NewsArticle, Product
from ..media.blob_lifecycle import BlobLifecycleManager
from ..repositories.collections import (
    CONTACT_MESSAGES,
    GIFT_PRODUCTS,
    HERO_SLIDES,
    NEWS,
    ORDERS,
    PRODUCT_CATEGORIES,
    PRODUCTS,
)
from ..repositories.documents import (
    CategoryRepository,
    ContactMessageRepository,
    DocumentRepository,
    OrderRepository,
)
from ..repositories.gallery import GalleryRepository
from ..repositories.singletons import PageSectionRepository, WebsiteSettingsRepository
from ..storage.blobs import BlobStore, FilesystemBlobStore
from ..storage.documents import DocumentStore
from ..storage.sqlalchemy_store import SQLAlchemyDocumentStore


def _ensure_local_paths(config: AppConfig) -> None:
    config.media_root.mkdir(parents=True, exist_ok=True)
    url = make_url(config.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


@dataclass(slots=True)
class ContentServices:
    """Repositories sharing one document store and one blob lifecycle manager."""

    config: AppConfig
    store: DocumentStore
    blob_store: BlobStore
    blobs: BlobLifecycleManager
    gallery: GalleryRepository
    hero_slides: DocumentRepository[HeroSlide]
    products: DocumentRepository[Product]
    categories: CategoryRepository
    gift_products: DocumentRepository[GiftProduct]
    news: DocumentRepository[NewsArticle]
    orders: OrderRepository
    messages: ContactMessageRepository
    settings: WebsiteSettingsRepository
    sections: PageSectionRepository

    def collections(self) -> dict[str, DocumentRepository[Any]]:
        """Flat repositories keyed by content type name."""

        repositories: list[DocumentRepository[Any]] = [
            self.hero_slides,
            self.products,
            self.categories,
            self.gift_products,
            self.news,
            self.orders,
            self.messages,
        ]
        return {repo.content_type.name: repo for repo in repositories}

    async def startup(self) -> None:
        _ensure_local_paths(self.config)
        init_models = getattr(self.store, "init_models", None)
        if init_models is not None:
            await init_models()

    async def shutdown(self) -> None:
        dispose = getattr(self.store, "dispose", None)
        if dispose is not None:
            await dispose()


def build_services(
    config: AppConfig | None = None,
    *,
    store: DocumentStore | None = None,
    blob_store: BlobStore | None = None,
) -> ContentServices:
    """Wire repositories from ``config``; stores may be injected (e.g. fakes)."""

    cfg = config or AppConfig.build_default()
    document_store = store or SQLAlchemyDocumentStore.from_url(cfg.database_url)
    blob_backend = blob_store or FilesystemBlobStore(
        root=cfg.media_root, public_base_url=cfg.public_base_url
    )
    blobs = BlobLifecycleManager(
        store=blob_backend,
        expected_prefix=cfg.public_base_url,
        escalate_failures=cfg.escalate_cleanup_failures,
        upload_concurrency=cfg.upload_concurrency,
    )
    return ContentServices(
        config=cfg,
        store=document_store,
        blob_store=blob_backend,
        blobs=blobs,
        gallery=GalleryRepository(document_store, blobs),
        hero_slides=DocumentRepository(document_store, blobs, HERO_SLIDES),
        products=DocumentRepository(document_store, blobs, PRODUCTS),
        categories=CategoryRepository(document_store, blobs, PRODUCT_CATEGORIES),
        gift_products=DocumentRepository(document_store, blobs, GIFT_PRODUCTS),
        news=DocumentRepository(document_store, blobs, NEWS),
        orders=OrderRepository(document_store, blobs, ORDERS),
        messages=ContactMessageRepository(document_store, blobs, CONTACT_MESSAGES),
        settings=WebsiteSettingsRepository(document_store),
        sections=PageSectionRepository(document_store, blobs),
    )


__all__ = ["ContentServices", "build_services"]
