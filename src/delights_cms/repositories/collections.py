"""Registry of flat content collections and how they are stored."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..domain.models import (
    ContactMessage,
    ContentRecord,
    GiftProduct,
    HeroSlide,
    NewsArticle,
    Order,
    Product,
    ProductCategory,
)
from ..media.blob_lifecycle import VIDEO_FOLDER
from ..storage.documents import OrderBy

R = TypeVar("R", bound=ContentRecord)


@dataclass(frozen=True, slots=True)
class ContentType(Generic[R]):
    """Binds a record type to its collection, default ordering and upload folder."""

    name: str
    collection: str
    record_type: type[R]
    order_by: OrderBy | None = None
    upload_folder: str | None = None


HERO_SLIDES = ContentType(
    "heroSlides", "homeContent/hero/slides", HeroSlide, OrderBy("order"), "hero-slides"
)
PRODUCTS = ContentType("products", "products", Product, None, "products")
PRODUCT_CATEGORIES = ContentType(
    "productCategories", "productCategories", ProductCategory, OrderBy("order")
)
GIFT_PRODUCTS = ContentType("giftProducts", "giftProducts", GiftProduct, None, "gift-products")
NEWS = ContentType("news", "news", NewsArticle, OrderBy("createdAt", descending=True), "news")
ORDERS = ContentType("orders", "orders", Order, OrderBy("createdAt", descending=True))
CONTACT_MESSAGES = ContentType(
    "contactMessages", "contactMessages", ContactMessage, OrderBy("createdAt", descending=True)
)

CONTENT_TYPES: dict[str, ContentType] = {
    content_type.name: content_type
    for content_type in (
        HERO_SLIDES,
        PRODUCTS,
        PRODUCT_CATEGORIES,
        GIFT_PRODUCTS,
        NEWS,
        ORDERS,
        CONTACT_MESSAGES,
    )
}

GALLERY_COLLECTION = "gallery"
GALLERY_UPLOAD_FOLDER = "gallery"
SECTIONS_COLLECTION = "homeContent"
SECTIONS_UPLOAD_FOLDER = "home-content"
SETTINGS_COLLECTION = "settings"
WEBSITE_SETTINGS_ID = "website"


def upload_folders() -> tuple[str, ...]:
    """Every folder the backend uploads into."""

    folders = [ct.upload_folder for ct in CONTENT_TYPES.values() if ct.upload_folder]
    folders += [GALLERY_UPLOAD_FOLDER, SECTIONS_UPLOAD_FOLDER, VIDEO_FOLDER]
    return tuple(dict.fromkeys(folders))


__all__ = [
    "CONTACT_MESSAGES",
    "CONTENT_TYPES",
    "ContentType",
    "GALLERY_COLLECTION",
    "GALLERY_UPLOAD_FOLDER",
    "GIFT_PRODUCTS",
    "HERO_SLIDES",
    "NEWS",
    "ORDERS",
    "PRODUCTS",
    "PRODUCT_CATEGORIES",
    "SECTIONS_COLLECTION",
    "SECTIONS_UPLOAD_FOLDER",
    "SETTINGS_COLLECTION",
    "WEBSITE_SETTINGS_ID",
    "upload_folders",
]
