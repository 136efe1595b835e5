"""Repositories built on the document and blob store contracts."""

from .collections import CONTENT_TYPES, ContentType
from .documents import (
    CategoryRepository,
    ContactMessageRepository,
    DocumentRepository,
    OrderRepository,
)
from .gallery import GalleryRepository
from .singletons import PageSectionRepository, WebsiteSettingsRepository

__all__ = [
    "CONTENT_TYPES",
    "CategoryRepository",
    "ContactMessageRepository",
    "ContentType",
    "DocumentRepository",
    "GalleryRepository",
    "OrderRepository",
    "PageSectionRepository",
    "WebsiteSettingsRepository",
]
