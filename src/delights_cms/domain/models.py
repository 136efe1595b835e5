"""Typed records stored by the content backend.

Every record converts to and from the camelCase documents kept in the
document database. Localized fields use :class:`LocalizedText` with explicit
setters instead of dotted field paths, so a typo in a field name fails at
attribute access rather than silently creating a new key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Iterator, Mapping

from ..ids import new_id
from ..storage.blobs import LOCATOR_SEGMENT


class Language(str, Enum):
    """Languages supported by the marketing site."""

    EN = "en"
    AR = "ar"


class OrderStatus(str, Enum):
    """Fulfilment states of a checkout order."""

    NEW = "new"
    PROCESSING = "processing"
    COMPLETED = "completed"


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def iter_locators(value: Any) -> Iterator[str]:
    """Yield every string inside ``value`` that looks like a blob locator."""

    if isinstance(value, str):
        if LOCATOR_SEGMENT in value:
            yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from iter_locators(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_locators(item)


@dataclass(slots=True)
class LocalizedText:
    """Fixed two-language text mapping."""

    en: str = ""
    ar: str = ""

    def get(self, language: Language | str) -> str:
        return self.ar if Language(language) is Language.AR else self.en

    def set(self, language: Language | str, value: str) -> None:
        if Language(language) is Language.AR:
            self.ar = value
        else:
            self.en = value

    def is_blank(self) -> bool:
        return not (self.en.strip() or self.ar.strip())

    def display(self, preferred: Language | str = Language.EN) -> str:
        """Return the preferred language, falling back to the other one."""

        primary = self.get(preferred)
        if primary:
            return primary
        return self.ar if Language(preferred) is Language.EN else self.en

    def to_document(self) -> dict[str, str]:
        return {"en": self.en, "ar": self.ar}

    @classmethod
    def from_document(cls, raw: Any) -> "LocalizedText":
        if isinstance(raw, str):
            return cls(en=raw)
        if not isinstance(raw, Mapping):
            return cls()
        return cls(en=_text(raw.get("en")), ar=_text(raw.get("ar")))


# Gallery tree -----------------------------------------------------------


@dataclass(slots=True)
class GalleryImage:
    """Image entry addressed by its position inside an album."""

    image_url: str
    created_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {"imageUrl": self.image_url, "createdAt": format_timestamp(self.created_at)}

    @classmethod
    def from_document(cls, raw: Any) -> "GalleryImage":
        if isinstance(raw, str):
            return cls(image_url=raw)
        return cls(
            image_url=_text(raw.get("imageUrl")),
            created_at=parse_timestamp(raw.get("createdAt")),
        )


@dataclass(slots=True)
class Album:
    """Album embedded in exactly one country's ``albums`` sequence."""

    name: LocalizedText = field(default_factory=LocalizedText)
    images: list[GalleryImage] = field(default_factory=list)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def blob_locators(self) -> list[str]:
        return [image.image_url for image in self.images if image.image_url]

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name.to_document(),
            "images": [image.to_document() for image in self.images],
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_document(cls, raw: Mapping[str, Any]) -> "Album":
        return cls(
            id=raw.get("id") or None,
            name=LocalizedText.from_document(raw.get("name")),
            images=[GalleryImage.from_document(item) for item in raw.get("images") or []],
            created_at=parse_timestamp(raw.get("createdAt")),
            updated_at=parse_timestamp(raw.get("updatedAt")),
        )


@dataclass(slots=True)
class Country:
    """Root document of the gallery tree."""

    name: LocalizedText = field(default_factory=LocalizedText)
    albums: list[Album] = field(default_factory=list)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_album(self, album_id: str) -> tuple[int, Album] | None:
        for index, album in enumerate(self.albums):
            if album.id == album_id:
                return index, album
        return None

    def blob_locators(self) -> list[str]:
        return [locator for album in self.albums for locator in album.blob_locators()]

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "name": self.name.to_document(),
            "albums": [album.to_document() for album in self.albums],
        }
        if self.created_at is not None:
            document["createdAt"] = format_timestamp(self.created_at)
        if self.updated_at is not None:
            document["updatedAt"] = format_timestamp(self.updated_at)
        return document

    @classmethod
    def from_document(cls, raw: Mapping[str, Any]) -> "Country":
        return cls(
            id=raw.get("id"),
            name=LocalizedText.from_document(raw.get("name")),
            albums=[Album.from_document(item) for item in raw.get("albums") or []],
            created_at=parse_timestamp(raw.get("createdAt")),
            updated_at=parse_timestamp(raw.get("updatedAt")),
        )


# Flat content records ---------------------------------------------------


@dataclass(slots=True)
class ContentRecord(ABC):
    """Flat document with a store-assigned id and bookkeeping timestamps.

    Abstract: concrete record types implement :meth:`content_fields` and
    :meth:`parse_fields`; :meth:`to_document` and :meth:`from_document` add
    ``createdAt`` and ``updatedAt`` around them.
    """

    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    order_field: ClassVar[str | None] = None

    @abstractmethod
    def content_fields(self) -> dict[str, Any]:
        """Return the stored fields of the record, without timestamps."""

    @classmethod
    @abstractmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Map a stored document to constructor keyword arguments."""

    def blob_locators(self) -> list[str]:
        return []

    def to_document(self) -> dict[str, Any]:
        document = self.content_fields()
        if self.created_at is not None:
            document["createdAt"] = format_timestamp(self.created_at)
        if self.updated_at is not None:
            document["updatedAt"] = format_timestamp(self.updated_at)
        return document

    @classmethod
    def from_document(cls, raw: Mapping[str, Any]) -> "ContentRecord":
        return cls(
            id=raw.get("id"),
            created_at=parse_timestamp(raw.get("createdAt")),
            updated_at=parse_timestamp(raw.get("updatedAt")),
            **cls.parse_fields(raw),
        )


@dataclass(slots=True)
class SlideAction:
    title: LocalizedText = field(default_factory=LocalizedText)
    link: str = ""

    def to_document(self) -> dict[str, Any]:
        return {"title": self.title.to_document(), "link": self.link}

    @classmethod
    def from_document(cls, raw: Any) -> "SlideAction":
        if not isinstance(raw, Mapping):
            return cls()
        return cls(title=LocalizedText.from_document(raw.get("title")), link=_text(raw.get("link")))


@dataclass(slots=True)
class HeroSlide(ContentRecord):
    image: str = ""
    title: LocalizedText = field(default_factory=LocalizedText)
    subtitle: LocalizedText = field(default_factory=LocalizedText)
    action1: SlideAction = field(default_factory=SlideAction)
    action2: SlideAction = field(default_factory=SlideAction)
    order: int = 0

    order_field: ClassVar[str | None] = "order"

    def blob_locators(self) -> list[str]:
        return [self.image] if self.image else []

    def content_fields(self) -> dict[str, Any]:
        return {
            "image": self.image,
            "title": self.title.to_document(),
            "subtitle": self.subtitle.to_document(),
            "action1": self.action1.to_document(),
            "action2": self.action2.to_document(),
            "order": self.order,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "image": _text(raw.get("image")),
            "title": LocalizedText.from_document(raw.get("title")),
            "subtitle": LocalizedText.from_document(raw.get("subtitle")),
            "action1": SlideAction.from_document(raw.get("action1")),
            "action2": SlideAction.from_document(raw.get("action2")),
            "order": int(raw.get("order") or 0),
        }


@dataclass(slots=True)
class Product(ContentRecord):
    name: LocalizedText = field(default_factory=LocalizedText)
    description: LocalizedText = field(default_factory=LocalizedText)
    main_image: str = ""
    images: list[str] = field(default_factory=list)
    package_size: str = ""
    grade: str = ""
    category: str = ""

    def blob_locators(self) -> list[str]:
        return ([self.main_image] if self.main_image else []) + list(self.images)

    def content_fields(self) -> dict[str, Any]:
        return {
            "name": self.name.to_document(),
            "description": self.description.to_document(),
            "mainImage": self.main_image,
            "images": list(self.images),
            "packageSize": self.package_size,
            "grade": self.grade,
            "category": self.category,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": LocalizedText.from_document(raw.get("name")),
            "description": LocalizedText.from_document(raw.get("description")),
            "main_image": _text(raw.get("mainImage")),
            "images": _strings(raw.get("images")),
            "package_size": _text(raw.get("packageSize")),
            "grade": _text(raw.get("grade")),
            "category": _text(raw.get("category")),
        }


@dataclass(slots=True)
class ProductCategory(ContentRecord):
    name: LocalizedText = field(default_factory=LocalizedText)
    description: LocalizedText = field(default_factory=LocalizedText)
    slug: str = ""
    href: str = "/products"
    icon_key: str = ""
    order: int = 0

    order_field: ClassVar[str | None] = "order"

    def content_fields(self) -> dict[str, Any]:
        return {
            "name": self.name.to_document(),
            "description": self.description.to_document(),
            "slug": self.slug,
            "href": self.href,
            "iconKey": self.icon_key,
            "order": self.order,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": LocalizedText.from_document(raw.get("name")),
            "description": LocalizedText.from_document(raw.get("description")),
            "slug": _text(raw.get("slug")),
            "href": _text(raw.get("href")) or "/products",
            "icon_key": _text(raw.get("iconKey")),
            "order": int(raw.get("order") or 0),
        }


@dataclass(slots=True)
class GiftProduct(ContentRecord):
    name: LocalizedText = field(default_factory=LocalizedText)
    image: str = ""
    package_size: str = ""
    grade: str = ""

    def needs_upgrade(self) -> bool:
        return not self.package_size or not self.grade

    def blob_locators(self) -> list[str]:
        return [self.image] if self.image else []

    def content_fields(self) -> dict[str, Any]:
        return {
            "name": self.name.to_document(),
            "image": self.image,
            "packageSize": self.package_size,
            "grade": self.grade,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": LocalizedText.from_document(raw.get("name")),
            "image": _text(raw.get("image")),
            "package_size": _text(raw.get("packageSize")),
            "grade": _text(raw.get("grade")),
        }


@dataclass(slots=True)
class NewsArticle(ContentRecord):
    title: str = ""
    description: str = ""
    content_html: str = ""
    cover_image: str = ""
    gallery: list[str] = field(default_factory=list)
    publish_date: str = ""

    def blob_locators(self) -> list[str]:
        return ([self.cover_image] if self.cover_image else []) + list(self.gallery)

    def content_fields(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "contentHtml": self.content_html,
            "coverImage": self.cover_image,
            "gallery": list(self.gallery),
            "publishDate": self.publish_date,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "title": _text(raw.get("title")),
            "description": _text(raw.get("description")),
            "content_html": _text(raw.get("contentHtml")),
            "cover_image": _text(raw.get("coverImage")),
            "gallery": _strings(raw.get("gallery")),
            "publish_date": _text(raw.get("publishDate")),
        }


@dataclass(slots=True)
class Order(ContentRecord):
    contact_name: str = ""
    company_name: str = ""
    contact_phone: str = ""
    items: list[dict[str, Any]] = field(default_factory=list)
    status: OrderStatus = OrderStatus.NEW

    def content_fields(self) -> dict[str, Any]:
        return {
            "contactName": self.contact_name,
            "companyName": self.company_name,
            "contactPhone": self.contact_phone,
            "items": [dict(item) for item in self.items],
            "status": self.status.value,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        try:
            status = OrderStatus(raw.get("status") or OrderStatus.NEW)
        except ValueError:
            status = OrderStatus.NEW
        return {
            "contact_name": _text(raw.get("contactName")),
            "company_name": _text(raw.get("companyName")),
            "contact_phone": _text(raw.get("contactPhone")),
            "items": [dict(item) for item in raw.get("items") or [] if isinstance(item, Mapping)],
            "status": status,
        }


@dataclass(slots=True)
class ContactMessage(ContentRecord):
    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""
    seen: bool = False
    resolved: bool = False

    def content_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "subject": self.subject,
            "message": self.message,
            "seen": self.seen,
            "resolved": self.resolved,
        }

    @classmethod
    def parse_fields(cls, raw: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": _text(raw.get("name")),
            "email": _text(raw.get("email")),
            "phone": _text(raw.get("phone")),
            "subject": _text(raw.get("subject")),
            "message": _text(raw.get("message")),
            "seen": bool(raw.get("seen")),
            "resolved": bool(raw.get("resolved")),
        }


# Singleton documents ----------------------------------------------------


SOCIAL_PLATFORMS = ("facebook", "instagram", "whatsapp", "google")


@dataclass(slots=True)
class ContactEntry:
    id: str
    label: str
    value: str = ""


@dataclass(slots=True)
class LocationEntry:
    id: str
    title: str = ""
    address: str = ""
    map_link: str = ""


def _contacts(raw: Any, default_label: str) -> list[ContactEntry]:
    entries = [entry for entry in raw or [] if isinstance(entry, Mapping)]
    if not entries:
        return [ContactEntry(id=new_id(), label=default_label)]
    return [
        ContactEntry(
            id=_text(entry.get("id")) or new_id(),
            label=_text(entry.get("label")) or default_label,
            value=_text(entry.get("value")),
        )
        for entry in entries
    ]


def _locations(raw: Any) -> list[LocationEntry]:
    entries = [entry for entry in raw or [] if isinstance(entry, Mapping)]
    if not entries:
        return [LocationEntry(id=new_id())]
    return [
        LocationEntry(
            id=_text(entry.get("id")) or new_id(),
            title=_text(entry.get("title")),
            address=_text(entry.get("address")),
            map_link=_text(entry.get("mapLink")),
        )
        for entry in entries
    ]


@dataclass(slots=True)
class WebsiteSettings:
    """Site-wide social links and contact details."""

    social_links: dict[str, str] = field(
        default_factory=lambda: {platform: "" for platform in SOCIAL_PLATFORMS}
    )
    phones: list[ContactEntry] = field(default_factory=lambda: _contacts(None, "Phone"))
    emails: list[ContactEntry] = field(default_factory=lambda: _contacts(None, "Email"))
    locations: list[LocationEntry] = field(default_factory=lambda: _locations(None))
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "socialLinks": dict(self.social_links),
            "phones": [{"id": e.id, "label": e.label, "value": e.value} for e in self.phones],
            "emails": [{"id": e.id, "label": e.label, "value": e.value} for e in self.emails],
            "locations": [
                {"id": e.id, "title": e.title, "address": e.address, "mapLink": e.map_link}
                for e in self.locations
            ],
        }
        if self.updated_at is not None:
            document["updatedAt"] = format_timestamp(self.updated_at)
        return document

    @classmethod
    def from_document(cls, raw: Mapping[str, Any]) -> "WebsiteSettings":
        """Build settings, filling missing links and entries with defaults."""

        links = raw.get("socialLinks") if isinstance(raw.get("socialLinks"), Mapping) else {}
        social_links = {platform: "" for platform in SOCIAL_PLATFORMS}
        social_links.update({key: _text(value) for key, value in links.items()})
        return cls(
            social_links=social_links,
            phones=_contacts(raw.get("phones"), "Phone"),
            emails=_contacts(raw.get("emails"), "Email"),
            locations=_locations(raw.get("locations")),
            updated_at=parse_timestamp(raw.get("updatedAt")),
        )


HOME_SECTION_KEYS = (
    "about",
    "whyChoose",
    "video",
    "trendingProducts",
    "events",
    "homeGallery",
    "zeroFeesShipping",
)


@dataclass(slots=True)
class PageSection:
    """Free-form home page section stored as one document."""

    key: str
    content: dict[str, Any] = field(default_factory=dict)
    updated_at: datetime | None = None

    def blob_locators(self) -> list[str]:
        return list(iter_locators(self.content))

    def to_document(self) -> dict[str, Any]:
        document = {name: value for name, value in self.content.items() if name != "updatedAt"}
        if self.updated_at is not None:
            document["updatedAt"] = format_timestamp(self.updated_at)
        return document

    @classmethod
    def from_document(cls, key: str, raw: Mapping[str, Any]) -> "PageSection":
        content = {name: value for name, value in raw.items() if name not in ("id", "updatedAt")}
        return cls(key=key, content=content, updated_at=parse_timestamp(raw.get("updatedAt")))


__all__ = [
    "Album",
    "ContactEntry",
    "ContactMessage",
    "ContentRecord",
    "Country",
    "GalleryImage",
    "GiftProduct",
    "HOME_SECTION_KEYS",
    "HeroSlide",
    "Language",
    "LocalizedText",
    "LocationEntry",
    "NewsArticle",
    "Order",
    "OrderStatus",
    "PageSection",
    "Product",
    "ProductCategory",
    "SOCIAL_PLATFORMS",
    "SlideAction",
    "WebsiteSettings",
    "format_timestamp",
    "iter_locators",
    "parse_timestamp",
]
