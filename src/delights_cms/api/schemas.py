"""Pydantic request and response models for the admin API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..domain.models import (
    Album,
    ContentRecord,
    Country,
    GalleryImage,
    LocalizedText,
    OrderStatus,
)


class LocalizedTextModel(BaseModel):
    en: str = ""
    ar: str = ""

    def to_domain(self) -> LocalizedText:
        return LocalizedText(en=self.en, ar=self.ar)


class ImageModel(BaseModel):
    image_url: str = Field(alias="imageUrl")

    model_config = {"populate_by_name": True}


class AlbumPayload(BaseModel):
    id: str | None = None
    name: LocalizedTextModel
    images: list[ImageModel] = Field(default_factory=list)

    def to_domain(self) -> Album:
        return Album(
            id=self.id,
            name=self.name.to_domain(),
            images=[GalleryImage(image_url=image.image_url) for image in self.images],
        )


class AlbumRenamePayload(BaseModel):
    name: LocalizedTextModel


class CountryPayload(BaseModel):
    """Full country record; ``albums`` replaces the stored sequence."""

    name: LocalizedTextModel
    albums: list[AlbumPayload] = Field(default_factory=list)

    def to_domain(self, country_id: str | None = None) -> Country:
        return Country(
            id=country_id,
            name=self.name.to_domain(),
            albums=[album.to_domain() for album in self.albums],
        )


class ImageUrlPayload(BaseModel):
    image_url: str = Field(alias="imageUrl", min_length=1)

    model_config = {"populate_by_name": True}


class OrderStatusPayload(BaseModel):
    status: OrderStatus


class ResolvedPayload(BaseModel):
    resolved: bool = True


class CreatedResponse(BaseModel):
    id: str


class UploadResponse(BaseModel):
    url: str


def country_payload(country: Country) -> dict[str, Any]:
    return {"id": country.id, **country.to_document()}


def album_payload(album: Album) -> dict[str, Any]:
    return album.to_document()


def record_payload(record: ContentRecord) -> dict[str, Any]:
    return {"id": record.id, **record.to_document()}
