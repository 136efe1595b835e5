"""Admin gallery routes: countries, albums and their images."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile, status

from ..media.blob_lifecycle import BlobUpload
from ..services.container import ContentServices
from .dependencies import get_services
from .errors import not_found_error
from .schemas import (
    AlbumPayload,
    AlbumRenamePayload,
    CountryPayload,
    CreatedResponse,
    ImageUrlPayload,
    album_payload,
    country_payload,
)

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.get("")
async def list_gallery(services: ContentServices = Depends(get_services)) -> list[dict[str, Any]]:
    countries = await services.gallery.list_countries()
    return [country_payload(country) for country in countries]


@router.get("/countries/{country_id}")
async def fetch_country(
    country_id: str, services: ContentServices = Depends(get_services)
) -> dict[str, Any]:
    country = await services.gallery.get_country(country_id)
    if country is None:
        raise not_found_error(f"country '{country_id}' not found")
    return country_payload(country)


@router.post("/countries", status_code=status.HTTP_201_CREATED)
async def create_country(
    payload: CountryPayload, services: ContentServices = Depends(get_services)
) -> CreatedResponse:
    country_id = await services.gallery.save_country(payload.to_domain())
    return CreatedResponse(id=country_id)


@router.put("/countries/{country_id}")
async def replace_country(
    country_id: str,
    payload: CountryPayload,
    services: ContentServices = Depends(get_services),
) -> CreatedResponse:
    existing = await services.gallery.get_country(country_id)
    if existing is None:
        raise not_found_error(f"country '{country_id}' not found")
    country = payload.to_domain(country_id)
    country.created_at = existing.created_at
    previous = {album.id: album for album in existing.albums}
    for album in country.albums:
        stored = previous.get(album.id)
        if stored is None:
            continue
        album.created_at = stored.created_at
        added_at = {image.image_url: image.created_at for image in stored.images}
        for image in album.images:
            image.created_at = added_at.get(image.image_url)
        if album.name == stored.name and album.blob_locators() == stored.blob_locators():
            album.updated_at = stored.updated_at
    await services.gallery.save_country(country)
    return CreatedResponse(id=country_id)


@router.delete("/countries/{country_id}")
async def delete_country(
    country_id: str, services: ContentServices = Depends(get_services)
) -> dict[str, int]:
    attempted = await services.gallery.delete_country(country_id)
    return {"blob_deletes": attempted}


@router.post("/countries/{country_id}/albums", status_code=status.HTTP_201_CREATED)
async def create_album(
    country_id: str,
    payload: AlbumPayload,
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    album = payload.to_domain()
    album.id = None
    saved = await services.gallery.save_album(country_id, album)
    return album_payload(saved)


@router.put("/countries/{country_id}/albums/{album_id}")
async def rename_album(
    country_id: str,
    album_id: str,
    payload: AlbumRenamePayload,
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    album = await services.gallery.rename_album(country_id, album_id, payload.name.to_domain())
    return album_payload(album)


@router.delete("/countries/{country_id}/albums/{album_id}")
async def delete_album(
    country_id: str,
    album_id: str,
    services: ContentServices = Depends(get_services),
) -> dict[str, int]:
    attempted = await services.gallery.delete_album(country_id, album_id)
    return {"blob_deletes": attempted}


@router.post(
    "/countries/{country_id}/albums/{album_id}/images",
    status_code=status.HTTP_201_CREATED,
)
async def upload_album_images(
    country_id: str,
    album_id: str,
    files: list[UploadFile] = File(...),
    services: ContentServices = Depends(get_services),
) -> list[dict[str, Any]]:
    uploads = [
        BlobUpload(data=await upload.read(), filename=upload.filename, content_type=upload.content_type)
        for upload in files
    ]
    images = await services.gallery.upload_images_to_album(country_id, album_id, uploads)
    return [image.to_document() for image in images]


@router.post(
    "/countries/{country_id}/albums/{album_id}/image-urls",
    status_code=status.HTTP_201_CREATED,
)
async def add_album_image_url(
    country_id: str,
    album_id: str,
    payload: ImageUrlPayload,
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    image = await services.gallery.add_image_to_album(country_id, album_id, payload.image_url)
    return image.to_document()


@router.delete("/countries/{country_id}/albums/{album_id}/images/{index}")
async def delete_album_image(
    country_id: str,
    album_id: str,
    index: int,
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    image = await services.gallery.delete_image_from_album(country_id, album_id, index)
    return image.to_document()
