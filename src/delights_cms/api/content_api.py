"""Admin routes for flat collections, singleton documents and seeding."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, File, UploadFile, status

from ..domain.models import PageSection, ProductCategory, WebsiteSettings
from ..repositories.collections import SECTIONS_UPLOAD_FOLDER
from ..repositories.documents import DocumentRepository
from ..services.container import ContentServices
from ..services.seeding import seed_all
from .dependencies import get_services
from .errors import ApiError, not_found_error
from .schemas import (
    CreatedResponse,
    OrderStatusPayload,
    ResolvedPayload,
    UploadResponse,
    record_payload,
)

router = APIRouter(prefix="/api", tags=["content"])


def _repository(services: ContentServices, name: str) -> DocumentRepository[Any]:
    repository = services.collections().get(name)
    if repository is None:
        raise not_found_error(f"unknown collection '{name}'")
    return repository


@router.get("/collections/{name}")
async def list_records(
    name: str, services: ContentServices = Depends(get_services)
) -> list[dict[str, Any]]:
    records = await _repository(services, name).list()
    return [record_payload(record) for record in records]


@router.get("/collections/{name}/{record_id}")
async def fetch_record(
    name: str, record_id: str, services: ContentServices = Depends(get_services)
) -> dict[str, Any]:
    record = await _repository(services, name).get(record_id)
    if record is None:
        raise not_found_error(f"{name} '{record_id}' not found")
    return record_payload(record)


@router.post("/collections/{name}", status_code=status.HTTP_201_CREATED)
async def create_record(
    name: str,
    payload: dict[str, Any] = Body(...),
    services: ContentServices = Depends(get_services),
) -> CreatedResponse:
    repository = _repository(services, name)
    record = repository.content_type.record_type.from_document(payload)
    record.id = None
    record.created_at = None
    return CreatedResponse(id=await repository.save(record))


@router.put("/collections/{name}/{record_id}")
async def replace_record(
    name: str,
    record_id: str,
    payload: dict[str, Any] = Body(...),
    services: ContentServices = Depends(get_services),
) -> CreatedResponse:
    repository = _repository(services, name)
    existing = await repository.get(record_id)
    if existing is None:
        raise not_found_error(f"{name} '{record_id}' not found")
    record = repository.content_type.record_type.from_document(payload)
    record.id = record_id
    record.created_at = existing.created_at
    await repository.save(record)
    return CreatedResponse(id=record_id)


@router.delete("/collections/{name}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    name: str, record_id: str, services: ContentServices = Depends(get_services)
) -> None:
    await _repository(services, name).delete(record_id)


@router.post("/collections/{name}/uploads", status_code=status.HTTP_201_CREATED)
async def upload_record_asset(
    name: str,
    file: UploadFile = File(...),
    services: ContentServices = Depends(get_services),
) -> UploadResponse:
    folder = _repository(services, name).content_type.upload_folder
    if folder is None:
        raise ApiError(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "uploads_unsupported",
            f"collection '{name}' does not accept uploads",
        )
    locator = await services.blobs.upload(
        await file.read(),
        folder=folder,
        filename=file.filename,
        content_type=file.content_type,
    )
    return UploadResponse(url=locator)


@router.post("/categories/by-slug")
async def merge_category(
    payload: dict[str, Any] = Body(...),
    services: ContentServices = Depends(get_services),
) -> CreatedResponse:
    category = ProductCategory.from_document(payload)
    slug = await services.categories.save_by_slug(category)
    return CreatedResponse(id=slug)


@router.patch("/orders/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_order_status(
    order_id: str,
    payload: OrderStatusPayload,
    services: ContentServices = Depends(get_services),
) -> None:
    await services.orders.update_status(order_id, payload.status)


@router.post("/messages/{message_id}/seen", status_code=status.HTTP_204_NO_CONTENT)
async def mark_message_seen(
    message_id: str, services: ContentServices = Depends(get_services)
) -> None:
    await services.messages.mark_seen(message_id)


@router.put("/messages/{message_id}/resolved", status_code=status.HTTP_204_NO_CONTENT)
async def mark_message_resolved(
    message_id: str,
    payload: ResolvedPayload,
    services: ContentServices = Depends(get_services),
) -> None:
    await services.messages.mark_resolved(message_id, payload.resolved)


@router.get("/settings/website")
async def fetch_website_settings(
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    settings = await services.settings.get()
    return settings.to_document()


@router.put("/settings/website")
async def replace_website_settings(
    payload: dict[str, Any] = Body(...),
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    settings = WebsiteSettings.from_document(payload)
    await services.settings.save(settings)
    return settings.to_document()


@router.get("/sections/{key}")
async def fetch_section(
    key: str, services: ContentServices = Depends(get_services)
) -> dict[str, Any]:
    section = await services.sections.get(key)
    if section is None:
        raise not_found_error(f"section '{key}' not found")
    return section.to_document()


@router.put("/sections/{key}")
async def replace_section(
    key: str,
    payload: dict[str, Any] = Body(...),
    services: ContentServices = Depends(get_services),
) -> dict[str, Any]:
    section = PageSection.from_document(key, payload)
    await services.sections.save(section)
    return section.to_document()


@router.delete("/sections/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_section(key: str, services: ContentServices = Depends(get_services)) -> None:
    await services.sections.delete(key)


@router.post("/sections/uploads", status_code=status.HTTP_201_CREATED)
async def upload_section_asset(
    file: UploadFile = File(...),
    services: ContentServices = Depends(get_services),
) -> UploadResponse:
    data = await file.read()
    if (file.content_type or "").startswith("video/"):
        locator = await services.blobs.upload_video(
            data, filename=file.filename, content_type=file.content_type
        )
    else:
        locator = await services.blobs.upload(
            data,
            folder=SECTIONS_UPLOAD_FOLDER,
            filename=file.filename,
            content_type=file.content_type,
        )
    return UploadResponse(url=locator)


@router.post("/seed")
async def seed_content(services: ContentServices = Depends(get_services)) -> list[dict[str, Any]]:
    reports = await seed_all(services)
    return [
        {"collection": report.collection, "inserted": report.inserted, "upgraded": report.upgraded}
        for report in reports
    ]
