"""Remove blobs that no document references any more."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Iterable

from ..domain.models import HOME_SECTION_KEYS, iter_locators

if TYPE_CHECKING:
    from ..services.container import ContentServices

logger = logging.getLogger(__name__)

# Blobs younger than this may belong to an upload whose document is not written yet.
DEFAULT_MIN_AGE = timedelta(hours=24)


@dataclass(slots=True)
class SweepSummary:
    scanned: int
    orphaned: int
    removed: int
    dry_run: bool
    recent: int = 0


async def collect_referenced_locators(services: "ContentServices") -> list[str]:
    """Gather every locator referenced by stored documents.

    Reads are strict: a failed read aborts the sweep instead of making every
    blob look unreferenced.
    """

    locators: list[str] = []
    for country in await services.gallery.list_countries(strict=True):
        locators.extend(country.blob_locators())
    for repo in services.collections().values():
        for record in await repo.list_all():
            locators.extend(record.blob_locators())
    settings = await services.settings.get()
    locators.extend(iter_locators(settings.to_document()))
    for key in HOME_SECTION_KEYS:
        section = await services.sections.get(key, strict=True)
        if section is not None:
            locators.extend(section.blob_locators())
    return locators


async def sweep_orphan_blobs(
    services: "ContentServices",
    *,
    folders: Iterable[str],
    dry_run: bool = False,
    min_age: timedelta = DEFAULT_MIN_AGE,
    reference_time: datetime | None = None,
) -> SweepSummary:
    """Delete blobs under ``folders`` that are not referenced by any document.

    Blobs modified less than ``min_age`` before ``reference_time`` are kept
    and counted as ``recent``. Referenced locators are decoded whatever
    their base URL, so a document written under an older public base still
    protects its blobs.
    """

    now = reference_time or datetime.now(timezone.utc)
    referenced = {
        path
        for path in (
            services.blobs.path_from_locator(locator, check_prefix=False)
            for locator in await collect_referenced_locators(services)
        )
        if path is not None
    }
    stored = []
    for folder in folders:
        stored.extend(await services.blob_store.list_blobs(f"{folder.strip('/')}/"))

    unreferenced = [blob for blob in stored if blob.path not in referenced]
    orphans = [blob.path for blob in unreferenced if now - blob.modified_at >= min_age]
    recent = len(unreferenced) - len(orphans)
    removed = 0
    if not dry_run:
        for path in orphans:
            locator = await services.blob_store.retrievable_url(path)
            if await services.blobs.delete_by_locator(locator):
                removed += 1
    logger.info(
        "blob.sweep.completed",
        extra={
            "scanned": len(stored),
            "orphaned": len(orphans),
            "recent": recent,
            "removed": removed,
            "dry_run": dry_run,
        },
    )
    return SweepSummary(
        scanned=len(stored),
        orphaned=len(orphans),
        removed=removed,
        dry_run=dry_run,
        recent=recent,
    )


__all__ = ["DEFAULT_MIN_AGE", "SweepSummary", "collect_referenced_locators", "sweep_orphan_blobs"]
