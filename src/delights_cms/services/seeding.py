"""Idempotent seeding of default catalog data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from ..domain.models import GiftProduct, Product
from ..repositories.documents import CategoryRepository, DocumentRepository
from .seed_data import default_categories, default_gift_products, default_products

if TYPE_CHECKING:
    from .container import ContentServices

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class SeedReport:
    collection: str
    inserted: int = 0
    upgraded: int = 0


def _log(report: SeedReport) -> SeedReport:
    logger.info(
        "seed.completed",
        collection=report.collection,
        inserted=report.inserted,
        upgraded=report.upgraded,
    )
    return report


async def seed_products(repo: DocumentRepository[Product]) -> SeedReport:
    """Insert the default products when the collection is empty."""

    report = SeedReport(repo.collection)
    if await repo.list(strict=True):
        return _log(report)
    for product in default_products():
        await repo.save(product)
        report.inserted += 1
    return _log(report)


async def seed_product_categories(repo: CategoryRepository) -> SeedReport:
    """Insert the default categories, keyed by slug, when none exist."""

    report = SeedReport(repo.collection)
    if await repo.list(strict=True):
        return _log(report)
    for category in default_categories():
        await repo.save_by_slug(category)
        report.inserted += 1
    return _log(report)


async def seed_gift_products(repo: DocumentRepository[GiftProduct]) -> SeedReport:
    """Insert defaults when empty, else backfill ``packageSize``/``grade``.

    Stored gift products are matched to defaults by English name; records
    without a matching default are left untouched.
    """

    report = SeedReport(repo.collection)
    existing = await repo.list(strict=True)
    defaults = default_gift_products()
    if not existing:
        for gift in defaults:
            await repo.save(gift)
            report.inserted += 1
        return _log(report)

    by_name = {gift.name.en.strip().lower(): gift for gift in defaults}
    for gift in existing:
        if not gift.needs_upgrade() or gift.id is None:
            continue
        template = by_name.get(gift.name.en.strip().lower())
        if template is None:
            logger.info("seed.gift.unmatched", record_id=gift.id)
            continue
        await repo.update_fields(
            gift.id,
            {
                "packageSize": gift.package_size or template.package_size,
                "grade": gift.grade or template.grade,
            },
        )
        report.upgraded += 1
    return _log(report)


async def seed_all(services: "ContentServices") -> list[SeedReport]:
    """Run every seeding routine in turn."""

    return [
        await seed_product_categories(services.categories),
        await seed_products(services.products),
        await seed_gift_products(services.gift_products),
    ]


__all__ = [
    "SeedReport",
    "seed_all",
    "seed_gift_products",
    "seed_product_categories",
    "seed_products",
]
