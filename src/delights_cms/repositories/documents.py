"""Repository over flat content collections."""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, TypeVar

from ..domain.models import (
    ContactMessage,
    ContentRecord,
    Order,
    OrderStatus,
    ProductCategory,
)
from ..exceptions import translate_store_errors
from ..ids import new_id
from ..media.blob_lifecycle import BlobLifecycleManager
from ..storage.documents import SERVER_TIMESTAMP, DocumentStore, OrderBy
from .collections import ContentType

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=ContentRecord)


class DocumentRepository(Generic[R]):
    """List, save and delete records of one flat collection.

    Reads from :meth:`list` degrade to an empty result; every write path
    raises :class:`~delights_cms.exceptions.PersistenceError` on store
    failures.
    """

    def __init__(
        self,
        store: DocumentStore,
        blobs: BlobLifecycleManager,
        content_type: ContentType[R],
    ) -> None:
        self._store = store
        self._blobs = blobs
        self.content_type = content_type

    @property
    def collection(self) -> str:
        return self.content_type.collection

    async def list(self, order_by: OrderBy | None = None, *, strict: bool = False) -> list[R]:
        """Return every record, ordered by ``order_by`` or the collection default.

        With ``strict`` a read failure raises instead of returning ``[]``.
        """

        ordering = order_by or self.content_type.order_by
        try:
            with translate_store_errors(entity=self.collection, action="list"):
                documents = await self._store.list(self.collection, ordering)
        except Exception:
            if strict:
                raise
            logger.exception("documents.list.failed", extra={"collection": self.collection})
            return []
        return [self._parse(document) for document in documents]

    async def list_all(self) -> list[R]:
        """Return every record, including those lacking the ordering field.

        Read failures raise.
        """

        with translate_store_errors(entity=self.collection, action="list"):
            documents = await self._store.list(self.collection)
        return [self._parse(document) for document in documents]

    async def get(self, record_id: str) -> R | None:
        with translate_store_errors(entity=self.collection, action="get"):
            document = await self._store.get(self.collection, record_id)
        return self._parse(document) if document is not None else None

    async def save(self, record: R) -> str:
        """Replace the record at ``record.id`` or insert it under a new id."""

        fields = record.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        if record.id:
            with translate_store_errors(entity=self.collection, action="save"):
                await self._store.set(self.collection, record.id, fields)
            logger.info(
                "documents.record.replaced",
                extra={"collection": self.collection, "record_id": record.id},
            )
            return record.id

        record_id = new_id()
        order_field = type(record).order_field
        if order_field:
            fields[order_field] = await self.next_order()
        fields["createdAt"] = SERVER_TIMESTAMP
        with translate_store_errors(entity=self.collection, action="save"):
            await self._store.set(self.collection, record_id, fields)
        logger.info(
            "documents.record.created",
            extra={"collection": self.collection, "record_id": record_id},
        )
        return record_id

    async def update_fields(self, record_id: str, fields: Mapping[str, Any]) -> None:
        """Partially update an existing record; raise ``NotFoundError`` if absent."""

        payload = {**fields, "updatedAt": SERVER_TIMESTAMP}
        with translate_store_errors(entity=self.collection, action="update"):
            await self._store.update(self.collection, record_id, payload)

    async def delete(self, record_id: str) -> None:
        """Delete the record and, best-effort, every blob it references."""

        record = await self.get(record_id)
        if record is None:
            logger.info(
                "documents.record.missing",
                extra={"collection": self.collection, "record_id": record_id},
            )
            return
        attempted = await self._blobs.delete_many(record.blob_locators())
        with translate_store_errors(entity=self.collection, action="delete"):
            await self._store.delete(self.collection, record_id)
        logger.info(
            "documents.record.deleted",
            extra={
                "collection": self.collection,
                "record_id": record_id,
                "blob_deletes": attempted,
            },
        )

    async def next_order(self) -> int:
        """Return one more than the highest ``order`` currently stored."""

        order_field = self.content_type.record_type.order_field
        if not order_field:
            raise ValueError(f"{self.collection} has no ordering field")
        with translate_store_errors(entity=self.collection, action="list"):
            documents = await self._store.list(
                self.collection, OrderBy(order_field, descending=True)
            )
        if not documents:
            return 1
        return int(documents[0].get(order_field) or 0) + 1

    def _parse(self, document: Mapping[str, Any]) -> R:
        return self.content_type.record_type.from_document(document)  # type: ignore[return-value]


class CategoryRepository(DocumentRepository[ProductCategory]):
    """Categories are keyed by slug and support merge-on-save."""

    async def save_by_slug(self, category: ProductCategory) -> str:
        """Merge into the category stored under ``category.slug`` or create it."""

        if not category.slug:
            raise ValueError("category slug is required")
        with translate_store_errors(entity=self.collection, action="get"):
            existing = await self._store.get(self.collection, category.slug)
        fields = category.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        if existing is None:
            fields["order"] = await self.next_order()
            fields["createdAt"] = SERVER_TIMESTAMP
        else:
            fields.pop("createdAt", None)
            if not category.order:
                fields.pop("order", None)
        with translate_store_errors(entity=self.collection, action="save"):
            await self._store.set(self.collection, category.slug, fields, merge=True)
        logger.info(
            "documents.category.merged",
            extra={"slug": category.slug, "inserted": existing is None},
        )
        return category.slug


class OrderRepository(DocumentRepository[Order]):
    async def update_status(self, order_id: str, status: OrderStatus | str) -> None:
        await self.update_fields(order_id, {"status": OrderStatus(status).value})


class ContactMessageRepository(DocumentRepository[ContactMessage]):
    async def mark_seen(self, message_id: str) -> None:
        await self.update_fields(message_id, {"seen": True})

    async def mark_resolved(self, message_id: str, resolved: bool = True) -> None:
        await self.update_fields(message_id, {"resolved": resolved})


__all__ = [
    "CategoryRepository",
    "ContactMessageRepository",
    "DocumentRepository",
    "OrderRepository",
]
