"""Document database contract consumed by the repositories."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

Document = dict[str, Any]
"""A stored document: ``{"id": <id>, **fields}``."""


class _ServerTimestamp:
    """Sentinel replaced by the store's clock when a document is written."""

    _instance: "_ServerTimestamp | None" = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True, slots=True)
class OrderBy:
    """Ordering clause for :meth:`DocumentStore.list`."""

    field: str
    descending: bool = False


class DocumentStore(Protocol):
    """Narrow interface over a document database.

    Implementations raise :class:`~delights_cms.exceptions.PersistenceError`
    for transport failures and :class:`~delights_cms.exceptions.NotFoundError`
    from :meth:`update` when the document does not exist.
    """

    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document or ``None`` when absent."""

    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        """Replace the document, or merge top-level fields when ``merge``."""

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Apply a partial update to an existing document."""

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete the document; absent documents are ignored."""

    async def list(self, collection: str, order_by: OrderBy | None = None) -> list[Document]:
        """Return every document in ``collection``."""


def utc_timestamp(now: datetime | None = None) -> str:
    """Return the ISO-8601 representation stored for server timestamps."""

    return (now or datetime.now(timezone.utc)).isoformat()


def resolve_server_timestamps(fields: Mapping[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Return a copy of ``fields`` with :data:`SERVER_TIMESTAMP` values resolved."""

    stamp = utc_timestamp(now)
    return {key: stamp if value is SERVER_TIMESTAMP else value for key, value in fields.items()}


def sort_documents(documents: list[Document], order_by: OrderBy | None) -> list[Document]:
    """Apply ``order_by`` the way the document database does.

    Documents missing the ordering field are left out of ordered results.
    """

    if order_by is None:
        return documents
    present = [doc for doc in documents if doc.get(order_by.field) is not None]
    return sorted(present, key=lambda doc: doc[order_by.field], reverse=order_by.descending)


__all__ = [
    "Document",
    "DocumentStore",
    "OrderBy",
    "SERVER_TIMESTAMP",
    "resolve_server_timestamps",
    "sort_documents",
    "utc_timestamp",
]
