"""SQLAlchemy implementation of :class:`DocumentStore`."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..db.models import Base, StoredDocument
from ..exceptions import NotFoundError, handle_sqlalchemy_errors
from .documents import Document, OrderBy, resolve_server_timestamps, sort_documents


class SQLAlchemyDocumentStore:
    """Store documents as JSON rows in a single ``documents`` table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, database_url: str) -> "SQLAlchemyDocumentStore":
        return cls(create_async_engine(database_url, future=True))

    async def init_models(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def get(self, collection: str, doc_id: str) -> Document | None:
        with handle_sqlalchemy_errors(entity=collection):
            async with self._session_factory() as session:
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is None:
                    return None
                return self._to_document(row)

    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        now = datetime.now(timezone.utc)
        payload = resolve_server_timestamps(fields, now)
        payload.pop("id", None)
        with handle_sqlalchemy_errors(entity=collection):
            async with self._session_factory() as session, session.begin():
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is None:
                    session.add(
                        StoredDocument(
                            collection=collection,
                            id=doc_id,
                            data=payload,
                            created_at=now,
                            updated_at=now,
                        )
                    )
                    return
                row.data = {**row.data, **payload} if merge else payload
                row.updated_at = now

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        now = datetime.now(timezone.utc)
        payload = resolve_server_timestamps(fields, now)
        payload.pop("id", None)
        with handle_sqlalchemy_errors(entity=collection):
            async with self._session_factory() as session, session.begin():
                row = await session.get(StoredDocument, (collection, doc_id))
                if row is None:
                    raise NotFoundError(f"{collection} '{doc_id}' not found")
                row.data = {**row.data, **payload}
                row.updated_at = now

    async def delete(self, collection: str, doc_id: str) -> None:
        with handle_sqlalchemy_errors(entity=collection):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    sa.delete(StoredDocument).where(
                        StoredDocument.collection == collection,
                        StoredDocument.id == doc_id,
                    )
                )

    async def list(self, collection: str, order_by: OrderBy | None = None) -> list[Document]:
        stmt = (
            sa.select(StoredDocument)
            .where(StoredDocument.collection == collection)
            .order_by(StoredDocument.created_at, StoredDocument.id)
        )
        with handle_sqlalchemy_errors(entity=collection):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                documents = [self._to_document(row) for row in result.scalars().all()]
        return sort_documents(documents, order_by)

    @staticmethod
    def _to_document(row: StoredDocument) -> Document:
        return {"id": row.id, **row.data}


__all__ = ["SQLAlchemyDocumentStore"]
