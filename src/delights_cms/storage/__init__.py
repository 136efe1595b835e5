"""Document and blob store contracts with their bundled backends."""

from .blobs import BlobStore, FilesystemBlobStore, StoredBlob, build_locator
from .documents import SERVER_TIMESTAMP, Document, DocumentStore, OrderBy
from .sqlalchemy_store import SQLAlchemyDocumentStore

__all__ = [
    "BlobStore",
    "Document",
    "DocumentStore",
    "FilesystemBlobStore",
    "OrderBy",
    "SERVER_TIMESTAMP",
    "SQLAlchemyDocumentStore",
    "StoredBlob",
    "build_locator",
]
