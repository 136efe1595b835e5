"""Domain level exceptions and helpers for repository layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, TypeVar

from sqlalchemy import exc as sa_exc

__all__ = [
    "AppError",
    "RepositoryError",
    "NotFoundError",
    "PersistenceError",
    "StorageError",
    "StorageWriteError",
    "BlobNotFoundError",
    "ensure_found",
    "handle_sqlalchemy_errors",
    "translate_store_errors",
]

T = TypeVar("T")


class AppError(Exception):
    """Base class for application specific errors."""


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class NotFoundError(RepositoryError):
    """Raised when a root document, nested album or image index is missing."""


class PersistenceError(RepositoryError):
    """Raised when a document write or delete could not be completed."""


class StorageError(AppError):
    """Base class for blob store failures."""


class StorageWriteError(StorageError):
    """Raised when the blob store rejects an upload."""


class BlobNotFoundError(StorageError):
    """Raised by blob stores when the addressed object does not exist."""


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None

    def format(self, message: str) -> str:
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(record: T | None, *, entity: str, identifier: object) -> T:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> PersistenceError:
    if isinstance(exc, sa_exc.IntegrityError):
        return PersistenceError(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.DBAPIError):
        return PersistenceError(context.format("database operation failed"))
    return PersistenceError(context.format(str(exc)))


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into :class:`PersistenceError`."""

    context = _EntityContext(entity)
    try:
        yield
    except sa_exc.SQLAlchemyError as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc


@contextmanager
def translate_store_errors(*, entity: str, action: str) -> Iterator[None]:
    """Surface unexpected document store failures as :class:`PersistenceError`.

    Application errors raised by the store (``NotFoundError``,
    ``PersistenceError``) pass through unchanged.
    """

    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise PersistenceError(f"{entity}: {action} failed") from exc
