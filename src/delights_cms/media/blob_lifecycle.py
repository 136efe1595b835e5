"""Upload blobs and delete them again from their retrievable locators."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, Iterable, Sequence
from urllib.parse import unquote, urlparse

from ..exceptions import BlobNotFoundError, StorageWriteError
from ..storage.blobs import LOCATOR_SEGMENT, BlobStore

VIDEO_FOLDER = "videos"


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(slots=True)
class BlobUpload:
    """Binary payload waiting to be stored."""

    data: bytes
    filename: str | None = None
    content_type: str | None = None


@dataclass(slots=True)
class BlobLifecycleManager:
    """Own the path scheme of uploaded blobs and their best-effort removal.

    Deletions never raise: document writes are the record of truth and must
    not be blocked by housekeeping on the blob store.
    """

    store: BlobStore
    expected_prefix: str | None = None
    escalate_failures: bool = False
    upload_concurrency: int = 4
    clock: Callable[[], int] = _epoch_millis
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def build_path(self, folder: str, filename: str | None) -> str:
        name = PurePosixPath((filename or "").replace("\\", "/")).name or "upload.bin"
        return f"{folder.strip('/')}/{self.clock()}-{name}"

    async def upload(
        self,
        data: bytes,
        *,
        folder: str,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> str:
        """Store ``data`` below ``folder`` and return its locator."""

        path = self.build_path(folder, filename)
        try:
            await self.store.put(path, data, content_type)
            locator = await self.store.retrievable_url(path)
        except StorageWriteError:
            self.log.error("blob.upload.failed", extra={"path": path})
            raise
        except Exception as exc:
            self.log.error("blob.upload.failed", extra={"path": path})
            raise StorageWriteError(f"failed to upload blob '{path}'") from exc
        self.log.info("blob.upload.stored", extra={"path": path, "size_bytes": len(data)})
        return locator

    async def upload_video(
        self, data: bytes, *, filename: str | None = None, content_type: str | None = None
    ) -> str:
        return await self.upload(
            data, folder=VIDEO_FOLDER, filename=filename, content_type=content_type
        )

    async def upload_many(self, uploads: Sequence[BlobUpload], *, folder: str) -> list[str]:
        """Upload concurrently and return locators in input order.

        The first failure propagates as :class:`StorageWriteError`.
        """

        semaphore = asyncio.Semaphore(max(1, self.upload_concurrency))

        async def _upload_one(upload: BlobUpload) -> str:
            async with semaphore:
                return await self.upload(
                    upload.data,
                    folder=folder,
                    filename=upload.filename,
                    content_type=upload.content_type,
                )

        return list(await asyncio.gather(*(_upload_one(upload) for upload in uploads)))

    def path_from_locator(self, locator: str | None, *, check_prefix: bool = True) -> str | None:
        """Decode the storage path embedded in ``locator`` or return ``None``.

        With ``check_prefix`` off, locators under any base URL are decoded.
        """

        if not locator:
            return None
        if check_prefix and self.expected_prefix and not locator.startswith(self.expected_prefix):
            return None
        parsed = urlparse(locator)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return None
        marker = parsed.path.find(LOCATOR_SEGMENT)
        if marker < 0:
            return None
        path = unquote(parsed.path[marker + len(LOCATOR_SEGMENT):])
        if not path or path.startswith("/") or ".." in PurePosixPath(path).parts:
            return None
        return path

    async def delete_by_locator(self, locator: str | None) -> bool:
        """Best-effort delete; return ``True`` when the blob is gone afterwards."""

        path = self.path_from_locator(locator)
        if path is None:
            self.log.info("blob.delete.skipped", extra={"locator": locator})
            return False
        try:
            await self.store.delete(path)
        except BlobNotFoundError:
            self.log.info("blob.delete.absent", extra={"path": path})
            return True
        except Exception:
            level = logging.ERROR if self.escalate_failures else logging.WARNING
            self.log.log(level, "blob.delete.failed", exc_info=True, extra={"path": path})
            return False
        self.log.info("blob.delete.removed", extra={"path": path})
        return True

    async def delete_many(self, locators: Iterable[str | None]) -> int:
        """Delete every locator in turn and return how many were attempted."""

        attempted = 0
        for locator in locators:
            await self.delete_by_locator(locator)
            attempted += 1
        return attempted


__all__ = ["BlobLifecycleManager", "BlobUpload", "VIDEO_FOLDER"]
