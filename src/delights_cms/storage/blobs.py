"""Blob store contract and a filesystem-backed implementation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import quote

from ..exceptions import BlobNotFoundError, StorageWriteError

LOCATOR_SEGMENT = "/o/"


class BlobStore(Protocol):
    """Narrow interface over binary object storage."""

    async def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        """Store ``data`` under ``path``; raise ``StorageWriteError`` on failure."""

    async def retrievable_url(self, path: str) -> str:
        """Return the public URL for ``path``."""

    async def delete(self, path: str) -> None:
        """Remove the object; raise ``BlobNotFoundError`` when it is absent."""

    async def list_blobs(self, prefix: str = "") -> list["StoredBlob"]:
        """Return stored objects whose path starts with ``prefix``, sorted by path."""


@dataclass(slots=True, frozen=True)
class StoredBlob:
    """Listing entry: object path and its last modification time (UTC)."""

    path: str
    modified_at: datetime


def build_locator(base_url: str, path: str) -> str:
    """Encode ``path`` into a retrievable URL under ``base_url``."""

    return f"{base_url.rstrip('/')}{LOCATOR_SEGMENT}{quote(path, safe='')}?alt=media"


@dataclass(slots=True)
class FilesystemBlobStore:
    """Keep blobs as files below ``root`` and serve them from ``public_base_url``."""

    root: Path
    public_base_url: str

    def resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if not path or relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"invalid blob path: {path!r}")
        return self.root.joinpath(*relative.parts)

    async def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as exc:
            raise StorageWriteError(f"failed to store blob '{path}': {exc}") from exc

    async def retrievable_url(self, path: str) -> str:
        return build_locator(self.public_base_url, path)

    async def delete(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"blob '{path}' not found") from exc

    async def list_blobs(self, prefix: str = "") -> list[StoredBlob]:
        return await asyncio.to_thread(self._scan, prefix)

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def _scan(self, prefix: str) -> list[StoredBlob]:
        if not self.root.exists():
            return []
        blobs = []
        for file in self.root.rglob("*"):
            path = file.relative_to(self.root).as_posix()
            if not file.is_file() or not path.startswith(prefix):
                continue
            modified_at = datetime.fromtimestamp(file.stat().st_mtime, timezone.utc)
            blobs.append(StoredBlob(path=path, modified_at=modified_at))
        return sorted(blobs, key=lambda blob: blob.path)


__all__ = [
    "BlobStore",
    "FilesystemBlobStore",
    "LOCATOR_SEGMENT",
    "StoredBlob",
    "build_locator",
]
