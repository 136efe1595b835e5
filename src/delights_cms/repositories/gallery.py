"""Gallery tree persistence: Country -> Album -> Image in one root document.

Every nested mutation loads the whole country document, changes it in
memory and writes the whole document back. There is no version check
between the load and the write, so two editors mutating the same country
concurrently race and the last full-document write wins, even when they
touched different albums.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Sequence

from ..domain.models import Album, Country, GalleryImage, LocalizedText
from ..exceptions import NotFoundError, ensure_found, translate_store_errors
from ..ids import new_id
from ..media.blob_lifecycle import BlobLifecycleManager, BlobUpload
from ..storage.documents import SERVER_TIMESTAMP, DocumentStore
from .collections import GALLERY_COLLECTION, GALLERY_UPLOAD_FOLDER

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GalleryRepository:
    """Owns country root documents and the albums and images embedded in them."""

    collection = GALLERY_COLLECTION

    def __init__(
        self,
        store: DocumentStore,
        blobs: BlobLifecycleManager,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._blobs = blobs
        self._clock = clock or _utcnow

    # Countries ----------------------------------------------------------

    async def list_countries(self, *, strict: bool = False) -> list[Country]:
        """Return every country; read failures degrade to ``[]`` unless ``strict``."""

        try:
            with translate_store_errors(entity=self.collection, action="list"):
                documents = await self._store.list(self.collection)
        except Exception:
            if strict:
                raise
            logger.exception("gallery.list.failed")
            return []
        return [Country.from_document(document) for document in documents]

    async def get_country(self, country_id: str) -> Country | None:
        with translate_store_errors(entity=self.collection, action="get"):
            document = await self._store.get(self.collection, country_id)
        return Country.from_document(document) if document is not None else None

    async def save_country(self, country: Country) -> str:
        """Overwrite the country root (albums included) or create a new one.

        Raises ``ValueError`` when two albums carry the same id. Albums and
        images without timestamps are stamped with the current time.
        """

        given = [album.id for album in country.albums if album.id]
        duplicates = sorted({album_id for album_id in given if given.count(album_id) > 1})
        if duplicates:
            raise ValueError(f"duplicate album ids: {', '.join(duplicates)}")

        now = self._clock()
        for album in country.albums:
            if not album.id:
                album.id = self._unique_album_id(country)
            album.created_at = album.created_at or now
            album.updated_at = album.updated_at or now
            for image in album.images:
                image.created_at = image.created_at or now

        fields = country.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        country_id = country.id or new_id()
        if not country.id:
            fields["createdAt"] = SERVER_TIMESTAMP
        with translate_store_errors(entity=self.collection, action="save"):
            await self._store.set(self.collection, country_id, fields)
        logger.info(
            "gallery.country.saved",
            extra={"country_id": country_id, "albums": len(country.albums)},
        )
        return country_id

    async def delete_country(self, country_id: str) -> int:
        """Cascade-delete a country: blobs first, then the root document.

        Returns the number of blob deletions attempted.
        """

        country = await self.get_country(country_id)
        if country is None:
            logger.info("gallery.country.missing", extra={"country_id": country_id})
            return 0
        attempted = await self._blobs.delete_many(country.blob_locators())
        with translate_store_errors(entity=self.collection, action="delete"):
            await self._store.delete(self.collection, country_id)
        logger.info(
            "gallery.country.deleted",
            extra={"country_id": country_id, "blob_deletes": attempted},
        )
        return attempted

    # Albums -------------------------------------------------------------

    async def save_album(self, country_id: str, album: Album) -> Album:
        """Append a new album, or replace the album with ``album.id``.

        Editing keeps the stored ``createdAt`` and refreshes ``updatedAt``.
        """

        country = await self._load_root(country_id)
        now = self._clock()
        if album.id:
            index, existing = self._locate_album(country, album.id)
            saved = Album(
                id=existing.id,
                name=album.name,
                images=list(album.images),
                created_at=existing.created_at,
                updated_at=now,
            )
            country.albums[index] = saved
        else:
            saved = Album(
                id=self._unique_album_id(country),
                name=album.name,
                images=list(album.images),
                created_at=now,
                updated_at=now,
            )
            country.albums.append(saved)
        await self._write_root(country)
        logger.info(
            "gallery.album.saved",
            extra={"country_id": country_id, "album_id": saved.id},
        )
        return saved

    async def rename_album(self, country_id: str, album_id: str, name: LocalizedText) -> Album:
        """Change only the album name, keeping its images as stored."""

        country = await self._load_root(country_id)
        _, album = self._locate_album(country, album_id)
        album.name = name
        album.updated_at = self._clock()
        await self._write_root(country)
        return album

    async def delete_album(self, country_id: str, album_id: str) -> int:
        """Remove an album and best-effort delete the blobs of its images."""

        country = await self._load_root(country_id)
        index, album = self._locate_album(country, album_id)
        attempted = await self._blobs.delete_many(album.blob_locators())
        del country.albums[index]
        await self._write_root(country)
        logger.info(
            "gallery.album.deleted",
            extra={"country_id": country_id, "album_id": album_id, "blob_deletes": attempted},
        )
        return attempted

    # Images -------------------------------------------------------------

    async def add_image_to_album(
        self, country_id: str, album_id: str, image_url: str
    ) -> GalleryImage:
        images = await self.add_images_to_album(country_id, album_id, [image_url])
        return images[0]

    async def add_images_to_album(
        self, country_id: str, album_id: str, image_urls: Sequence[str]
    ) -> list[GalleryImage]:
        """Append images in the given order with a single root write."""

        country = await self._load_root(country_id)
        _, album = self._locate_album(country, album_id)
        now = self._clock()
        added = [GalleryImage(image_url=url, created_at=now) for url in image_urls]
        album.images.extend(added)
        album.updated_at = now
        await self._write_root(country)
        logger.info(
            "gallery.images.added",
            extra={"country_id": country_id, "album_id": album_id, "count": len(added)},
        )
        return added

    async def upload_images_to_album(
        self,
        country_id: str,
        album_id: str,
        uploads: Sequence[BlobUpload],
        *,
        folder: str = GALLERY_UPLOAD_FOLDER,
    ) -> list[GalleryImage]:
        """Upload concurrently, then append every locator to the album.

        A failed upload raises ``StorageWriteError`` before any document write.
        """

        locators = await self._blobs.upload_many(uploads, folder=folder)
        return await self.add_images_to_album(country_id, album_id, locators)

    async def delete_image_from_album(
        self, country_id: str, album_id: str, index: int
    ) -> GalleryImage:
        """Remove the image at ``index``; its blob is deleted before the write."""

        country = await self._load_root(country_id)
        _, album = self._locate_album(country, album_id)
        if index < 0 or index >= len(album.images):
            raise NotFoundError(
                f"image index {index} out of range for album '{album_id}' "
                f"({len(album.images)} images)"
            )
        image = album.images[index]
        await self._blobs.delete_by_locator(image.image_url)
        del album.images[index]
        album.updated_at = self._clock()
        await self._write_root(country)
        logger.info(
            "gallery.image.deleted",
            extra={"country_id": country_id, "album_id": album_id, "index": index},
        )
        return image

    # Internals ----------------------------------------------------------

    async def _load_root(self, country_id: str) -> Country:
        country = await self.get_country(country_id)
        return ensure_found(country, entity="country", identifier=country_id)

    @staticmethod
    def _locate_album(country: Country, album_id: str) -> tuple[int, Album]:
        located = country.find_album(album_id)
        return ensure_found(located, entity="album", identifier=album_id)

    @staticmethod
    def _unique_album_id(country: Country) -> str:
        taken = {album.id for album in country.albums}
        album_id = new_id()
        while album_id in taken:
            album_id = new_id()
        return album_id

    async def _write_root(self, country: Country) -> None:
        fields = country.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        with translate_store_errors(entity=self.collection, action="save"):
            await self._store.set(self.collection, country.id, fields)


__all__ = ["GalleryRepository"]
