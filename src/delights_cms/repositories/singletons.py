"""Repositories for single-document content: website settings and home sections."""

from __future__ import annotations

import logging

from ..domain.models import HOME_SECTION_KEYS, PageSection, WebsiteSettings
from ..exceptions import translate_store_errors
from ..media.blob_lifecycle import BlobLifecycleManager
from ..storage.documents import SERVER_TIMESTAMP, DocumentStore
from .collections import SECTIONS_COLLECTION, SETTINGS_COLLECTION, WEBSITE_SETTINGS_ID

logger = logging.getLogger(__name__)


class WebsiteSettingsRepository:
    """Read and overwrite the ``settings/website`` document."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def get(self) -> WebsiteSettings:
        """Return stored settings, or defaults when missing or unreadable."""

        try:
            with translate_store_errors(entity=SETTINGS_COLLECTION, action="get"):
                document = await self._store.get(SETTINGS_COLLECTION, WEBSITE_SETTINGS_ID)
        except Exception:
            logger.exception("settings.read.failed")
            return WebsiteSettings()
        if document is None:
            return WebsiteSettings()
        return WebsiteSettings.from_document(document)

    async def save(self, settings: WebsiteSettings) -> None:
        fields = settings.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        with translate_store_errors(entity=SETTINGS_COLLECTION, action="save"):
            await self._store.set(SETTINGS_COLLECTION, WEBSITE_SETTINGS_ID, fields)
        logger.info("settings.saved")


class PageSectionRepository:
    """Home page sections stored as ``homeContent/<key>`` documents."""

    def __init__(self, store: DocumentStore, blobs: BlobLifecycleManager) -> None:
        self._store = store
        self._blobs = blobs

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in HOME_SECTION_KEYS:
            raise ValueError(f"unknown home section '{key}'")

    async def get(self, key: str, *, strict: bool = False) -> PageSection | None:
        """Return the section or ``None``; read failures degrade unless ``strict``."""

        self._check_key(key)
        try:
            with translate_store_errors(entity=SECTIONS_COLLECTION, action="get"):
                document = await self._store.get(SECTIONS_COLLECTION, key)
        except Exception:
            if strict:
                raise
            logger.exception("sections.read.failed", extra={"section": key})
            return None
        return PageSection.from_document(key, document) if document is not None else None

    async def save(self, section: PageSection) -> None:
        self._check_key(section.key)
        fields = section.to_document()
        fields["updatedAt"] = SERVER_TIMESTAMP
        with translate_store_errors(entity=SECTIONS_COLLECTION, action="save"):
            await self._store.set(SECTIONS_COLLECTION, section.key, fields)
        logger.info("sections.saved", extra={"section": section.key})

    async def delete(self, key: str) -> None:
        """Delete the section and, best-effort, every blob its content references."""

        self._check_key(key)
        with translate_store_errors(entity=SECTIONS_COLLECTION, action="get"):
            document = await self._store.get(SECTIONS_COLLECTION, key)
        if document is None:
            return
        section = PageSection.from_document(key, document)
        attempted = await self._blobs.delete_many(section.blob_locators())
        with translate_store_errors(entity=SECTIONS_COLLECTION, action="delete"):
            await self._store.delete(SECTIONS_COLLECTION, key)
        logger.info("sections.deleted", extra={"section": key, "blob_deletes": attempted})


__all__ = ["PageSectionRepository", "WebsiteSettingsRepository"]
