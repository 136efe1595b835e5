from __future__ import annotations

from pathlib import Path

import pytest

from delights_cms.config import AppConfig
from delights_cms.services.container import ContentServices, build_services
from tests.mocks.stores import TEST_BLOB_BASE, InMemoryBlobStore, InMemoryDocumentStore


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cms.db'}",
        media_root=tmp_path / "media",
        public_base_url=TEST_BLOB_BASE,
    )


@pytest.fixture
def services(
    config: AppConfig,
    document_store: InMemoryDocumentStore,
    blob_store: InMemoryBlobStore,
) -> ContentServices:
    return build_services(config, store=document_store, blob_store=blob_store)
