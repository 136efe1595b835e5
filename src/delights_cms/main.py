"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api import include_routers
from .api.errors import register_error_handlers
from .config import AppConfig
from .logging import configure_logging
from .services.container import ContentServices, build_services
from .services.seeding import seed_all
from .storage.blobs import LOCATOR_SEGMENT, FilesystemBlobStore

logger = logging.getLogger(__name__)


def _mount_media(app: FastAPI, services: ContentServices) -> None:
    """Serve filesystem blobs under the path of ``public_base_url``."""

    blob_store = services.blob_store
    if not isinstance(blob_store, FilesystemBlobStore):
        return
    base_path = urlparse(services.config.public_base_url).path.rstrip("/")
    app.mount(
        f"{base_path}{LOCATOR_SEGMENT.rstrip('/')}",
        StaticFiles(directory=blob_store.root, check_dir=False),
        name="media",
    )


def create_app(
    config: AppConfig | None = None, services: ContentServices | None = None
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or (services.config if services is not None else AppConfig.build_default())
    configure_logging(cfg.log_level)
    content = services or build_services(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await content.startup()
        if cfg.seed_on_startup:
            reports = await seed_all(content)
            logger.info(
                "app.seeded",
                extra={"inserted": sum(report.inserted for report in reports)},
            )
        try:
            yield
        finally:
            await content.shutdown()

    app = FastAPI(title="Delights CMS", lifespan=lifespan)
    app.state.services = content
    register_error_handlers(app)
    include_routers(app)
    _mount_media(app, content)
    return app


app = create_app()
