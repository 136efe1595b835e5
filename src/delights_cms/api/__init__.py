"""Admin HTTP API."""

from fastapi import FastAPI

from .content_api import router as content_router
from .gallery_api import router as gallery_router


def include_routers(app: FastAPI) -> None:
    app.include_router(gallery_router)
    app.include_router(content_router)


__all__ = ["include_routers"]
