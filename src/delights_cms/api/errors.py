"""Reusable error primitives for API exception handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import NotFoundError, PersistenceError, StorageWriteError


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str
    headers: Mapping[str, str] | None = None

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
            headers=dict(self.headers or {}),
        )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


async def not_found_handler(_: Request, exc: NotFoundError) -> JSONResponse:
    return ApiError(status.HTTP_404_NOT_FOUND, "not_found", str(exc)).to_response()


async def persistence_error_handler(_: Request, exc: PersistenceError) -> JSONResponse:
    return ApiError(
        status.HTTP_503_SERVICE_UNAVAILABLE, "persistence_failed", str(exc)
    ).to_response()


async def storage_write_error_handler(_: Request, exc: StorageWriteError) -> JSONResponse:
    return ApiError(status.HTTP_502_BAD_GATEWAY, "storage_write_failed", str(exc)).to_response()


async def value_error_handler(_: Request, exc: ValueError) -> JSONResponse:
    return ApiError(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_request", str(exc)
    ).to_response()


def not_found_error(message: str) -> ApiError:
    """Return an :class:`ApiError` for an unknown route resource."""

    return ApiError(status.HTTP_404_NOT_FOUND, "not_found", message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PersistenceError, persistence_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StorageWriteError, storage_write_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, value_error_handler)  # type: ignore[arg-type]


__all__ = ["ApiError", "not_found_error", "register_error_handlers"]
