"""Request-scoped access to the composed services."""

from __future__ import annotations

from fastapi import Request

from ..services.container import ContentServices


def get_services(request: Request) -> ContentServices:
    """Fetch the content services from application state."""
    try:
        return request.app.state.services  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - misconfiguration
        raise RuntimeError("ContentServices are not configured") from exc
