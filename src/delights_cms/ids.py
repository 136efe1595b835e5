"""Identifier generation for entries without a natural key."""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 8


def new_id() -> str:
    """Return a time-prefixed identifier such as ``1718000000000-k3x9a0qz``.

    The millisecond prefix keeps identifiers roughly sortable by creation
    time; the random suffix separates ids minted within the same millisecond.
    """

    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{millis:013d}-{suffix}"


__all__ = ["new_id"]
