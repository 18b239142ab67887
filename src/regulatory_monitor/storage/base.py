"""State store contract shared by every backend."""

import asyncio
import base64
import weakref
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from ..models.page_version import PageVersion

DEFAULT_MAX_VERSIONS = 10


class StateStore(Protocol):
    """
    Generic JSON key/value storage plus per-URL version history.
    After every save_version only the max_versions newest snapshots of that URL
    survive, whichever backend is used.
    """

    max_versions: int

    async def get(self, key: str, default: Any = None) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def get_latest_version(self, url: str) -> Optional[PageVersion]: ...

    async def save_version(self, version: PageVersion) -> None: ...

    async def get_version_history(self, url: str, max_versions: int = DEFAULT_MAX_VERSIONS) -> list[PageVersion]: ...


class UrlLocks:
    """
    One asyncio.Lock per URL, so append + prune never interleave for a URL.
    A lock is dropped once no caller holds a reference to it.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def __call__(self, url: str) -> asyncio.Lock:
        lock = self._locks.get(url)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[url] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


def validate_version(version: Optional[PageVersion]) -> PageVersion:
    """Reject versions without identifying data."""
    if version is None:
        raise ValueError("version must not be None")
    if not isinstance(version, PageVersion):
        raise ValueError(f"expected PageVersion, got {type(version).__name__}")
    if not version.url:
        raise ValueError("version.url must not be empty")
    return version


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def safe_filename(value: str) -> str:
    """URL-safe base64 name with '=' padding mapped to '.'."""
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").replace("=", ".")
