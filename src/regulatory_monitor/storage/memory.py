"""In-memory state store."""

import json
import logging
from typing import Any, Optional

from ..models.page_version import PageVersion
from .base import DEFAULT_MAX_VERSIONS, UrlLocks, as_utc, validate_version

logger = logging.getLogger(__name__)


class InMemoryStateStore:
    """Process-local store. Values are round-tripped through JSON like the durable backends."""

    def __init__(self, max_versions: int = DEFAULT_MAX_VERSIONS):
        if max_versions < 1:
            raise ValueError("max_versions must be at least 1")
        self.max_versions = max_versions
        self._store: dict[str, str] = {}
        self._history: dict[str, list[PageVersion]] = {}
        self._locks = UrlLocks()

    async def get(self, key: str, default: Any = None) -> Any:
        raw = self._store.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        try:
            self._store[key] = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.error("Error serializing value for key %s: %s", key, e)

    async def get_latest_version(self, url: str) -> Optional[PageVersion]:
        versions = self._history.get(url)
        if not versions:
            return None
        return max(versions, key=lambda v: as_utc(v.captured_at))

    async def save_version(self, version: PageVersion) -> None:
        version = validate_version(version)
        async with self._locks(version.url):
            versions = self._history.setdefault(version.url, [])
            versions.append(version)
            if len(versions) > self.max_versions:
                versions.sort(key=lambda v: as_utc(v.captured_at), reverse=True)
                del versions[self.max_versions:]
                logger.debug("Pruned version history for %s to %d versions", version.url, self.max_versions)

    async def get_version_history(self, url: str, max_versions: int = DEFAULT_MAX_VERSIONS) -> list[PageVersion]:
        versions = self._history.get(url, [])
        ordered = sorted(versions, key=lambda v: as_utc(v.captured_at), reverse=True)
        return ordered[:max(max_versions, 0)]
