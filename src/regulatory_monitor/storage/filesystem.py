"""Filesystem state store: one directory per URL, metadata and payloads in separate files."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..models.page_version import PageVersion
from .base import DEFAULT_MAX_VERSIONS, UrlLocks, as_utc, safe_filename, validate_version

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
CONTENT_SUFFIX = ".content.txt"
TEXT_SUFFIX = ".text.txt"

_READ_ERRORS = (OSError, ValueError, ValidationError)


class FileSystemStateStore:
    """
    Layout under base_path:
        data/<b64(key)>.json
        versions/<b64(url)>/<yyyyMMddHHmmss>.json
        versions/<b64(url)>/<yyyyMMddHHmmss>.content.txt
        versions/<b64(url)>/<yyyyMMddHHmmss>.text.txt
    Timestamp file names sort chronologically. Two saves of one URL within the
    same second share a file name; the later one wins.
    """

    def __init__(self, base_path: str | Path, max_versions: int = DEFAULT_MAX_VERSIONS):
        if max_versions < 1:
            raise ValueError("max_versions must be at least 1")
        self.max_versions = max_versions
        self.base_path = Path(base_path).resolve()
        self.data_path = self.base_path / "data"
        self.versions_path = self.base_path / "versions"
        self.data_path.mkdir(parents=True, exist_ok=True)
        self.versions_path.mkdir(parents=True, exist_ok=True)
        self._locks = UrlLocks()
        logger.info("Initialized filesystem state store at %s", self.base_path)

    def _key_path(self, key: str) -> Path:
        return self.data_path / f"{safe_filename(key)}.json"

    def _url_dir(self, url: str) -> Path:
        return self.versions_path / safe_filename(url)

    async def get(self, key: str, default: Any = None) -> Any:
        path = self._key_path(key)
        if not await aiofiles.os.path.exists(path):
            return default
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                return json.loads(await f.read())
        except _READ_ERRORS as e:
            logger.error("Error reading data for key %s: %s", key, e, exc_info=True)
            return default

    async def set(self, key: str, value: Any) -> None:
        path = self._key_path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, default=str)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing data for key %s: %s", key, e, exc_info=True)

    async def get_latest_version(self, url: str) -> Optional[PageVersion]:
        versions = await self.get_version_history(url, 1)
        return versions[0] if versions else None

    async def save_version(self, version: PageVersion) -> None:
        version = validate_version(version)
        version_dir = self._url_dir(version.url)
        stamp = as_utc(version.captured_at).strftime(TIMESTAMP_FORMAT)

        async with self._locks(version.url):
            try:
                await aiofiles.os.makedirs(version_dir, exist_ok=True)
                # Payload files before the metadata record
                for content, suffix in (
                    (version.full_content, CONTENT_SUFFIX),
                    (version.text_content, TEXT_SUFFIX),
                ):
                    path = version_dir / f"{stamp}{suffix}"
                    if content is not None:
                        async with aiofiles.open(path, "w", encoding="utf-8") as f:
                            await f.write(content)
                    elif await aiofiles.os.path.exists(path):
                        await aiofiles.os.remove(path)

                async with aiofiles.open(version_dir / f"{stamp}.json", "w", encoding="utf-8") as f:
                    await f.write(version.without_payload().model_dump_json())

                await self._prune(version_dir)
            except OSError as e:
                logger.error("Error saving version for URL %s: %s", version.url, e, exc_info=True)

    async def get_version_history(self, url: str, max_versions: int = DEFAULT_MAX_VERSIONS) -> list[PageVersion]:
        version_dir = self._url_dir(url)
        if max_versions <= 0 or not await aiofiles.os.path.isdir(version_dir):
            return []

        try:
            stamps = await self._stamps(version_dir)
        except OSError as e:
            logger.error("Error listing versions for URL %s: %s", url, e, exc_info=True)
            return []

        versions: list[PageVersion] = []
        for stamp in stamps:
            if len(versions) >= max_versions:
                break
            try:
                versions.append(await self._read_version(version_dir, stamp))
            except _READ_ERRORS as e:
                logger.error("Skipping unreadable version %s of %s: %s", stamp, url, e)
        return versions

    async def _stamps(self, version_dir: Path) -> list[str]:
        """Timestamps of stored versions, newest first."""
        names = await aiofiles.os.listdir(version_dir)
        return sorted(
            (name[: -len(".json")] for name in names if name.endswith(".json")),
            reverse=True,
        )

    async def _read_version(self, version_dir: Path, stamp: str) -> PageVersion:
        async with aiofiles.open(version_dir / f"{stamp}.json", encoding="utf-8") as f:
            version = PageVersion.model_validate_json(await f.read())

        payload: dict[str, str] = {}
        for field, suffix in (("full_content", CONTENT_SUFFIX), ("text_content", TEXT_SUFFIX)):
            path = version_dir / f"{stamp}{suffix}"
            if await aiofiles.os.path.exists(path):
                async with aiofiles.open(path, encoding="utf-8") as f:
                    payload[field] = await f.read()
        return version.model_copy(update=payload) if payload else version

    async def _prune(self, version_dir: Path) -> None:
        """Delete metadata and payload files beyond the newest max_versions."""
        stale = (await self._stamps(version_dir))[self.max_versions:]
        for stamp in stale:
            for suffix in (".json", CONTENT_SUFFIX, TEXT_SUFFIX):
                path = version_dir / f"{stamp}{suffix}"
                if await aiofiles.os.path.exists(path):
                    await aiofiles.os.remove(path)
        if stale:
            logger.debug("Pruned %d old versions in %s", len(stale), version_dir.name)
