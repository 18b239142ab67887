"""SQLite state store: one row per version, one row per key."""

import asyncio
import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..models.page_version import PageVersion
from .base import DEFAULT_MAX_VERSIONS, UrlLocks, as_utc, validate_version

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS KeyValueData (
    Key TEXT PRIMARY KEY,
    Value TEXT,
    UpdatedAt TEXT
);
CREATE TABLE IF NOT EXISTS PageVersions (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Url TEXT,
    Hash TEXT,
    CapturedAt TEXT,
    ChangeType TEXT,
    Metadata TEXT,
    FullContent TEXT,
    TextContent TEXT
);
CREATE INDEX IF NOT EXISTS IDX_PageVersions_Url_CapturedAt
    ON PageVersions (Url, CapturedAt);
"""

SELECT_VERSIONS = """
    SELECT Metadata, FullContent, TextContent
    FROM PageVersions
    WHERE Url = ?
    ORDER BY CapturedAt DESC, Id DESC
    LIMIT ?
"""


def _sortable_timestamp(value: datetime) -> str:
    """Fixed-width UTC timestamp so text ordering matches time ordering."""
    return as_utc(value).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


class SqliteStateStore:
    """
    Relational backend on stdlib sqlite3. Each call opens its own connection in a
    worker thread; insert and prune of a version share one transaction.
    """

    def __init__(self, db_path: str | Path, max_versions: int = DEFAULT_MAX_VERSIONS, timeout: float = 30.0):
        if max_versions < 1:
            raise ValueError("max_versions must be at least 1")
        self.max_versions = max_versions
        self.db_path = Path(db_path).resolve()
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._locks = UrlLocks()
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path), timeout=self.timeout)

    def _initialize(self) -> None:
        with closing(self._connect()) as conn:
            conn.executescript(SCHEMA)
            conn.commit()
        logger.info("Initialized SQLite state store at %s", self.db_path)

    async def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = await asyncio.to_thread(self._get_sync, key)
            return default if raw is None else json.loads(raw)
        except (sqlite3.Error, ValueError) as e:
            logger.error("Error getting value for key %s: %s", key, e, exc_info=True)
            return default

    def _get_sync(self, key: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT Value FROM KeyValueData WHERE Key = ?", (key,)).fetchone()
        return row[0] if row else None

    async def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False, default=str)
            await asyncio.to_thread(self._set_sync, key, payload)
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("Error setting value for key %s: %s", key, e, exc_info=True)

    def _set_sync(self, key: str, payload: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                "INSERT OR REPLACE INTO KeyValueData (Key, Value, UpdatedAt) VALUES (?, ?, ?)",
                (key, payload, datetime.now(timezone.utc).isoformat()),
            )

    async def get_latest_version(self, url: str) -> Optional[PageVersion]:
        versions = await self.get_version_history(url, 1)
        return versions[0] if versions else None

    async def save_version(self, version: PageVersion) -> None:
        version = validate_version(version)
        async with self._locks(version.url):
            try:
                await asyncio.to_thread(self._save_sync, version)
            except sqlite3.Error as e:
                logger.error("Error saving version for URL %s: %s", version.url, e, exc_info=True)

    def _save_sync(self, version: PageVersion) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                INSERT INTO PageVersions (Url, Hash, CapturedAt, ChangeType, Metadata, FullContent, TextContent)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    version.url,
                    version.hash,
                    _sortable_timestamp(version.captured_at),
                    version.change_from_previous.value,
                    version.without_payload().model_dump_json(),
                    version.full_content,
                    version.text_content,
                ),
            )
            keep = [
                row[0]
                for row in conn.execute(
                    "SELECT Id FROM PageVersions WHERE Url = ? ORDER BY CapturedAt DESC, Id DESC LIMIT ?",
                    (version.url, self.max_versions),
                )
            ]
            placeholders = ",".join("?" * len(keep))
            deleted = conn.execute(
                f"DELETE FROM PageVersions WHERE Url = ? AND Id NOT IN ({placeholders})",
                (version.url, *keep),
            ).rowcount
        if deleted:
            logger.debug("Pruned %d old versions for %s", deleted, version.url)

    async def get_version_history(self, url: str, max_versions: int = DEFAULT_MAX_VERSIONS) -> list[PageVersion]:
        if max_versions <= 0:
            return []
        try:
            return await asyncio.to_thread(self._history_sync, url, max_versions)
        except (sqlite3.Error, ValueError, ValidationError) as e:
            logger.error("Error getting version history for URL %s: %s", url, e, exc_info=True)
            return []

    def _history_sync(self, url: str, max_versions: int) -> list[PageVersion]:
        with closing(self._connect()) as conn:
            rows = conn.execute(SELECT_VERSIONS, (url, max_versions)).fetchall()

        versions = []
        for metadata, full_content, text_content in rows:
            version = PageVersion.model_validate_json(metadata)
            versions.append(
                version.model_copy(update={"full_content": full_content, "text_content": text_content})
            )
        return versions
